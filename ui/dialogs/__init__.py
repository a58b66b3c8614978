# ui/dialogs - Modal dialogs
from ui.dialogs.calibration_edit_dialog import CalibrationEditDialog

__all__ = ["CalibrationEditDialog"]
