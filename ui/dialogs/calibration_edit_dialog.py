# ui/dialogs/calibration_edit_dialog.py - Modal edit form for one calibration record

import logging

from PyQt5 import QtWidgets

from api_client import NotFoundError, RecordStoreError
from domain.models import CalibrationRecord
from services.validation_service import ValidationError
from ui.dialogs.common import STANDARD_FIELD_WIDTH, WaitCursor, request_error_text
from ui.edit_session import EditSessionController, SessionState, SessionStateError

logger = logging.getLogger(__name__)


class CalibrationEditDialog(QtWidgets.QDialog):
    """
    Edit voltage/percentage of an existing calibration record.
    Opens the controller's session on construction; OK submits, Cancel discards.
    The dialog stays open on any failure so the user can retry or cancel.
    """

    def __init__(self, controller: EditSessionController, record: CalibrationRecord, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.updated_record = None
        session = controller.open(record)

        self.setWindowTitle(f"Calibration - Edit #{record.id}")
        self.setModal(True)
        form = QtWidgets.QFormLayout(self)

        self.voltage_edit = QtWidgets.QLineEdit(str(session.draft_voltage))
        self.voltage_edit.setMinimumWidth(STANDARD_FIELD_WIDTH)
        self.percentage_edit = QtWidgets.QLineEdit(str(session.draft_percentage))
        self.percentage_edit.setMinimumWidth(STANDARD_FIELD_WIDTH)
        self.percentage_edit.setPlaceholderText("0 - 100")

        form.addRow("ID", QtWidgets.QLabel(str(record.id)))
        form.addRow("Voltage*", self.voltage_edit)
        form.addRow("Battery %*", self.percentage_edit)

        self.btn_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Save | QtWidgets.QDialogButtonBox.Cancel
        )
        self.btn_box.accepted.connect(self.on_save)
        self.btn_box.rejected.connect(self.reject)
        form.addRow(self.btn_box)

    def on_save(self):
        save_btn = self.btn_box.button(QtWidgets.QDialogButtonBox.Save)
        save_btn.setEnabled(False)
        try:
            with WaitCursor():
                self.updated_record = self.controller.submit(
                    self.voltage_edit.text(), self.percentage_edit.text()
                )
        except ValidationError as e:
            QtWidgets.QMessageBox.warning(self, "Validation", str(e))
            return
        except NotFoundError as e:
            QtWidgets.QMessageBox.warning(self, "Record not found", request_error_text(e))
            return
        except SessionStateError as e:
            logger.warning("Save ignored: %s", e)
            return
        except RecordStoreError as e:
            if self.controller.state is SessionState.CLOSED:
                # Update went through; only the follow-up reload failed
                QtWidgets.QMessageBox.warning(
                    self,
                    "Saved",
                    "The record was saved, but the table could not be reloaded:\n"
                    + request_error_text(e),
                )
                super().accept()
                return
            QtWidgets.QMessageBox.critical(self, "Save failed", request_error_text(e))
            return
        finally:
            save_btn.setEnabled(True)
        super().accept()

    def reject(self):
        if self.controller.state is SessionState.SUBMITTING:
            return
        self.controller.cancel()
        super().reject()
