# domain - Typed entities shared across layers
from domain.models import CalibrationInput, CalibrationRecord, TelemetryRecord

__all__ = ["CalibrationInput", "CalibrationRecord", "TelemetryRecord"]
