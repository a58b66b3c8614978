# services/validation_service.py - Calibration input validation
#
# Single rule shared by the "record calibration" form and the edit dialog.
# Pure: no network, no widgets. Raises ValidationError subclasses.

import math

from domain.models import CalibrationInput

PERCENTAGE_MIN = 0
PERCENTAGE_MAX = 100


class ValidationError(ValueError):
    """Input rejected before any request is sent."""

    kind = "invalid"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class NotANumberError(ValidationError):
    kind = "not_a_number"


class OutOfRangeError(ValidationError):
    kind = "out_of_range"


def _parse_float(field: str, raw) -> float:
    if isinstance(raw, bool) or raw is None:
        raise NotANumberError(field, f"{field.capitalize()} must be a number.")
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            raise NotANumberError(field, f"{field.capitalize()} is required.")
        try:
            value = float(text)
        except ValueError:
            raise NotANumberError(field, f"{field.capitalize()} must be a number, got {text!r}.") from None
    if not math.isfinite(value):
        raise NotANumberError(field, f"{field.capitalize()} must be a finite number.")
    return value


def parse_voltage(raw) -> float:
    """Parse a voltage entry as float. Raises NotANumberError."""
    return _parse_float("voltage", raw)


def parse_percentage(raw) -> int:
    """
    Parse a battery percentage entry as a whole number.
    "65" and "65.0" are accepted; "12.5" is not. Raises NotANumberError.
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    value = _parse_float("percentage", raw)
    if not value.is_integer():
        raise NotANumberError("percentage", "Percentage must be a whole number.")
    return int(value)


def check_percentage_range(percentage: int) -> None:
    """Raise OutOfRangeError unless PERCENTAGE_MIN <= percentage <= PERCENTAGE_MAX."""
    if percentage < PERCENTAGE_MIN or percentage > PERCENTAGE_MAX:
        raise OutOfRangeError(
            "percentage",
            f"Battery percentage must be between {PERCENTAGE_MIN} and {PERCENTAGE_MAX}, got {percentage}.",
        )


def validate_calibration_input(voltage_raw, percentage_raw) -> CalibrationInput:
    """
    Validate a (voltage, percentage) pair as typed by the user.
    Type checks run first (voltage, then percentage), then the range check.
    Returns CalibrationInput. Raises NotANumberError or OutOfRangeError.
    """
    voltage = parse_voltage(voltage_raw)
    percentage = parse_percentage(percentage_raw)
    check_percentage_range(percentage)
    return CalibrationInput(voltage=voltage, percentage=percentage)
