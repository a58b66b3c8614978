# domain/models.py - Domain entities (dataclasses)
#
# Typed models for cross-layer data. Conversion from the JSON payloads
# happens at the API client boundary only.

from dataclasses import dataclass
from typing import Any


def _whole_number(value) -> int:
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"percentage must be a whole number, got {value!r}")
    return int(number)


@dataclass(frozen=True)
class CalibrationRecord:
    """
    One battery calibration point (voltage -> percentage).
    The id is assigned by the server and never changes.
    """

    id: int
    voltage: float
    percentage: int

    @classmethod
    def from_json(cls, data: Any) -> "CalibrationRecord":
        """Build from a decoded JSON object. Raises KeyError/TypeError/ValueError on a bad shape."""
        if not isinstance(data, dict):
            raise TypeError(f"Expected a calibration object, got {type(data).__name__}")
        return cls(
            id=data["id"],
            voltage=float(data["voltage"]),
            percentage=_whole_number(data["percentage"]),
        )

    def __str__(self) -> str:
        return f"id={self.id}, voltage={self.voltage}, percentage={self.percentage}"


@dataclass(frozen=True)
class CalibrationInput:
    """Validated form input, ready to send."""

    voltage: float
    percentage: int

    def to_payload(self) -> dict[str, Any]:
        """Request body for create/update (the record id travels in the URL, never in the body)."""
        return {"voltage": self.voltage, "percentage": self.percentage}


@dataclass(frozen=True)
class TelemetryRecord:
    """
    Read-only device telemetry row from /api/history.
    Values are kept as the server sends them (mostly strings).
    """

    id: int
    timestamp: Any
    pv_total_power: Any
    ems_power: Any
    load_power: Any
    ems_voltage: Any
    battery_percentage: Any

    @classmethod
    def from_json(cls, data: Any) -> "TelemetryRecord":
        if not isinstance(data, dict):
            raise TypeError(f"Expected a telemetry object, got {type(data).__name__}")
        return cls(
            id=data["ID"],
            timestamp=data.get("TimeStamp"),
            pv_total_power=data.get("PvTotalPower"),
            ems_power=data.get("EmsPower"),
            load_power=data.get("LoadPower"),
            ems_voltage=data.get("EmsVoltage"),
            battery_percentage=data.get("BatteryPercentage"),
        )
