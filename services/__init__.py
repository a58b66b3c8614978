# services - Orchestration layer between the UI and the API client
from services import (
    validation_service,
    calibration_service,
)

__all__ = [
    "validation_service",
    "calibration_service",
]
