# services/calibration_service.py - Calibration record create/refresh orchestration
#
# Thin layer: validates input, delegates to the API client, re-renders the table.
# New records always trigger a full refresh since their id is unknown until created.

import logging
from typing import TYPE_CHECKING

from api_client import RecordStoreError
from services.validation_service import validate_calibration_input
from ui.table_models import calibration_row

if TYPE_CHECKING:
    from api_client import CalibrationApiClient
    from domain.models import CalibrationRecord
    from ui.table_models import RecordTableModel

logger = logging.getLogger(__name__)


class RefreshAfterCreateError(Exception):
    """The record was created but the table could not be reloaded afterwards."""

    def __init__(self, record: "CalibrationRecord", error: "RecordStoreError"):
        super().__init__(f"Calibration {record.id} recorded, but reload failed: {error}")
        self.record = record
        self.error = error


def create_calibration(
    client: "CalibrationApiClient",
    voltage_raw,
    percentage_raw,
) -> "CalibrationRecord":
    """Validate and create a calibration record. Raises ValidationError before any request on bad input."""
    values = validate_calibration_input(voltage_raw, percentage_raw)
    return client.create(values.voltage, values.percentage)


def refresh_calibration_table(
    client: "CalibrationApiClient",
    model: "RecordTableModel",
) -> list["CalibrationRecord"]:
    """Fetch all calibration records and re-render the table from them."""
    records = client.list()
    model.render_all(records, calibration_row)
    return records


def record_calibration(
    client: "CalibrationApiClient",
    model: "RecordTableModel",
    voltage_raw,
    percentage_raw,
) -> "CalibrationRecord":
    """
    Create a record, then fully refresh the table. Returns the created record.
    A failed create raises the client error; a failed reload after a
    successful create raises RefreshAfterCreateError carrying the new record.
    """
    record = create_calibration(client, voltage_raw, percentage_raw)
    try:
        refresh_calibration_table(client, model)
    except RecordStoreError as e:
        logger.warning("Recorded calibration %s but reload failed: %s", record, e)
        raise RefreshAfterCreateError(record, e) from e
    logger.info("Recorded calibration %s", record)
    return record
