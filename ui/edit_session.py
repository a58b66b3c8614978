# ui/edit_session.py - Single active edit of a calibration record
#
# Owns the one EditSession and is the only code allowed to change a rendered
# row in place. Everything else re-renders the whole table.

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from api_client import RecordStoreError
from domain.models import CalibrationRecord
from services.validation_service import validate_calibration_input
from ui.table_models import CAL_COL_PERCENTAGE, CAL_COL_VOLTAGE, RecordTableModel, calibration_row

if TYPE_CHECKING:
    from api_client import CalibrationApiClient

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    CLOSED = "closed"
    OPEN = "open"
    SUBMITTING = "submitting"


class SessionStateError(RuntimeError):
    """Edit operation not allowed in the controller's current state."""


class InternalConsistencyError(RuntimeError):
    """A server-confirmed record id has no matching row in the rendered table."""

    def __init__(self, record_id):
        super().__init__(f"No rendered row tagged with record id {record_id!r}")
        self.record_id = record_id


@dataclass
class EditSession:
    record_id: Any
    draft_voltage: Any
    draft_percentage: Any
    is_open: bool = True


def _log_consistency_error(err: InternalConsistencyError) -> None:
    logger.error("Calibration table out of sync, reloading: %s", err)


class EditSessionController:
    """
    State machine CLOSED -> OPEN -> SUBMITTING -> CLOSED (or back to OPEN on failure).
    On a successful update only the matching row's voltage/percentage cells are
    rewritten, with the values the server returned.
    """

    def __init__(
        self,
        client: "CalibrationApiClient",
        table_model: RecordTableModel,
        on_consistency_error: Callable[[InternalConsistencyError], None] | None = None,
    ):
        self.client = client
        self.table_model = table_model
        self.on_consistency_error = on_consistency_error or _log_consistency_error
        self._state = SessionState.CLOSED
        self._session: EditSession | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def session(self) -> EditSession | None:
        return self._session

    def open(self, record: CalibrationRecord) -> EditSession:
        if self._state is SessionState.SUBMITTING:
            raise SessionStateError("Cannot open an edit while a save is in progress")
        if self._state is SessionState.OPEN:
            logger.info("Closing edit of record %s to open record %s", self._session.record_id, record.id)
            self.cancel()
        self._session = EditSession(
            record_id=record.id,
            draft_voltage=record.voltage,
            draft_percentage=record.percentage,
        )
        self._state = SessionState.OPEN
        logger.debug("Opened edit session for record %s", record.id)
        return self._session

    def cancel(self) -> None:
        if self._state is SessionState.SUBMITTING:
            raise SessionStateError("Cannot cancel while a save is in progress")
        if self._state is SessionState.CLOSED:
            return
        logger.debug("Cancelled edit session for record %s", self._session.record_id)
        self._close()

    def _close(self) -> None:
        if self._session is not None:
            self._session.is_open = False
        self._session = None
        self._state = SessionState.CLOSED

    def submit(self, draft_voltage, draft_percentage) -> CalibrationRecord:
        """
        Validate the drafts and send the update.
        Raises ValidationError (session stays OPEN, nothing sent), RecordStoreError
        (session back to OPEN, drafts kept) or SessionStateError.
        """
        if self._state is SessionState.SUBMITTING:
            raise SessionStateError("A save is already in progress for this record")
        if self._state is not SessionState.OPEN:
            raise SessionStateError("No edit session is open")

        session = self._session
        session.draft_voltage = draft_voltage
        session.draft_percentage = draft_percentage
        values = validate_calibration_input(draft_voltage, draft_percentage)

        self._state = SessionState.SUBMITTING
        try:
            updated = self.client.update(session.record_id, values.voltage, values.percentage)
        except RecordStoreError as e:
            logger.warning("Update of calibration record %s failed: %s", session.record_id, e)
            self._state = SessionState.OPEN
            raise
        except Exception:
            self._state = SessionState.OPEN
            raise

        self._close()
        self.reconcile(updated)
        return updated

    def reconcile(self, record: CalibrationRecord) -> bool:
        """
        Patch the row tagged record.id with the server's values.
        Returns False if the row was missing and the table was reloaded instead.
        """
        row = self.table_model.row_for_tag(record.id)
        if row is None:
            self.on_consistency_error(InternalConsistencyError(record.id))
            self.table_model.render_all(self.client.list(), calibration_row)
            return False
        self.table_model.set_cell(row, CAL_COL_VOLTAGE, record.voltage)
        self.table_model.set_cell(row, CAL_COL_PERCENTAGE, record.percentage)
        logger.debug("Patched row %d for record %s", row, record.id)
        return True
