# api_client.py
"""
HTTP client for the calibration dashboard backend.

One request per call: no retries, no caching, no coalescing. HTTP outcomes
are translated into domain records or RecordStoreError subclasses; callers
decide how to present failures.
"""

from __future__ import annotations

import logging

import requests

from domain.models import CalibrationInput, CalibrationRecord, TelemetryRecord

logger = logging.getLogger(__name__)

CALIBRATION_LIST_PATH = "/api/calibration_data"
CALIBRATION_CREATE_PATH = "/api/calibrate_battery"
CALIBRATION_ITEM_PATH = "/api/calibration_data/{id}"
HISTORY_PATH = "/api/history"
RUN_MAIN_PATH = "/api/run_main"

_JSON_HEADERS = {"Accept": "application/json"}


class RecordStoreError(Exception):
    """Base class for failed backend calls."""


class NetworkError(RecordStoreError):
    """No response received (connection refused, DNS failure, timeout)."""


class ServerError(RecordStoreError):
    """The server answered but rejected the request or sent an unusable body."""

    def __init__(self, status: int, message: str):
        super().__init__(f"HTTP {status}: {message}")
        self.status = status
        self.message = message


class NotFoundError(ServerError):
    """The targeted record does not exist on the server."""


def _error_message(response: requests.Response) -> str:
    """Server's "error" text if the body is JSON, else the raw body or HTTP reason."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message"):
            if body.get(key):
                return str(body[key])
    text = (response.text or "").strip()
    return text or (response.reason or "Request failed")


class CalibrationApiClient:
    """Record store client for calibration and telemetry data."""

    def __init__(self, base_url: str, timeout: float | None = None, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, payload=None):
        url = self.base_url + path
        logger.debug("%s %s body=%s", method, url, payload)
        try:
            response = self.session.request(
                method,
                url,
                json=payload,
                headers=_JSON_HEADERS,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise NetworkError(f"Could not reach server at {self.base_url}: {e}") from e

        if not response.ok:
            message = _error_message(response)
            logger.warning("%s %s -> HTTP %s: %s", method, url, response.status_code, message)
            raise ServerError(response.status_code, message)

        try:
            return response.status_code, response.json()
        except ValueError:
            logger.warning("%s %s -> HTTP %s with invalid JSON body", method, url, response.status_code)
            raise ServerError(response.status_code, "Invalid JSON in server response") from None

    @staticmethod
    def _parse_list(status: int, body, parse):
        if body is None:
            return []
        if not isinstance(body, list):
            raise ServerError(status, f"Expected a JSON array, got {type(body).__name__}")
        try:
            return [parse(item) for item in body]
        except (KeyError, TypeError, ValueError) as e:
            raise ServerError(status, f"Malformed record in server response: {e}") from e

    @staticmethod
    def _parse_record(status: int, body) -> CalibrationRecord:
        try:
            return CalibrationRecord.from_json(body)
        except (KeyError, TypeError, ValueError) as e:
            raise ServerError(status, f"Malformed calibration record in server response: {e}") from e

    # --- Calibration records -------------------------------------------------

    def list(self) -> list[CalibrationRecord]:
        """Fresh read of all calibration records, in server order."""
        status, body = self._request("GET", CALIBRATION_LIST_PATH)
        records = self._parse_list(status, body, CalibrationRecord.from_json)
        logger.debug("Fetched %d calibration record(s)", len(records))
        return records

    def create(self, voltage: float, percentage: int) -> CalibrationRecord:
        """Create a calibration record. Returns the record with its server-assigned id."""
        status, body = self._request(
            "POST", CALIBRATION_CREATE_PATH, CalibrationInput(voltage, percentage).to_payload()
        )
        record = self._parse_record(status, body)
        logger.info("Created calibration record %s", record)
        return record

    def update(self, record_id, voltage: float, percentage: int) -> CalibrationRecord:
        """
        Update voltage/percentage of one record. Returns the server's copy.
        Raises NotFoundError if the server has no such id.
        """
        path = CALIBRATION_ITEM_PATH.format(id=record_id)
        try:
            status, body = self._request("PUT", path, CalibrationInput(voltage, percentage).to_payload())
        except ServerError as e:
            if e.status == 404:
                raise NotFoundError(e.status, e.message) from e
            raise
        record = self._parse_record(status, body)
        logger.info("Updated calibration record %s", record)
        return record

    # --- Telemetry history ---------------------------------------------------

    def list_history(self) -> list[TelemetryRecord]:
        status, body = self._request("GET", HISTORY_PATH)
        return self._parse_list(status, body, TelemetryRecord.from_json)

    def run_main(self) -> list[TelemetryRecord]:
        """Trigger the backend's main collection run; returns the resulting history."""
        status, body = self._request("POST", RUN_MAIN_PATH)
        return self._parse_list(status, body, TelemetryRecord.from_json)
