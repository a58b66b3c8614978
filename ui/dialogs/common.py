# ui/dialogs/common.py - Shared constants and helpers for dialogs

from PyQt5 import QtWidgets, QtCore

from api_client import NetworkError, NotFoundError, ServerError

STANDARD_FIELD_WIDTH = 280


def request_error_text(exc: Exception) -> str:
    """User-facing text for a failed backend call (server message verbatim)."""
    if isinstance(exc, NotFoundError):
        return f"The record no longer exists on the server:\n{exc.message}\n\nRefresh the table and try again."
    if isinstance(exc, ServerError):
        return exc.message
    if isinstance(exc, NetworkError):
        return f"Could not reach the server.\n\n{exc}"
    return str(exc)


class WaitCursor:
    """Context manager: wait cursor for the duration of a blocking request."""

    def __enter__(self):
        QtWidgets.QApplication.setOverrideCursor(QtCore.Qt.WaitCursor)
        return self

    def __exit__(self, exc_type, exc, tb):
        QtWidgets.QApplication.restoreOverrideCursor()
        return False
