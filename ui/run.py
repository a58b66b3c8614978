# ui/run.py - Application entry point and run_gui

from PyQt5 import QtWidgets

from api_client import CalibrationApiClient
from ui.main_window import MainWindow


def run_gui(client: CalibrationApiClient) -> int:
    """Create and run the main application window. Returns the Qt exit code."""
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    app.setOrganizationName("CalibrationDashboard")
    app.setApplicationName("CalibrationDashboard")
    win = MainWindow(client)
    win.show()
    return app.exec_()
