# ui/main_window.py - Main application window

import logging

from PyQt5 import QtWidgets, QtCore, QtGui

from api_client import CalibrationApiClient, RecordStoreError
from calibration_curve import estimate_percentage
from services import calibration_service
from services.validation_service import ValidationError, parse_voltage
from ui.dialogs import CalibrationEditDialog
from ui.dialogs.common import STANDARD_FIELD_WIDTH, WaitCursor, request_error_text
from ui.edit_session import EditSessionController, InternalConsistencyError
from ui.table_models import (
    CALIBRATION_HEADERS,
    TELEMETRY_HEADERS,
    RecordTableModel,
    calibration_record_at,
    telemetry_row,
)

logger = logging.getLogger(__name__)


def _configure_table(table: QtWidgets.QTableView) -> None:
    table.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
    table.setSelectionMode(QtWidgets.QAbstractItemView.SingleSelection)
    table.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
    # Rows stay in server order
    table.setSortingEnabled(False)
    table.setAlternatingRowColors(True)
    table.setShowGrid(False)
    table.verticalHeader().setVisible(False)
    table.verticalHeader().setDefaultSectionSize(24)
    header = table.horizontalHeader()
    header.setStretchLastSection(True)
    header.setHighlightSections(False)
    header.setDefaultAlignment(QtCore.Qt.AlignLeft | QtCore.Qt.AlignVCenter)


class MainWindow(QtWidgets.QMainWindow):
    def __init__(self, client: CalibrationApiClient):
        super().__init__()
        self.client = client
        self.setWindowTitle("Calibration Dashboard")
        self.resize(1000, 700)

        self.calibration_model = RecordTableModel(CALIBRATION_HEADERS, self)
        self.history_model = RecordTableModel(TELEMETRY_HEADERS, self)
        self.edit_controller = EditSessionController(
            client,
            self.calibration_model,
            on_consistency_error=self._on_consistency_error,
        )

        self._loaded = False
        self._init_ui()

    def _init_ui(self):
        central = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(central)

        # ------------------------------------------------------------------
        # Toolbar + menus
        # ------------------------------------------------------------------
        toolbar = self.addToolBar("Main")
        toolbar.setMovable(False)

        self.act_refresh = toolbar.addAction("Refresh")
        self.act_refresh.setShortcut(QtGui.QKeySequence.Refresh)
        self.act_refresh.setToolTip("Reload calibration records and history (F5)")
        self.act_refresh.triggered.connect(self.load_all)

        self.act_edit = toolbar.addAction("Edit")
        self.act_edit.setShortcut(QtGui.QKeySequence("Ctrl+E"))
        self.act_edit.setToolTip("Edit the selected calibration record (Ctrl+E)")
        self.act_edit.triggered.connect(self.on_edit)

        toolbar.addSeparator()

        self.act_run_main = toolbar.addAction("Run main function")
        self.act_run_main.setToolTip("Trigger a data collection run on the server")
        self.act_run_main.triggered.connect(self.on_run_main)

        menubar = self.menuBar()
        file_menu = menubar.addMenu("&File")
        file_menu.addAction(self.act_refresh)
        file_menu.addSeparator()
        exit_action = file_menu.addAction("E&xit")
        exit_action.setShortcut(QtGui.QKeySequence.Quit)
        exit_action.triggered.connect(self.close)

        cal_menu = menubar.addMenu("&Calibrations")
        cal_menu.addAction(self.act_edit)
        cal_menu.addAction(self.act_run_main)

        # ------------------------------------------------------------------
        # Calibration form
        # ------------------------------------------------------------------
        form_group = QtWidgets.QGroupBox("Record calibration")
        form_layout = QtWidgets.QFormLayout(form_group)
        self.voltage_edit = QtWidgets.QLineEdit()
        self.voltage_edit.setPlaceholderText("e.g. 53.2")
        self.voltage_edit.setMaximumWidth(STANDARD_FIELD_WIDTH)
        self.percentage_edit = QtWidgets.QLineEdit()
        self.percentage_edit.setPlaceholderText("0 - 100")
        self.percentage_edit.setMaximumWidth(STANDARD_FIELD_WIDTH)
        form_layout.addRow("Voltage*", self.voltage_edit)
        form_layout.addRow("Battery %*", self.percentage_edit)

        form_buttons = QtWidgets.QHBoxLayout()
        self.btn_record = QtWidgets.QPushButton("Record calibration")
        self.btn_record.clicked.connect(self.on_record_calibration)
        self.btn_estimate = QtWidgets.QPushButton("Estimate %")
        self.btn_estimate.setToolTip("Estimate battery % for the entered voltage from the calibration points")
        self.btn_estimate.clicked.connect(self.on_estimate)
        self.estimate_label = QtWidgets.QLabel("")
        form_buttons.addWidget(self.btn_record)
        form_buttons.addWidget(self.btn_estimate)
        form_buttons.addWidget(self.estimate_label)
        form_buttons.addStretch(1)
        form_layout.addRow(form_buttons)
        layout.addWidget(form_group)

        # ------------------------------------------------------------------
        # Calibration table
        # ------------------------------------------------------------------
        cal_group = QtWidgets.QGroupBox("Calibration data")
        cal_layout = QtWidgets.QVBoxLayout(cal_group)
        self.calibration_table = QtWidgets.QTableView()
        self.calibration_table.setModel(self.calibration_model)
        _configure_table(self.calibration_table)
        self.calibration_table.doubleClicked.connect(lambda _idx: self.on_edit())
        cal_layout.addWidget(self.calibration_table)
        cal_buttons = QtWidgets.QHBoxLayout()
        btn_edit = QtWidgets.QPushButton("Edit selected")
        btn_edit.clicked.connect(self.on_edit)
        btn_refresh_cal = QtWidgets.QPushButton("Refresh")
        btn_refresh_cal.clicked.connect(self.load_calibration)
        cal_buttons.addWidget(btn_edit)
        cal_buttons.addWidget(btn_refresh_cal)
        cal_buttons.addStretch(1)
        cal_layout.addLayout(cal_buttons)

        # ------------------------------------------------------------------
        # History table
        # ------------------------------------------------------------------
        hist_group = QtWidgets.QGroupBox("Device history")
        hist_layout = QtWidgets.QVBoxLayout(hist_group)
        self.history_table = QtWidgets.QTableView()
        self.history_table.setModel(self.history_model)
        _configure_table(self.history_table)
        hist_layout.addWidget(self.history_table)
        hist_buttons = QtWidgets.QHBoxLayout()
        btn_run_main = QtWidgets.QPushButton("Run main function")
        btn_run_main.clicked.connect(self.on_run_main)
        btn_refresh_hist = QtWidgets.QPushButton("Refresh history")
        btn_refresh_hist.clicked.connect(self.load_history)
        hist_buttons.addWidget(btn_run_main)
        hist_buttons.addWidget(btn_refresh_hist)
        hist_buttons.addStretch(1)
        hist_layout.addLayout(hist_buttons)

        splitter = QtWidgets.QSplitter(QtCore.Qt.Vertical)
        splitter.addWidget(cal_group)
        splitter.addWidget(hist_group)
        layout.addWidget(splitter, 1)

        self.setCentralWidget(central)
        self.statusBar().showMessage(f"Server: {self.client.base_url}")

    def showEvent(self, event):
        super().showEvent(event)
        if not self._loaded:
            self._loaded = True
            QtCore.QTimer.singleShot(0, self.load_all)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_all(self):
        self.load_calibration()
        self.load_history()

    def load_calibration(self):
        try:
            with WaitCursor():
                records = calibration_service.refresh_calibration_table(self.client, self.calibration_model)
        except RecordStoreError as e:
            logger.warning("Loading calibration data failed: %s", e)
            QtWidgets.QMessageBox.critical(
                self, "Load failed", f"Failed to load calibration data:\n{request_error_text(e)}"
            )
            return
        self.statusBar().showMessage(f"Loaded {len(records)} calibration record(s)", 3000)

    def load_history(self):
        try:
            with WaitCursor():
                records = self.client.list_history()
        except RecordStoreError as e:
            logger.warning("Loading history failed: %s", e)
            QtWidgets.QMessageBox.critical(
                self, "Load failed", f"Failed to load device history:\n{request_error_text(e)}"
            )
            return
        self.history_model.render_all(records, telemetry_row)
        self.statusBar().showMessage(f"Loaded {len(records)} history record(s)", 3000)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def on_record_calibration(self):
        voltage_raw = self.voltage_edit.text()
        percentage_raw = self.percentage_edit.text()
        try:
            with WaitCursor():
                record = calibration_service.record_calibration(
                    self.client, self.calibration_model, voltage_raw, percentage_raw
                )
        except ValidationError as e:
            QtWidgets.QMessageBox.warning(self, "Validation", str(e))
            return
        except calibration_service.RefreshAfterCreateError as e:
            self._clear_form()
            self.statusBar().showMessage(f"Calibration recorded (id {e.record.id})", 3000)
            QtWidgets.QMessageBox.warning(
                self,
                "Calibration",
                f"Calibration recorded (id {e.record.id}), but the table could not be reloaded:\n"
                + request_error_text(e.error),
            )
            return
        except RecordStoreError as e:
            logger.warning("Recording calibration failed: %s", e)
            QtWidgets.QMessageBox.critical(
                self, "Error recording calibration", request_error_text(e)
            )
            self._clear_form()
            return
        self._clear_form()
        self.statusBar().showMessage(f"Calibration recorded (id {record.id})", 3000)
        QtWidgets.QMessageBox.information(self, "Calibration", "Calibration recorded successfully.")

    def _clear_form(self):
        self.voltage_edit.clear()
        self.percentage_edit.clear()

    def on_estimate(self):
        try:
            voltage = parse_voltage(self.voltage_edit.text())
        except ValidationError as e:
            QtWidgets.QMessageBox.warning(self, "Validation", str(e))
            return
        try:
            with WaitCursor():
                records = self.client.list()
        except RecordStoreError as e:
            QtWidgets.QMessageBox.critical(self, "Estimate failed", request_error_text(e))
            return
        pct = estimate_percentage(records, voltage)
        self.estimate_label.setText(f"~{pct}% at {voltage:g} V ({len(records)} point(s))")

    def _selected_calibration_row(self):
        sel = self.calibration_table.selectionModel()
        if sel is None:
            return None
        rows = sel.selectedRows()
        if not rows:
            return None
        return rows[0].row()

    def on_edit(self):
        row = self._selected_calibration_row()
        if row is None:
            QtWidgets.QMessageBox.information(
                self, "No selection", "Please select a calibration record to edit."
            )
            return
        record = calibration_record_at(self.calibration_model, row)
        dlg = CalibrationEditDialog(self.edit_controller, record, parent=self)
        if dlg.exec_() == QtWidgets.QDialog.Accepted and dlg.updated_record is not None:
            self.statusBar().showMessage(f"Calibration record {dlg.updated_record.id} updated", 3000)

    def on_run_main(self):
        try:
            with WaitCursor():
                records = self.client.run_main()
        except RecordStoreError as e:
            logger.warning("Run main failed: %s", e)
            QtWidgets.QMessageBox.critical(
                self, "Run main function", f"Error running main function: {request_error_text(e)}"
            )
            return
        self.history_model.render_all(records, telemetry_row)
        self.statusBar().showMessage(f"Main function completed; {len(records)} record(s)", 3000)

    def _on_consistency_error(self, err: InternalConsistencyError):
        logger.error("Calibration table out of sync, reloading from server: %s", err)
        self.statusBar().showMessage("Calibration table reloaded from server", 3000)
