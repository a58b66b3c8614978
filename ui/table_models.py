# ui/table_models.py - Table models and row builders for record tables

from typing import Any, Callable, Iterable, NamedTuple

from PyQt5 import QtCore

from domain.models import CalibrationRecord, TelemetryRecord

TAG_ROLE = QtCore.Qt.UserRole


class RowSpec(NamedTuple):
    """One rendered row: the record identifier it is tagged with, plus its cell values."""

    tag: Any
    cells: tuple


CALIBRATION_HEADERS = ["ID", "Voltage", "Battery %"]
CAL_COL_VOLTAGE = 1
CAL_COL_PERCENTAGE = 2

TELEMETRY_HEADERS = [
    "ID",
    "Timestamp",
    "PV Total Power",
    "EMS Power",
    "Load Power",
    "EMS Voltage",
    "Battery %",
]


def calibration_row(record: CalibrationRecord) -> RowSpec:
    return RowSpec(record.id, (record.id, record.voltage, record.percentage))


def telemetry_row(record: TelemetryRecord) -> RowSpec:
    return RowSpec(
        record.id,
        (
            record.id,
            record.timestamp,
            record.pv_total_power,
            record.ems_power,
            record.load_power,
            record.ems_voltage,
            record.battery_percentage,
        ),
    )


class RecordTableModel(QtCore.QAbstractTableModel):
    """
    Read-only table of records. Every render replaces the whole row set;
    rows carry their record id under TAG_ROLE so they can be found again.
    """

    def __init__(self, headers, parent=None):
        super().__init__(parent)
        self.headers = list(headers)
        self._rows: list[RowSpec] = []

    def rowCount(self, parent=QtCore.QModelIndex()):
        if parent.isValid():
            return 0
        return len(self._rows)

    def columnCount(self, parent=QtCore.QModelIndex()):
        if parent.isValid():
            return 0
        return len(self.headers)

    def data(self, index, role=QtCore.Qt.DisplayRole):
        if not index.isValid():
            return None
        row = self._rows[index.row()]
        if role == TAG_ROLE:
            return row.tag
        if role in (QtCore.Qt.DisplayRole, QtCore.Qt.EditRole):
            col = index.column()
            if col < len(row.cells):
                value = row.cells[col]
                return "" if value is None else value
            return ""
        return None

    def headerData(self, section, orientation, role=QtCore.Qt.DisplayRole):
        if role != QtCore.Qt.DisplayRole:
            return None
        if orientation == QtCore.Qt.Horizontal:
            return self.headers[section]
        return section + 1

    def render_all(self, records: Iterable, row_builder: Callable[[Any], RowSpec]) -> None:
        """Replace all rows with one row per record, in input order."""
        rows = [row_builder(r) for r in records]
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()

    def rows(self) -> list[RowSpec]:
        return list(self._rows)

    def tag_at(self, row: int):
        if 0 <= row < len(self._rows):
            return self._rows[row].tag
        return None

    def row_for_tag(self, tag) -> int | None:
        for i, row in enumerate(self._rows):
            if row.tag == tag:
                return i
        return None

    def set_cell(self, row: int, column: int, value) -> None:
        """Overwrite a single cell in place and notify views for that cell only."""
        spec = self._rows[row]
        cells = list(spec.cells)
        cells[column] = value
        self._rows[row] = RowSpec(spec.tag, tuple(cells))
        idx = self.index(row, column)
        self.dataChanged.emit(idx, idx, [QtCore.Qt.DisplayRole, QtCore.Qt.EditRole])


def calibration_record_at(model: RecordTableModel, row: int) -> CalibrationRecord | None:
    """Read a CalibrationRecord back out of a rendered calibration row."""
    if not 0 <= row < model.rowCount():
        return None
    spec = model.rows()[row]
    return CalibrationRecord(
        id=spec.tag,
        voltage=spec.cells[CAL_COL_VOLTAGE],
        percentage=spec.cells[CAL_COL_PERCENTAGE],
    )
