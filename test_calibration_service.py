# test_calibration_service.py
"""
Unit tests for services.calibration_service - create flow gate and full refresh.
Run with: python -m pytest test_calibration_service.py -v
"""

import unittest
from unittest import mock

from PyQt5 import QtCore

from api_client import NetworkError, RecordStoreError, ServerError
from domain.models import CalibrationRecord
from services import calibration_service
from services.validation_service import NotANumberError, OutOfRangeError
from ui.table_models import CALIBRATION_HEADERS, RecordTableModel, calibration_row


def _mock_client(list_result=(), create_result=None):
    client = mock.Mock()
    client.list.return_value = list(list_result)
    client.create.return_value = create_result
    return client


class TestCreateCalibration(unittest.TestCase):
    def test_out_of_range_never_calls_create(self):
        client = _mock_client()
        with self.assertRaises(OutOfRangeError):
            calibration_service.create_calibration(client, "13.2", "150")
        client.create.assert_not_called()

    def test_not_a_number_never_calls_create(self):
        client = _mock_client()
        for voltage, pct in (("abc", "50"), ("13.2", ""), ("", "")):
            with self.subTest(voltage=voltage, pct=pct):
                with self.assertRaises(NotANumberError):
                    calibration_service.create_calibration(client, voltage, pct)
        self.assertEqual(client.create.call_count, 0)

    def test_valid_input_sends_parsed_values(self):
        created = CalibrationRecord(12, 13.2, 50)
        client = _mock_client(create_result=created)
        self.assertIs(calibration_service.create_calibration(client, " 13.2", "50 "), created)
        client.create.assert_called_once_with(13.2, 50)


class TestRecordCalibration(unittest.TestCase):
    def test_create_then_full_refresh(self):
        created = CalibrationRecord(3, 52.0, 55)
        server_list = [CalibrationRecord(1, 50.8, 0), CalibrationRecord(3, 52.0, 55)]
        client = _mock_client(list_result=server_list, create_result=created)
        model = RecordTableModel(CALIBRATION_HEADERS)
        model.render_all([CalibrationRecord(1, 50.8, 0)], calibration_row)

        result = calibration_service.record_calibration(client, model, "52", "55")

        self.assertIs(result, created)
        client.list.assert_called_once_with()
        self.assertEqual(model.rowCount(), 2)
        self.assertEqual(model.tag_at(1), 3)
        self.assertEqual(model.index(1, 1).data(QtCore.Qt.DisplayRole), 52.0)

    def test_create_failure_leaves_table(self):
        client = _mock_client()
        client.create.side_effect = ServerError(500, "Failed to save calibration data")
        model = RecordTableModel(CALIBRATION_HEADERS)
        with self.assertRaises(ServerError):
            calibration_service.record_calibration(client, model, "52", "55")
        client.list.assert_not_called()
        self.assertEqual(model.rowCount(), 0)

    def test_reload_failure_after_create_keeps_created_record(self):
        created = CalibrationRecord(7, 52.0, 55)
        client = _mock_client(create_result=created)
        client.list.side_effect = NetworkError("connection refused")
        model = RecordTableModel(CALIBRATION_HEADERS)
        model.render_all([CalibrationRecord(1, 50.8, 0)], calibration_row)

        with self.assertRaises(calibration_service.RefreshAfterCreateError) as ctx:
            calibration_service.record_calibration(client, model, "52", "55")

        self.assertIs(ctx.exception.record, created)
        self.assertIsInstance(ctx.exception.error, NetworkError)
        self.assertNotIsInstance(ctx.exception, RecordStoreError)
        self.assertEqual(client.create.call_count, 1)
        self.assertEqual(model.rowCount(), 1)

    def test_refresh_returns_records(self):
        records = [CalibrationRecord(1, 50.8, 0)]
        client = _mock_client(list_result=records)
        model = RecordTableModel(CALIBRATION_HEADERS)
        self.assertEqual(calibration_service.refresh_calibration_table(client, model), records)
        self.assertEqual(model.row_for_tag(1), 0)


if __name__ == "__main__":
    unittest.main()
