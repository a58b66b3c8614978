# test_main.py
"""
Tests for main.py headless modes (--list-calibration, --estimate) with a mocked client.
Run with: python -m pytest test_main.py -v
"""

import contextlib
import io
import unittest
from unittest import mock

import main
from api_client import NetworkError
from domain.models import CalibrationRecord


class HeadlessTestCase(unittest.TestCase):
    def setUp(self):
        patches = [
            mock.patch("main.setup_logging"),
            mock.patch("main.install_global_excepthook"),
            mock.patch("main.load_api_base_url", return_value="http://dash.local:8080"),
            mock.patch("main.load_request_timeout", return_value=3.0),
            mock.patch("main.persist_api_base_url"),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)
        client_patch = mock.patch("main.CalibrationApiClient")
        self.client_cls = client_patch.start()
        self.addCleanup(client_patch.stop)
        self.client = self.client_cls.return_value

    def _run(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main.main(argv)
        return code, out.getvalue(), err.getvalue()


class TestHeadless(HeadlessTestCase):
    def test_list_calibration(self):
        self.client.list.return_value = [CalibrationRecord(1, 50.8, 0), CalibrationRecord(2, 57.3, 100)]
        code, out, _ = self._run(["--list-calibration"])
        self.assertEqual(code, 0)
        self.assertIn("2 record(s)", out)
        self.assertIn("57.3", out)
        self.client_cls.assert_called_once_with("http://dash.local:8080", timeout=3.0)

    def test_estimate(self):
        self.client.list.return_value = [CalibrationRecord(1, 50.0, 0), CalibrationRecord(2, 60.0, 100)]
        code, out, _ = self._run(["--estimate", "55"])
        self.assertEqual(code, 0)
        self.assertIn("55 V -> 50%", out)

    def test_estimate_bad_voltage(self):
        code, _, err = self._run(["--estimate", "abc"])
        self.assertEqual(code, 1)
        self.assertIn("Error", err)
        self.client.list.assert_not_called()

    def test_network_failure_exit_code(self):
        self.client.list.side_effect = NetworkError("Could not reach server")
        code, _, err = self._run(["--list-calibration"])
        self.assertEqual(code, 1)
        self.assertIn("Could not reach server", err)

    def test_api_url_override_and_remember(self):
        self.client.list.return_value = []
        self._run(["--api-url", "http://pi.local:9000/", "--remember", "--list-calibration"])
        self.client_cls.assert_called_once_with("http://pi.local:9000", timeout=3.0)
        main.persist_api_base_url.assert_called_once_with("http://pi.local:9000")


if __name__ == "__main__":
    unittest.main()
