# test_validation_service.py
"""
Unit tests for services.validation_service - number parsing and the 0..100 range rule.
Run with: python -m pytest test_validation_service.py -v
"""

import unittest

from domain.models import CalibrationInput
from services.validation_service import (
    NotANumberError,
    OutOfRangeError,
    ValidationError,
    parse_percentage,
    parse_voltage,
    validate_calibration_input,
)


class TestValidateCalibrationInput(unittest.TestCase):
    def test_valid_strings(self):
        self.assertEqual(validate_calibration_input("13.2", "50"), CalibrationInput(13.2, 50))

    def test_whitespace_ignored(self):
        self.assertEqual(validate_calibration_input("  52.1 ", " 7 "), CalibrationInput(52.1, 7))

    def test_numbers_accepted(self):
        result = validate_calibration_input(53, 100)
        self.assertEqual(result.voltage, 53.0)
        self.assertIsInstance(result.voltage, float)
        self.assertEqual(result.percentage, 100)

    def test_bounds_inclusive(self):
        self.assertEqual(validate_calibration_input("1", "0").percentage, 0)
        self.assertEqual(validate_calibration_input("1", "100").percentage, 100)

    def test_out_of_range(self):
        for pct in ("150", "101", "-1", "-50", 1000):
            with self.subTest(pct=pct):
                with self.assertRaises(OutOfRangeError) as ctx:
                    validate_calibration_input("13.2", pct)
                self.assertEqual(ctx.exception.kind, "out_of_range")
                self.assertEqual(ctx.exception.field, "percentage")

    def test_not_a_number_voltage(self):
        for voltage in ("", "abc", "nan", "inf", None, "12,5"):
            with self.subTest(voltage=voltage):
                with self.assertRaises(NotANumberError) as ctx:
                    validate_calibration_input(voltage, "50")
                self.assertEqual(ctx.exception.field, "voltage")
                self.assertEqual(ctx.exception.kind, "not_a_number")

    def test_not_a_number_percentage(self):
        for pct in ("", "fifty", "12.5", "NaN", None):
            with self.subTest(pct=pct):
                with self.assertRaises(NotANumberError) as ctx:
                    validate_calibration_input("13.2", pct)
                self.assertEqual(ctx.exception.field, "percentage")

    def test_type_check_before_range_check(self):
        # Bad voltage is reported even when the percentage is also out of range
        with self.assertRaises(NotANumberError):
            validate_calibration_input("x", "150")

    def test_errors_are_value_errors(self):
        self.assertTrue(issubclass(ValidationError, ValueError))
        self.assertTrue(issubclass(OutOfRangeError, ValidationError))
        self.assertTrue(issubclass(NotANumberError, ValidationError))


class TestParsers(unittest.TestCase):
    def test_parse_percentage_whole_float_text(self):
        self.assertEqual(parse_percentage("65.0"), 65)

    def test_parse_percentage_rejects_bool(self):
        with self.assertRaises(NotANumberError):
            parse_percentage(True)

    def test_parse_voltage_negative_allowed(self):
        self.assertEqual(parse_voltage("-3.5"), -3.5)


if __name__ == "__main__":
    unittest.main()
