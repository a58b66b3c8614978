# test_calibration_curve.py
"""
Unit tests for calibration_curve - fit selection by point count, clamping.
Run with: python -m pytest test_calibration_curve.py -v
"""

import unittest

from calibration_curve import clamp_percentage, estimate_percentage, fit_percentage
from domain.models import CalibrationRecord


def _records(points):
    return [CalibrationRecord(i + 1, v, p) for i, (v, p) in enumerate(points)]


class TestClamp(unittest.TestCase):
    def test_truncates_and_clamps(self):
        self.assertEqual(clamp_percentage(55.9), 55)
        self.assertEqual(clamp_percentage(-0.5), 0)
        self.assertEqual(clamp_percentage(-20), 0)
        self.assertEqual(clamp_percentage(130.2), 100)


class TestFallback(unittest.TestCase):
    def test_no_points_uses_fixed_line(self):
        self.assertEqual(estimate_percentage([], 54.0), 48)  # (170*54 - 8642) / 11 = 48.9

    def test_single_point_uses_fixed_line(self):
        self.assertEqual(estimate_percentage(_records([(10.0, 99)]), 54.0), 48)

    def test_fixed_line_clamped(self):
        self.assertEqual(estimate_percentage([], 40.0), 0)
        self.assertEqual(estimate_percentage([], 60.0), 100)


class TestLinear(unittest.TestCase):
    def test_two_points_line(self):
        recs = _records([(50.0, 0), (60.0, 100)])
        self.assertEqual(estimate_percentage(recs, 55.0), 50)
        self.assertEqual(estimate_percentage(recs, 52.5), 25)

    def test_identical_voltages_flat_at_mean(self):
        self.assertAlmostEqual(fit_percentage([50.0, 50.0], [20, 40], 70.0), 30.0)


class TestPolynomial(unittest.TestCase):
    def test_three_points_quadratic_through_knots(self):
        # p = v^2 on these points
        volts = [2.0, 5.0, 8.0]
        pcts = [4, 25, 64]
        self.assertAlmostEqual(fit_percentage(volts, pcts, 5.0), 25.0, places=6)
        self.assertAlmostEqual(fit_percentage(volts, pcts, 6.0), 36.0, places=6)


class TestSpline(unittest.TestCase):
    def test_passes_through_knots(self):
        points = [(50.0, 0), (52.0, 20), (53.0, 45), (55.0, 80), (57.0, 100)]
        volts = [v for v, _ in points]
        pcts = [p for _, p in points]
        for v, p in points:
            with self.subTest(v=v):
                self.assertAlmostEqual(fit_percentage(volts, pcts, v), p, places=6)

    def test_unsorted_and_duplicate_voltages(self):
        # Last value wins for the duplicated 52.0 V point
        points = [(55.0, 80), (50.0, 0), (52.0, 99), (57.0, 100), (52.0, 20), (53.0, 45)]
        volts = [v for v, _ in points]
        pcts = [p for _, p in points]
        self.assertAlmostEqual(fit_percentage(volts, pcts, 52.0), 20.0, places=6)

    def test_linear_data_stays_linear(self):
        volts = [50.0, 52.0, 54.0, 56.0, 58.0]
        pcts = [0, 20, 40, 60, 80]
        self.assertAlmostEqual(fit_percentage(volts, pcts, 53.0), 30.0, places=6)


if __name__ == "__main__":
    unittest.main()
