# calibration_curve.py
"""
Battery percentage estimate from the recorded calibration points.

The fit depends on how many points exist:
  - fewer than 2: fixed fallback line for a 48-56 V pack
  - exactly 2:    least-squares line
  - 3 or 4:       polynomial of degree n - 1 through the points
  - 5 or more:    natural cubic spline through the points sorted by voltage
Results are truncated to int and clamped to 0..100.
"""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np
from scipy.interpolate import CubicSpline

from domain.models import CalibrationRecord

logger = logging.getLogger(__name__)

# Fallback line: 50.8 V -> ~0 %, 57.3 V -> ~100 %
FALLBACK_SLOPE = 170.0 / 11.0
FALLBACK_INTERCEPT = -8642.0 / 11.0

SPLINE_MIN_POINTS = 5


def clamp_percentage(value: float) -> int:
    pct = int(value)  # truncates toward zero
    return max(0, min(100, pct))


def _fallback(voltage: float) -> float:
    return FALLBACK_SLOPE * voltage + FALLBACK_INTERCEPT


def _linear(voltages: np.ndarray, percentages: np.ndarray, voltage: float) -> float:
    n = len(voltages)
    sum_x = voltages.sum()
    sum_y = percentages.sum()
    denominator = n * (voltages * voltages).sum() - sum_x * sum_x
    # Identical voltages: flat line at the mean
    slope = 0.0 if denominator == 0 else (n * (voltages * percentages).sum() - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return slope * voltage + intercept


def _polynomial(voltages: np.ndarray, percentages: np.ndarray, voltage: float) -> float:
    coefficients = np.polyfit(voltages, percentages, len(voltages) - 1)
    return float(np.polyval(coefficients, voltage))


def _spline(voltages: np.ndarray, percentages: np.ndarray, voltage: float) -> float:
    # Later points win for duplicate voltages
    points = dict(zip(voltages.tolist(), percentages.tolist()))
    xs = np.array(sorted(points))
    if len(xs) < 2:
        return _fallback(voltage)
    ys = np.array([points[x] for x in xs])
    spline = CubicSpline(xs, ys, bc_type="natural")
    return float(spline(voltage))


def fit_percentage(voltages, percentages, voltage: float) -> float:
    """Unclamped estimate for voltage from parallel sequences of calibration points."""
    xs = np.asarray(voltages, dtype=float)
    ys = np.asarray(percentages, dtype=float)
    n = len(xs)
    if n < 2:
        return _fallback(voltage)
    if n == 2:
        return _linear(xs, ys, voltage)
    if n < SPLINE_MIN_POINTS:
        return _polynomial(xs, ys, voltage)
    return _spline(xs, ys, voltage)


def estimate_percentage(records: Iterable[CalibrationRecord], voltage: float) -> int:
    """Estimated battery percentage (0..100) for voltage given the calibration records."""
    records = list(records)
    estimate = fit_percentage(
        [r.voltage for r in records],
        [r.percentage for r in records],
        voltage,
    )
    if not np.isfinite(estimate):
        logger.warning("Calibration fit produced %r for %s V; using fallback line", estimate, voltage)
        estimate = _fallback(voltage)
    result = clamp_percentage(estimate)
    logger.debug("Estimated %s%% for %s V from %d point(s)", result, voltage, len(records))
    return result
