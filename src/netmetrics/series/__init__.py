"""Time-series handling - calibration, normalization and statistics."""

from netmetrics.series.calibration import (
    CalibratedRange,
    RangeSpec,
    RawPoint,
    TimeRange,
    calibrate_range,
    detect_step,
)
from netmetrics.series.normalization import NormalizedPoint, normalize_metrics, parse_number
from netmetrics.series.stats import StatType, Stats, compute_stats, get_stat, sum_series

__all__ = [
    # Calibration
    "CalibratedRange",
    "RangeSpec",
    "RawPoint",
    "TimeRange",
    "calibrate_range",
    "detect_step",
    # Normalization
    "NormalizedPoint",
    "normalize_metrics",
    "parse_number",
    # Statistics
    "StatType",
    "Stats",
    "compute_stats",
    "get_stat",
    "sum_series",
]
