"""Series normalization onto a calibrated grid."""

import math
from collections.abc import Sequence

from netmetrics.common.exceptions import InvalidStepError
from netmetrics.series.calibration import RawPoint

NormalizedPoint = tuple[int, float]


def parse_number(value: object) -> float:
    """Convert a raw sample payload to a float.

    Backends report values as strings. Anything that is not a finite
    number (absent, empty, garbage, NaN, infinities) counts as zero.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def normalize_metrics(
    points: Sequence[RawPoint],
    start: int,
    end: int,
    step: int,
) -> list[NormalizedPoint]:
    """Resample a raw series onto the ``start``..``end`` grid.

    Samples are kept only when they sit exactly on a grid tick. Ticks
    without a sample are filled with ``0``: inside a calibrated window a
    missing sample means no traffic, not unknown traffic.

    Args:
        points: Raw ``(timestamp, value)`` pairs.
        start: First grid tick.
        end: Last grid tick (inclusive).
        step: Grid interval in seconds.

    Returns:
        One ``(timestamp, value)`` pair per tick.
    """
    if step <= 0:
        raise InvalidStepError("Step must be positive", details={"step": step})

    by_timestamp = {int(point[0]): point[1] for point in points}
    return [
        (tick, parse_number(by_timestamp[tick]) if tick in by_timestamp else 0.0)
        for tick in range(start, end + 1, step)
    ]
