"""Summary statistics over normalized series."""

import math
import sys
from collections.abc import Sequence
from dataclasses import asdict, dataclass
from enum import Enum

from netmetrics.series.normalization import NormalizedPoint, parse_number


class StatType(str, Enum):
    """Statistic shown for a flow."""

    LATEST = "latest"
    MAX = "max"
    AVG = "avg"
    TOTAL = "total"


@dataclass(frozen=True)
class Stats:
    """Summary of a normalized series.

    ``avg`` is rounded to two decimals for display. ``total`` estimates
    the cumulative volume over the window from the unrounded mean.
    """

    latest: float = 0.0
    max: float = 0.0
    avg: float = 0.0
    total: int = 0

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def _round_half_up(value: float, places: int = 0) -> float:
    scale = 10 ** places
    scaled = value * scale
    if not math.isfinite(scaled):
        # Beyond float precision there are no decimals left to round
        return value
    return math.floor(scaled + 0.5) / scale


def _mean(values: Sequence[float]) -> float:
    count = len(values)
    mean = sum(values) / count
    if math.isfinite(mean):
        return mean
    # Sum overflowed although every value is finite
    mean = sum(value / count for value in values)
    return max(-sys.float_info.max, min(mean, sys.float_info.max))


def _total(values: Sequence[float], mean: float, duration: int) -> int:
    total = sum(values) * duration / len(values)
    if math.isfinite(total):
        return int(_round_half_up(total))
    return int(mean) * duration


def compute_stats(series: Sequence[NormalizedPoint]) -> Stats:
    """Reduce a normalized series to latest/max/avg/total.

    ``total`` is ``round(sum * (end - start) / count)`` where ``start`` and
    ``end`` are the first and last timestamps of the series. Non-finite
    values count as zero and magnitudes near the float limit do not
    overflow, so the reduction never raises.
    """
    if not series:
        return Stats()

    values = [parse_number(value) for _, value in series]
    mean = _mean(values)
    duration = series[-1][0] - series[0][0]

    return Stats(
        latest=values[-1],
        max=max(values),
        avg=_round_half_up(mean, 2),
        total=_total(values, mean, duration),
    )


def get_stat(stats: Stats, stat_type: StatType | str) -> float:
    """Pick a single statistic by type."""
    return getattr(stats, StatType(stat_type).value)


def sum_series(series_list: Sequence[Sequence[NormalizedPoint]]) -> list[NormalizedPoint]:
    """Element-wise sum of series normalized on the same grid.

    Used for the overall traffic line of a selection. Series of unequal
    length are summed over the ticks they share with the first one.
    """
    if not series_list:
        return []
    totals = [[timestamp, 0.0] for timestamp, _ in series_list[0]]
    for series in series_list:
        for point, (_, value) in zip(totals, series):
            point[1] += value
    return [(timestamp, value) for timestamp, value in totals]
