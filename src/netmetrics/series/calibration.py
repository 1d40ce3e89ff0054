"""Sampling grid calibration.

Derives a uniform ``start``/``end``/``step`` grid from one or more raw
backend series and the range that was requested from the backend.
"""

import time
from collections.abc import Sequence
from dataclasses import dataclass

from netmetrics.common.config import get_settings
from netmetrics.common.exceptions import InvalidRangeError, InvalidStepError
from netmetrics.common.logging import get_logger
from netmetrics.common.metrics import LAGGING_SAMPLES_TRIMMED

logger = get_logger(__name__)

# Sentinel distinguishing "use configured value" from an explicit None
_FROM_SETTINGS = object()

RawPoint = tuple[int, object]


@dataclass(frozen=True)
class TimeRange:
    """Absolute range in epoch seconds, both ends included."""

    start: int
    end: int


# Either an absolute range or a duration in seconds ending "now"
RangeSpec = TimeRange | int


@dataclass(frozen=True)
class CalibratedRange:
    """Canonical sampling grid shared by every series of a batch."""

    start: int
    end: int
    step: int

    @property
    def duration(self) -> int:
        return self.end - self.start

    @property
    def tick_count(self) -> int:
        """Number of grid ticks from start to end inclusive."""
        return self.duration // self.step + 1


def detect_step(series: Sequence[Sequence[RawPoint]]) -> int | None:
    """Smallest positive gap between adjacent samples of any series."""
    step: int | None = None
    for values in series:
        for previous, current in zip(values, values[1:]):
            delta = int(current[0]) - int(previous[0])
            if delta > 0 and (step is None or delta < step):
                step = delta
    return step


def _observed_bounds(series: Sequence[Sequence[RawPoint]]) -> tuple[int, int] | None:
    timestamps = [int(values[i][0]) for values in series if values for i in (0, -1)]
    if not timestamps:
        return None
    return min(timestamps), max(timestamps)


def calibrate_range(
    series: Sequence[Sequence[RawPoint]],
    range_spec: RangeSpec,
    now: int | None = None,
    *,
    default_step: int | None | object = _FROM_SETTINGS,
    lag_tolerance: int | None = None,
) -> CalibratedRange:
    """Compute the sampling grid for a batch of raw series.

    With an explicit ``TimeRange`` the bounds are used verbatim. With a
    duration, the left edge is the first observed sample and the right
    edge is pulled back to the last observed sample when the samples
    missing before ``now`` are explained by collection lag (at most
    ``lag_tolerance`` seconds). A longer trailing gap is genuine and the
    grid extends to ``now`` so that it gets zero-filled.

    Args:
        series: Raw ``(timestamp, value)`` sequences, one per backend row.
        range_spec: ``TimeRange`` or a duration in seconds.
        now: Current epoch seconds. Defaults to the wall clock.
        default_step: Step used when no two samples exist. ``None``
            disables the fallback.
        lag_tolerance: Seconds of trailing lag to absorb.

    Returns:
        Calibrated grid with ``(end - start) % step == 0`` for relative
        ranges.

    Raises:
        InvalidRangeError: If the range is inverted or the duration negative.
        InvalidStepError: If no step can be derived and no default is set.
    """
    settings = get_settings().series
    if default_step is _FROM_SETTINGS:
        default_step = settings.default_step_seconds
    if lag_tolerance is None:
        lag_tolerance = settings.lag_tolerance_seconds

    if isinstance(range_spec, TimeRange) and range_spec.end < range_spec.start:
        raise InvalidRangeError(
            "Range end precedes its start",
            details={"start": range_spec.start, "end": range_spec.end},
        )
    if not isinstance(range_spec, TimeRange) and range_spec < 0:
        raise InvalidRangeError(
            "Range duration must not be negative",
            details={"duration": range_spec},
        )

    step = detect_step(series)
    if step is None:
        if default_step is None:
            raise InvalidStepError(
                "No adjacent samples to derive a step from and no default step configured",
            )
        step = int(default_step)

    if isinstance(range_spec, TimeRange):
        return CalibratedRange(start=range_spec.start, end=range_spec.end, step=step)

    if now is None:
        now = int(time.time())

    bounds = _observed_bounds(series)
    if bounds is None:
        # Nothing observed: keep the nominal window, aligned on "now"
        start = now - (range_spec // step) * step
        return CalibratedRange(start=start, end=now, step=step)

    start, last_seen = bounds
    lag = now - last_seen
    if lag <= lag_tolerance:
        right_edge = last_seen
        trimmed = lag // step
        if trimmed:
            LAGGING_SAMPLES_TRIMMED.inc(trimmed)
            logger.debug(
                "Trailing samples treated as reporting lag",
                lag_seconds=lag,
                trimmed_ticks=trimmed,
            )
    else:
        right_edge = now

    end = start + ((right_edge - start) // step) * step
    return CalibratedRange(start=start, end=max(end, start), step=step)
