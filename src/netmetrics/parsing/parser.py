"""Parsing of backend metric rows into flow records.

A batch of rows is calibrated once, each row is then normalized and
summarized independently, and a final pass over the whole batch
disambiguates endpoint display names shared by different kinds.
"""

import time
from collections import defaultdict
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any

from netmetrics.common.config import ParserSettings, get_settings
from netmetrics.common.exceptions import MalformedRowError
from netmetrics.common.logging import LoggerMixin
from netmetrics.common.metrics import (
    PARSE_DURATION,
    PEERS_DISAMBIGUATED,
    ROWS_MALFORMED,
    ROWS_PARSED,
)
from netmetrics.parsing.models import MetricScope, ParsedBatch, ParsedFlowMetric, RawMetricRow
from netmetrics.parsing.peers import Endpoint, build_peer
from netmetrics.series.calibration import CalibratedRange, RangeSpec, calibrate_range
from netmetrics.series.normalization import normalize_metrics
from netmetrics.series.stats import compute_stats
from netmetrics.topology.models import TopologyMetricPeer, short_kind


def disambiguate(metrics: Sequence[ParsedFlowMetric]) -> list[ParsedFlowMetric]:
    """Suffix display names shared by endpoints of different kinds.

    Every source and destination of the batch is counted. A display name
    held by more than one kind is rewritten as ``"<name> (<short kind>)"``
    on each of its holders; other names are left untouched.

    Returns:
        New records; the input is not modified.
    """
    kinds_by_name: dict[str, set[str]] = defaultdict(set)
    for metric in metrics:
        for peer in (metric.source, metric.destination):
            kind = peer.display_kind
            if peer.display_name and kind:
                kinds_by_name[peer.display_name].add(kind)

    ambiguous = {name for name, kinds in kinds_by_name.items() if len(kinds) > 1}
    if not ambiguous:
        return list(metrics)

    def rename(peer: TopologyMetricPeer) -> TopologyMetricPeer:
        kind = peer.display_kind
        if peer.display_name not in ambiguous or not kind:
            return peer
        PEERS_DISAMBIGUATED.inc()
        return replace(peer, display_name=f"{peer.display_name} ({short_kind(kind)})")

    return [
        replace(metric, source=rename(metric.source), destination=rename(metric.destination))
        for metric in metrics
    ]


class MetricsParser(LoggerMixin):
    """Turns a batch of raw metric rows into flow records.

    Per-row normalization and statistics only depend on the shared
    calibrated range, so large batches are spread over a thread pool.
    """

    def __init__(self, settings: ParserSettings | None = None) -> None:
        """Initialize parser.

        Args:
            settings: Parser settings.
        """
        if settings is None:
            settings = get_settings().parser

        self._worker_count = settings.worker_count
        self._parallel_threshold = settings.parallel_threshold

    def parse_batch(
        self,
        rows: Sequence[RawMetricRow | dict[str, Any]],
        range_spec: RangeSpec,
        scope: MetricScope | str,
        now: int | None = None,
    ) -> ParsedBatch:
        """Parse rows into disambiguated flow records.

        Args:
            rows: Backend rows, as ``RawMetricRow`` or raw mappings.
            range_spec: Requested range (``TimeRange`` or duration).
            scope: Aggregation scope of the query.
            now: Current epoch seconds for relative ranges.

        Returns:
            The calibrated grid and one record per row, in input order.

        Raises:
            MalformedRowError: If a row is structurally invalid or lacks the
                identity its scope requires.
            InvalidRangeError: If the range is invalid.
            InvalidStepError: If no step can be derived.
        """
        scope = MetricScope(scope)
        started = time.perf_counter()

        try:
            raw_rows = [
                row if isinstance(row, RawMetricRow) else RawMetricRow.from_dict(row)
                for row in rows
            ]
            peers = [
                (
                    build_peer(row.labels, Endpoint.SOURCE, scope),
                    build_peer(row.labels, Endpoint.DESTINATION, scope),
                )
                for row in raw_rows
            ]
        except MalformedRowError as e:
            ROWS_MALFORMED.labels(scope=scope.value).inc()
            self.logger.warning(
                "Rejected malformed metric row",
                scope=scope.value,
                error=e.message,
                details=e.details,
            )
            raise

        calibrated = calibrate_range([row.values for row in raw_rows], range_spec, now)
        summaries = self._summarize(raw_rows, calibrated)

        metrics = [
            ParsedFlowMetric(source=source, destination=destination, stats=stats, series=series)
            for (source, destination), (series, stats) in zip(peers, summaries)
        ]
        metrics = disambiguate(metrics)

        duration = time.perf_counter() - started
        ROWS_PARSED.labels(scope=scope.value).inc(len(metrics))
        PARSE_DURATION.labels(scope=scope.value).observe(duration)
        self.logger.debug(
            "Parsed metric rows",
            scope=scope.value,
            rows=len(metrics),
            start=calibrated.start,
            end=calibrated.end,
            step=calibrated.step,
            duration_ms=round(duration * 1000, 2),
        )
        return ParsedBatch(range=calibrated, metrics=metrics)

    def parse(
        self,
        rows: Sequence[RawMetricRow | dict[str, Any]],
        range_spec: RangeSpec,
        scope: MetricScope | str,
        now: int | None = None,
    ) -> list[ParsedFlowMetric]:
        """Parse rows into flow records, dropping the grid."""
        return self.parse_batch(rows, range_spec, scope, now).metrics

    def _summarize(self, rows: Sequence[RawMetricRow], calibrated: CalibratedRange):
        def summarize(row: RawMetricRow):
            series = normalize_metrics(row.values, calibrated.start, calibrated.end, calibrated.step)
            return series, compute_stats(series)

        if len(rows) < self._parallel_threshold or self._worker_count == 1:
            return [summarize(row) for row in rows]

        with ThreadPoolExecutor(max_workers=self._worker_count) as executor:
            return list(executor.map(summarize, rows))


def parse_metrics(
    rows: Sequence[RawMetricRow | dict[str, Any]],
    range_spec: RangeSpec,
    scope: MetricScope | str,
    now: int | None = None,
) -> list[ParsedFlowMetric]:
    """Parse rows with the configured parser. See ``MetricsParser.parse``."""
    return MetricsParser().parse(rows, range_spec, scope, now)
