"""Metric row parsing - peers, flow records and disambiguation."""

from netmetrics.parsing.models import MetricScope, ParsedBatch, ParsedFlowMetric, RawMetricRow
from netmetrics.parsing.parser import MetricsParser, disambiguate, parse_metrics
from netmetrics.parsing.peers import Endpoint, build_peer

__all__ = [
    "Endpoint",
    "MetricScope",
    "MetricsParser",
    "ParsedBatch",
    "ParsedFlowMetric",
    "RawMetricRow",
    "build_peer",
    "disambiguate",
    "parse_metrics",
]
