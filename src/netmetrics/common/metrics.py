"""Prometheus metrics for NetMetrics.

Instruments metric-row parsing and the HTTP API.
"""

from prometheus_client import Counter, Histogram, Info

# Application info
APP_INFO = Info(
    "netmetrics",
    "NetMetrics application information",
)

# Parsing metrics
ROWS_PARSED = Counter(
    "netmetrics_rows_parsed_total",
    "Total number of backend metric rows parsed",
    ["scope"],
)

ROWS_MALFORMED = Counter(
    "netmetrics_rows_malformed_total",
    "Total number of metric rows rejected as malformed",
    ["scope"],
)

PEERS_DISAMBIGUATED = Counter(
    "netmetrics_peers_disambiguated_total",
    "Total number of endpoint display names suffixed with a kind",
)

LAGGING_SAMPLES_TRIMMED = Counter(
    "netmetrics_lagging_samples_trimmed_total",
    "Trailing grid ticks excluded as reporting lag",
)

PARSE_DURATION = Histogram(
    "netmetrics_parse_duration_seconds",
    "Time to parse a batch of metric rows",
    ["scope"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# API metrics
API_REQUESTS = Counter(
    "netmetrics_api_requests_total",
    "Total number of API requests",
    ["method", "endpoint", "status"],
)

API_REQUEST_DURATION = Histogram(
    "netmetrics_api_request_duration_seconds",
    "API request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


def set_app_info(version: str, environment: str) -> None:
    """Set application info metric.

    Args:
        version: Application version.
        environment: Deployment environment.
    """
    APP_INFO.info({
        "version": version,
        "environment": environment,
    })
