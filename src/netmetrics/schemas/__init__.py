"""Pydantic schemas for API request/response validation."""

from netmetrics.schemas.metrics import (
    CalibratedRangeSchema,
    FlowMetricSchema,
    MatchRequest,
    MatchResponse,
    ParseRequest,
    ParseResponse,
    PeerSchema,
    StatsRequest,
    StatsSchema,
    TimeRangeSchema,
)

__all__ = [
    "CalibratedRangeSchema",
    "FlowMetricSchema",
    "MatchRequest",
    "MatchResponse",
    "ParseRequest",
    "ParseResponse",
    "PeerSchema",
    "StatsRequest",
    "StatsSchema",
    "TimeRangeSchema",
]
