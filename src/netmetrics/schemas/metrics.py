"""Pydantic schemas for the metrics API endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from netmetrics.parsing.models import MetricScope, ParsedBatch
from netmetrics.series.calibration import RangeSpec, TimeRange
from netmetrics.series.stats import Stats
from netmetrics.topology.models import TopologyMetricPeer


class TimeRangeSchema(BaseModel):
    """Absolute range in epoch seconds."""

    model_config = ConfigDict(populate_by_name=True)

    start: int = Field(alias="from")
    end: int = Field(alias="to")


class CalibratedRangeSchema(BaseModel):
    """Sampling grid used for every series of a response."""

    start: int
    end: int
    step: int


class PeerSchema(BaseModel):
    """One flow endpoint."""

    model_config = ConfigDict(extra="ignore")

    namespace: str | None = None
    owner_name: str | None = None
    owner_type: str | None = None
    kind: str | None = None
    name: str | None = None
    addr: str | None = None
    host_name: str | None = None
    display_name: str = ""
    display_kind: str | None = None
    id: str | None = None

    def to_peer(self) -> TopologyMetricPeer:
        return TopologyMetricPeer(**self.model_dump(exclude={"id"}))

    @classmethod
    def from_peer(cls, peer: TopologyMetricPeer) -> "PeerSchema":
        return cls(**peer.to_dict())


class StatsSchema(BaseModel):
    """Summary statistics of a series."""

    latest: float
    max: float
    avg: float
    total: int

    @classmethod
    def from_stats(cls, stats: Stats) -> "StatsSchema":
        return cls(**stats.to_dict())


class FlowMetricSchema(BaseModel):
    """Flow record between two peers."""

    source: PeerSchema
    destination: PeerSchema
    stats: StatsSchema
    series: list[tuple[int, float]]


class ParseRequest(BaseModel):
    """Raw backend rows to parse.

    Exactly one of ``range`` (absolute) or ``duration`` (seconds ending
    at ``now``) must be given.
    """

    rows: list[dict[str, Any]] = Field(default_factory=list)
    range: TimeRangeSchema | None = None
    duration: int | None = Field(default=None, ge=0)
    scope: MetricScope = MetricScope.RESOURCE
    now: int | None = None

    @model_validator(mode="after")
    def check_range(self) -> "ParseRequest":
        """Ensure a single kind of range is requested."""
        if (self.range is None) == (self.duration is None):
            raise ValueError("Provide exactly one of 'range' or 'duration'")
        return self

    @property
    def range_spec(self) -> RangeSpec:
        if self.range is not None:
            return TimeRange(start=self.range.start, end=self.range.end)
        return self.duration


class ParseResponse(BaseModel):
    """Parsed flow records with their shared grid."""

    range: CalibratedRangeSchema
    metrics: list[FlowMetricSchema]

    @classmethod
    def from_batch(cls, batch: ParsedBatch) -> "ParseResponse":
        return cls(
            range=CalibratedRangeSchema(
                start=batch.range.start,
                end=batch.range.end,
                step=batch.range.step,
            ),
            metrics=[
                FlowMetricSchema(
                    source=PeerSchema.from_peer(metric.source),
                    destination=PeerSchema.from_peer(metric.destination),
                    stats=StatsSchema.from_stats(metric.stats),
                    series=metric.series,
                )
                for metric in batch.metrics
            ],
        )


class MatchRequest(BaseModel):
    """Peers to test against a graph node in its flat form."""

    node: dict[str, Any]
    peers: list[PeerSchema] = Field(default_factory=list)


class MatchResponse(BaseModel):
    """Peers belonging to the node."""

    indices: list[int]
    peers: list[PeerSchema]


class StatsRequest(BaseModel):
    """Normalized series to summarize."""

    series: list[tuple[int, float]] = Field(default_factory=list)
