"""Raw backend rows and parsed flow records."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from netmetrics.common.exceptions import MalformedRowError
from netmetrics.series.calibration import CalibratedRange, RawPoint
from netmetrics.series.normalization import NormalizedPoint
from netmetrics.series.stats import Stats
from netmetrics.topology.models import TopologyMetricPeer


class MetricScope(str, Enum):
    """Aggregation granularity of a metrics query."""

    RESOURCE = "resource"
    OWNER = "owner"
    NAMESPACE = "namespace"
    HOST = "host"


@dataclass(frozen=True)
class RawMetricRow:
    """One series returned by the metrics backend.

    ``labels`` identify both flow endpoints, ``values`` hold the raw
    ``(timestamp, value)`` samples in chronological order.
    """

    labels: dict[str, str] = field(default_factory=dict)
    values: list[RawPoint] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "RawMetricRow":
        """Build a row from the backend shape ``{"metric": {...}, "values": [...]}``.

        ``labels`` is accepted in place of ``metric``.

        Raises:
            MalformedRowError: If the label map or the value list is missing
                or not of the expected shape.
        """
        if not isinstance(data, Mapping):
            raise MalformedRowError("Metric row must be a mapping")

        labels = data.get("metric", data.get("labels"))
        if not isinstance(labels, Mapping):
            raise MalformedRowError(
                "Metric row has no label map",
                details={"keys": sorted(str(key) for key in data)},
            )

        values = data.get("values", [])
        if not isinstance(values, (list, tuple)):
            raise MalformedRowError("Metric row values must be a list")

        points: list[RawPoint] = []
        for value in values:
            if not isinstance(value, (list, tuple)) or len(value) != 2:
                raise MalformedRowError(
                    "Sample must be a [timestamp, value] pair",
                    details={"sample": repr(value)},
                )
            try:
                timestamp = int(value[0])
            except (TypeError, ValueError) as e:
                raise MalformedRowError(
                    "Sample timestamp is not an integer",
                    details={"sample": repr(value)},
                    cause=e,
                ) from e
            points.append((timestamp, value[1]))

        return cls(
            labels={str(key): str(label) for key, label in labels.items() if label is not None},
            values=points,
        )


@dataclass(frozen=True)
class ParsedFlowMetric:
    """A flow between two peers with its normalized series and summary."""

    source: TopologyMetricPeer
    destination: TopologyMetricPeer
    stats: Stats
    series: list[NormalizedPoint]

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source.to_dict(),
            "destination": self.destination.to_dict(),
            "stats": self.stats.to_dict(),
            "series": [[timestamp, value] for timestamp, value in self.series],
        }


@dataclass(frozen=True)
class ParsedBatch:
    """Flow records of one refresh together with their shared grid."""

    range: CalibratedRange
    metrics: list[ParsedFlowMetric]
