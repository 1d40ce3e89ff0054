"""Metrics API endpoints - parsing, node matching and statistics."""

from fastapi import APIRouter

from netmetrics.common.logging import get_logger
from netmetrics.parsing.parser import MetricsParser
from netmetrics.schemas.metrics import (
    MatchRequest,
    MatchResponse,
    ParseRequest,
    ParseResponse,
    StatsRequest,
    StatsSchema,
)
from netmetrics.series.stats import compute_stats
from netmetrics.topology.matcher import match_peer
from netmetrics.topology.models import node_from_dict

logger = get_logger(__name__)

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.post("/parse", response_model=ParseResponse)
def parse(request: ParseRequest) -> ParseResponse:
    """Normalize raw backend rows into flow records.

    Rows use the backend shape ``{"metric": {...labels}, "values": [[ts, "v"], ...]}``.
    """
    batch = MetricsParser().parse_batch(
        request.rows,
        request.range_spec,
        request.scope,
        now=request.now,
    )
    return ParseResponse.from_batch(batch)


@router.post("/match", response_model=MatchResponse)
def match(request: MatchRequest) -> MatchResponse:
    """Select the peers that belong to a topology node."""
    node = node_from_dict(request.node)
    indices = [
        index for index, peer in enumerate(request.peers)
        if match_peer(node, peer.to_peer())
    ]

    logger.debug(
        "Matched peers",
        node_type=node.node_type.value,
        candidates=len(request.peers),
        matched=len(indices),
    )

    return MatchResponse(
        indices=indices,
        peers=[request.peers[index] for index in indices],
    )


@router.post("/stats", response_model=StatsSchema)
def stats(request: StatsRequest) -> StatsSchema:
    """Summarize a normalized series."""
    return StatsSchema.from_stats(compute_stats(request.series))
