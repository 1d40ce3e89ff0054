"""Topology nodes, metric peers and the rules matching them."""

from netmetrics.topology.matcher import filter_metrics, match_peer
from netmetrics.topology.models import (
    HostNode,
    NamespaceNode,
    NodeData,
    NodeType,
    OwnerNode,
    ParentScope,
    ResourceNode,
    TopologyMetricPeer,
    UnknownNode,
    node_from_dict,
    short_kind,
)

__all__ = [
    # Matching
    "filter_metrics",
    "match_peer",
    # Models
    "HostNode",
    "NamespaceNode",
    "NodeData",
    "NodeType",
    "OwnerNode",
    "ParentScope",
    "ResourceNode",
    "TopologyMetricPeer",
    "UnknownNode",
    "node_from_dict",
    "short_kind",
]
