"""Matching of topology nodes against metric peers.

Rules by node granularity, most generic first:

- unknown: the peer carries no identity at all
- namespace / host: every peer in the group, optionally narrowed by a
  parent scope
- owner: namespace, owner name and owner kind all equal
- resource: namespace, kind, name and address all equal

A field left unset on the node is not checked. A field the node does
check must be present and equal on the peer.
"""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, TypeVar

from netmetrics.topology.models import (
    HOST_KIND,
    NAMESPACE_KIND,
    HostNode,
    NamespaceNode,
    NodeData,
    OwnerNode,
    ParentScope,
    ResourceNode,
    TopologyMetricPeer,
    UnknownNode,
)

if TYPE_CHECKING:
    from netmetrics.parsing.models import ParsedFlowMetric

M = TypeVar("M", bound="ParsedFlowMetric")


def _fields_match(pairs: Iterable[tuple[str | None, str | None]]) -> bool:
    return all(expected is None or expected == actual for expected, actual in pairs)


def _in_parent(parent: ParentScope | None, peer: TopologyMetricPeer) -> bool:
    if parent is None:
        return True
    if parent.kind == NAMESPACE_KIND:
        return peer.namespace == parent.name
    if parent.kind == HOST_KIND:
        return peer.host_name == parent.name
    return peer.owner_type == parent.kind and peer.owner_name == parent.name


def match_peer(node: NodeData, peer: TopologyMetricPeer) -> bool:
    """Check whether a metric peer belongs to a topology node."""
    if isinstance(node, UnknownNode):
        return peer.is_unknown
    if isinstance(node, NamespaceNode):
        return peer.namespace == node.name and _in_parent(node.parent, peer)
    if isinstance(node, HostNode):
        return peer.host_name == node.name and _in_parent(node.parent, peer)
    if isinstance(node, OwnerNode):
        return _fields_match((
            (node.namespace, peer.namespace),
            (node.name, peer.owner_name),
            (node.kind, peer.owner_type),
        ))
    if isinstance(node, ResourceNode):
        return _fields_match((
            (node.namespace, peer.namespace),
            (node.kind, peer.kind),
            (node.name, peer.name),
            (node.addr, peer.addr),
        ))
    return False


def filter_metrics(metrics: Sequence[M], node: NodeData) -> list[M]:
    """Flow records with the node at either end."""
    return [
        metric for metric in metrics
        if match_peer(node, metric.source) or match_peer(node, metric.destination)
    ]
