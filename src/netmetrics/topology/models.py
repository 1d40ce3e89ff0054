"""Topology node and metric peer descriptors.

A peer is one endpoint of a backend metric row. A node is an element of
the topology graph selected by the user, at one of several
granularities. Nodes are modeled as one variant per granularity so each
carries only the fields its match rule looks at.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Union

from netmetrics.common.exceptions import InvalidNodeError

# Abbreviations appended to display names shared by different kinds
SHORT_KINDS: Final[dict[str, str]] = {
    "Pod": "pod",
    "Service": "svc",
    "Node": "node",
    "Namespace": "ns",
    "Deployment": "depl",
    "DeploymentConfig": "dc",
    "DaemonSet": "ds",
    "StatefulSet": "sts",
    "ReplicaSet": "rs",
    "ReplicationController": "rc",
    "Job": "job",
    "CronJob": "cj",
}

NAMESPACE_KIND: Final = "Namespace"
HOST_KIND: Final = "Node"


def short_kind(kind: str) -> str:
    """Abbreviated lowercase form of a Kubernetes kind."""
    return SHORT_KINDS.get(kind, kind.lower())


class NodeType(str, Enum):
    """Granularity of a topology graph node."""

    UNKNOWN = "unknown"
    NAMESPACE = "namespace"
    OWNER = "owner"
    RESOURCE = "resource"
    HOST = "host"


@dataclass(frozen=True)
class TopologyMetricPeer:
    """One endpoint of a flow metric as reported by the backend.

    ``display_kind`` is the kind of the entity ``display_name`` refers to
    (resource kind, owner kind, ``Namespace`` or ``Node``). It is set by
    whoever builds the label, since the same fields yield different
    labels depending on the aggregation scope.
    """

    namespace: str | None = None
    owner_name: str | None = None
    owner_type: str | None = None
    kind: str | None = None
    name: str | None = None
    addr: str | None = None
    host_name: str | None = None
    display_name: str = ""
    display_kind: str | None = None

    @property
    def is_unknown(self) -> bool:
        """True for the backend's catch-all bucket of unidentified endpoints."""
        return not any((
            self.namespace,
            self.owner_name,
            self.owner_type,
            self.kind,
            self.name,
            self.addr,
            self.host_name,
        ))

    @property
    def peer_id(self) -> str:
        """Stable key built from the identity fields."""
        if self.is_unknown:
            return "unknown"
        parts = [
            f"h={self.host_name}" if self.host_name else "",
            f"n={self.namespace}" if self.namespace else "",
            f"o={self.owner_type}.{self.owner_name}" if self.owner_name else "",
            f"r={self.kind}.{self.name}" if self.name else "",
            f"a={self.addr}" if self.addr else "",
        ]
        return ",".join(part for part in parts if part)

    def to_dict(self) -> dict[str, Any]:
        return {
            "namespace": self.namespace,
            "owner_name": self.owner_name,
            "owner_type": self.owner_type,
            "kind": self.kind,
            "name": self.name,
            "addr": self.addr,
            "host_name": self.host_name,
            "display_name": self.display_name,
            "display_kind": self.display_kind,
            "id": self.peer_id,
        }


@dataclass(frozen=True)
class ParentScope:
    """Enclosing group narrowing a group node, e.g. a namespace inside a host."""

    kind: str
    name: str


@dataclass(frozen=True)
class UnknownNode:
    """Catch-all node for unidentified endpoints."""

    node_type = NodeType.UNKNOWN


@dataclass(frozen=True)
class NamespaceNode:
    """Every endpoint in a namespace."""

    name: str
    parent: ParentScope | None = None

    node_type = NodeType.NAMESPACE


@dataclass(frozen=True)
class HostNode:
    """Every endpoint running on a host."""

    name: str
    parent: ParentScope | None = None

    node_type = NodeType.HOST


@dataclass(frozen=True)
class OwnerNode:
    """Endpoints owned by one workload controller."""

    kind: str | None = None
    name: str | None = None
    namespace: str | None = None

    node_type = NodeType.OWNER


@dataclass(frozen=True)
class ResourceNode:
    """A single resource, identified down to its address."""

    kind: str | None = None
    name: str | None = None
    namespace: str | None = None
    addr: str | None = None

    node_type = NodeType.RESOURCE


NodeData = Union[UnknownNode, NamespaceNode, HostNode, OwnerNode, ResourceNode]


def node_from_dict(data: Mapping[str, Any]) -> NodeData:
    """Build a node variant from the flat form used by the graph view.

    The flat form carries ``nodeType`` plus optional ``resourceKind``,
    ``name``, ``namespace``, ``addr``, ``parentKind`` and ``parentName``.
    snake_case keys are accepted as well.

    Raises:
        InvalidNodeError: If the node type is missing or unknown, a group
            node has no name, or an owner or resource node has no identity
            field at all.
    """
    def field(camel: str, snake: str) -> Any:
        value = data.get(camel, data.get(snake))
        return value or None

    raw_type = field("nodeType", "node_type")
    try:
        node_type = NodeType(raw_type)
    except ValueError as e:
        raise InvalidNodeError(
            f"Unsupported node type: {raw_type!r}",
            details={"node_type": raw_type},
            cause=e,
        ) from e

    kind = field("resourceKind", "resource_kind")
    name = field("name", "name")
    namespace = field("namespace", "namespace")

    if node_type == NodeType.UNKNOWN:
        return UnknownNode()

    if node_type in (NodeType.OWNER, NodeType.RESOURCE):
        addr = field("addr", "addr") if node_type == NodeType.RESOURCE else None
        # Without any field the node would match every peer
        if not any((kind, name, namespace, addr)):
            raise InvalidNodeError(
                "Owner and resource nodes require an identity",
                details={"node_type": node_type.value},
            )
        if node_type == NodeType.OWNER:
            return OwnerNode(kind=kind, name=name, namespace=namespace)
        return ResourceNode(kind=kind, name=name, namespace=namespace, addr=addr)

    if not name:
        raise InvalidNodeError(
            "Group node requires a name",
            details={"node_type": node_type.value},
        )
    parent_kind = field("parentKind", "parent_kind")
    parent_name = field("parentName", "parent_name")
    parent = ParentScope(kind=parent_kind, name=parent_name) if parent_kind and parent_name else None
    if node_type == NodeType.NAMESPACE:
        return NamespaceNode(name=name, parent=parent)
    return HostNode(name=name, parent=parent)
