"""Unit tests for topology node / metric peer matching."""

from dataclasses import replace

import pytest

from netmetrics.common.exceptions import InvalidNodeError
from netmetrics.parsing.models import ParsedFlowMetric
from netmetrics.series.stats import Stats
from netmetrics.topology.matcher import filter_metrics, match_peer
from netmetrics.topology.models import (
    HostNode,
    NamespaceNode,
    NodeType,
    OwnerNode,
    ParentScope,
    ResourceNode,
    TopologyMetricPeer,
    UnknownNode,
    node_from_dict,
)


@pytest.fixture
def peers(sample_peers) -> list[TopologyMetricPeer]:
    """Sample peers as descriptors."""
    return [TopologyMetricPeer(**peer) for peer in sample_peers]


def matching(node, peers) -> list[TopologyMetricPeer]:
    return [peer for peer in peers if match_peer(node, peer)]


@pytest.mark.unit
class TestUnknownNode:
    """Test cases for the unknown catch-all node."""

    def test_matches_only_unidentified_peer(self, peers):
        """Test only the peer without identity matches."""
        assert matching(UnknownNode(), peers) == [peers[0]]

    def test_namespace_only_peer_is_known(self):
        """Test a peer with just a namespace is not unknown."""
        assert match_peer(UnknownNode(), TopologyMetricPeer(namespace="test")) is False

    def test_address_only_peer_is_known(self):
        """Test a peer with just an address is not unknown."""
        assert match_peer(UnknownNode(), TopologyMetricPeer(namespace="", addr="10.0.0.1")) is False


@pytest.mark.unit
class TestGroupNodes:
    """Test cases for namespace and host group nodes."""

    def test_namespace_group(self, peers):
        """Test every peer of the namespace matches."""
        assert matching(NamespaceNode(name="ns1"), peers) == [peers[1], peers[2], peers[3]]

    def test_other_namespace(self, peers):
        """Test a namespace without peers matches nothing."""
        assert matching(NamespaceNode(name="test2"), peers) == []

    def test_host_group(self, peers):
        """Test every peer of the host matches, across namespaces."""
        assert matching(HostNode(name="host1"), peers) == [peers[1], peers[4]]

    def test_host_narrowed_by_namespace(self, peers):
        """Test a parent namespace narrows a host group to a subset."""
        node = HostNode(name="host1", parent=ParentScope(kind="Namespace", name="ns2"))

        assert matching(node, peers) == [peers[4]]

    def test_namespace_narrowed_by_host(self, peers):
        """Test a parent host narrows a namespace group."""
        node = NamespaceNode(name="ns1", parent=ParentScope(kind="Node", name="host2"))

        assert matching(node, peers) == [peers[2]]

    def test_namespace_narrowed_by_owner(self, peers):
        """Test a parent owner narrows a namespace group."""
        node = NamespaceNode(name="ns1", parent=ParentScope(kind="Deployment", name="depl-a"))

        assert matching(node, peers) == [peers[1]]

    def test_unknown_peer_never_in_group(self, peers):
        """Test the unknown peer belongs to no group."""
        assert match_peer(NamespaceNode(name="ns1"), peers[0]) is False
        assert match_peer(HostNode(name="host1"), peers[0]) is False


@pytest.mark.unit
class TestOwnerNode:
    """Test cases for owner nodes."""

    @pytest.fixture
    def owner_peers(self) -> list[TopologyMetricPeer]:
        return [
            TopologyMetricPeer(namespace=""),
            TopologyMetricPeer(namespace="ns1", owner_name="depl-a", owner_type="Deployment"),
            TopologyMetricPeer(namespace="ns1", owner_name="depl-b", owner_type="Deployment"),
            TopologyMetricPeer(namespace="ns1", owner_name="depl-a", owner_type="DaemonSet"),
            TopologyMetricPeer(namespace="ns2", owner_name="depl-a", owner_type="Deployment"),
        ]

    def test_owner_match(self, owner_peers):
        """Test namespace, owner name and owner kind must all match."""
        node = OwnerNode(kind="Deployment", name="depl-a", namespace="ns1")

        assert matching(node, owner_peers) == [owner_peers[1]]

    def test_owner_peer_without_owner(self):
        """Test a peer lacking owner fields does not match an owner node."""
        node = OwnerNode(kind="Deployment", name="depl-a", namespace="ns1")

        assert match_peer(node, TopologyMetricPeer(namespace="ns1")) is False


@pytest.mark.unit
class TestResourceNode:
    """Test cases for resource nodes."""

    @pytest.fixture
    def node(self) -> ResourceNode:
        return ResourceNode(kind="Pod", name="depl-a-12345", namespace="ns1", addr="1.2.3.4")

    def test_resource_match(self, node, peers):
        """Test the single resource matches."""
        assert matching(node, peers) == [peers[1]]

    @pytest.mark.parametrize(
        "field, value",
        [
            ("namespace", "ns2"),
            ("kind", "Service"),
            ("name", "depl-a"),
            ("addr", "1.2.3.7"),
        ],
    )
    def test_any_field_change_breaks_match(self, node, peers, field, value):
        """Test each identity field is required."""
        changed = replace(node, **{field: value})

        assert match_peer(changed, peers[1]) is False

    def test_unset_node_fields_not_checked(self, peers):
        """Test a node identified by address only matches on address."""
        assert matching(ResourceNode(addr="1.2.3.7"), peers) == [peers[4]]

    def test_peer_missing_field(self, node):
        """Test a peer lacking a checked field does not match."""
        peer = TopologyMetricPeer(namespace="ns1", kind="Pod", name="depl-a-12345")

        assert match_peer(node, peer) is False


@pytest.mark.unit
class TestNodeFromDict:
    """Test cases for building nodes from their flat form."""

    def test_unknown(self):
        """Test unknown node type."""
        assert node_from_dict({"nodeType": "unknown"}) == UnknownNode()

    def test_resource(self):
        """Test resource fields are mapped."""
        node = node_from_dict({
            "nodeType": "resource",
            "resourceKind": "Pod",
            "name": "depl-a-12345",
            "namespace": "ns1",
            "addr": "1.2.3.4",
        })

        assert node == ResourceNode(kind="Pod", name="depl-a-12345", namespace="ns1", addr="1.2.3.4")
        assert node.node_type == NodeType.RESOURCE

    def test_group_with_parent(self):
        """Test parent scope is kept for group nodes."""
        node = node_from_dict({
            "nodeType": "host",
            "resourceKind": "Node",
            "name": "host1",
            "parentKind": "Namespace",
            "parentName": "ns2",
        })

        assert node == HostNode(name="host1", parent=ParentScope(kind="Namespace", name="ns2"))

    def test_snake_case_keys(self):
        """Test snake_case keys are accepted."""
        node = node_from_dict({"node_type": "owner", "resource_kind": "Deployment", "name": "depl-a"})

        assert node == OwnerNode(kind="Deployment", name="depl-a")

    def test_incomplete_parent_ignored(self):
        """Test a parent kind without a name does not narrow."""
        node = node_from_dict({"nodeType": "namespace", "name": "ns1", "parentKind": "Node"})

        assert node == NamespaceNode(name="ns1")

    @pytest.mark.parametrize("data", [{}, {"nodeType": "cluster"}])
    def test_invalid_type(self, data):
        """Test unsupported node types are rejected."""
        with pytest.raises(InvalidNodeError):
            node_from_dict(data)

    def test_group_without_name(self):
        """Test group nodes need a name."""
        with pytest.raises(InvalidNodeError):
            node_from_dict({"nodeType": "namespace"})

    @pytest.mark.parametrize("node_type", ["owner", "resource"])
    def test_identity_node_without_fields(self, node_type):
        """Test owner and resource nodes need at least one identity field."""
        with pytest.raises(InvalidNodeError) as exc_info:
            node_from_dict({"nodeType": node_type, "name": "", "addr": None})

        assert exc_info.value.details == {"node_type": node_type}


@pytest.mark.unit
class TestFilterMetrics:
    """Test cases for filter_metrics."""

    def test_either_end_matches(self, peers):
        """Test records are kept when the node is source or destination."""
        unknown, pod_a, pod_b, service, _ = peers
        metrics = [
            ParsedFlowMetric(source=pod_a, destination=service, stats=Stats(), series=[]),
            ParsedFlowMetric(source=service, destination=pod_b, stats=Stats(), series=[]),
            ParsedFlowMetric(source=unknown, destination=pod_b, stats=Stats(), series=[]),
        ]

        assert filter_metrics(metrics, ResourceNode(addr="1.2.3.6")) == metrics[:2]
        assert filter_metrics(metrics, UnknownNode()) == [metrics[2]]
        assert filter_metrics(metrics, HostNode(name="missing")) == []
