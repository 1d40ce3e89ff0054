"""Construction of metric peers from backend label sets.

Flow rows carry one label per endpoint attribute, prefixed with ``Src``
or ``Dst``: ``SrcK8S_Name``, ``SrcK8S_Type``, ``SrcK8S_Namespace``,
``SrcK8S_OwnerName``, ``SrcK8S_OwnerType``, ``SrcK8S_HostName`` and
``SrcAddr``. The aggregation scope decides how many of them survive.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Final

from netmetrics.common.exceptions import MalformedRowError
from netmetrics.parsing.models import MetricScope
from netmetrics.topology.models import HOST_KIND, NAMESPACE_KIND, TopologyMetricPeer


class Endpoint(str, Enum):
    """Side of a flow."""

    SOURCE = "Src"
    DESTINATION = "Dst"


# Label suffixes after the Src/Dst prefix
NAME_LABEL: Final = "K8S_Name"
TYPE_LABEL: Final = "K8S_Type"
NAMESPACE_LABEL: Final = "K8S_Namespace"
OWNER_NAME_LABEL: Final = "K8S_OwnerName"
OWNER_TYPE_LABEL: Final = "K8S_OwnerType"
HOST_NAME_LABEL: Final = "K8S_HostName"
ADDR_LABEL: Final = "Addr"


def _scoped_name(namespace: str | None, name: str) -> str:
    return f"{namespace}.{name}" if namespace else name


def build_peer(
    labels: Mapping[str, str],
    endpoint: Endpoint,
    scope: MetricScope,
) -> TopologyMetricPeer:
    """Build one endpoint of a row, keeping the labels relevant to ``scope``.

    Empty label values are treated as absent. An endpoint with no identity
    at all is the unknown peer and gets an empty display name. The
    display kind follows the field the display name was taken from.

    Raises:
        MalformedRowError: If the identity required by the scope is
            incomplete (a resource name without its kind, an owner name
            without its owner kind).
    """
    def label(suffix: str) -> str | None:
        return labels.get(f"{endpoint.value}{suffix}") or None

    namespace = label(NAMESPACE_LABEL)
    namespace_kind = NAMESPACE_KIND if namespace else None

    if scope == MetricScope.NAMESPACE:
        return TopologyMetricPeer(
            namespace=namespace,
            display_name=namespace or "",
            display_kind=namespace_kind,
        )

    if scope == MetricScope.HOST:
        host_name = label(HOST_NAME_LABEL)
        return TopologyMetricPeer(
            host_name=host_name,
            display_name=host_name or "",
            display_kind=HOST_KIND if host_name else None,
        )

    owner_name = label(OWNER_NAME_LABEL)
    owner_type = label(OWNER_TYPE_LABEL)
    if owner_name and not owner_type:
        raise MalformedRowError(
            "Owner name without owner kind",
            details={"endpoint": endpoint.name.lower(), "owner_name": owner_name},
        )

    if scope == MetricScope.OWNER:
        if owner_name:
            display_name, display_kind = _scoped_name(namespace, owner_name), owner_type
        else:
            display_name, display_kind = namespace or "", namespace_kind
        return TopologyMetricPeer(
            namespace=namespace,
            owner_name=owner_name,
            owner_type=owner_type,
            host_name=label(HOST_NAME_LABEL),
            display_name=display_name,
            display_kind=display_kind,
        )

    name = label(NAME_LABEL)
    kind = label(TYPE_LABEL)
    if name and not kind:
        raise MalformedRowError(
            "Resource name without resource kind",
            details={"endpoint": endpoint.name.lower(), "name": name},
        )
    addr = label(ADDR_LABEL)

    # An address names no kind and is never suffixed
    if name:
        display_name, display_kind = _scoped_name(namespace, name), kind
    elif addr:
        display_name, display_kind = addr, None
    else:
        display_name, display_kind = namespace or "", namespace_kind

    return TopologyMetricPeer(
        namespace=namespace,
        owner_name=owner_name,
        owner_type=owner_type,
        kind=kind,
        name=name,
        addr=addr,
        host_name=label(HOST_NAME_LABEL),
        display_name=display_name,
        display_kind=display_kind,
    )
