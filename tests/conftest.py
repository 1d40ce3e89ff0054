"""Pytest configuration and fixtures for NetMetrics tests."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from netmetrics.api.main import create_app
from netmetrics.common.config import ParserSettings, SeriesSettings, Settings

# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Get test settings."""
    return Settings(
        environment="development",
        debug=True,
        series=SeriesSettings(default_step_seconds=15, lag_tolerance_seconds=60),
        parser=ParserSettings(worker_count=4, parallel_threshold=500),
    )


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing API endpoints."""
    app = create_app()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# =============================================================================
# Sample Data Fixtures
# =============================================================================

FIRST_SAMPLE = 1664372000


def make_values(first: int, payloads: list[str], step: int = 15) -> list[tuple[int, str]]:
    """Build evenly spaced raw samples."""
    return [(first + index * step, payload) for index, payload in enumerate(payloads)]


@pytest.fixture
def steady_values() -> list[tuple[int, str]]:
    """Five minutes of complete 15s samples: 7x5, 7x10, 7x8."""
    return make_values(FIRST_SAMPLE, ["5"] * 7 + ["10"] * 7 + ["8"] * 7)


@pytest.fixture
def gapped_values() -> list[tuple[int, str]]:
    """Same window with no samples between +105s and +195s."""
    return make_values(FIRST_SAMPLE, ["5"] * 7) + make_values(FIRST_SAMPLE + 210, ["8"] * 7)


@pytest.fixture
def sample_peers() -> list[dict[str, Any]]:
    """Peers spread over two namespaces and two hosts, plus the unknown peer."""
    return [
        {"namespace": ""},
        {
            "namespace": "ns1",
            "host_name": "host1",
            "owner_name": "depl-a",
            "owner_type": "Deployment",
            "kind": "Pod",
            "name": "depl-a-12345",
            "addr": "1.2.3.4",
            "display_name": "depl-a-12345",
        },
        {
            "namespace": "ns1",
            "host_name": "host2",
            "owner_name": "depl-b",
            "owner_type": "Deployment",
            "kind": "Pod",
            "name": "depl-b-67890",
            "addr": "1.2.3.5",
            "display_name": "depl-b-67890",
        },
        {
            "namespace": "ns1",
            "kind": "Service",
            "name": "svc-a",
            "addr": "1.2.3.6",
            "display_name": "svc-a",
        },
        {
            "namespace": "ns2",
            "host_name": "host1",
            "owner_name": "depl-a",
            "owner_type": "Deployment",
            "kind": "Pod",
            "name": "depl-a-12345",
            "addr": "1.2.3.7",
            "display_name": "depl-a-12345",
        },
    ]


@pytest.fixture
def pod_and_service_rows() -> list[dict[str, Any]]:
    """Two flows from the same pod to a pod and a service both named B."""
    return [
        {
            "metric": {
                "SrcK8S_Name": "A",
                "SrcK8S_Namespace": "ns1",
                "SrcK8S_Type": "Pod",
                "DstK8S_Name": "B",
                "DstK8S_Namespace": "ns1",
                "DstK8S_Type": "Pod",
            },
            "values": [],
        },
        {
            "metric": {
                "SrcK8S_Name": "A",
                "SrcK8S_Namespace": "ns1",
                "SrcK8S_Type": "Pod",
                "DstK8S_Name": "B",
                "DstK8S_Namespace": "ns1",
                "DstK8S_Type": "Service",
            },
            "values": [],
        },
    ]
