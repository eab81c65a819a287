"""Shared fixtures for kubesweep integration tests.

Provides an in-memory cluster that answers discovery and list requests from
canned data, so sweeps run end-to-end without a real API server.
"""

from __future__ import annotations

from typing import Any

import pytest

from kubesweep.cluster.connection import ClusterClient
from kubesweep.models.resources import APIResourceBlock, APIResourceEntry, ResourceCoordinate

# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


def make_block(group_version: str, *resources: tuple[str, set[str]]) -> APIResourceBlock:
    """Build a discovery block from ``(name, verbs)`` pairs."""
    return APIResourceBlock(
        group_version=group_version,
        resources=tuple(APIResourceEntry(name=name, verbs=frozenset(verbs)) for name, verbs in resources),
    )


def make_item(name: str, namespace: str = "") -> dict[str, Any]:
    """Build a raw list item."""
    metadata: dict[str, Any] = {"name": name, "uid": f"uid-{name}"}
    if namespace:
        metadata["namespace"] = namespace
    return {"metadata": metadata, "spec": {}}


class FakeCluster(ClusterClient):
    """ClusterClient answering from canned data.

    ``items`` maps a coordinate to its list response, or to an exception the
    list request should raise.  Unknown coordinates list as empty.
    """

    def __init__(
        self,
        blocks: list[APIResourceBlock] | None = None,
        items: dict[ResourceCoordinate, list[dict[str, Any]] | Exception] | None = None,
        discovery_error: Exception | None = None,
    ) -> None:
        self.blocks = blocks or []
        self.items = items or {}
        self.discovery_error = discovery_error
        self.discover_calls = 0
        self.list_calls: list[tuple[ResourceCoordinate, str]] = []
        self.closed = False

    async def __aenter__(self) -> FakeCluster:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.closed = True

    async def discover(self) -> list[APIResourceBlock]:
        self.discover_calls += 1
        if self.discovery_error is not None:
            raise self.discovery_error
        return list(self.blocks)

    async def list_items(self, coordinate: ResourceCoordinate, label_selector: str = "") -> list[dict[str, Any]]:
        self.list_calls.append((coordinate, label_selector))
        response = self.items.get(coordinate, [])
        if isinstance(response, Exception):
            raise response
        return list(response)


# ---------------------------------------------------------------------------
# Coordinates used across scenarios
# ---------------------------------------------------------------------------

PODS = ResourceCoordinate(group="", version="v1", resource="pods")
NODES = ResourceCoordinate(group="", version="v1", resource="nodes")
NAMESPACES = ResourceCoordinate(group="", version="v1", resource="namespaces")
DEPLOYMENTS = ResourceCoordinate(group="apps", version="v1", resource="deployments")


@pytest.fixture
def cluster() -> FakeCluster:
    """A small cluster: pods, namespaces and deployments listable, nodes get-only."""
    return FakeCluster(
        blocks=[
            make_block(
                "v1",
                ("pods", {"list", "get", "watch"}),
                ("nodes", {"get"}),
                ("namespaces", {"list", "get"}),
            ),
            make_block("apps/v1", ("deployments", {"create", "list", "get"})),
        ],
        items={
            PODS: [make_item("a", "default"), make_item("b", "kube-system")],
            NAMESPACES: [make_item("default"), make_item("kube-system")],
            DEPLOYMENTS: [make_item("web", "default")],
        },
    )


@pytest.fixture
def connect(monkeypatch: pytest.MonkeyPatch):
    """Route ``load_connection`` to a FakeCluster; returns a setter and records the call kwargs."""
    calls: list[dict[str, Any]] = []

    def _install(fake: FakeCluster) -> list[dict[str, Any]]:
        async def _load_connection(**kwargs: Any) -> FakeCluster:
            calls.append(kwargs)
            return fake

        monkeypatch.setattr("kubesweep.app.load_connection", _load_connection)
        return calls

    return _install
