"""Cluster connection backed by kubernetes-asyncio.

ClusterClient     -- ABC the resolver and enumerator talk to.
ClusterConnection -- kubernetes-asyncio implementation: aggregated discovery
                     with a legacy per-group-version fallback, and
                     cluster-wide list requests.
load_connection   -- builds a ClusterConnection from kubeconfig or the
                     in-cluster service account.

The connection owns a private ApiClient/Configuration pair; nothing is
stored on the kubernetes-asyncio module-level defaults.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]
from kubernetes_asyncio import config as k8s_config  # type: ignore[import-untyped]
from kubernetes_asyncio.client.rest import ApiException  # type: ignore[import-untyped]

from kubesweep.errors import ConfigError, DiscoveryUnavailable, ListFailed
from kubesweep.models.resources import APIResourceBlock, APIResourceEntry, ResourceCoordinate
from kubesweep.observability.logging import get_logger

_log = get_logger("cluster.connection")

# Aggregated discovery first, plain JSON (legacy documents) last.
_DISCOVERY_ACCEPT = ",".join(
    [
        "application/json;g=apidiscovery.k8s.io;v=v2;as=APIGroupDiscoveryList",
        "application/json;g=apidiscovery.k8s.io;v=v2beta1;as=APIGroupDiscoveryList",
        "application/json",
    ]
)
_JSON_ACCEPT = "application/json"
_AGGREGATED_KIND = "APIGroupDiscoveryList"
_STALE = "Stale"

# (group, [(version, [entries])]) with versions in preference order
_GroupVersions = tuple[str, list[tuple[str, list[APIResourceEntry]]]]


class APIStatusError(ApiException):  # type: ignore[misc]
    """A non-2xx answer from the API server.

    Renders as ``<status> <reason>: <Status.message>`` on a single line
    instead of ApiException's multi-line dump.
    """

    def __init__(self, status: int, reason: str, body: str = "") -> None:
        super().__init__(status=status, reason=reason)
        self.body = body

    def __str__(self) -> str:
        summary = f"{self.status} {self.reason}".strip()
        detail = status_message(self.body)
        return f"{summary}: {detail}" if detail else summary


def status_message(body: str) -> str:
    """Return the ``message`` of a Status body, else its first non-empty line."""
    try:
        document = json.loads(body)
    except ValueError:
        document = None
    if isinstance(document, dict) and document.get("message"):
        return " ".join(str(document["message"]).split())
    for line in body.splitlines():
        if line.strip():
            return line.strip()[:200]
    return ""


class ClusterClient(ABC):
    """The two capabilities the sweep needs from a cluster."""

    @abstractmethod
    async def discover(self) -> list[APIResourceBlock]:
        """Return the server's preferred resources, one block per group-version."""

    @abstractmethod
    async def list_items(self, coordinate: ResourceCoordinate, label_selector: str = "") -> list[dict[str, Any]]:
        """Return the raw items of one cluster-wide list request."""


def collection_path(coordinate: ResourceCoordinate) -> str:
    """Return the all-namespaces collection URL for *coordinate*."""
    if coordinate.group:
        return f"/apis/{coordinate.group}/{coordinate.version}/{coordinate.resource}"
    return f"/api/{coordinate.version}/{coordinate.resource}"


def preferred_blocks(groups: list[_GroupVersions]) -> list[APIResourceBlock]:
    """Keep each (group, resource) from the first version that advertises it.

    Groups and versions are visited in the order given, so the result
    follows server order with the preferred version winning.
    """
    seen: set[tuple[str, str]] = set()
    blocks: list[APIResourceBlock] = []
    for group, versions in groups:
        for version, entries in versions:
            kept: list[APIResourceEntry] = []
            for entry in entries:
                key = (group, entry.name)
                if key in seen:
                    continue
                seen.add(key)
                kept.append(entry)
            if kept:
                group_version = f"{group}/{version}" if group else version
                blocks.append(APIResourceBlock(group_version=group_version, resources=tuple(kept)))
    return blocks


def parse_aggregated(document: dict[str, Any]) -> list[_GroupVersions]:
    """Parse an APIGroupDiscoveryList document.

    Subresources are nested under their parent and are not emitted.  A
    version the server marks Stale (an aggregated API server that is down)
    fails discovery as a whole.

    Raises:
        DiscoveryUnavailable: at least one group-version is stale.
    """
    groups: list[_GroupVersions] = []
    stale: list[str] = []
    for item in document.get("items") or []:
        group = str((item.get("metadata") or {}).get("name") or "")
        versions: list[tuple[str, list[APIResourceEntry]]] = []
        for version_doc in item.get("versions") or []:
            version = str(version_doc.get("version") or "")
            if version_doc.get("freshness") == _STALE:
                stale.append(f"{group}/{version}" if group else version)
                continue
            entries = [
                APIResourceEntry(
                    name=str(res.get("resource") or ""),
                    verbs=frozenset(res.get("verbs") or ()),
                    namespaced=res.get("scope") != "Cluster",
                )
                for res in version_doc.get("resources") or []
            ]
            versions.append((version, entries))
        groups.append((group, versions))
    if stale:
        _log.debug("stale_group_versions", group_versions=stale)
        raise DiscoveryUnavailable(
            "unable to retrieve the complete list of server APIs: "
            + ", ".join(f"{gv}: stale GroupVersion discovery" for gv in stale)
        )
    return groups


def parse_resource_list(document: dict[str, Any]) -> list[APIResourceEntry]:
    """Parse a legacy APIResourceList, dropping ``parent/sub`` subresources."""
    return [
        APIResourceEntry(
            name=str(res.get("name") or ""),
            verbs=frozenset(res.get("verbs") or ()),
            namespaced=bool(res.get("namespaced", True)),
        )
        for res in document.get("resources") or []
        if "/" not in str(res.get("name") or "")
    ]


def legacy_group_versions(group_list: dict[str, Any]) -> list[tuple[str, list[str]]]:
    """Return ``(group, [version, ...])`` from an APIGroupList, preferred version first."""
    result: list[tuple[str, list[str]]] = []
    for group_doc in group_list.get("groups") or []:
        versions = [str(v.get("version") or "") for v in group_doc.get("versions") or []]
        preferred = str((group_doc.get("preferredVersion") or {}).get("version") or "")
        if preferred in versions:
            versions.remove(preferred)
            versions.insert(0, preferred)
        result.append((str(group_doc.get("name") or ""), versions))
    return result


class ClusterConnection(ClusterClient):
    """kubernetes-asyncio backed cluster connection.

    Args:
        api_client:      Configured ``kubernetes_asyncio.client.ApiClient``.
        request_timeout: Per-request timeout in seconds; 0 disables it.
    """

    def __init__(self, api_client: Any, request_timeout: float = 0.0) -> None:
        self._api = api_client
        self._request_timeout = request_timeout

    async def __aenter__(self) -> ClusterConnection:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying ApiClient connection pool."""
        await self._api.close()

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    async def discover(self) -> list[APIResourceBlock]:
        try:
            core = await self._get_json("/api", accept=_DISCOVERY_ACCEPT)
            named = await self._get_json("/apis", accept=_DISCOVERY_ACCEPT)
            if core.get("kind") == _AGGREGATED_KIND and named.get("kind") == _AGGREGATED_KIND:
                groups = parse_aggregated(core) + parse_aggregated(named)
            else:
                _log.debug("aggregated_discovery_unavailable", core_kind=core.get("kind"), kind=named.get("kind"))
                groups = await self._legacy_groups(core, named)
        except DiscoveryUnavailable:
            raise
        except Exception as exc:
            raise DiscoveryUnavailable(exc) from exc
        return preferred_blocks(groups)

    async def _legacy_groups(self, core: dict[str, Any], named: dict[str, Any]) -> list[_GroupVersions]:
        """Fetch one APIResourceList per group-version from the legacy endpoints."""
        groups: list[_GroupVersions] = []
        core_versions: list[tuple[str, list[APIResourceEntry]]] = []
        for version in core.get("versions") or []:
            document = await self._get_json(f"/api/{version}")
            core_versions.append((str(version), parse_resource_list(document)))
        groups.append(("", core_versions))

        for group, versions in legacy_group_versions(named):
            fetched: list[tuple[str, list[APIResourceEntry]]] = []
            for version in versions:
                document = await self._get_json(f"/apis/{group}/{version}")
                fetched.append((version, parse_resource_list(document)))
            groups.append((group, fetched))
        return groups

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def list_items(self, coordinate: ResourceCoordinate, label_selector: str = "") -> list[dict[str, Any]]:
        query: list[tuple[str, str]] = []
        if label_selector:
            query.append(("labelSelector", label_selector))
        try:
            document = await self._get_json(collection_path(coordinate), query=query)
        except Exception as exc:
            raise ListFailed(coordinate, exc) from exc
        return list(document.get("items") or [])

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _get_json(
        self,
        path: str,
        query: list[tuple[str, str]] | None = None,
        accept: str = _JSON_ACCEPT,
    ) -> dict[str, Any]:
        """GET *path* through the ApiClient and decode the JSON body.

        Raises APIStatusError on a non-2xx status.
        """
        kwargs: dict[str, Any] = {}
        if self._request_timeout:
            kwargs["_request_timeout"] = self._request_timeout
        _log.debug("api_request", path=path, query=query or [])
        response = await self._api.call_api(
            path,
            "GET",
            query_params=query or [],
            header_params={"Accept": accept},
            auth_settings=["BearerToken"],
            _preload_content=False,
            **kwargs,
        )
        try:
            body = await response.read()
        finally:
            response.release()
        if not 200 <= response.status <= 299:
            raise APIStatusError(response.status, response.reason or "", body.decode("utf-8", errors="replace"))
        document = json.loads(body)
        if not isinstance(document, dict):
            raise ValueError(f"unexpected response from {path}: expected a JSON object")
        return document


async def _load_configuration(configuration: Any, kubeconfig: str, context: str) -> None:
    if kubeconfig:
        await k8s_config.load_kube_config(
            config_file=kubeconfig,
            context=context or None,
            client_configuration=configuration,
        )
        _log.info("k8s client configured from kubeconfig", path=kubeconfig)
        return
    try:
        await k8s_config.load_kube_config(context=context or None, client_configuration=configuration)
        _log.info("k8s client configured from default kubeconfig")
    except (k8s_config.ConfigException, OSError):
        if context:
            raise
        # load_incluster_config() is synchronous in kubernetes-asyncio
        k8s_config.load_incluster_config(client_configuration=configuration)
        _log.info("k8s client configured from in-cluster service account")


async def load_connection(
    kubeconfig: str = "",
    context: str = "",
    request_timeout: float = 0.0,
) -> ClusterConnection:
    """Resolve cluster credentials and return an open ClusterConnection.

    An explicit *kubeconfig* path is used as-is.  Otherwise the default
    kubeconfig chain is tried, then the in-cluster service account.

    Raises:
        ConfigError: no usable configuration was found.
    """
    configuration = k8s_client.Configuration()
    try:
        await _load_configuration(configuration, kubeconfig, context)
    except Exception as exc:
        raise ConfigError(exc) from exc
    return ClusterConnection(k8s_client.ApiClient(configuration=configuration), request_timeout=request_timeout)
