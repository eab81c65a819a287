"""Kind resolver.

Queries the cluster's discovery surface once and resolves every advertised
resource that supports ``list`` to a ResourceCoordinate.  Server order is
preserved: blocks in the order returned, entries in block order.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from kubesweep.errors import DiscoveryUnavailable, MalformedCoordinate
from kubesweep.models.resources import LIST_VERB, APIResourceBlock, ResourceCoordinate
from kubesweep.observability.logging import get_logger

if TYPE_CHECKING:
    from kubesweep.cluster.connection import ClusterClient

_log = get_logger("discovery.resolver")


def parse_group_version(group_version: str) -> tuple[str, str]:
    """Split ``group/version`` into its parts.

    A bare version (``"v1"``) belongs to the core group.  More than one
    slash, or an empty version, raises MalformedCoordinate.
    """
    if "/" not in group_version:
        group, version = "", group_version
    elif group_version.count("/") == 1:
        group, _, version = group_version.partition("/")
    else:
        raise MalformedCoordinate(group_version)
    if not version:
        raise MalformedCoordinate(group_version)
    return group, version


def resolve_blocks(blocks: Iterable[APIResourceBlock]) -> list[ResourceCoordinate]:
    """Resolve already-fetched discovery blocks to listable coordinates."""
    coordinates: list[ResourceCoordinate] = []
    for block in blocks:
        group, version = parse_group_version(block.group_version)
        for entry in block.resources:
            if not entry.supports(LIST_VERB):
                _log.debug(
                    "resource_skipped_no_list_verb",
                    group_version=block.group_version,
                    resource=entry.name,
                    verbs=sorted(entry.verbs),
                )
                continue
            coordinates.append(ResourceCoordinate(group=group, version=version, resource=entry.name))
    return coordinates


async def resolve(connection: ClusterClient) -> list[ResourceCoordinate]:
    """Discover the server's resources and return the listable coordinates.

    Raises:
        DiscoveryUnavailable: the discovery query failed.
        MalformedCoordinate:  a block's group-version could not be parsed;
                              no coordinates are returned in that case.
    """
    try:
        blocks = await connection.discover()
    except DiscoveryUnavailable:
        raise
    except Exception as exc:
        raise DiscoveryUnavailable(exc) from exc

    coordinates = resolve_blocks(blocks)
    _log.info("discovery_complete", blocks=len(blocks), listable=len(coordinates))
    return coordinates
