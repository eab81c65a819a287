"""Object enumerator.

Issues a single cluster-wide list request per coordinate and projects each
returned item to an ObjectRecord.  No pagination and no retry: the first
page is the whole answer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from kubesweep.errors import ListFailed
from kubesweep.models.resources import ObjectRecord, ResourceCoordinate
from kubesweep.observability.logging import get_logger

if TYPE_CHECKING:
    from kubesweep.cluster.connection import ClusterClient

_log = get_logger("listing.enumerator")


def to_record(item: dict[str, Any]) -> ObjectRecord:
    """Project a raw object to its namespace and name."""
    metadata = item.get("metadata") or {}
    return ObjectRecord(
        namespace=str(metadata.get("namespace") or ""),
        name=str(metadata.get("name") or ""),
    )


async def list_objects(
    connection: ClusterClient,
    coordinate: ResourceCoordinate,
    label_selector: str = "",
) -> list[ObjectRecord]:
    """List every object of *coordinate* across all namespaces.

    *label_selector* is passed to the server unmodified; ``""`` matches all.

    Raises:
        ListFailed: the list request failed.
    """
    try:
        items = await connection.list_items(coordinate, label_selector)
    except ListFailed:
        raise
    except Exception as exc:
        raise ListFailed(coordinate, exc) from exc

    records: list[ObjectRecord] = []
    for item in items:
        if not isinstance(item, dict):
            raise ListFailed(coordinate, f"unexpected list item of type {type(item).__name__}")
        records.append(to_record(item))
    _log.debug("objects_listed", resource=str(coordinate), selector=label_selector, count=len(records))
    return records
