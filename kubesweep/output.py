"""Plain-text rendering of the sweep.

The line format is consumed by existing scripts and must stay verbatim:

    Processing apps/v1, Resource=deployments
    Namespace: default
    Name: web

"""

from __future__ import annotations

from kubesweep.models.resources import ObjectRecord, ResourceCoordinate


def processing_line(coordinate: ResourceCoordinate) -> str:
    return f"Processing {coordinate}"


def record_lines(record: ObjectRecord) -> list[str]:
    """Lines for one object; the namespace line is omitted for cluster-scoped objects."""
    lines = []
    if record.namespace:
        lines.append(f"Namespace: {record.namespace}")
    lines.append(f"Name: {record.name}")
    lines.append("")
    return lines
