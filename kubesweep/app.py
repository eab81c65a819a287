"""Sweep orchestration for kubesweep.

Runs the two phases strictly in sequence: discovery once, then one list
request per coordinate in discovery order.  A coordinate's output is fully
written before the next coordinate is listed.  Nothing runs concurrently;
asyncio is only here because kubernetes-asyncio is.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kubesweep.cluster.connection import load_connection
from kubesweep.discovery.resolver import resolve
from kubesweep.errors import ListFailed
from kubesweep.listing.enumerator import list_objects
from kubesweep.models.config import OnErrorPolicy, SweepConfig
from kubesweep.models.resources import ResourceCoordinate
from kubesweep.observability.logging import get_logger
from kubesweep.output import processing_line, record_lines

if TYPE_CHECKING:
    from kubesweep.cluster.connection import ClusterClient

Writer = Callable[[str], None]

_log = get_logger("app")


@dataclass
class SweepSummary:
    """Counters for one sweep."""

    kinds_discovered: int = 0
    kinds_listed: int = 0
    objects: int = 0
    failures: list[ListFailed] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def failed_coordinates(self) -> list[ResourceCoordinate]:
        return [f.coordinate for f in self.failures]


async def sweep(
    connection: ClusterClient,
    write: Writer,
    write_err: Writer,
    label_selector: str = "",
    on_error: OnErrorPolicy = OnErrorPolicy.ABORT,
) -> SweepSummary:
    """Discover listable kinds and write every matching object.

    Under ``OnErrorPolicy.ABORT`` the first ListFailed propagates and no
    later coordinate is listed.  Under ``CONTINUE`` each failure is written
    to *write_err* as one diagnostic line and recorded in the summary.

    Raises:
        DiscoveryUnavailable, MalformedCoordinate: discovery failed.
        ListFailed: a listing failed and the policy is ABORT.
    """
    coordinates = await resolve(connection)
    summary = SweepSummary(kinds_discovered=len(coordinates))

    for coordinate in coordinates:
        write(processing_line(coordinate))
        try:
            records = await list_objects(connection, coordinate, label_selector)
        except ListFailed as exc:
            if on_error is OnErrorPolicy.ABORT:
                raise
            _log.warning("list_failed_continuing", resource=str(coordinate), error=str(exc.cause))
            write_err(str(exc))
            summary.failures.append(exc)
            continue

        for record in records:
            for line in record_lines(record):
                write(line)
        summary.kinds_listed += 1
        summary.objects += len(records)
        _log.info("resource_listed", resource=str(coordinate), count=len(records))

    _log.info(
        "sweep_complete",
        kinds=summary.kinds_discovered,
        listed=summary.kinds_listed,
        objects=summary.objects,
        failed=len(summary.failures),
    )
    return summary


async def run(config: SweepConfig, write: Writer, write_err: Writer) -> SweepSummary:
    """Connect with *config* and sweep the cluster.

    The connection is closed whether the sweep succeeds or fails.

    Raises:
        ConfigError: credentials could not be resolved.
        SweepError subclasses raised by sweep().
    """
    connection = await load_connection(
        kubeconfig=config.cluster.kubeconfig,
        context=config.cluster.context,
        request_timeout=config.cluster.request_timeout,
    )
    async with connection:
        return await sweep(
            connection,
            write,
            write_err,
            label_selector=config.listing.label_selector,
            on_error=config.listing.on_error,
        )
