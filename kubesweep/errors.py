"""Error types raised while sweeping a cluster.

Every error is fatal where it is detected.  The CLI prints ``str(err)``, a
single ``<context>: <cause>`` line, and exits non-zero.
"""

from __future__ import annotations

from kubesweep.models.resources import ResourceCoordinate


def one_line(cause: Exception | str) -> str:
    """Join the non-blank lines of *cause* with ``; ``."""
    return "; ".join(line.strip() for line in str(cause).splitlines() if line.strip())


class SweepError(Exception):
    """Base class.  Carries the failing operation and the underlying cause."""

    def __init__(self, context: str, cause: Exception | str) -> None:
        super().__init__(f"{context}: {one_line(cause)}")
        self.context = context
        self.cause = cause


class ConfigError(SweepError):
    """Kubeconfig or in-cluster configuration could not be resolved."""

    def __init__(self, cause: Exception | str, context: str = "error getting REST config") -> None:
        super().__init__(context, cause)


class DiscoveryUnavailable(SweepError):
    """The server's discovery endpoints could not be queried."""

    def __init__(self, cause: Exception | str) -> None:
        super().__init__("error getting server preferred resources", cause)


class MalformedCoordinate(SweepError):
    """A discovery block's group-version string has an unexpected shape."""

    def __init__(self, group_version: str) -> None:
        super().__init__(
            f"error parsing GroupVersion {group_version}",
            f"unexpected GroupVersion string: {group_version!r}",
        )
        self.group_version = group_version


class ListFailed(SweepError):
    """Listing one resource kind failed."""

    def __init__(self, coordinate: ResourceCoordinate, cause: Exception | str) -> None:
        super().__init__(f"error listing {coordinate}", cause)
        self.coordinate = coordinate
