"""Resource coordinates, discovery blocks, and listed object records."""

from __future__ import annotations

from dataclasses import dataclass, field

LIST_VERB = "list"


@dataclass(frozen=True)
class ResourceCoordinate:
    """A (group, version, resource) triple identifying one kind on the server.

    ``group`` is empty for the core API group.  Renders the same way
    kubectl's GroupVersionResource does, e.g. ``apps/v1, Resource=deployments``
    or ``/v1, Resource=pods``.
    """

    group: str
    version: str
    resource: str

    @property
    def group_version(self) -> str:
        """Return the ``group/version`` string (bare version for the core group)."""
        return f"{self.group}/{self.version}" if self.group else self.version

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Resource={self.resource}"


@dataclass(frozen=True)
class APIResourceEntry:
    """One resource advertised inside a discovery block."""

    name: str
    verbs: frozenset[str] = field(default_factory=frozenset)
    namespaced: bool = True

    def supports(self, verb: str) -> bool:
        return verb in self.verbs


@dataclass(frozen=True)
class APIResourceBlock:
    """Resources advertised for a single group-version, in server order."""

    group_version: str
    resources: tuple[APIResourceEntry, ...] = ()


@dataclass(frozen=True)
class ObjectRecord:
    """Minimal projection of a listed object.

    ``namespace`` is empty for cluster-scoped kinds.
    """

    namespace: str
    name: str
