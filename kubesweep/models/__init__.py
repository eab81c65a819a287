"""Core data structures for kubesweep."""

from kubesweep.models.config import (
    ClusterConfig,
    ListingConfig,
    LogConfig,
    OnErrorPolicy,
    SweepConfig,
)
from kubesweep.models.resources import (
    LIST_VERB,
    APIResourceBlock,
    APIResourceEntry,
    ObjectRecord,
    ResourceCoordinate,
)

__all__ = [
    "LIST_VERB",
    "APIResourceBlock",
    "APIResourceEntry",
    "ClusterConfig",
    "ListingConfig",
    "LogConfig",
    "ObjectRecord",
    "OnErrorPolicy",
    "ResourceCoordinate",
    "SweepConfig",
]
