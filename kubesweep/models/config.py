"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class OnErrorPolicy(StrEnum):
    """What to do when listing one resource kind fails."""

    ABORT = "abort"
    CONTINUE = "continue"


@dataclass
class ClusterConfig:
    """Cluster connection configuration."""

    kubeconfig: str = ""
    context: str = ""
    request_timeout: float = 0.0


@dataclass
class ListingConfig:
    """Object listing configuration."""

    label_selector: str = ""
    on_error: OnErrorPolicy = OnErrorPolicy.ABORT


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "warning"


@dataclass
class SweepConfig:
    """Top-level kubesweep configuration."""

    cluster: ClusterConfig = field(default_factory=ClusterConfig)
    listing: ListingConfig = field(default_factory=ListingConfig)
    log: LogConfig = field(default_factory=LogConfig)
