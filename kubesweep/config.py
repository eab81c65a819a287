"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kubesweep.models.config import (
    ClusterConfig,
    ListingConfig,
    LogConfig,
    OnErrorPolicy,
    SweepConfig,
)

LOG_LEVELS = ("debug", "info", "warning", "error")


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBESWEEP_{key}", default)


def _env_float(key: str, default: float, min_val: float | None = None) -> float:
    val = float(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    return val


def validate_log_level(value: str) -> str:
    if value.lower() not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {value}. Must be one of {set(LOG_LEVELS)}")
    return value.lower()


def validate_on_error(value: str) -> OnErrorPolicy:
    try:
        return OnErrorPolicy(value.lower())
    except ValueError:
        valid = {p.value for p in OnErrorPolicy}
        raise ValueError(f"Invalid on-error policy: {value}. Must be one of {valid}") from None


def load_config() -> SweepConfig:
    """Load configuration from KUBESWEEP_* environment variables.

    ``KUBECONFIG`` itself is left to the kubeconfig loader; only an explicit
    ``KUBESWEEP_KUBECONFIG`` lands in the config.
    """
    return SweepConfig(
        cluster=ClusterConfig(
            kubeconfig=_env("KUBECONFIG", ""),
            context=_env("CONTEXT", ""),
            request_timeout=_env_float("REQUEST_TIMEOUT", 0.0, min_val=0.0),
        ),
        listing=ListingConfig(
            label_selector=_env("SELECTOR", ""),
            on_error=validate_on_error(_env("ON_ERROR", OnErrorPolicy.ABORT.value)),
        ),
        log=LogConfig(
            level=validate_log_level(_env("LOG_LEVEL", "warning")),
        ),
    )
