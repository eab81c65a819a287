"""Shared test configuration."""

from __future__ import annotations

import pytest

from kubesweep.observability.logging import setup_logging


@pytest.fixture(autouse=True)
def _quiet_logging() -> None:
    """Reset structlog before every test so a previous CLI run's stream is never reused."""
    setup_logging("error")
