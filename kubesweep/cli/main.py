"""The ``kubesweep`` command.

Flags override the matching ``KUBESWEEP_*`` environment variables.
"""

from __future__ import annotations

import asyncio

import click

from kubesweep import __version__
from kubesweep.app import run
from kubesweep.config import LOG_LEVELS, load_config, validate_log_level, validate_on_error
from kubesweep.errors import SweepError
from kubesweep.models.config import OnErrorPolicy, SweepConfig
from kubesweep.observability.logging import get_logger, setup_logging


def _write(line: str) -> None:
    click.echo(line)


def _write_err(line: str) -> None:
    click.echo(line, err=True)


def _apply_flags(
    config: SweepConfig,
    kubeconfig: str | None,
    context: str | None,
    selector: str | None,
    on_error: str | None,
    log_level: str | None,
    request_timeout: float | None,
) -> SweepConfig:
    if kubeconfig is not None:
        config.cluster.kubeconfig = kubeconfig
    if context is not None:
        config.cluster.context = context
    if request_timeout is not None:
        config.cluster.request_timeout = request_timeout
    if selector is not None:
        config.listing.label_selector = selector
    if on_error is not None:
        config.listing.on_error = validate_on_error(on_error)
    if log_level is not None:
        config.log.level = validate_log_level(log_level)
    return config


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--kubeconfig", default=None, help="Path to kubeconfig file.")
@click.option("--context", "kube_context", default=None, help="Kubeconfig context to use.")
@click.option("--selector", "-l", default=None, help="Label selector.")
@click.option(
    "--on-error",
    type=click.Choice([p.value for p in OnErrorPolicy], case_sensitive=False),
    default=None,
    help="Abort on the first failed kind, or report it and continue.",
)
@click.option(
    "--log-level",
    type=click.Choice(list(LOG_LEVELS), case_sensitive=False),
    default=None,
    help="Log level for the JSON log written to stderr.",
)
@click.option(
    "--request-timeout",
    type=click.FloatRange(min=0.0),
    default=None,
    help="Per-request timeout in seconds (0 = no timeout).",
)
@click.version_option(__version__, prog_name="kubesweep")
def cli(
    kubeconfig: str | None,
    kube_context: str | None,
    selector: str | None,
    on_error: str | None,
    log_level: str | None,
    request_timeout: float | None,
) -> None:
    """List every object you can read, across every listable resource kind."""
    try:
        config = _apply_flags(
            load_config(),
            kubeconfig,
            kube_context,
            selector,
            on_error,
            log_level,
            request_timeout,
        )
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    setup_logging(config.log.level)
    log = get_logger("cli")

    try:
        summary = asyncio.run(run(config, _write, _write_err))
    except SweepError as exc:
        log.debug("sweep aborted", error_type=type(exc).__name__, context=exc.context)
        _write_err(str(exc))
        raise SystemExit(1) from exc

    if not summary.ok:
        raise SystemExit(1)
