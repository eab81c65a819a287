"""Entry point for `python -m kubesweep`.

Usage:
    python -m kubesweep --selector app=web
    uv run python -m kubesweep --kubeconfig ~/.kube/staging
"""

from __future__ import annotations

from kubesweep.cli import cli

cli(prog_name="kubesweep")
