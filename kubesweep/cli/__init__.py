"""kubesweep command-line interface.

Exposes:
    cli -- Click command entry point (registered as ``kubesweep`` script).
"""

from kubesweep.cli.main import cli

__all__ = ["cli"]
