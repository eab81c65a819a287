"""Discovery package for kubesweep.

Turns the server's advertised resources into listable coordinates.

Submodules
----------
resolver -- resolve(): one discovery query, filtered to kinds supporting ``list``.
"""

from kubesweep.discovery.resolver import parse_group_version, resolve, resolve_blocks

__all__ = ["parse_group_version", "resolve", "resolve_blocks"]
