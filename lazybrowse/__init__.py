"""Public package surface for lazybrowse.

Exports ``main`` for programmatic CLI invocation.
The navigation core lives in ``lazybrowse.navigation`` and its helpers.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)

__all__ = ["main"]
