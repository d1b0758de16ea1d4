"""Public package surface for focuscontext.

Exports ``main`` for programmatic CLI invocation and the synchronizer that
hosts embed. Most implementation lives in ``context_model``, ``host`` and
``sync``.
"""

from __future__ import annotations

__version__ = "0.1.0"


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def __getattr__(name: str):
    if name == "ContextSynchronizer":
        from .sync.synchronizer import ContextSynchronizer

        return ContextSynchronizer
    raise AttributeError(name)


__all__ = ["ContextSynchronizer", "main"]
