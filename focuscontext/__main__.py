"""Module entrypoint for ``python -m focuscontext``.

All argument parsing and runtime setup happen in ``focuscontext.cli``.
"""

from .cli import main


if __name__ == "__main__":
    raise SystemExit(main())
