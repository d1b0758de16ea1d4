"""Pytest bootstrap for running the suite from a source checkout.

Test modules live in plain directories without ``__init__.py``, so pytest
imports them by basename. Putting the checkout first on ``sys.path`` makes
``import focuscontext`` pick up the working tree instead of an installed copy.
"""

from __future__ import annotations

import sys
from pathlib import Path

CHECKOUT_ROOT = str(Path(__file__).resolve().parents[1])

if CHECKOUT_ROOT not in sys.path:
    sys.path.insert(0, CHECKOUT_ROOT)
