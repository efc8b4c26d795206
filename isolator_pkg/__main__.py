"""Main entry point for running isolator_pkg as a module.

This allows running Isolator with:
    python -m isolator_pkg demo
    python -m isolator_pkg demo --v1 2.5 --v2 0.75 --format json
    python -m isolator_pkg --health-check
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
