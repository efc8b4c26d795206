"""Centralized configuration for Isolator.

This module defines:
- Solver limits (isolation step ceiling)
- Output formatting precision
- Tolerances used when cross-checking solutions
- Default logging level

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with ISOLATOR_)
"""

import importlib.metadata
import os

# Version is defined in pyproject.toml [project] section
try:
    VERSION = importlib.metadata.version("isolator")
except importlib.metadata.PackageNotFoundError:
    # Running from a source checkout
    VERSION = "1.0.0"

# Solver configuration
MAX_ISOLATION_STEPS = int(
    os.getenv("ISOLATOR_MAX_ISOLATION_STEPS", "10000")
)  # Ceiling on peel iterations for a single equation

# Output configuration
OUTPUT_PRECISION = int(
    os.getenv("ISOLATOR_OUTPUT_PRECISION", "6")
)  # Significant digits for approximate values

# Verification tolerance (absolute and relative)
VERIFY_TOLERANCE = float(os.getenv("ISOLATOR_VERIFY_TOLERANCE", "1e-9"))

LOG_LEVEL = os.getenv("ISOLATOR_LOG_LEVEL", "WARNING")

# Symbol name prefix used when rendering variables
VARIABLE_PREFIX = os.getenv("ISOLATOR_VARIABLE_PREFIX", "v")
