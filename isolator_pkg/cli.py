"""Command-line entry point: demonstration run and health check."""

from __future__ import annotations

import argparse
import json
import math

from . import config
from .api import format_number, solve_system, verify_solution
from .expression import (
    E,
    Scalar,
    Value,
    VariableArena,
    VariableCell,
    VariableNode,
    new_variable,
)
from .logging_config import get_logger, setup_logging

logger = get_logger("cli")

DEMO_RATE = 0.5


def build_demo_system(
    v1_true: float, v2_true: float, arena: VariableArena | None = None
) -> tuple[list[tuple[Value, Value]], list[VariableCell]]:
    """Build a two-equation system whose solution is ``(v1_true, v2_true)``.

    The system is upper triangular: the first equation mentions both
    unknowns, the second only ``v2``::

        e^(v1 * v2)     = out0
        2^(v2 * rate)   = out1

    Observed outputs are stored in variables, like measured samples would be.
    """
    v1 = new_variable(1.0, arena)
    v2 = new_variable(1.0, arena)
    rate = new_variable(DEMO_RATE, arena)
    out0 = new_variable(math.exp(v1_true * v2_true), arena)
    out1 = new_variable(2.0 ** (v2_true * DEMO_RATE), arena)

    equations = [
        (E.pow(VariableNode(v1) * VariableNode(v2)), VariableNode(out0)),
        (Scalar(2.0).pow(VariableNode(v2) * VariableNode(rate)), VariableNode(out1)),
    ]
    return equations, [v1, v2]


def run_demo(v1_true: float, v2_true: float, output_format: str = "human") -> int:
    equations, unknowns = build_demo_system(v1_true, v2_true)
    result = solve_system(equations, unknowns)
    if output_format == "json":
        print(json.dumps(result.to_dict()))
        return 0 if result.ok else 1
    if not result.ok:
        print(f"Error ({result.error_code}): {result.error}")
        return 1
    for index, cell in enumerate(unknowns, start=1):
        print(f"Variable{index}: {format_number(cell.value)}")
    return 0


def _health_check() -> int:
    """Run health check to verify dependencies and basic operations.

    Returns:
        Exit code (0 for success, non-zero for failures)
    """
    checks_passed = 0
    checks_failed = 0

    print("Running Isolator health check...")
    print("-" * 50)

    try:
        import sympy as sp

        print(f"[OK] SymPy {sp.__version__} imported successfully")
        checks_passed += 1
    except ImportError as e:
        print(f"[FAIL] SymPy import failed: {e}")
        checks_failed += 1

    try:
        import numpy as np

        print(f"[OK] NumPy {np.__version__} imported successfully")
        checks_passed += 1
    except ImportError as e:
        print(f"[FAIL] NumPy import failed: {e}")
        checks_failed += 1

    try:
        value = (Scalar(2.0) + Scalar(3.0)).evaluate()
        if value == 5.0:
            print("[OK] Basic evaluation works")
            checks_passed += 1
        else:
            print(f"[FAIL] Basic evaluation failed: expected 5, got {value}")
            checks_failed += 1
    except Exception as e:
        print(f"[FAIL] Evaluation check failed: {e}")
        checks_failed += 1

    try:
        arena = VariableArena()
        equations, unknowns = build_demo_system(3.0, 4.0, arena)
        result = solve_system(equations, unknowns)
        recovered = [cell.value for cell in unknowns]
        if (
            result.ok
            and math.isclose(recovered[0], 3.0, rel_tol=1e-9)
            and math.isclose(recovered[1], 4.0, rel_tol=1e-9)
            and all(verify_solution(left, right) for left, right in equations)
        ):
            print("[OK] System solving works")
            checks_passed += 1
        else:
            print(f"[FAIL] System solving check failed: {result}")
            checks_failed += 1
    except Exception as e:
        print(f"[FAIL] System solving check failed: {e}")
        checks_failed += 1

    print("-" * 50)
    print(f"Results: {checks_passed} passed, {checks_failed} failed")

    if checks_failed > 0:
        print("\n[WARN] Some health checks failed. Core functionality may be impaired.")
        return 1

    print("\n[OK] All health checks passed!")
    return 0


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for Isolator CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(prog="isolator")
    parser.add_argument(
        "command",
        nargs="?",
        choices=["demo"],
        help="demo: solve a sample two-equation system and print the unknowns",
    )
    parser.add_argument("--v1", type=float, default=3.0, help="True value of the first unknown")
    parser.add_argument("--v2", type=float, default=4.0, help="True value of the second unknown")
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-p", "--precision", type=int, help="Set output precision (significant digits)"
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=config.LOG_LEVEL.upper(),
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and verify dependencies",
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    # Direct module variable modification, read at call time by api.py
    if args.precision is not None:
        config.OUTPUT_PRECISION = args.precision

    if args.version:
        print(f"isolator {config.VERSION}")
        return 0

    if args.health_check:
        return _health_check()

    if args.command == "demo":
        logger.debug("running demo with v1=%s v2=%s", args.v1, args.v2)
        return run_demo(args.v1, args.v2, args.format)

    parser.print_help()
    return 0
