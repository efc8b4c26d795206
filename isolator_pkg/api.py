"""Public API for Isolator - returns structured objects instead of raising."""

from __future__ import annotations

import math
from typing import Sequence

from . import config
from . import solver as _solver
from . import system_solver as _system_solver
from .expression import Value, VariableCell, scalars_equal
from .logging_config import get_logger, solve_context
from .sympy_bridge import to_float, to_sympy
from .types import SolveResult, SolverError, SystemSolveResult

logger = get_logger("api")


def format_number(value: float, precision: int | None = None) -> str:
    """Format a float with the configured number of significant digits."""
    digits = config.OUTPUT_PRECISION if precision is None else precision
    return f"{value:.{digits}g}"


def solve_equation(left: Value, right: Value, unknown: VariableCell | int) -> SolveResult:
    """Solve a single equation for one unknown.

    Args:
        left: Left-hand side containing the unknown
        right: Right-hand side free of the unknown
        unknown: Cell of the unknown, or its id

    Returns:
        SolveResult with the solution tree, its SymPy form and its current value

    Example:
        >>> from isolator_pkg.expression import Scalar, new_variable
        >>> x = new_variable(0.0)
        >>> result = solve_equation(Scalar(4.0) * x, Scalar(20.0), x)
        >>> result.approx
        '5'
    """
    variable_id = unknown.id if isinstance(unknown, VariableCell) else unknown
    try:
        solution = _solver.solve(left, right, variable_id)
    except SolverError as e:
        logger.info("solve failed: %s", e, extra=solve_context(variable_id))
        return SolveResult(ok=False, error=e.message, error_code=e.code)
    return SolveResult(
        ok=True,
        exact=str(to_sympy(solution)),
        approx=format_number(solution.evaluate()),
        expression=solution,
    )


def solve_system(
    equations: Sequence[tuple[Value, Value]], unknowns: Sequence[VariableCell]
) -> SystemSolveResult:
    """Solve a triangular system and commit the values into ``unknowns``.

    Args:
        equations: Ordered (left, right) pairs
        unknowns: Cells paired with ``equations`` by position

    Returns:
        SystemSolveResult mapping each unknown's name to its committed value;
        on failure no cell is modified
    """
    try:
        _system_solver.solve(equations, unknowns)
    except SolverError as e:
        logger.info("system solve failed: %s", e)
        return SystemSolveResult(ok=False, error=e.message, error_code=e.code)
    return SystemSolveResult(
        ok=True,
        values={f"{config.VARIABLE_PREFIX}{cell.id}": cell.value for cell in unknowns},
    )


def verify_solution(left: Value, right: Value, tolerance: float | None = None) -> bool:
    """Check an equation holds at the current variable values.

    Both sides are evaluated through SymPy, independently of
    ``Value.evaluate``. NaN on both sides counts as agreement.
    """
    tol = config.VERIFY_TOLERANCE if tolerance is None else tolerance
    lhs = to_float(left)
    rhs = to_float(right)
    return scalars_equal(lhs, rhs) or math.isclose(lhs, rhs, rel_tol=tol, abs_tol=tol)
