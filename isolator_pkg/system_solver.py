"""Sequential solving of triangular systems of equations.

Equation ``i`` is solved for unknown ``i``. The solution is substituted into
the equations that follow, eliminating the unknown from them. Once every
equation is solved symbolically, the solutions are evaluated from last to
first and written into the unknowns' cells, so that each solution sees the
final values of the unknowns solved after it.
"""

from __future__ import annotations

from typing import Sequence

from . import solver
from .expression import Value, VariableCell
from .logging_config import get_logger, solve_context
from .types import PreconditionViolation

logger = get_logger("system_solver")


def solve(
    equations: Sequence[tuple[Value, Value]], unknowns: Sequence[VariableCell]
) -> None:
    """Solve a system and commit the results into the unknowns' cells.

    Args:
        equations: Ordered (left, right) pairs
        unknowns: Cells to solve for, paired with ``equations`` by position

    Raises:
        PreconditionViolation: If the sequences differ in length, or an equation
            does not admit its unknown
        UnsupportedForm: If an equation cannot be inverted
        InternalInvariantViolation: If isolation loses track of an unknown

    No cell is modified unless every equation was solved.
    """
    if len(equations) != len(unknowns):
        raise PreconditionViolation(
            f"Got {len(equations)} equations for {len(unknowns)} unknowns"
        )

    pending = list(equations)
    solutions: list[Value] = []
    for i, cell in enumerate(unknowns):
        unknown = cell.get().id
        left, right = pending[i]
        solution = solver.solve(left, right, unknown)
        logger.debug("eliminated as %s", solution, extra=solve_context(unknown))
        for j in range(i, len(pending)):
            left, right = pending[j]
            pending[j] = (
                left.substitute(unknown, solution),
                right.substitute(unknown, solution),
            )
        solutions.append(solution)

    for solution, cell in reversed(list(zip(solutions, unknowns))):
        value = solution.evaluate()
        cell.modify(value)
        logger.info("committed %r", value, extra=solve_context(cell.id))
