"""Single equation solving by isolation.

The solver keeps the unknown on the left-hand side and peels the outermost
operation off it, applying the inverse operation to the right-hand side,
until the left-hand side is the bare variable. Each handled case shrinks the
left-hand side, so the loop terminates.

Supported inversions:
- Multiplication: divide out the factors that do not mention the unknown
- Power with the unknown only in the exponent: take the logarithm in the base

Everything else (sums, logarithms, the unknown in a power base) raises
UnsupportedForm. There is no numeric fallback.
"""

from __future__ import annotations

from . import config
from .expression import Multiplication, Power, Sum, Value, VariableNode
from .logging_config import get_logger, solve_context
from .types import InternalInvariantViolation, PreconditionViolation, UnsupportedForm

logger = get_logger("solver")


def _peel_multiplication(
    left: Multiplication, right: Value, variable_id: int
) -> tuple[Value, Value]:
    related = [factor for factor in left.factors if factor.depends_on(variable_id)]
    unrelated = [factor for factor in left.factors if not factor.depends_on(variable_id)]

    if not related:
        raise InternalInvariantViolation(
            f"Variable {variable_id} vanished from a product during isolation"
        )
    if not unrelated:
        if len(related) == 1:
            # Redundant single-factor product
            return related[0], right
        raise UnsupportedForm(
            f"Variable {variable_id} appears in every factor of {left}; "
            "expanding products is not supported"
        )

    divisor = unrelated[0] if len(unrelated) == 1 else Multiplication(tuple(unrelated))
    remaining = related[0] if len(related) == 1 else Multiplication(tuple(related))
    return remaining, right / divisor


def _peel_power(left: Power, right: Value, variable_id: int) -> tuple[Value, Value]:
    in_base = left.base.depends_on(variable_id)
    in_exponent = left.exponent.depends_on(variable_id)

    if in_base and in_exponent:
        raise UnsupportedForm(
            f"Variable {variable_id} appears in both base and exponent of {left}"
        )
    if in_base:
        raise UnsupportedForm(
            f"Isolating variable {variable_id} from the base of {left} is not implemented"
        )
    if not in_exponent:
        raise InternalInvariantViolation(
            f"Variable {variable_id} vanished from a power during isolation"
        )
    return left.exponent, right.log(left.base)


def _peel_sum(left: Sum, right: Value, variable_id: int) -> tuple[Value, Value]:
    if len(left.terms) == 1:
        return left.terms[0], right
    raise UnsupportedForm(
        f"Isolating variable {variable_id} from the sum {left} is not implemented"
    )


def _peel(left: Value, right: Value, variable_id: int) -> tuple[Value, Value]:
    """Remove one operation from ``left`` and mirror it onto ``right``."""
    if left.is_multiplication():
        return _peel_multiplication(left, right, variable_id)
    if left.is_power():
        return _peel_power(left, right, variable_id)
    if left.is_sum():
        return _peel_sum(left, right, variable_id)
    if left.is_log():
        raise UnsupportedForm(
            f"Isolating variable {variable_id} from the logarithm {left} is not implemented"
        )
    if left.is_scalar() or left.is_constant():
        raise InternalInvariantViolation(
            f"Left-hand side reduced to {left} without reaching variable {variable_id}"
        )
    raise InternalInvariantViolation(
        f"Cannot isolate variable {variable_id} from {type(left).__name__} {left}"
    )


def solve(left: Value, right: Value, variable_id: int) -> Value:
    """Solve ``left = right`` for a variable that appears only on the left.

    Args:
        left: Left-hand side, must mention the variable
        right: Right-hand side, must not mention the variable
        variable_id: Identity of the variable to isolate

    Returns:
        Expression equal to the variable's value; it may still reference
        other variables

    Raises:
        PreconditionViolation: If the variable is missing from ``left`` or present in ``right``
        UnsupportedForm: If an operation around the variable cannot be inverted
        InternalInvariantViolation: If isolation loses track of the variable
    """
    if right.depends_on(variable_id):
        raise PreconditionViolation(
            f"Variable {variable_id} on the right-hand side is not supported"
        )
    if not left.depends_on(variable_id):
        raise PreconditionViolation(f"Variable {variable_id} is not part of the equation")

    steps = 0
    while not isinstance(left, VariableNode):
        if steps >= config.MAX_ISOLATION_STEPS:
            raise InternalInvariantViolation(
                f"Isolation of variable {variable_id} exceeded {config.MAX_ISOLATION_STEPS} steps"
            )
        left, right = _peel(left, right, variable_id)
        steps += 1
        logger.debug("%s = %s", left, right, extra=solve_context(variable_id, steps))

    if left.variable_id != variable_id:
        raise InternalInvariantViolation(
            f"Isolation reached variable {left.variable_id} instead of {variable_id}"
        )
    return right
