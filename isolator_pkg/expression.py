"""Expression trees over shared variables.

This module provides:
- NaN-tolerant scalar comparison (scalars_equal)
- Variable records, the arena that owns them, and the cell handles
  expressions use to reach them
- The Value tree (Sum, Multiplication, Power, Log, Scalar, VariableNode,
  E and PI constants) with evaluation, dependency queries and substitution
- The operator algebra (+, -, *, /, pow, log) with its flattening rules

Trees are immutable. The only state that changes after construction is the
value held in an arena slot, and every tree that references the slot through
a VariableCell observes the new value on its next evaluation.
"""

from __future__ import annotations

import functools
import itertools
import math
import numbers
import operator
from dataclasses import dataclass, field

import numpy as np

from .config import VARIABLE_PREFIX

# Process-wide identity source; ids are never reused, even across arenas.
_ids = itertools.count()


def unique_id() -> int:
    """Return a fresh variable identity."""
    return next(_ids)


def scalars_equal(a: float, b: float) -> bool:
    """Compare two floats treating NaN as equal to NaN.

    Both sides being NaN means both are undefined, and undefined values are
    interchangeable for structural comparison of trees.
    """
    return (math.isnan(a) and math.isnan(b)) or a == b


@dataclass(frozen=True, eq=False)
class Variable:
    """Identity plus current value of an unknown."""

    id: int
    value: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Variable):
            return NotImplemented
        return self.id == other.id and scalars_equal(self.value, other.value)


class VariableArena:
    """Owns variable records, keyed by their identity.

    Expressions never hold records directly. They hold a VariableCell, and
    every read goes through the arena, so replacing a slot is visible to all
    holders at once.
    """

    def __init__(self) -> None:
        self._slots: dict[int, Variable] = {}

    def new(self, value: float) -> VariableCell:
        record = Variable(unique_id(), float(value))
        self._slots[record.id] = record
        return VariableCell(self, record.id)

    def lookup(self, variable_id: int) -> Variable:
        return self._slots[variable_id]

    def replace(self, variable_id: int, value: float) -> None:
        """Swap the record in a slot for one with the same id and a new value.

        Raises:
            KeyError: If the arena holds no record with this id
        """
        current = self._slots[variable_id]
        self._slots[variable_id] = Variable(current.id, float(value))

    def __contains__(self, variable_id: object) -> bool:
        return variable_id in self._slots

    def __len__(self) -> int:
        return len(self._slots)


@dataclass(frozen=True)
class VariableCell:
    """Shared handle to one arena slot."""

    arena: VariableArena = field(repr=False)
    id: int

    def get(self) -> Variable:
        return self.arena.lookup(self.id)

    @property
    def value(self) -> float:
        return self.get().value

    def modify(self, value: float) -> None:
        self.arena.replace(self.id, value)


DEFAULT_ARENA = VariableArena()


def new_variable(value: float, arena: VariableArena | None = None) -> VariableCell:
    """Create a variable with a fresh identity and return its cell.

    Args:
        value: Initial value
        arena: Arena to allocate in (defaults to the process-wide arena)

    Returns:
        Handle to the new variable
    """
    return (arena or DEFAULT_ARENA).new(value)


def _power(base: float, exponent: float) -> float:
    with np.errstate(all="ignore"):
        return float(np.power(np.float64(base), np.float64(exponent)))


def _log(base: float, argument: float) -> float:
    with np.errstate(all="ignore"):
        return float(np.log(np.float64(argument)) / np.log(np.float64(base)))


def _coerce(other: object) -> Value | None:
    if isinstance(other, Value):
        return other
    if isinstance(other, VariableCell):
        return VariableNode(other)
    if isinstance(other, numbers.Real) and not isinstance(other, bool):
        return Scalar(float(other))
    return None


def as_value(other: object) -> Value:
    """Convert a number or a variable cell into a Value leaf.

    Raises:
        TypeError: If the object has no expression form
    """
    value = _coerce(other)
    if value is None:
        raise TypeError(f"Cannot build an expression from {type(other).__name__}")
    return value


class Value:
    """Base of the expression tree variants."""

    def evaluate(self) -> float:
        raise NotImplementedError

    def children(self) -> tuple[Value, ...]:
        return ()

    def _with_children(self, children: tuple[Value, ...]) -> Value:
        return self

    def depends_on(self, variable_id: int) -> bool:
        return any(child.depends_on(variable_id) for child in self.children())

    def variable_ids(self) -> set[int]:
        ids: set[int] = set()
        for child in self.children():
            ids |= child.variable_ids()
        return ids

    def substitute(self, variable_id: int, replacement: Value) -> Value:
        """Replace every leaf of the given variable with ``replacement``.

        Subtrees that do not mention the variable are shared with the
        original tree rather than rebuilt.
        """
        children = self.children()
        if not children:
            return self
        replaced = tuple(child.substitute(variable_id, replacement) for child in children)
        if all(new is old for new, old in zip(replaced, children)):
            return self
        return self._with_children(replaced)

    # Shape predicates

    def is_sum(self) -> bool:
        return isinstance(self, Sum)

    def is_multiplication(self) -> bool:
        return isinstance(self, Multiplication)

    def is_power(self) -> bool:
        return isinstance(self, Power)

    def is_log(self) -> bool:
        return isinstance(self, Log)

    def is_scalar(self) -> bool:
        return isinstance(self, Scalar)

    def is_variable(self) -> bool:
        return isinstance(self, VariableNode)

    def is_e(self) -> bool:
        return isinstance(self, Euler)

    def is_pi(self) -> bool:
        return isinstance(self, Pi)

    def is_constant(self) -> bool:
        return self.is_e() or self.is_pi()

    # Structural equality

    def _same_as(self, other: Value) -> bool:
        return self.children() == other.children()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return type(self) is type(other) and self._same_as(other)

    # Operator algebra

    def __add__(self, other: object) -> Value:
        right = _coerce(other)
        if right is None:
            return NotImplemented
        if isinstance(self, Sum):
            tail = right.terms if isinstance(right, Sum) else (right,)
            return Sum(self.terms + tail)
        return Sum((self, right))

    def __radd__(self, other: object) -> Value:
        left = _coerce(other)
        if left is None:
            return NotImplemented
        return left + self

    def __neg__(self) -> Value:
        return self * Scalar(-1.0)

    def __sub__(self, other: object) -> Value:
        right = _coerce(other)
        if right is None:
            return NotImplemented
        return self + (-right)

    def __rsub__(self, other: object) -> Value:
        left = _coerce(other)
        if left is None:
            return NotImplemented
        return left - self

    def __mul__(self, other: object) -> Value:
        right = _coerce(other)
        if right is None:
            return NotImplemented
        if isinstance(self, Multiplication):
            tail = right.factors if isinstance(right, Multiplication) else (right,)
            return Multiplication(self.factors + tail)
        return Multiplication((self, right))

    def __rmul__(self, other: object) -> Value:
        left = _coerce(other)
        if left is None:
            return NotImplemented
        return left * self

    def __truediv__(self, other: object) -> Value:
        right = _coerce(other)
        if right is None:
            return NotImplemented
        return self * right.pow(Scalar(-1.0))

    def __rtruediv__(self, other: object) -> Value:
        left = _coerce(other)
        if left is None:
            return NotImplemented
        return left / self

    def pow(self, exponent: object) -> Value:
        return Power(self, as_value(exponent))

    def __pow__(self, other: object) -> Value:
        exponent = _coerce(other)
        if exponent is None:
            return NotImplemented
        return Power(self, exponent)

    def __rpow__(self, other: object) -> Value:
        base = _coerce(other)
        if base is None:
            return NotImplemented
        return Power(base, self)

    def log(self, base: object) -> Value:
        """Logarithm of this expression in ``base``."""
        return Log(as_value(base), self)


def _operand(value: Value) -> str:
    text = str(value)
    if isinstance(value, Power):
        return f"({text})"
    return text


@dataclass(frozen=True, eq=False)
class Sum(Value):
    terms: tuple[Value, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "terms", tuple(self.terms))

    def children(self) -> tuple[Value, ...]:
        return self.terms

    def _with_children(self, children: tuple[Value, ...]) -> Value:
        return Sum(children)

    def evaluate(self) -> float:
        # Plain left fold of +, without compensated summation
        return functools.reduce(operator.add, (term.evaluate() for term in self.terms), 0.0)

    def __str__(self) -> str:
        if not self.terms:
            return "0"
        return "(" + " + ".join(str(term) for term in self.terms) + ")"


@dataclass(frozen=True, eq=False)
class Multiplication(Value):
    factors: tuple[Value, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "factors", tuple(self.factors))

    def children(self) -> tuple[Value, ...]:
        return self.factors

    def _with_children(self, children: tuple[Value, ...]) -> Value:
        return Multiplication(children)

    def evaluate(self) -> float:
        return math.prod((factor.evaluate() for factor in self.factors), start=1.0)

    def __str__(self) -> str:
        if not self.factors:
            return "1"
        return "(" + " * ".join(str(factor) for factor in self.factors) + ")"


@dataclass(frozen=True, eq=False)
class Power(Value):
    base: Value
    exponent: Value

    def children(self) -> tuple[Value, ...]:
        return (self.base, self.exponent)

    def _with_children(self, children: tuple[Value, ...]) -> Value:
        return Power(*children)

    def evaluate(self) -> float:
        return _power(self.base.evaluate(), self.exponent.evaluate())

    def __str__(self) -> str:
        return f"{_operand(self.base)}^{_operand(self.exponent)}"


@dataclass(frozen=True, eq=False)
class Log(Value):
    base: Value
    argument: Value

    def children(self) -> tuple[Value, ...]:
        return (self.base, self.argument)

    def _with_children(self, children: tuple[Value, ...]) -> Value:
        return Log(*children)

    def evaluate(self) -> float:
        return _log(self.base.evaluate(), self.argument.evaluate())

    def __str__(self) -> str:
        return f"log_{_operand(self.base)}({self.argument})"


@dataclass(frozen=True, eq=False)
class Scalar(Value):
    value: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))

    def evaluate(self) -> float:
        return self.value

    def _same_as(self, other: Value) -> bool:
        return scalars_equal(self.value, other.value)

    def __str__(self) -> str:
        if self.value.is_integer():
            return f"{self.value:g}"
        return repr(self.value)


@dataclass(frozen=True, eq=False)
class VariableNode(Value):
    cell: VariableCell

    @property
    def variable_id(self) -> int:
        return self.cell.get().id

    def evaluate(self) -> float:
        # Always read through the arena; values change between solves.
        return self.cell.get().value

    def depends_on(self, variable_id: int) -> bool:
        return self.variable_id == variable_id

    def variable_ids(self) -> set[int]:
        return {self.variable_id}

    def substitute(self, variable_id: int, replacement: Value) -> Value:
        if self.variable_id == variable_id:
            return replacement
        return self

    def _same_as(self, other: Value) -> bool:
        return self.cell.get() == other.cell.get()

    def __str__(self) -> str:
        return f"{VARIABLE_PREFIX}{self.variable_id}"


@dataclass(frozen=True, eq=False)
class Euler(Value):
    def evaluate(self) -> float:
        return math.e

    def __str__(self) -> str:
        return "e"


@dataclass(frozen=True, eq=False)
class Pi(Value):
    def evaluate(self) -> float:
        return math.pi

    def __str__(self) -> str:
        return "pi"


E = Euler()
PI = Pi()
