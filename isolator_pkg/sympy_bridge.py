"""Conversion of expression trees into SymPy expressions.

Used for display of solutions and for cross-checking numeric results against
SymPy's own evaluator. Conversion keeps the tree's structure: SymPy nodes are
built with ``evaluate=False`` so nothing is simplified on the way.
"""

from __future__ import annotations

import math
from typing import Mapping

import sympy as sp

from .config import VARIABLE_PREFIX
from .expression import Value


def _scalar(value: float) -> sp.Expr:
    if math.isnan(value):
        return sp.nan
    if math.isinf(value):
        return sp.oo if value > 0 else -sp.oo
    if value.is_integer():
        return sp.Integer(int(value))
    return sp.Float(value)


def variable_symbol(variable_id: int, symbol_names: Mapping[int, str] | None = None) -> sp.Symbol:
    """Return the SymPy symbol standing for a variable."""
    name = (symbol_names or {}).get(variable_id, f"{VARIABLE_PREFIX}{variable_id}")
    return sp.Symbol(name, real=True)


def to_sympy(value: Value, symbol_names: Mapping[int, str] | None = None) -> sp.Expr:
    """Convert an expression tree to an unevaluated SymPy expression.

    Args:
        value: Expression tree
        symbol_names: Optional display names for variables, keyed by id

    Returns:
        SymPy expression with one real symbol per variable
    """
    if value.is_sum():
        return sp.Add(*(to_sympy(term, symbol_names) for term in value.children()), evaluate=False)
    if value.is_multiplication():
        return sp.Mul(
            *(to_sympy(factor, symbol_names) for factor in value.children()), evaluate=False
        )
    if value.is_power():
        base, exponent = value.children()
        return sp.Pow(to_sympy(base, symbol_names), to_sympy(exponent, symbol_names), evaluate=False)
    if value.is_log():
        base, argument = value.children()
        # SymPy's two-argument log is log(argument)/log(base)
        return sp.Mul(
            sp.log(to_sympy(argument, symbol_names), evaluate=False),
            sp.Pow(sp.log(to_sympy(base, symbol_names), evaluate=False), -1, evaluate=False),
            evaluate=False,
        )
    if value.is_scalar():
        return _scalar(value.evaluate())
    if value.is_variable():
        return variable_symbol(value.variable_id, symbol_names)
    if value.is_e():
        return sp.E
    if value.is_pi():
        return sp.pi
    raise TypeError(f"Unknown expression node {type(value).__name__}")


def variable_values(value: Value, symbol_names: Mapping[int, str] | None = None) -> dict[sp.Symbol, sp.Float]:
    """Map each variable symbol in ``value`` to the variable's current value."""
    values: dict[sp.Symbol, sp.Float] = {}
    _collect_values(value, symbol_names, values)
    return values


def _collect_values(
    value: Value,
    symbol_names: Mapping[int, str] | None,
    values: dict[sp.Symbol, sp.Float],
) -> None:
    if value.is_variable():
        record = value.cell.get()
        values[variable_symbol(record.id, symbol_names)] = sp.Float(record.value)
        return
    for child in value.children():
        _collect_values(child, symbol_names, values)


def to_float(value: Value) -> float:
    """Numerically evaluate an expression with SymPy at the current variable values.

    Non-real results (e.g. a negative base raised to a fractional power) are
    reported as NaN, matching ``Value.evaluate``.
    """
    expr = to_sympy(value).subs(variable_values(value))
    result = sp.N(expr)
    if result.is_extended_real:
        return float(result)
    return math.nan
