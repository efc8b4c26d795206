"""Isolator package: expression trees and equation solving by isolation."""

from .api import format_number, solve_equation, solve_system, verify_solution

__all__ = [
    "config",
    "expression",
    "solver",
    "system_solver",
    "sympy_bridge",
    "types",
    "api",
    "cli",
    "logging_config",
    "format_number",
    "solve_equation",
    "solve_system",
    "verify_solution",
]

# Public API exports

__api_exports__ = [
    "solve_equation",
    "solve_system",
    "verify_solution",
    "format_number",
]
