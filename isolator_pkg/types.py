"""Type definitions, error taxonomy and result dataclasses for consistent API responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .expression import Value


class SolverError(Exception):
    """Raised when solving fails."""

    def __init__(self, message: str, code: str = "SOLVER_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class PreconditionViolation(SolverError):
    """Raised when the caller hands the solver an equation it cannot be asked to solve.

    Covers a target variable missing from the left-hand side, a target
    variable present on the right-hand side, and mismatched equation and
    unknown counts.
    """

    def __init__(self, message: str, code: str = "PRECONDITION_VIOLATION"):
        super().__init__(message, code)


class UnsupportedForm(SolverError):
    """Raised when the outermost operation has no inversion rule."""

    def __init__(self, message: str, code: str = "UNSUPPORTED_FORM"):
        super().__init__(message, code)


class InternalInvariantViolation(SolverError):
    """Raised when isolation loses track of the target variable."""

    def __init__(self, message: str, code: str = "INTERNAL_INVARIANT"):
        super().__init__(message, code)


@dataclass
class SolveResult:
    """Result of solving a single equation."""

    ok: bool
    error: str | None = None
    error_code: str | None = None
    exact: str | None = None
    approx: str | None = None
    expression: Value | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        if self.exact is not None:
            result_dict["exact"] = self.exact
        if self.approx is not None:
            result_dict["approx"] = self.approx
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"SolveResult(ok=False, error_code={self.error_code!r}, error={self.error!r})"
        parts = [f"ok={self.ok}"]
        if self.exact is not None:
            parts.append(f"exact={self.exact!r}")
        if self.approx is not None:
            parts.append(f"approx={self.approx!r}")
        return f"SolveResult({', '.join(parts)})"


@dataclass
class SystemSolveResult:
    """Result of solving a system of equations."""

    ok: bool
    error: str | None = None
    error_code: str | None = None
    values: dict[str, float] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        if self.values is not None:
            result_dict["values"] = self.values
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"SystemSolveResult(ok=False, error_code={self.error_code!r}, error={self.error!r})"
        return f"SystemSolveResult(ok=True, values={self.values!r})"
