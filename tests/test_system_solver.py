"""Tests for forward elimination and backward evaluation over systems."""

import math

import pytest

from isolator_pkg import system_solver
from isolator_pkg.expression import E, Scalar, VariableArena, VariableNode
from isolator_pkg.types import PreconditionViolation, UnsupportedForm


@pytest.fixture
def arena():
    return VariableArena()


class TestTriangularSystems:
    """Systems the isolation rules can solve."""

    def test_upper_triangular_uses_backward_order(self, arena):
        # v1's solution refers to v2, so v2 must be committed first
        v1, v2 = arena.new(1.0), arena.new(1.0)
        out0 = arena.new(math.exp(3.0 * 4.0))
        equations = [
            (E.pow(VariableNode(v1) * VariableNode(v2)), VariableNode(out0)),
            (VariableNode(v2) * Scalar(3.0), Scalar(12.0)),
        ]
        system_solver.solve(equations, [v1, v2])
        assert v2.value == pytest.approx(4.0, rel=1e-12)
        assert v1.value == pytest.approx(3.0, rel=1e-12)

    def test_lower_triangular_uses_substitution(self, arena):
        v1, v2 = arena.new(0.0), arena.new(0.0)
        equations = [
            (VariableNode(v1) * Scalar(2.0), Scalar(6.0)),
            (E.pow(VariableNode(v2)) * VariableNode(v1), Scalar(3.0 * math.exp(1.5))),
        ]
        system_solver.solve(equations, [v1, v2])
        assert v1.value == pytest.approx(3.0)
        assert v2.value == pytest.approx(1.5)

    def test_three_equation_chain(self, arena):
        v1, v2, v3 = arena.new(0.0), arena.new(0.0), arena.new(0.0)
        x1, x2, x3 = VariableNode(v1), VariableNode(v2), VariableNode(v3)
        equations = [
            (x1 * x2, Scalar(6.0)),
            (x2 * x3, Scalar(8.0)),
            (x3 * Scalar(2.0), Scalar(4.0)),
        ]
        system_solver.solve(equations, [v1, v2, v3])
        assert v3.value == pytest.approx(2.0)
        assert v2.value == pytest.approx(4.0)
        assert v1.value == pytest.approx(1.5)

    def test_identity_preserved(self, arena):
        v1 = arena.new(0.0)
        system_solver.solve([(VariableNode(v1) * Scalar(2.0), Scalar(1.0))], [v1])
        assert v1.get().id == v1.id
        assert v1.value == 0.5

    def test_expressions_observe_committed_values(self, arena):
        v1 = arena.new(0.0)
        observer = VariableNode(v1) + Scalar(1.0)
        system_solver.solve([(E.pow(VariableNode(v1)), Scalar(1.0))], [v1])
        assert observer.evaluate() == 1.0

    def test_input_equations_are_not_mutated(self, arena):
        v1, v2 = arena.new(0.0), arena.new(0.0)
        first = (VariableNode(v1) * Scalar(2.0), Scalar(6.0))
        second = (VariableNode(v2) * VariableNode(v1), Scalar(6.0))
        equations = [first, second]
        system_solver.solve(equations, [v1, v2])
        assert equations[0] is first
        assert equations[1] is second
        assert second[0].depends_on(v1.id)

    def test_empty_system(self):
        system_solver.solve([], [])


class TestSystemFailures:
    """A failed solve commits nothing."""

    def test_length_mismatch(self, arena):
        v1, v2 = arena.new(1.0), arena.new(2.0)
        with pytest.raises(PreconditionViolation):
            system_solver.solve([(VariableNode(v1) * Scalar(2.0), Scalar(4.0))], [v1, v2])
        assert v1.value == 1.0
        assert v2.value == 2.0

    def test_nested_exponential_model_is_rejected(self, arena):
        # After eliminating v1, v2 sits in two factors of the product
        v1, v2 = arena.new(3.0), arena.new(4.0)
        samples = [(arena.new(1.0), arena.new(50.0)), (arena.new(2.0), arena.new(90.0))]
        equations = [
            (
                E.pow(VariableNode(v1) * E.pow(VariableNode(v2) * VariableNode(x))),
                VariableNode(y),
            )
            for x, y in samples
        ]
        with pytest.raises(UnsupportedForm):
            system_solver.solve(equations, [v1, v2])
        assert v1.value == 3.0
        assert v2.value == 4.0

    def test_eliminated_unknown_missing_from_later_equation(self, arena):
        v1, v2 = arena.new(7.0), arena.new(8.0)
        equations = [
            (VariableNode(v1) * Scalar(2.0), Scalar(6.0)),
            (VariableNode(v1) * Scalar(3.0), Scalar(9.0)),
        ]
        with pytest.raises(PreconditionViolation):
            system_solver.solve(equations, [v1, v2])
        assert v1.value == 7.0
        assert v2.value == 8.0
