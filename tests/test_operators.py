"""Tests for the operator algebra and its flattening rules."""

import pytest

from isolator_pkg.expression import (
    E,
    Log,
    Multiplication,
    Power,
    Scalar,
    Sum,
    VariableNode,
    as_value,
    new_variable,
)


@pytest.fixture
def abc():
    return tuple(VariableNode(new_variable(float(i))) for i in range(4))


class TestAddition:
    def test_left_sum_flattens(self, abc):
        a, b, c, _ = abc
        expr = (a + b) + c
        assert isinstance(expr, Sum)
        assert expr.terms == (a, b, c)

    def test_right_sum_is_not_flattened(self, abc):
        a, b, c, _ = abc
        expr = a + (b + c)
        assert expr.terms == (a, Sum((b, c)))

    def test_sum_plus_sum_splices(self, abc):
        a, b, c, d = abc
        expr = (a + b) + (c + d)
        assert expr.terms == (a, b, c, d)

    def test_numbers_are_wrapped(self, abc):
        a = abc[0]
        assert (a + 2).terms == (a, Scalar(2.0))
        assert (2 + a).terms == (Scalar(2.0), a)

    def test_variable_cells_are_wrapped(self):
        cell = new_variable(1.0)
        assert (Scalar(1.0) + cell).terms == (Scalar(1.0), VariableNode(cell))


class TestNegationAndSubtraction:
    def test_negation_multiplies_by_minus_one(self, abc):
        a = abc[0]
        assert -a == Multiplication((a, Scalar(-1.0)))

    def test_negation_flattens_into_product(self, abc):
        a, b, _, _ = abc
        assert -(a * b) == Multiplication((a, b, Scalar(-1.0)))

    def test_subtraction_adds_negation(self, abc):
        a, b, _, _ = abc
        assert a - b == Sum((a, Multiplication((b, Scalar(-1.0)))))

    def test_reflected_subtraction(self, abc):
        a = abc[0]
        assert 5 - a == Sum((Scalar(5.0), Multiplication((a, Scalar(-1.0)))))


class TestMultiplication:
    def test_left_product_flattens(self, abc):
        a, b, c, _ = abc
        expr = (a * b) * c
        assert isinstance(expr, Multiplication)
        assert expr.factors == (a, b, c)

    def test_right_product_is_not_flattened(self, abc):
        a, b, c, _ = abc
        assert (a * (b * c)).factors == (a, Multiplication((b, c)))

    def test_division_uses_negative_power(self, abc):
        a, b, _, _ = abc
        assert a / b == Multiplication((a, Power(b, Scalar(-1.0))))

    def test_division_flattens_into_product(self, abc):
        a, b, c, _ = abc
        assert (a * b) / c == Multiplication((a, b, Power(c, Scalar(-1.0))))

    def test_reflected_division(self, abc):
        a = abc[0]
        assert 1 / a == Multiplication((Scalar(1.0), Power(a, Scalar(-1.0))))


class TestPowerAndLog:
    def test_pow_wraps_operands(self, abc):
        a, b, _, _ = abc
        assert a.pow(b) == Power(a, b)
        assert a ** 2 == Power(a, Scalar(2.0))
        assert 2 ** a == Power(Scalar(2.0), a)

    def test_no_simplification(self, abc):
        a = abc[0]
        nested = a.pow(Scalar(2.0)).pow(Scalar(3.0))
        assert nested == Power(Power(a, Scalar(2.0)), Scalar(3.0))
        assert E.pow(Scalar(0.0)) == Power(E, Scalar(0.0))

    def test_log_receiver_is_argument(self, abc):
        a, b, _, _ = abc
        expr = a.log(b)
        assert expr == Log(b, a)
        assert expr.base == b
        assert expr.argument == a


class TestCoercion:
    def test_as_value_passthrough(self):
        value = Scalar(1.0)
        assert as_value(value) is value

    @pytest.mark.parametrize("bad", ["x", None, True, [1.0]])
    def test_as_value_rejects(self, bad):
        with pytest.raises(TypeError):
            as_value(bad)

    def test_unsupported_operand(self, abc):
        with pytest.raises(TypeError):
            abc[0] + "x"
