import pytest

from symbolic_algebra import (
    SimplifyOptions, add, collect, factor, func, mul, normalize, power, rational,
    rational_preserved, real, semantically_equal, simplify, var
)
from symbolic_algebra.expression_tree import IntegerNode

x = var('x')
y = var('y')


class TestCollect:
    def test_like_terms_are_combined(self):
        assert collect(add(x, x, x)).to_string() == "3*x"
        assert collect(add(mul(2, x), mul(3, x), y)).to_string() == "5*x+y"

    def test_numeric_terms_fold(self):
        assert collect(add(2, mul(3, 4))).to_string() == "14"
        assert collect(add(real(0.5), real(0.25))).to_string() == "0.75"
        assert collect(add(rational(1, 2), rational(1, 2))).to_string() == "1"

    def test_cancelling_terms_give_zero(self):
        result = collect(add(x, mul(-1, x)))
        assert isinstance(result, IntegerNode)
        assert result.to_string() == "0"

    def test_grouping_is_by_rendering(self):
        # x*y and y*x render differently, so collect keeps both
        assert collect(add(mul(x, y), mul(y, x))).to_string() == "x*y+y*x"

    def test_same_base_powers_merge(self):
        assert collect(mul(x, x)).to_string() == "x^2"
        assert collect(mul(x, power(x, 2))).to_string() == "x^3"
        assert collect(mul(x, power(x, -1))).to_string() == "1"
        assert collect(mul(2, x, 3)).to_string() == "6*x"

    def test_zero_factor(self):
        assert collect(mul(0, x)).to_string() == "0"

    def test_negative_one_times_zero_is_kept(self):
        assert collect(mul(-1, 0)).to_string() == "-1*0"
        assert collect(mul(0, -1)).to_string() == "0*-1"

    def test_power_rules(self):
        assert collect(power(power(x, 2), 3)).to_string() == "x^6"
        assert collect(power(x, 0)).to_string() == "1"
        assert collect(power(x, 1)).to_string() == "x"
        assert collect(power(2, 10)).to_string() == "1024"
        assert collect(power(rational(2, 3), 2)).to_string() == "4/9"
        assert collect(power(2, -2)).to_string() == "1/4"

    def test_unfoldable_powers_stay(self):
        assert collect(power(0, -1)).to_string() == "0^-1"
        assert collect(power(2, 100)).to_string() == "2^100"
        assert collect(power(2, rational(1, 2))).to_string() == "2^(1/2)"

    def test_rationals_are_canonicalized(self):
        assert collect(rational_preserved(4, 2)).to_string() == "2"
        assert collect(rational_preserved(2, 4)).to_string() == "1/2"

    def test_function_arguments_are_collected(self):
        assert collect(func('sin', add(x, x))).to_string() == "sin(2*x)"

    def test_nested_sums_are_flattened(self):
        assert collect(add(x, add(x, y))).to_string() == "2*x+y"

    def test_collect_preserves_value(self):
        expr = add(mul(2, x, y), mul(3, power(x, 2)), mul(y, x, 4), 7, x)
        bindings = {'x': 3, 'y': -2}
        assert collect(expr).evaluate(bindings) == expr.evaluate(bindings)


class TestFactor:
    def test_integer_gcd_is_pulled_out(self):
        expr = add(mul(2, x), mul(4, y))
        factored = factor(expr)
        assert factored.to_string() == "2*(x+2*y)"
        assert factored.evaluate({'x': 3, 'y': 1}) == 10

    def test_numeric_terms_take_part(self):
        assert factor(add(6, mul(9, x))).to_string() == "3*(2+3*x)"

    def test_all_negative_coefficients_give_a_negative_gcd(self):
        expr = add(mul(-2, x), mul(-4, y))
        assert factor(expr).to_string() == "-2*(x+2*y)"

        kept = factor(expr, SimplifyOptions(keep_negative_factoring=True))
        assert kept.to_string() == "2*(-1*x-2*y)"

    def test_no_common_factor_is_a_no_op(self):
        expr = add(x, mul(2, y))
        assert factor(expr) is expr

    def test_rational_coefficient_aborts(self):
        expr = add(mul(rational(1, 2), x), mul(4, y))
        assert factor(expr).to_string() == expr.to_string()

    def test_single_term_sum_is_left_alone(self):
        expr = add(mul(2, x))
        assert factor(expr).to_string() == "2*x"

    def test_factoring_reaches_nested_sums(self):
        expr = func('sin', add(mul(3, x), 6))
        assert factor(expr).to_string() == "sin(3*(x+2))"


class TestNormalize:
    def test_orders_terms_and_factors(self):
        assert normalize(mul(y, x)).to_string() == "x*y"
        assert normalize(add(y, x)).to_string() == "x+y"

    def test_makes_commuted_products_match(self):
        expr = add(mul(x, y), mul(y, x))
        normalized = normalize(expr)
        assert normalized.terms[0].to_string() == normalized.terms[1].to_string()
        assert collect(normalized).to_string() == "2*x*y"


class TestSimplify:
    def test_factors_common_coefficients(self):
        expr = add(mul(2, x), mul(4, y))
        assert simplify(expr).to_string() == "2*(x+2*y)"

    def test_is_idempotent(self):
        once = simplify(add(mul(2, x), mul(4, y)))
        assert simplify(once).to_string() == once.to_string()

    def test_single_pass_stops_after_one_round(self):
        expr = mul(add(x, 1), add(x, 1))
        assert simplify(expr, SimplifyOptions(single_pass=True)).to_string() == "(x+1)^2"

    def test_plateau_escapes_through_expansion(self):
        expr = mul(add(x, 1), add(x, 1))
        result = simplify(expr)
        assert result.to_string() == "x^2+2*x+1"
        assert result.evaluate({'x': 5}) == 36

    def test_zero_iterations_returns_the_input(self):
        expr = add(x, x)
        assert simplify(expr, SimplifyOptions(max_iterations=0)) is expr

    def test_already_simple_input_comes_back(self):
        assert simplify(x) is x
        assert simplify(add(x, y)).to_string() == "x+y"

    def test_preserves_value(self):
        expr = add(mul(3, x, add(x, 2)), mul(-1, power(x, 2)), 4)
        bindings = {'x': 7}
        assert simplify(expr).evaluate(bindings) == expr.evaluate(bindings)


def test_semantic_equality_ignores_operand_order():
    assert semantically_equal(mul(x, y), mul(y, x))
    assert semantically_equal(add(x, x), mul(2, x))
    assert not semantically_equal(add(x, 1), add(x, 2))


def test_options_reject_negative_values():
    with pytest.raises(ValueError):
        SimplifyOptions(max_iterations=-1)
