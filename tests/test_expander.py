import pytest

from symbolic_algebra import (
    ExpandOptions, add, collect, expand, expand_fully, func, mul, power, var
)

x = var('x')
y = var('y')
a, b, c, d = var('a'), var('b'), var('c'), var('d')


def test_product_distributes_over_sum():
    assert expand(mul(2, add(x, y))).to_string() == "2*x+2*y"
    assert expand(mul(add(a, b), add(c, d))).to_string() == "a*c+a*d+b*c+b*d"


def test_binomial_expansion():
    expanded = expand(power(add(x, 1), 2))
    assert expanded.to_string() == "x^2+2*x*1+1^2"
    assert collect(expanded).to_string() == "x^2+2*x+1"

    cubed = collect(expand(power(add(x, y), 3)))
    assert cubed.to_string() == "x^3+3*x^2*y+3*x*y^2+y^3"


def test_multinomial_power_uses_repeated_multiplication():
    expr = power(add(x, y, 1), 2)
    expanded = expand(expr)
    assert len(expanded.terms) == 9
    bindings = {'x': 2, 'y': 3}
    assert collect(expanded).evaluate(bindings) == expr.evaluate(bindings) == 36


def test_power_of_product():
    expanded = expand(power(mul(2, x), 3))
    assert expanded.to_string() == "2^3*x^3"
    assert collect(expanded).to_string() == "8*x^3"


def test_degree_limit():
    high = power(add(x, 1), 11)
    assert expand(high) is high
    assert expand(high, ExpandOptions(max_degree=11)).size() > high.size()

    with pytest.raises(ValueError):
        ExpandOptions(max_degree=-1)


def test_zero_and_one_exponents():
    assert expand(power(add(x, 1), 0)).to_string() == "1"
    assert expand(power(add(x, 1), 1)).to_string() == "x+1"


def test_non_integer_and_negative_exponents_are_left_alone():
    negative = power(add(x, 1), -1)
    assert expand(negative) is negative
    symbolic = power(add(x, 1), y)
    assert expand(symbolic) is symbolic


def test_expansion_reaches_function_arguments():
    expr = func('sin', mul(2, add(x, 1)))
    assert expand(expr).to_string() == "sin(2*x+2*1)"


def test_log_expansion_is_opt_in():
    product = func('ln', mul(x, y))
    assert expand(product) is product

    options = ExpandOptions(expand_logs=True)
    assert expand(product, options).to_string() == "ln(x)+ln(y)"
    assert expand(func('ln', power(x, 2)), options).to_string() == "2*ln(x)"
    assert expand(func('log', mul(x, y)), options).to_string() == "log(x)+log(y)"


def test_trig_expansion_is_opt_in():
    tangent = func('tan', x)
    assert expand(tangent) is tangent

    options = ExpandOptions(expand_trig=True)
    assert expand(tangent, options).to_string() == "sin(x)*cos(x)^-1"
    assert expand(func('sec', x), options).to_string() == "cos(x)^-1"
    assert expand(func('csc', x), options).to_string() == "sin(x)^-1"
    assert expand(func('cot', x), options).to_string() == "cos(x)*sin(x)^-1"


def test_expand_fully_reaches_a_fixed_point():
    expr = mul(add(x, 1), power(add(x, 1), 2))
    result = expand_fully(expr)
    assert expand(result).to_string() == result.to_string()
    assert collect(result).evaluate({'x': 2}) == 27


def test_expand_preserves_value():
    expr = mul(add(x, 2), add(y, -3), add(x, y))
    bindings = {'x': 4, 'y': 5}
    assert expand(expr).evaluate(bindings) == expr.evaluate(bindings)
