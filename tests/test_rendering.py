from symbolic_algebra import (
    add, constant, eq, func, integer, mul, power, rational, rational_preserved, real, var
)
from symbolic_algebra.expression_tree import AddNode, MulNode

x = var('x')
y = var('y')
n = var('n')


def test_sum_rendering_skips_plus_before_negative_terms():
    assert add(x, y).to_string() == "x+y"
    assert add(x, mul(-1, y)).to_string() == "x-1*y"
    assert add(x, -3).to_string() == "x-3"
    assert add(x, real(-2.5)).to_string() == "x-2.5"
    assert str(add(1, x)) == "1+x"


def test_product_parenthesizes_sums():
    assert mul(2, x).to_string() == "2*x"
    assert mul(2, add(x, 1)).to_string() == "2*(x+1)"
    assert mul(add(x, 1), add(x, -1)).to_string() == "(x+1)*(x-1)"


def test_power_parenthesization():
    assert power(x, 2).to_string() == "x^2"
    assert power(add(x, 1), 2).to_string() == "(x+1)^2"
    assert power(mul(2, x), 2).to_string() == "(2*x)^2"
    assert power(power(x, 2), 3).to_string() == "(x^2)^3"
    assert power(-2, 2).to_string() == "(-2)^2"
    assert power(rational(1, 2), 2).to_string() == "(1/2)^2"
    assert power(x, add(n, 1)).to_string() == "x^(n+1)"
    assert power(x, rational(1, 2)).to_string() == "x^(1/2)"
    assert power(x, -1).to_string() == "x^-1"
    assert power(func('cos', x), -1).to_string() == "cos(x)^-1"


def test_numeric_leaves():
    assert integer(-7).to_string() == "-7"
    assert rational(1, 2).to_string() == "1/2"
    assert rational_preserved(4, 1).to_string() == "4/1"
    assert real(2.5).to_string() == "2.5"
    assert real(6.0).to_string() == "6"
    assert real('1e-9').to_string() == "1e-9"
    assert real('1.5e30').to_string() == "1.5e+30"


def test_functions_and_constants():
    assert func('sin', x).to_string() == "sin(x)"
    assert func('log', x, 2).to_string() == "log(x, 2)"
    assert constant('pi').to_string() == "pi"
    assert constant('e').to_string() == "e"


def test_relations():
    assert eq(x, 1).to_string() == "x=1"
    assert eq(x, 1, '<=').to_string() == "x<=1"
    assert eq(x, 1, '!=').to_string() == "x<>1"
    assert eq(x, 1, '>').to_string() == "x>1"


def test_empty_sum_and_product_render_identities():
    assert AddNode([]).to_string() == "0"
    assert MulNode([]).to_string() == "1"
    assert AddNode([x]).to_string() == "x"


def test_latex():
    assert mul(x, y).to_latex() == "x \\cdot y"
    assert mul(2, add(x, 1)).to_latex() == "2 \\cdot (x+1)"
    assert power(x, 2).to_latex() == "x^{2}"
    assert power(add(x, 1), add(n, 1)).to_latex() == "(x+1)^{n+1}"
    assert rational(1, 2).to_latex() == "\\frac{1}{2}"
    assert rational_preserved(3, 1).to_latex() == "3"
    assert func('sqrt', x).to_latex() == "\\sqrt{x}"
    assert func('ln', x).to_latex() == "\\ln{x}"
    assert func('log', x).to_latex() == "\\log{x}"
    assert func('sin', x).to_latex() == "\\mathrm{sin}(x)"
    assert func('log', x, 2).to_latex() == "\\mathrm{log}(x, 2)"
    assert constant('pi').to_latex() == "\\pi"
    assert eq(x, 1, '<=').to_latex() == "x \\le 1"
    assert eq(x, 1, '>=').to_latex() == "x \\ge 1"
    assert eq(x, 1, '<>').to_latex() == "x \\ne 1"
    assert eq(x, 1).to_latex() == "x = 1"


def test_rendering_is_deterministic():
    expr = add(mul(3, power(x, 2)), mul(-1, y), func('sin', add(x, 1)))
    assert expr.to_string() == expr.clone().to_string()
    assert expr.to_string() == "3*x^2-1*y+sin(x+1)"
