from decimal import Decimal

import pytest
import sympy as sp

from symbolic_algebra import (
    NodeType, Relation, add, constant, eq, from_sympy, func, mul, parse, power, rational, real, var
)
from symbolic_algebra.expression_tree import SymPyBridge

x = var('x')
y = var('y')


def test_parse_arithmetic():
    expr = parse("x^2 + 3*x - 4")
    assert expr.evaluate({'x': 2}) == 6
    assert set(expr.free_variables()) == {'x'}


def test_parse_functions_and_constants():
    assert parse("log(100)").evaluate() == 2
    assert parse("log(100)").kind() == NodeType.FUNC
    assert abs(parse("ln(e)").evaluate() - 1) < Decimal('1e-40')
    assert parse("sqrt(16)").evaluate() == 4
    assert parse("sin(0) + cos(0)").evaluate() == 1
    assert abs(parse("2*pi").evaluate() - 2 * constant('pi').value()) < Decimal('1e-40')


def test_parse_relations():
    less = parse("x <= 3")
    assert less.kind() == NodeType.EQ
    assert less.relation is Relation.LESS_EQUAL
    assert less.evaluate({'x': 3}) == 1

    different = parse("x <> 1")
    assert different.relation is Relation.NOT_EQUAL
    assert different.evaluate({'x': 1}) == 0

    assert parse("y = 2*x").relation is Relation.EQUAL


def test_parse_rejects_garbage():
    with pytest.raises(Exception):
        parse("x +* )")


def test_from_sympy_numbers():
    assert from_sympy(sp.Integer(5)).to_string() == "5"
    assert from_sympy(sp.Rational(3, 6)).to_string() == "1/2"
    assert from_sympy(sp.Float('2.5')).to_string() == "2.5"
    assert from_sympy(sp.pi) is constant('pi')
    assert from_sympy(sp.E) is constant('e')


def test_from_sympy_structures():
    X, Y = sp.symbols('x y')
    assert from_sympy(sp.sin(X)).to_string() == "sin(x)"
    assert from_sympy(sp.log(X)).to_string() == "ln(x)"
    assert from_sympy(sp.sqrt(X)).to_string() == "sqrt(x)"
    assert from_sympy(sp.Pow(X, 3)).to_string() == "x^3"

    converted = from_sympy(sp.Add(X, sp.Mul(2, Y, evaluate=False), evaluate=False))
    assert converted.evaluate({'x': 1, 'y': 2}) == 5

    relation = from_sympy(sp.Le(X, 1))
    assert relation.relation is Relation.LESS_EQUAL


def test_from_sympy_rejects_unsupported_objects():
    with pytest.raises(ValueError):
        from_sympy(sp.I)


def test_to_sympy():
    X = sp.Symbol('x')
    assert add(x, 1).to_sympy() == X + 1
    assert power(x, rational(1, 2)).to_sympy() == sp.sqrt(X)
    assert func('arcsin', x).to_sympy() == sp.asin(X)
    assert func('log', x).to_sympy() == sp.log(X, 10)
    assert constant('pi').to_sympy() is sp.pi
    assert eq(x, 1, '<').to_sympy() == sp.Lt(X, 1)
    assert float(real(2.5).to_sympy()) == 2.5


def test_equivalence_through_sympy():
    assert SymPyBridge.equivalent(mul(2, add(x, 1)), add(mul(2, x), 2)) is True
    assert SymPyBridge.equivalent(add(x, 1), add(x, 2)) is False
