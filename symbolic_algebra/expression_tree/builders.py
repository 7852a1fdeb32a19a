"""Constructors for expression trees.

Children may be given as nodes or as plain Python values: ``int`` becomes an
integer leaf, ``float``/``Decimal`` a float leaf, ``Fraction`` a reduced
rational and ``str`` a variable.
"""

from decimal import Decimal
from fractions import Fraction

from .constants import get_constant_table
from .core.node import (
  Node, IntegerNode, FloatNode, RationalNode, VariableNode, ConstantNode,
  AddNode, MulNode, PowNode, FuncNode, EqNode
)
from .core.numbers import Number
from .core.operators import Relation


def as_node(value) -> Node:
  if isinstance(value, Node):
    return value
  if isinstance(value, int):
    return IntegerNode(int(value))
  if isinstance(value, Fraction):
    return number_node(value)
  if isinstance(value, (float, Decimal)):
    return FloatNode(value)
  if isinstance(value, str):
    return VariableNode(value)
  raise TypeError(f"cannot build an expression node from {type(value).__name__}")


def number_node(value: Number) -> Node:
  """Fresh leaf for a scratch number: int, Fraction (int when whole) or Decimal"""
  if isinstance(value, Fraction):
    if value.denominator == 1:
      return IntegerNode(value.numerator)
    return RationalNode(value.numerator, value.denominator)
  if isinstance(value, Decimal):
    return FloatNode(value)
  return IntegerNode(value)


def integer(value: int) -> IntegerNode:
  return IntegerNode(value)


def real(value) -> FloatNode:
  return FloatNode(value)


def rational(numerator: int, denominator: int) -> RationalNode:
  """Reduced rational with a positive denominator; raises ZeroDivisionError on 0"""
  reduced = Fraction(numerator, denominator)
  return RationalNode(reduced.numerator, reduced.denominator)


def rational_preserved(numerator: int, denominator: int) -> RationalNode:
  """Rational kept exactly as written, e.g. 2/4 stays 2/4"""
  return RationalNode(numerator, denominator)


def var(name: str) -> VariableNode:
  return VariableNode(name)


def constant(name: str, value=None) -> ConstantNode:
  """Named constant; pi and e resolve to the shared singletons"""
  if value is None:
    node = get_constant_table().get(name)
    if node is None:
      raise ValueError(f"unknown constant {name!r}; pass a value to define one")
    return node
  return ConstantNode(name, value)


def add(*terms) -> AddNode:
  return AddNode(as_node(t) for t in terms)


def mul(*factors) -> MulNode:
  return MulNode(as_node(f) for f in factors)


def power(base, exponent) -> PowNode:
  return PowNode(as_node(base), as_node(exponent))


def func(name: str, *args) -> FuncNode:
  return FuncNode(name, (as_node(a) for a in args))


def eq(left, right, relation=Relation.EQUAL) -> EqNode:
  return EqNode(as_node(left), as_node(right), relation)


def negate(node) -> MulNode:
  return mul(-1, node)


def reciprocal(node) -> PowNode:
  return power(node, -1)
