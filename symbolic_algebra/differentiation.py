"""Symbolic differentiation over expression trees.

Sum, product (binary and n-ary), power (constant exponent, constant base and
the general f^g case) and chain rules, with a table of elementary
derivatives. Each composite rule passes its result through ``collect``, so
results come back partly simplified; run ``simplify`` for a tidier form.
"""

from collections import OrderedDict
from typing import Callable, Dict, Iterable

from .errors import InvalidDerivativeOrderError, UnsupportedDifferentiationError
from .expression_tree.builders import func, integer, mul, negate, power, rational, reciprocal, add
from .expression_tree.core.node import Node, AddNode, MulNode, PowNode, FuncNode
from .expression_tree.core.operators import NodeType
from .expression_tree.utils.simplifier import collect
from .logging_system import log_derivative


def _one_minus_square(u: Node) -> Node:
  return add(1, negate(power(u, 2)))


# d/du outer(u), without the inner u' factor
DERIVATIVE_TABLE: Dict[str, Callable[[Node], Node]] = {
  'sin': lambda u: func('cos', u),
  'cos': lambda u: negate(func('sin', u)),
  'tan': lambda u: reciprocal(power(func('cos', u), 2)),
  'sec': lambda u: mul(func('sec', u), func('tan', u)),
  'csc': lambda u: mul(-1, func('csc', u), func('cot', u)),
  'cot': lambda u: negate(power(func('csc', u), 2)),
  'arcsin': lambda u: reciprocal(func('sqrt', _one_minus_square(u))),
  'arccos': lambda u: negate(reciprocal(func('sqrt', _one_minus_square(u)))),
  'arctan': lambda u: reciprocal(add(1, power(u, 2))),
  'sinh': lambda u: func('cosh', u),
  'cosh': lambda u: func('sinh', u),
  'tanh': lambda u: reciprocal(power(func('cosh', u), 2)),
  'ln': lambda u: reciprocal(u),
  'log': lambda u: reciprocal(mul(u, func('ln', 10))),
  'exp': lambda u: func('exp', u),
  'sqrt': lambda u: mul(rational(1, 2), power(u, mul(-1, rational(1, 2)))),
  'abs': lambda u: mul(u, reciprocal(func('abs', u))),
}
DERIVATIVE_TABLE['asin'] = DERIVATIVE_TABLE['arcsin']
DERIVATIVE_TABLE['acos'] = DERIVATIVE_TABLE['arccos']
DERIVATIVE_TABLE['atan'] = DERIVATIVE_TABLE['arctan']


class Differentiator:
  """Differentiates with respect to one variable"""

  def __init__(self, variable: str):
    self.variable = variable

  def differentiate(self, node: Node) -> Node:
    kind = node.kind()
    if kind in (NodeType.INTEGER, NodeType.FLOAT, NodeType.RATIONAL, NodeType.CONSTANT):
      return integer(0)
    if kind == NodeType.VARIABLE:
      return integer(1 if node.name == self.variable else 0)
    if kind == NodeType.ADD:
      return self._sum_rule(node)
    if kind == NodeType.MUL:
      return self._product_rule(node)
    if kind == NodeType.POW:
      return self._power_rule(node)
    if kind == NodeType.FUNC:
      return self._chain_rule(node)
    raise UnsupportedDifferentiationError(f"cannot differentiate {kind.name.lower()} node {node}")

  def _sum_rule(self, node: AddNode) -> Node:
    return collect(AddNode(self.differentiate(term) for term in node.terms))

  def _product_rule(self, node: MulNode) -> Node:
    factors = node.factors
    if not factors:
      return integer(0)
    if len(factors) == 1:
      return self.differentiate(factors[0])

    derivatives = [self.differentiate(f) for f in factors]
    if len(factors) == 2:
      f, g = factors
      df, dg = derivatives
      return collect(AddNode((MulNode((df, g)), MulNode((f, dg)))))

    # One term per factor, with that factor replaced by its derivative
    terms = []
    for i, derivative in enumerate(derivatives):
      terms.append(MulNode(factors[:i] + (derivative,) + factors[i + 1:]))
    return collect(AddNode(terms))

  def _power_rule(self, node: PowNode) -> Node:
    base, exponent = node.base, node.exponent

    if not exponent.contains_variable(self.variable):
      lowered = power(base, add(exponent, -1))
      return collect(mul(exponent, lowered, self.differentiate(base)))

    if not base.contains_variable(self.variable):
      return collect(mul(node, func('ln', base), self.differentiate(exponent)))

    # f^g * (g' ln f + g f' / f)
    inner = add(
      mul(self.differentiate(exponent), func('ln', base)),
      mul(exponent, mul(self.differentiate(base), reciprocal(base)))
    )
    return collect(mul(node, inner))

  def _chain_rule(self, node: FuncNode) -> Node:
    if len(node.args) != 1:
      raise UnsupportedDifferentiationError(
        f"cannot differentiate {node.name} with {len(node.args)} arguments"
      )
    outer = DERIVATIVE_TABLE.get(node.name)
    if outer is None:
      raise UnsupportedDifferentiationError(f"no derivative rule for function {node.name}")
    arg = node.args[0]
    return collect(mul(outer(arg), self.differentiate(arg)))


def derivative(expr: Node, variable: str) -> Node:
  """d(expr)/d(variable); raises UnsupportedDifferentiationError"""
  log_derivative(expr.to_string(), variable)
  return Differentiator(variable).differentiate(expr)


def partial_derivative(expr: Node, variable: str) -> Node:
  return derivative(expr, variable)


def nth_derivative(expr: Node, variable: str, n: int) -> Node:
  if n < 0:
    raise InvalidDerivativeOrderError(n)
  current = expr
  for _ in range(n):
    current = derivative(current, variable)
  return current


def gradient(expr: Node, variables: Iterable[str]) -> "OrderedDict[str, Node]":
  """Partial derivative per variable, in the order given"""
  result: "OrderedDict[str, Node]" = OrderedDict()
  for variable in variables:
    result[variable] = partial_derivative(expr, variable)
  return result
