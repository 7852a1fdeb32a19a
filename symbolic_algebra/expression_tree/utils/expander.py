import itertools
import math
from typing import List, Optional

from ..core.node import Node, IntegerNode, AddNode, MulNode, PowNode, FuncNode
from ..core.operators import NodeType
from .tree_utils import flatten_children, map_children
from ...config import EXPAND_FULLY_ROUNDS, ExpandOptions
from ...logging_system import LogLevel, log_debug, log_info


def _clean_power(base: Node, exponent: int) -> Optional[Node]:
  """base^exponent with exponent 0 dropped (None) and exponent 1 left bare"""
  if exponent == 0:
    return None
  if exponent == 1:
    return base
  return PowNode(base, IntegerNode(exponent))


class ExpressionExpander:
  """Distributes products over sums and expands integer powers of sums"""

  def __init__(self, options: Optional[ExpandOptions] = None):
    self.options = options or ExpandOptions()

  def expand(self, node: Node) -> Node:
    node = map_children(node, self.expand)
    kind = node.kind()
    if kind == NodeType.ADD:
      terms = flatten_children(node.terms, NodeType.ADD)
      return node if len(terms) == len(node.terms) else AddNode(terms)
    if kind == NodeType.MUL:
      return self._expand_mul(node)
    if kind == NodeType.POW:
      return self._expand_pow(node)
    if kind == NodeType.FUNC:
      return self._expand_func(node)
    return node

  def _expand_mul(self, node: MulNode) -> Node:
    factors = flatten_children(node.factors, NodeType.MUL)
    if not any(f.kind() == NodeType.ADD for f in factors):
      return node if len(factors) == len(node.factors) else MulNode(factors)
    return self._distribute(factors)

  def _distribute(self, factors: List[Node]) -> Node:
    """Cartesian product of the factors' terms, one product per combination"""
    term_sets = [f.terms if f.kind() == NodeType.ADD else (f,) for f in factors]
    products = []
    for combination in itertools.product(*term_sets):
      product = flatten_children(combination, NodeType.MUL)
      products.append(product[0] if len(product) == 1 else MulNode(product))
    return AddNode(flatten_children(products, NodeType.ADD))

  def _expand_pow(self, node: PowNode) -> Node:
    base, exponent = node.base, node.exponent
    if exponent.kind() != NodeType.INTEGER:
      return node
    n = exponent.exact_value()

    if base.kind() == NodeType.MUL:
      return self._expand_mul(MulNode(
        self._expand_pow(PowNode(factor, exponent)) for factor in base.factors
      ))

    if base.kind() != NodeType.ADD or n < 0:
      return node
    if n > self.options.max_degree:
      log_info(f"left {node} unexpanded: degree {n} exceeds max_degree {self.options.max_degree}",
               LogLevel.MODERATE)
      return node
    if n == 0:
      return IntegerNode(1)
    if n == 1:
      return base

    terms = flatten_children(base.terms, NodeType.ADD)
    if len(terms) == 2:
      return self._binomial(terms[0], terms[1], n)

    result: Node = AddNode(terms)
    for _ in range(n - 1):
      result = self._distribute([result, AddNode(terms)])
    return result

  def _binomial(self, a: Node, b: Node, n: int) -> Node:
    """(a+b)^n = sum over k of C(n,k) a^(n-k) b^k"""
    expanded_terms = []
    for k in range(n + 1):
      coefficient = math.comb(n, k)
      factors = [] if coefficient == 1 else [IntegerNode(coefficient)]
      factors += [p for p in (_clean_power(a, n - k), _clean_power(b, k)) if p is not None]
      term = factors[0] if len(factors) == 1 else MulNode(factors)
      expanded_terms.append(self.expand(term))
    return AddNode(flatten_children(expanded_terms, NodeType.ADD))

  def _expand_func(self, node: FuncNode) -> Node:
    if len(node.args) != 1:
      return node
    arg = node.args[0]
    name = node.name

    if self.options.expand_logs and name in ('ln', 'log'):
      if arg.kind() == NodeType.MUL:
        return AddNode(self._expand_func(FuncNode(name, (factor,))) for factor in arg.factors)
      if arg.kind() == NodeType.POW:
        return MulNode((arg.exponent, self._expand_func(FuncNode(name, (arg.base,)))))

    if self.options.expand_trig:
      if name == 'tan':
        return MulNode((FuncNode('sin', (arg,)), PowNode(FuncNode('cos', (arg,)), IntegerNode(-1))))
      if name == 'sec':
        return PowNode(FuncNode('cos', (arg,)), IntegerNode(-1))
      if name == 'csc':
        return PowNode(FuncNode('sin', (arg,)), IntegerNode(-1))
      if name == 'cot':
        return MulNode((FuncNode('cos', (arg,)), PowNode(FuncNode('sin', (arg,)), IntegerNode(-1))))

    return node


def expand(node: Node, options: Optional[ExpandOptions] = None) -> Node:
  return ExpressionExpander(options).expand(node)


def expand_fully(node: Node, options: Optional[ExpandOptions] = None) -> Node:
  """Repeat expand until the rendering stops changing, at most EXPAND_FULLY_ROUNDS times"""
  expander = ExpressionExpander(options)
  current = node
  for round_index in range(EXPAND_FULLY_ROUNDS):
    expanded = expander.expand(current)
    if expanded.to_string() == current.to_string():
      log_debug(f"expand_fully settled after {round_index} round(s)")
      break
    current = expanded
  return current
