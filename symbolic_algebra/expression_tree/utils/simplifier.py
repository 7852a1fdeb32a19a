import math
from fractions import Fraction
from typing import Dict, List, Optional, Tuple

from ..builders import number_node
from ..core.node import Node, IntegerNode, AddNode, MulNode, PowNode
from ..core.numbers import Number, add_numbers, multiply_numbers
from ..core.operators import NodeType
from .expander import expand
from .tree_utils import flatten_children, map_children
from ...config import ExpandOptions, MAX_FOLDED_EXPONENT, SimplifyOptions
from ...logging_system import (
  log_debug, log_simplify_finished, log_simplify_round, log_simplify_started
)


def _is_numeric_value(node: Node, value) -> bool:
  return node.is_numeric() and node.exact_value() == value


class ExpressionSimplifier:
  """Collect, factor and normalize rewrites plus the fixed-point simplify driver.

  Every rewrite is total: when no rule applies the input comes back unchanged.
  """

  def __init__(self, options: Optional[SimplifyOptions] = None,
               expand_options: Optional[ExpandOptions] = None):
    self.options = options or SimplifyOptions()
    self.expand_options = expand_options or ExpandOptions()

  # collect

  @staticmethod
  def collect(node: Node) -> Node:
    """Combine like terms, numeric factors and powers of the same base"""
    kind = node.kind()
    if kind == NodeType.ADD:
      return ExpressionSimplifier._collect_add(node)
    if kind == NodeType.MUL:
      return ExpressionSimplifier._collect_mul(node)
    if kind == NodeType.POW:
      return ExpressionSimplifier._collect_pow(node)
    if kind == NodeType.RATIONAL:
      return number_node(node.exact_value())
    if kind in (NodeType.FUNC, NodeType.EQ):
      return map_children(node, ExpressionSimplifier.collect)
    return node

  @staticmethod
  def split_term(term: Node) -> Tuple[Optional[Node], Number]:
    """(base, coefficient) of a sum term; a bare number has base None"""
    if term.is_numeric():
      return None, term.exact_value()
    if term.kind() == NodeType.MUL:
      coefficient: Number = 1
      rest = []
      for factor in term.factors:
        if factor.is_numeric():
          coefficient = multiply_numbers(coefficient, factor.exact_value())
        else:
          rest.append(factor)
      if not rest:
        return None, coefficient
      if len(rest) == 1:
        return rest[0], coefficient
      return MulNode(rest), coefficient
    return term, 1

  @staticmethod
  def join_term(base: Optional[Node], coefficient: Number) -> Node:
    """Inverse of split_term: coefficient 1 gives the bare base"""
    if base is None:
      return number_node(coefficient)
    if coefficient == 1:
      return base
    factors = base.factors if base.kind() == NodeType.MUL else (base,)
    return MulNode((number_node(coefficient),) + tuple(factors))

  @staticmethod
  def _collect_add(node: AddNode) -> Node:
    terms = flatten_children(
      (ExpressionSimplifier.collect(t) for t in flatten_children(node.terms, NodeType.ADD)),
      NodeType.ADD
    )

    # Grouped by rendering in first-seen order; x*y and y*x stay apart
    groups: Dict[Optional[str], List] = {}
    for term in terms:
      base, coefficient = ExpressionSimplifier.split_term(term)
      key = None if base is None else base.to_string()
      if key in groups:
        groups[key][1] = add_numbers(groups[key][1], coefficient)
      else:
        groups[key] = [base, coefficient]

    collected = [
      ExpressionSimplifier.join_term(base, coefficient)
      for base, coefficient in groups.values() if coefficient != 0
    ]
    if not collected:
      return IntegerNode(0)
    if len(collected) == 1:
      return collected[0]
    return AddNode(collected)

  @staticmethod
  def _is_legacy_negative_zero(factors: List[Node]) -> bool:
    if len(factors) != 2 or not all(f.kind() == NodeType.INTEGER for f in factors):
      return False
    return sorted(f.exact_value() for f in factors) == [-1, 0]

  @staticmethod
  def _collect_mul(node: MulNode) -> Node:
    factors = flatten_children(
      (ExpressionSimplifier.collect(f) for f in flatten_children(node.factors, NodeType.MUL)),
      NodeType.MUL
    )
    # -1*0 is kept as written for compatibility with older outputs
    if ExpressionSimplifier._is_legacy_negative_zero(factors):
      return MulNode(factors)

    coefficient: Number = 1
    others = []
    for factor in factors:
      if factor.is_numeric():
        coefficient = multiply_numbers(coefficient, factor.exact_value())
      else:
        others.append(factor)
    if coefficient == 0:
      return IntegerNode(0)

    groups: Dict[str, List] = {}
    for factor in others:
      if factor.kind() == NodeType.POW:
        base, exponent = factor.base, factor.exponent
      else:
        base, exponent = factor, IntegerNode(1)
      key = base.to_string()
      if key in groups:
        groups[key][1].append(exponent)
      else:
        groups[key] = [base, [exponent], factor]

    combined = []
    for base, exponents, first in groups.values():
      if len(exponents) == 1:
        combined.append(first)
        continue
      exponent = ExpressionSimplifier.collect(AddNode(exponents))
      if _is_numeric_value(exponent, 0):
        continue
      combined.append(ExpressionSimplifier._collect_pow(PowNode(base, exponent)))

    # Combining exponents can fold a power to a number, e.g. 2^(1/2)*2^(1/2)
    if any(f.is_numeric() for f in combined):
      return ExpressionSimplifier._collect_mul(MulNode([number_node(coefficient)] + combined))

    if not combined:
      return number_node(coefficient)
    if coefficient == 1:
      return combined[0] if len(combined) == 1 else MulNode(combined)
    return MulNode([number_node(coefficient)] + combined)

  @staticmethod
  def _collect_pow(node: PowNode) -> Node:
    base = ExpressionSimplifier.collect(node.base)
    exponent = ExpressionSimplifier.collect(node.exponent)

    if base.kind() == NodeType.POW:
      exponent = ExpressionSimplifier.collect(MulNode((base.exponent, exponent)))
      base = base.base

    if _is_numeric_value(exponent, 0):
      return IntegerNode(1)
    if _is_numeric_value(exponent, 1):
      return base

    folded = ExpressionSimplifier._fold_numeric_power(base, exponent)
    if folded is not None:
      return folded
    if base is node.base and exponent is node.exponent:
      return node
    return PowNode(base, exponent)

  @staticmethod
  def _fold_numeric_power(base: Node, exponent: Node) -> Optional[Node]:
    if base.kind() not in (NodeType.INTEGER, NodeType.RATIONAL) or exponent.kind() != NodeType.INTEGER:
      return None
    n = exponent.exact_value()
    value = Fraction(base.exact_value())
    if abs(n) > MAX_FOLDED_EXPONENT or (value == 0 and n < 0):
      return None
    return number_node(value ** n)

  # factor

  @staticmethod
  def factor(node: Node, options: Optional[SimplifyOptions] = None) -> Node:
    """Pull the integer GCD of the coefficients out of every sum"""
    options = options or SimplifyOptions()
    if node.kind() == NodeType.ADD:
      terms = [ExpressionSimplifier.factor(t, options) for t in node.terms]
      return ExpressionSimplifier._factor_sum(node, terms, options)
    return map_children(node, lambda child: ExpressionSimplifier.factor(child, options))

  @staticmethod
  def _factor_sum(node: AddNode, terms: List[Node], options: SimplifyOptions) -> Node:
    unchanged = node if all(a is b for a, b in zip(node.terms, terms)) else AddNode(terms)
    if len(terms) < 2:
      return unchanged

    split = [ExpressionSimplifier.split_term(t) for t in terms]
    # Rational or float coefficients abort factoring
    if not all(type(coefficient) is int for _, coefficient in split):
      return unchanged

    gcd = 0
    for _, coefficient in split:
      gcd = math.gcd(gcd, coefficient)
    if gcd <= 1:
      return unchanged
    if not options.keep_negative_factoring and all(c < 0 for _, c in split):
      gcd = -gcd

    reduced = [ExpressionSimplifier.join_term(base, c // gcd) for base, c in split]
    return MulNode((IntegerNode(gcd), AddNode(reduced)))

  # normalize

  @staticmethod
  def normalize(node: Node) -> Node:
    """Sort sum terms and product factors by rendering, recursively"""
    node = map_children(node, ExpressionSimplifier.normalize)
    if node.kind() == NodeType.ADD:
      return AddNode(sorted(node.terms, key=lambda n: n.to_string()))
    if node.kind() == NodeType.MUL:
      return MulNode(sorted(node.factors, key=lambda n: n.to_string()))
    return node

  # driver

  def simplify(self, node: Node) -> Node:
    """Alternate factor+collect (and expand+collect on a plateau) to a fixed point.

    Stops when a round leaves the rendering unchanged, after one round in
    single-pass mode, or at ``max_iterations``. A round that reproduces an
    earlier rendering closes a cycle; the smallest member of that cycle
    (fewest nodes, then lexicographic rendering) is returned, so simplifying
    a simplified tree gives the same tree back.
    """
    current = node
    current_text = current.to_string()
    seen: Dict[str, int] = {current_text: 0}
    history = [current]
    log_simplify_started(current_text)

    for round_index in range(1, self.options.max_iterations + 1):
      candidate = self.collect(self.factor(current, self.options))
      text = candidate.to_string()
      note = ""

      if text == current_text:
        expanded = self.collect(expand(current, self.expand_options))
        expanded_text = expanded.to_string()
        if expanded_text == current_text:
          log_simplify_finished("converged", round_index - 1, current_text)
          return current
        log_debug(f"simplify plateau at {current_text}, escaping via expand")
        candidate, text, note = expanded, expanded_text, "(expanded)"

      log_simplify_round(round_index, text, note)

      if text in seen:
        cycle = history[seen[text]:]
        best = min(cycle, key=lambda n: (n.size(), n.to_string()))
        log_simplify_finished(f"closed a cycle of length {len(cycle)}", round_index, best.to_string())
        return best

      seen[text] = len(history)
      history.append(candidate)
      current, current_text = candidate, text

      if self.options.single_pass:
        log_simplify_finished("stopped after a single pass", round_index, current_text)
        return current

    log_simplify_finished("reached the iteration cap", self.options.max_iterations, current_text)
    return current


def collect(node: Node) -> Node:
  return ExpressionSimplifier.collect(node)


def factor(node: Node, options: Optional[SimplifyOptions] = None) -> Node:
  return ExpressionSimplifier.factor(node, options)


def normalize(node: Node) -> Node:
  return ExpressionSimplifier.normalize(node)


def simplify(node: Node, options: Optional[SimplifyOptions] = None,
             expand_options: Optional[ExpandOptions] = None) -> Node:
  return ExpressionSimplifier(options, expand_options).simplify(node)


def semantically_equal(a: Node, b: Node) -> bool:
  """Order-insensitive comparison of two trees after simplification"""
  return normalize(simplify(a)).to_string() == normalize(simplify(b)).to_string()
