import re
import sympy as sp
from decimal import Decimal
from typing import Dict, Optional
from sympy.core.function import AppliedUndef
from sympy.core.relational import Relational
from sympy.parsing.sympy_parser import convert_xor, parse_expr, standard_transformations

from ..builders import constant, rational
from ..core.node import (
  Node, IntegerNode, FloatNode, VariableNode, AddNode, MulNode, PowNode, FuncNode, EqNode
)
from ..core.operators import Relation

SYMPY_FUNCTION_NAMES: Dict[type, str] = {
  sp.sin: 'sin', sp.cos: 'cos', sp.tan: 'tan',
  sp.sec: 'sec', sp.csc: 'csc', sp.cot: 'cot',
  sp.asin: 'arcsin', sp.acos: 'arccos', sp.atan: 'arctan',
  sp.sinh: 'sinh', sp.cosh: 'cosh', sp.tanh: 'tanh',
  sp.exp: 'exp', sp.log: 'ln', sp.Abs: 'abs',
}

# Names as this package spells them; log stays base 10 as an opaque function
PARSE_NAMESPACE = {
  'e': sp.E, 'pi': sp.pi,
  'ln': sp.log, 'log': sp.Function('log'),
  'abs': sp.Abs, 'sqrt': sp.sqrt,
  'arcsin': sp.asin, 'arccos': sp.acos, 'arctan': sp.atan,
}

TRANSFORMATIONS = standard_transformations + (convert_xor,)

RELATION_PATTERN = re.compile(r'<=|>=|<>|!=|==|≤|≥|≠|=|<|>')


class SymPyBridge:
  """Conversion between sympy expressions and expression trees"""

  @staticmethod
  def from_sympy(expr) -> Node:
    """Convert a sympy expression (ideally built with evaluate=False) to a tree"""
    if isinstance(expr, Relational):
      return EqNode(
        SymPyBridge.from_sympy(expr.lhs),
        SymPyBridge.from_sympy(expr.rhs),
        Relation.from_symbol(expr.rel_op)
      )
    if expr is sp.pi:
      return constant('pi')
    if expr is sp.E:
      return constant('e')
    if expr.is_Integer:
      return IntegerNode(int(expr))
    if expr.is_Rational:
      return rational(int(expr.p), int(expr.q))
    if expr.is_Float:
      return FloatNode(Decimal(str(expr)))
    if expr.is_Symbol:
      return VariableNode(expr.name)

    children = [SymPyBridge.from_sympy(arg) for arg in expr.args]
    if isinstance(expr, sp.Add):
      return AddNode(children)
    if isinstance(expr, sp.Mul):
      return MulNode(children)
    if isinstance(expr, sp.Pow):
      if expr.exp == sp.Rational(1, 2):
        return FuncNode('sqrt', children[:1])
      return PowNode(children[0], children[1])
    if isinstance(expr, AppliedUndef):
      return FuncNode(expr.func.__name__, children)

    name = SYMPY_FUNCTION_NAMES.get(expr.func)
    if name is not None:
      return FuncNode(name, children)
    raise ValueError(f"cannot convert sympy object {expr!r} ({type(expr).__name__})")

  @staticmethod
  def parse(text: str) -> Node:
    """Parse infix text through sympy without evaluating it.

    Accepts ``^`` for powers and one relation operator (``=``, ``<``, ``<=``,
    ``<>`` ...). This is a convenience for tests and scripts, not a full
    grammar: sympy may still reorder commutative arguments.
    """
    match = RELATION_PATTERN.search(text)
    if match is not None:
      left = SymPyBridge.parse(text[:match.start()])
      right = SymPyBridge.parse(text[match.end():])
      return EqNode(left, right, Relation.from_symbol(match.group()))
    parsed = parse_expr(
      text, local_dict=dict(PARSE_NAMESPACE),
      transformations=TRANSFORMATIONS, evaluate=False
    )
    return SymPyBridge.from_sympy(parsed)

  @staticmethod
  def equivalent(a: Node, b: Node) -> Optional[bool]:
    """Whether sympy can show a - b == 0; None when it cannot decide"""
    difference = sp.simplify(a.to_sympy() - b.to_sympy())
    if difference == 0:
      return True
    if difference.is_number and difference != 0:
      return False
    return None


def from_sympy(expr) -> Node:
  return SymPyBridge.from_sympy(expr)


def parse(text: str) -> Node:
  return SymPyBridge.parse(text)
