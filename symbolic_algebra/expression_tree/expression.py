import numpy as np
import sympy as sp
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .core.node import Node
from .core.operators import NodeType
from .utils.expander import expand, expand_fully
from .utils.simplifier import collect, factor, normalize, semantically_equal, simplify
from .utils.sympy_utils import SymPyBridge
from ..config import ExpandOptions, SimplifyOptions


class Expression:
  """Immutable wrapper around a tree root with a cached rendering"""

  __slots__ = ('root', '_string_cache')

  def __init__(self, root: Node):
    self.root = root
    self._string_cache: Optional[str] = None

  @staticmethod
  def _wrap(other) -> Node:
    return other.root if isinstance(other, Expression) else other

  def kind(self) -> NodeType:
    return self.root.kind()

  def evaluate(self, bindings: Optional[Mapping[str, Any]] = None) -> Decimal:
    return self.root.evaluate(bindings)

  def evaluate_array(self, bindings: Mapping[str, Any]) -> np.ndarray:
    return self.root.evaluate_array(bindings)

  def to_string(self) -> str:
    if self._string_cache is None:
      self._string_cache = self.root.to_string()
    return self._string_cache

  def to_latex(self) -> str:
    return self.root.to_latex()

  def to_sympy(self) -> sp.Expr:
    return self.root.to_sympy()

  def clone(self) -> 'Expression':
    return Expression(self.root.clone())

  def size(self) -> int:
    """Node count"""
    return self.root.size()

  def free_variables(self) -> List[str]:
    return self.root.free_variables()

  def structural_equal(self, other) -> bool:
    return self.root.structural_equal(self._wrap(other))

  def semantically_equal(self, other) -> bool:
    return semantically_equal(self.root, self._wrap(other))

  def simplify(self, options: Optional[SimplifyOptions] = None,
               expand_options: Optional[ExpandOptions] = None) -> 'Expression':
    return Expression(simplify(self.root, options, expand_options))

  def collect(self) -> 'Expression':
    return Expression(collect(self.root))

  def factor(self, options: Optional[SimplifyOptions] = None) -> 'Expression':
    return Expression(factor(self.root, options))

  def expand(self, options: Optional[ExpandOptions] = None) -> 'Expression':
    return Expression(expand(self.root, options))

  def expand_fully(self, options: Optional[ExpandOptions] = None) -> 'Expression':
    return Expression(expand_fully(self.root, options))

  def normalize(self) -> 'Expression':
    return Expression(normalize(self.root))

  def derivative(self, variable: str) -> 'Expression':
    from ..differentiation import derivative
    return Expression(derivative(self.root, variable))

  def nth_derivative(self, variable: str, n: int) -> 'Expression':
    from ..differentiation import nth_derivative
    return Expression(nth_derivative(self.root, variable, n))

  def gradient(self, variables: Iterable[str]) -> Dict[str, 'Expression']:
    from ..differentiation import gradient
    return {name: Expression(node) for name, node in gradient(self.root, variables).items()}

  def __hash__(self) -> int:
    return hash(self.root)

  def __eq__(self, other) -> bool:
    if not isinstance(other, Expression):
      return NotImplemented
    return self.root.structural_equal(other.root)

  def __str__(self) -> str:
    return self.to_string()

  def __repr__(self) -> str:
    return f"Expression({self.to_string()!r})"

  @classmethod
  def from_sympy(cls, expr) -> 'Expression':
    return cls(SymPyBridge.from_sympy(expr))

  @classmethod
  def from_string(cls, expr_str: str) -> 'Expression':
    """Parse through sympy with evaluation disabled; raises on malformed input"""
    return cls(SymPyBridge.parse(expr_str))
