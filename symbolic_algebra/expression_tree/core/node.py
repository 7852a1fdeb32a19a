import decimal
import numpy as np
import sympy as sp
from abc import ABC, abstractmethod
from decimal import Decimal
from fractions import Fraction
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .numbers import (
  DECIMAL_CONTEXT, ONE, ZERO, Number, format_decimal, is_integral, to_decimal
)
from .operators import (
  NUMERIC_TYPES, SYMPY_FUNCTIONS, NodeType, Relation,
  evaluate_function, evaluate_function_array
)
from ...errors import DomainError, UndefinedVariableError

Bindings = Optional[Mapping[str, Any]]

SYMPY_RELATIONS = {
  Relation.EQUAL: sp.Eq,
  Relation.LESS: sp.Lt,
  Relation.GREATER: sp.Gt,
  Relation.LESS_EQUAL: sp.Le,
  Relation.GREATER_EQUAL: sp.Ge,
  Relation.NOT_EQUAL: sp.Ne,
}


class Node(ABC):
  """Immutable expression tree node with cached rendering, hash and size"""

  __slots__ = ('_hash_cache', '_string_cache', '_size_cache')

  def __init__(self):
    self._hash_cache: Optional[int] = None
    self._string_cache: Optional[str] = None
    self._size_cache: Optional[int] = None

  @abstractmethod
  def kind(self) -> NodeType:
    pass

  @abstractmethod
  def evaluate(self, bindings: Bindings = None) -> Decimal:
    pass

  @abstractmethod
  def _evaluate_array(self, bindings: Mapping[str, Any]):
    pass

  @abstractmethod
  def _render(self) -> str:
    pass

  @abstractmethod
  def to_latex(self) -> str:
    pass

  @abstractmethod
  def clone(self) -> 'Node':
    pass

  @abstractmethod
  def to_sympy(self) -> sp.Expr:
    pass

  @abstractmethod
  def _key(self) -> tuple:
    pass

  def children(self) -> Tuple['Node', ...]:
    return ()

  def is_numeric(self) -> bool:
    return self.kind() in NUMERIC_TYPES

  def to_string(self) -> str:
    if self._string_cache is None:
      self._string_cache = self._render()
    return self._string_cache

  def evaluate_array(self, bindings: Mapping[str, Any]) -> np.ndarray:
    """Vectorised float64 evaluation; points outside a function's domain come back as nan or inf"""
    with np.errstate(all='ignore'):
      result = self._evaluate_array(bindings or {})
    return np.asarray(result, dtype=np.float64)

  def size(self) -> int:
    """Node count"""
    if self._size_cache is None:
      self._size_cache = 1 + sum(child.size() for child in self.children())
    return self._size_cache

  def free_variables(self) -> List[str]:
    """Distinct variable names in first-seen order"""
    names: Dict[str, None] = {}
    self._collect_variables(names)
    return list(names)

  def _collect_variables(self, names: Dict[str, None]):
    for child in self.children():
      child._collect_variables(names)

  def contains_variable(self, name: str) -> bool:
    return any(child.contains_variable(name) for child in self.children())

  def structural_equal(self, other: 'Node') -> bool:
    """Same variant and positionally equal children; x+y and y+x differ"""
    if self is other:
      return True
    if not isinstance(other, Node) or self.kind() != other.kind():
      return False
    return self._key() == other._key()

  def __eq__(self, other) -> bool:
    if not isinstance(other, Node):
      return NotImplemented
    return self.structural_equal(other)

  def __hash__(self) -> int:
    if self._hash_cache is None:
      self._hash_cache = hash((self.kind(), self._key()))
    return self._hash_cache

  def __str__(self) -> str:
    return self.to_string()

  def __repr__(self) -> str:
    return f"{type(self).__name__}({self.to_string()!r})"


class NumericNode(Node):
  """Shared behaviour of Integer, Float and Rational leaves"""

  __slots__ = ()

  @abstractmethod
  def exact_value(self) -> Number:
    pass

  def value(self) -> Decimal:
    return to_decimal(self.exact_value())

  def evaluate(self, bindings: Bindings = None) -> Decimal:
    return self.value()

  def _evaluate_array(self, bindings):
    return np.float64(self.exact_value())

  def is_negative(self) -> bool:
    return self.exact_value() < 0


class IntegerNode(NumericNode):
  __slots__ = ('_value',)

  def __init__(self, value: int):
    super().__init__()
    self._value = int(value)

  def kind(self) -> NodeType:
    return NodeType.INTEGER

  def exact_value(self) -> int:
    return self._value

  def _render(self) -> str:
    return str(self._value)

  def to_latex(self) -> str:
    return str(self._value)

  def clone(self) -> 'IntegerNode':
    return IntegerNode(self._value)

  def to_sympy(self):
    return sp.Integer(self._value)

  def _key(self) -> tuple:
    return (self._value,)


class FloatNode(NumericNode):
  __slots__ = ('_value',)

  def __init__(self, value):
    super().__init__()
    value = to_decimal(value)
    if not value.is_finite():
      raise ValueError(f"float node value must be finite, got {value}")
    self._value = value

  def kind(self) -> NodeType:
    return NodeType.FLOAT

  def exact_value(self) -> Decimal:
    return self._value

  def value(self) -> Decimal:
    return self._value

  def _render(self) -> str:
    return format_decimal(self._value)

  def to_latex(self) -> str:
    return format_decimal(self._value)

  def clone(self) -> 'FloatNode':
    return FloatNode(self._value)

  def to_sympy(self):
    return sp.Float(str(self._value), DECIMAL_CONTEXT.prec)

  def _key(self) -> tuple:
    return (self._value,)


class RationalNode(NumericNode):
  """num/den as given; reduction is the builder's job"""

  __slots__ = ('_numerator', '_denominator')

  def __init__(self, numerator: int, denominator: int):
    super().__init__()
    if denominator == 0:
      raise ZeroDivisionError(f"rational with zero denominator: {numerator}/0")
    self._numerator = int(numerator)
    self._denominator = int(denominator)

  @property
  def numerator(self) -> int:
    return self._numerator

  @property
  def denominator(self) -> int:
    return self._denominator

  def kind(self) -> NodeType:
    return NodeType.RATIONAL

  def exact_value(self) -> Fraction:
    return Fraction(self._numerator, self._denominator)

  def value(self) -> Decimal:
    return DECIMAL_CONTEXT.divide(Decimal(self._numerator), Decimal(self._denominator))

  def _evaluate_array(self, bindings):
    return np.float64(self._numerator) / np.float64(self._denominator)

  def _render(self) -> str:
    return f"{self._numerator}/{self._denominator}"

  def to_latex(self) -> str:
    if self._denominator == 1:
      return str(self._numerator)
    return f"\\frac{{{self._numerator}}}{{{self._denominator}}}"

  def clone(self) -> 'RationalNode':
    return RationalNode(self._numerator, self._denominator)

  def to_sympy(self):
    return sp.Rational(self._numerator, self._denominator)

  def _key(self) -> tuple:
    return (self._numerator, self._denominator)


class VariableNode(Node):
  __slots__ = ('_name',)

  def __init__(self, name: str):
    super().__init__()
    if not name:
      raise ValueError("variable name must be non-empty")
    self._name = name

  @property
  def name(self) -> str:
    return self._name

  def kind(self) -> NodeType:
    return NodeType.VARIABLE

  def evaluate(self, bindings: Bindings = None) -> Decimal:
    if not bindings or self._name not in bindings:
      raise UndefinedVariableError(self._name)
    return to_decimal(bindings[self._name])

  def _evaluate_array(self, bindings):
    if self._name not in bindings:
      raise UndefinedVariableError(self._name)
    return np.asarray(bindings[self._name], dtype=np.float64)

  def _collect_variables(self, names):
    names.setdefault(self._name)

  def contains_variable(self, name: str) -> bool:
    return self._name == name

  def _render(self) -> str:
    return self._name

  def to_latex(self) -> str:
    return self._name

  def clone(self) -> 'VariableNode':
    return VariableNode(self._name)

  def to_sympy(self):
    return sp.Symbol(self._name)

  def _key(self) -> tuple:
    return (self._name,)


class ConstantNode(Node):
  """Named constant with a fixed high-precision value; equality is by name"""

  __slots__ = ('_name', '_value')

  def __init__(self, name: str, value):
    super().__init__()
    self._name = name
    self._value = to_decimal(value)

  @property
  def name(self) -> str:
    return self._name

  def kind(self) -> NodeType:
    return NodeType.CONSTANT

  def value(self) -> Decimal:
    return self._value

  def evaluate(self, bindings: Bindings = None) -> Decimal:
    return self._value

  def _evaluate_array(self, bindings):
    return np.float64(self._value)

  def _render(self) -> str:
    return self._name

  def to_latex(self) -> str:
    if self._name == 'pi':
      return '\\pi'
    return self._name

  def clone(self) -> 'ConstantNode':
    return ConstantNode(self._name, self._value)

  def to_sympy(self):
    if self._name == 'pi':
      return sp.pi
    if self._name == 'e':
      return sp.E
    return sp.Float(str(self._value), DECIMAL_CONTEXT.prec)

  def _key(self) -> tuple:
    return (self._name,)


def _parenthesize(text: str) -> str:
  return f"({text})"


class AddNode(Node):
  __slots__ = ('_terms',)

  def __init__(self, terms: Iterable[Node]):
    super().__init__()
    self._terms: Tuple[Node, ...] = tuple(terms)

  @property
  def terms(self) -> Tuple[Node, ...]:
    return self._terms

  def children(self) -> Tuple[Node, ...]:
    return self._terms

  def kind(self) -> NodeType:
    return NodeType.ADD

  def evaluate(self, bindings: Bindings = None) -> Decimal:
    total = ZERO
    for term in self._terms:
      try:
        total = DECIMAL_CONTEXT.add(total, term.evaluate(bindings))
      except decimal.DecimalException as exc:
        raise DomainError('add', total, type(exc).__name__) from exc
    return total

  def _evaluate_array(self, bindings):
    total = np.float64(0.0)
    for term in self._terms:
      total = total + term._evaluate_array(bindings)
    return total

  def _join(self, parts: List[str]) -> str:
    if not parts:
      return "0"
    pieces = [parts[0]]
    for text in parts[1:]:
      pieces.append(text if text.startswith('-') else '+' + text)
    return ''.join(pieces)

  def _render(self) -> str:
    return self._join([
      _parenthesize(t.to_string()) if t.kind() == NodeType.EQ else t.to_string()
      for t in self._terms
    ])

  def to_latex(self) -> str:
    return self._join([
      _parenthesize(t.to_latex()) if t.kind() == NodeType.EQ else t.to_latex()
      for t in self._terms
    ])

  def clone(self) -> 'AddNode':
    return AddNode(t.clone() for t in self._terms)

  def to_sympy(self):
    return sp.Add(*[t.to_sympy() for t in self._terms])

  def _key(self) -> tuple:
    return self._terms


class MulNode(Node):
  __slots__ = ('_factors',)

  def __init__(self, factors: Iterable[Node]):
    super().__init__()
    self._factors: Tuple[Node, ...] = tuple(factors)

  @property
  def factors(self) -> Tuple[Node, ...]:
    return self._factors

  def children(self) -> Tuple[Node, ...]:
    return self._factors

  def kind(self) -> NodeType:
    return NodeType.MUL

  def evaluate(self, bindings: Bindings = None) -> Decimal:
    product = ONE
    for factor in self._factors:
      try:
        product = DECIMAL_CONTEXT.multiply(product, factor.evaluate(bindings))
      except decimal.DecimalException as exc:
        raise DomainError('mul', product, type(exc).__name__) from exc
    return product

  def _evaluate_array(self, bindings):
    product = np.float64(1.0)
    for factor in self._factors:
      product = product * factor._evaluate_array(bindings)
    return product

  @staticmethod
  def _wrap(factor: Node, text: str) -> str:
    if factor.kind() in (NodeType.ADD, NodeType.EQ):
      return _parenthesize(text)
    return text

  def _render(self) -> str:
    if not self._factors:
      return "1"
    return '*'.join(self._wrap(f, f.to_string()) for f in self._factors)

  def to_latex(self) -> str:
    if not self._factors:
      return "1"
    return ' \\cdot '.join(self._wrap(f, f.to_latex()) for f in self._factors)

  def clone(self) -> 'MulNode':
    return MulNode(f.clone() for f in self._factors)

  def to_sympy(self):
    return sp.Mul(*[f.to_sympy() for f in self._factors])

  def _key(self) -> tuple:
    return self._factors


class PowNode(Node):
  __slots__ = ('_base', '_exponent')

  BASE_PAREN_TYPES = (NodeType.ADD, NodeType.MUL, NodeType.POW, NodeType.RATIONAL, NodeType.EQ)
  EXPONENT_PAREN_TYPES = (NodeType.ADD, NodeType.MUL, NodeType.RATIONAL, NodeType.EQ)

  def __init__(self, base: Node, exponent: Node):
    super().__init__()
    self._base = base
    self._exponent = exponent

  @property
  def base(self) -> Node:
    return self._base

  @property
  def exponent(self) -> Node:
    return self._exponent

  def children(self) -> Tuple[Node, ...]:
    return (self._base, self._exponent)

  def kind(self) -> NodeType:
    return NodeType.POW

  def evaluate(self, bindings: Bindings = None) -> Decimal:
    base = self._base.evaluate(bindings)
    exponent = self._exponent.evaluate(bindings)
    try:
      return self._power(base, exponent)
    except decimal.DecimalException as exc:
      raise DomainError('pow', base, type(exc).__name__) from exc

  def _power(self, base: Decimal, exponent: Decimal) -> Decimal:
    if exponent == 0:
      return ONE
    if is_integral(exponent):
      if base == 0 and exponent < 0:
        raise DomainError('pow', base, "zero raised to a negative power")
      return DECIMAL_CONTEXT.power(base, int(exponent))
    if base > 0:
      return DECIMAL_CONTEXT.power(base, exponent)
    if base == 0:
      if exponent > 0:
        return ZERO
      raise DomainError('pow', base, "zero raised to a negative power")
    # Negative base: only an exact rational exponent with odd denominator has a real value
    if isinstance(self._exponent, RationalNode) and self._exponent.denominator % 2 == 1:
      magnitude = DECIMAL_CONTEXT.power(-base, exponent)
      if self._exponent.numerator % 2 == 1:
        return -magnitude
      return magnitude
    raise DomainError('pow', base, f"negative base with non-integer exponent {self._exponent}")

  def _evaluate_array(self, bindings):
    base = self._base._evaluate_array(bindings)
    exponent = self._exponent._evaluate_array(bindings)
    if isinstance(self._exponent, RationalNode) and self._exponent.denominator % 2 == 1:
      magnitude = np.power(np.abs(base), exponent)
      if self._exponent.numerator % 2 == 1:
        return np.where(base < 0, -magnitude, magnitude)
      return magnitude
    return np.power(base, exponent)

  def _wrap_base(self, text: str) -> str:
    base = self._base
    if base.kind() in self.BASE_PAREN_TYPES or (base.is_numeric() and base.is_negative()):
      return _parenthesize(text)
    return text

  def _wrap_exponent(self, text: str) -> str:
    if self._exponent.kind() in self.EXPONENT_PAREN_TYPES:
      return _parenthesize(text)
    return text

  def _render(self) -> str:
    return f"{self._wrap_base(self._base.to_string())}^{self._wrap_exponent(self._exponent.to_string())}"

  def to_latex(self) -> str:
    return f"{self._wrap_base(self._base.to_latex())}^{{{self._exponent.to_latex()}}}"

  def clone(self) -> 'PowNode':
    return PowNode(self._base.clone(), self._exponent.clone())

  def to_sympy(self):
    return sp.Pow(self._base.to_sympy(), self._exponent.to_sympy())

  def _key(self) -> tuple:
    return (self._base, self._exponent)


class FuncNode(Node):
  """Named function application; arity is only checked when evaluated"""

  __slots__ = ('_name', '_args')

  LATEX_COMMANDS = {'sqrt': '\\sqrt', 'log': '\\log', 'ln': '\\ln'}

  def __init__(self, name: str, args: Iterable[Node]):
    super().__init__()
    self._name = name
    self._args: Tuple[Node, ...] = tuple(args)

  @property
  def name(self) -> str:
    return self._name

  @property
  def args(self) -> Tuple[Node, ...]:
    return self._args

  def children(self) -> Tuple[Node, ...]:
    return self._args

  def kind(self) -> NodeType:
    return NodeType.FUNC

  def evaluate(self, bindings: Bindings = None) -> Decimal:
    return evaluate_function(self._name, [arg.evaluate(bindings) for arg in self._args])

  def _evaluate_array(self, bindings):
    return evaluate_function_array(self._name, [arg._evaluate_array(bindings) for arg in self._args])

  def _render(self) -> str:
    return f"{self._name}({', '.join(arg.to_string() for arg in self._args)})"

  def to_latex(self) -> str:
    command = self.LATEX_COMMANDS.get(self._name)
    if command is not None and len(self._args) == 1:
      return f"{command}{{{self._args[0].to_latex()}}}"
    return f"\\mathrm{{{self._name}}}({', '.join(arg.to_latex() for arg in self._args)})"

  def clone(self) -> 'FuncNode':
    return FuncNode(self._name, (arg.clone() for arg in self._args))

  def to_sympy(self):
    args = [arg.to_sympy() for arg in self._args]
    function = SYMPY_FUNCTIONS.get(self._name)
    if function is None:
      return sp.Function(self._name)(*args)
    return function(*args)

  def _key(self) -> tuple:
    return (self._name, self._args)


class EqNode(Node):
  __slots__ = ('_left', '_right', '_relation')

  def __init__(self, left: Node, right: Node, relation=Relation.EQUAL):
    super().__init__()
    self._left = left
    self._right = right
    self._relation = Relation.from_symbol(relation)

  @property
  def left(self) -> Node:
    return self._left

  @property
  def right(self) -> Node:
    return self._right

  @property
  def relation(self) -> Relation:
    return self._relation

  def children(self) -> Tuple[Node, ...]:
    return (self._left, self._right)

  def kind(self) -> NodeType:
    return NodeType.EQ

  def evaluate(self, bindings: Bindings = None) -> Decimal:
    left = self._left.evaluate(bindings)
    right = self._right.evaluate(bindings)
    return ONE if self._relation.holds(left, right) else ZERO

  def _evaluate_array(self, bindings):
    left = self._left._evaluate_array(bindings)
    right = self._right._evaluate_array(bindings)
    return np.where(self._relation.holds(left, right), 1.0, 0.0)

  def as_expression(self) -> AddNode:
    """left - right as a sum, the form solvers and comparators work with"""
    return AddNode((self._left, MulNode((IntegerNode(-1), self._right))))

  def divide_through(self, expr: Optional[Node] = None) -> Node:
    """Drop the factors of ``expr`` that do not move its zeros.

    ``expr`` defaults to ``as_expression()``. A sum is factored first. For an
    equality only the sum factors are kept when there are any; otherwise the
    numeric factors are removed. The sign of a removed factor is not carried
    into the relation.
    """
    from ..utils.simplifier import factor
    if expr is None:
      expr = self.as_expression()
    factored = factor(expr) if expr.kind() == NodeType.ADD else expr
    if factored.kind() != NodeType.MUL:
      return expr

    sums = [f for f in factored.factors if f.kind() == NodeType.ADD]
    if self._relation is Relation.EQUAL and sums:
      return sums[0] if len(sums) == 1 else MulNode(sums)

    remaining = sums + [
      f for f in factored.factors if f.kind() != NodeType.ADD and not f.is_numeric()
    ]
    if not remaining:
      return IntegerNode(1)
    return remaining[0] if len(remaining) == 1 else MulNode(remaining)

  def _render(self) -> str:
    return f"{self._left.to_string()}{self._relation.value}{self._right.to_string()}"

  def to_latex(self) -> str:
    return f"{self._left.to_latex()} {self._relation.latex} {self._right.to_latex()}"

  def clone(self) -> 'EqNode':
    return EqNode(self._left.clone(), self._right.clone(), self._relation)

  def to_sympy(self):
    return SYMPY_RELATIONS[self._relation](self._left.to_sympy(), self._right.to_sympy())

  def _key(self) -> tuple:
    return (self._relation, self._left, self._right)
