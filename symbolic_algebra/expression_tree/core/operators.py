import decimal
import numpy as np
import sympy as sp
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Callable, Dict, Sequence, Tuple

from .numbers import DECIMAL_CONTEXT, ONE, ZERO
from ...errors import ArityError, DomainError, UnknownFunctionError


class NodeType(IntEnum):
  INTEGER = 0
  FLOAT = 1
  RATIONAL = 2
  VARIABLE = 3
  CONSTANT = 4
  ADD = 5
  MUL = 6
  POW = 7
  FUNC = 8
  EQ = 9


NUMERIC_TYPES = (NodeType.INTEGER, NodeType.FLOAT, NodeType.RATIONAL)


class Relation(Enum):
  EQUAL = '='
  LESS = '<'
  GREATER = '>'
  LESS_EQUAL = '<='
  GREATER_EQUAL = '>='
  NOT_EQUAL = '<>'

  @classmethod
  def from_symbol(cls, symbol) -> 'Relation':
    if isinstance(symbol, Relation):
      return symbol
    try:
      return RELATION_ALIASES[symbol]
    except KeyError:
      raise ValueError(f"unknown relation: {symbol!r}") from None

  @property
  def latex(self) -> str:
    return RELATION_LATEX.get(self, self.value)

  def holds(self, left: Decimal, right: Decimal) -> bool:
    if self is Relation.EQUAL:
      return left == right
    if self is Relation.LESS:
      return left < right
    if self is Relation.GREATER:
      return left > right
    if self is Relation.LESS_EQUAL:
      return left <= right
    if self is Relation.GREATER_EQUAL:
      return left >= right
    return left != right


RELATION_ALIASES: Dict[str, Relation] = {
  '=': Relation.EQUAL, '==': Relation.EQUAL,
  '<': Relation.LESS, '>': Relation.GREATER,
  '<=': Relation.LESS_EQUAL, '≤': Relation.LESS_EQUAL,
  '>=': Relation.GREATER_EQUAL, '≥': Relation.GREATER_EQUAL,
  '<>': Relation.NOT_EQUAL, '!=': Relation.NOT_EQUAL, '≠': Relation.NOT_EQUAL,
}

RELATION_LATEX: Dict[Relation, str] = {
  Relation.LESS_EQUAL: '\\le',
  Relation.GREATER_EQUAL: '\\ge',
  Relation.NOT_EQUAL: '\\ne',
}

# Accepted argument counts per function; arity is checked at evaluation time
FUNCTION_ARITY: Dict[str, Tuple[int, ...]] = {
  'sqrt': (1,), 'abs': (1,), 'ln': (1,), 'log': (1, 2), 'exp': (1,),
  'sin': (1,), 'cos': (1,), 'tan': (1,),
  'sec': (1,), 'csc': (1,), 'cot': (1,),
  'arcsin': (1,), 'arccos': (1,), 'arctan': (1,),
  'sinh': (1,), 'cosh': (1,), 'tanh': (1,),
}

FUNCTION_ALIASES: Dict[str, str] = {'asin': 'arcsin', 'acos': 'arccos', 'atan': 'arctan'}


def canonical_function_name(name: str) -> str:
  return FUNCTION_ALIASES.get(name, name)


def check_arity(name: str, n_args: int):
  accepted = FUNCTION_ARITY[canonical_function_name(name)]
  if n_args not in accepted:
    expected = ' or '.join(str(n) for n in accepted)
    raise ArityError(name, expected, n_args)


def _from_float(name: str, argument: Decimal, value) -> Decimal:
  if not np.isfinite(value):
    raise DomainError(name, argument, "result is not finite")
  return Decimal(repr(float(value)))


def _float_kernel(name: str, kernel: Callable) -> Callable[[Decimal], Decimal]:
  def evaluate(x: Decimal) -> Decimal:
    with np.errstate(all='ignore'):
      value = kernel(np.float64(x))
    return _from_float(name, x, value)
  return evaluate


def _sqrt(x: Decimal) -> Decimal:
  if x < 0:
    raise DomainError('sqrt', x, "argument must be non-negative")
  return DECIMAL_CONTEXT.sqrt(x)


def _ln(x: Decimal) -> Decimal:
  if x <= 0:
    raise DomainError('ln', x, "argument must be positive")
  if x == ONE:
    return ZERO
  return DECIMAL_CONTEXT.ln(x)


def _log(x: Decimal, base: Decimal = None) -> Decimal:
  if x <= 0:
    raise DomainError('log', x, "argument must be positive")
  if base is None:
    return DECIMAL_CONTEXT.log10(x)
  if base <= 0 or base == ONE:
    raise DomainError('log', base, "base must be positive and not equal to 1")
  return DECIMAL_CONTEXT.divide(_ln(x), _ln(base))


def _bounded_inverse(name: str, kernel: Callable) -> Callable[[Decimal], Decimal]:
  evaluate_float = _float_kernel(name, kernel)

  def evaluate(x: Decimal) -> Decimal:
    if x < -1 or x > 1:
      raise DomainError(name, x, "argument must be in [-1, 1]")
    return evaluate_float(x)
  return evaluate


DECIMAL_FUNCTIONS: Dict[str, Callable[..., Decimal]] = {
  'sqrt': _sqrt,
  'abs': lambda x: DECIMAL_CONTEXT.abs(x),
  'ln': _ln,
  'log': _log,
  'exp': lambda x: DECIMAL_CONTEXT.exp(x),
  'sin': _float_kernel('sin', np.sin),
  'cos': _float_kernel('cos', np.cos),
  'tan': _float_kernel('tan', np.tan),
  'sec': _float_kernel('sec', lambda x: 1.0 / np.cos(x)),
  'csc': _float_kernel('csc', lambda x: 1.0 / np.sin(x)),
  'cot': _float_kernel('cot', lambda x: np.cos(x) / np.sin(x)),
  'arcsin': _bounded_inverse('arcsin', np.arcsin),
  'arccos': _bounded_inverse('arccos', np.arccos),
  'arctan': _float_kernel('arctan', np.arctan),
  'sinh': _float_kernel('sinh', np.sinh),
  'cosh': _float_kernel('cosh', np.cosh),
  'tanh': _float_kernel('tanh', np.tanh),
}


def evaluate_function(name: str, args: Sequence[Decimal]) -> Decimal:
  """Evaluate an elementary function on already-evaluated decimal arguments"""
  key = canonical_function_name(name)
  if key not in DECIMAL_FUNCTIONS:
    raise UnknownFunctionError(name)
  check_arity(name, len(args))
  try:
    return DECIMAL_FUNCTIONS[key](*args)
  except (decimal.Overflow, decimal.InvalidOperation, decimal.DivisionByZero) as exc:
    raise DomainError(name, args[0], type(exc).__name__) from exc


def _array_log(x: np.ndarray, base: np.ndarray = None) -> np.ndarray:
  if base is None:
    return np.log10(x)
  return np.log(x) / np.log(base)


# Float kernels for vectorised evaluation; invalid points come back as nan/inf
ARRAY_FUNCTIONS: Dict[str, Callable[..., np.ndarray]] = {
  'sqrt': np.sqrt,
  'abs': np.abs,
  'ln': np.log,
  'log': _array_log,
  'exp': np.exp,
  'sin': np.sin,
  'cos': np.cos,
  'tan': np.tan,
  'sec': lambda x: 1.0 / np.cos(x),
  'csc': lambda x: 1.0 / np.sin(x),
  'cot': lambda x: np.cos(x) / np.sin(x),
  'arcsin': np.arcsin,
  'arccos': np.arccos,
  'arctan': np.arctan,
  'sinh': np.sinh,
  'cosh': np.cosh,
  'tanh': np.tanh,
}


def evaluate_function_array(name: str, args: Sequence[np.ndarray]) -> np.ndarray:
  key = canonical_function_name(name)
  if key not in ARRAY_FUNCTIONS:
    raise UnknownFunctionError(name)
  check_arity(name, len(args))
  return ARRAY_FUNCTIONS[key](*args)


SYMPY_FUNCTIONS: Dict[str, Callable[..., sp.Expr]] = {
  'sqrt': sp.sqrt,
  'abs': sp.Abs,
  'ln': sp.log,
  'log': lambda x, base=10: sp.log(x, base),
  'exp': sp.exp,
  'sin': sp.sin,
  'cos': sp.cos,
  'tan': sp.tan,
  'sec': sp.sec,
  'csc': sp.csc,
  'cot': sp.cot,
  'arcsin': sp.asin, 'asin': sp.asin,
  'arccos': sp.acos, 'acos': sp.acos,
  'arctan': sp.atan, 'atan': sp.atan,
  'sinh': sp.sinh,
  'cosh': sp.cosh,
  'tanh': sp.tanh,
}
