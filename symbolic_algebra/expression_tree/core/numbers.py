"""Exact and high-precision scalar arithmetic shared by nodes and the simplifier.

Scalars are plain Python values: ``int`` and ``Fraction`` stay exact, and a
``Decimal`` anywhere in an operation makes the result a ``Decimal`` computed in
``DECIMAL_CONTEXT``. The thread-global decimal context is never touched.
"""

import decimal
from decimal import Decimal
from fractions import Fraction
from numbers import Integral, Real
from typing import Union

from ...config import DECIMAL_PRECISION

Number = Union[int, Fraction, Decimal]

DECIMAL_CONTEXT = decimal.Context(prec=DECIMAL_PRECISION)

ZERO = Decimal(0)
ONE = Decimal(1)


def to_decimal(value) -> Decimal:
  """Coerce an int, float, str, Fraction or Decimal to a context-rounded Decimal"""
  if isinstance(value, Decimal):
    return DECIMAL_CONTEXT.plus(value)
  if isinstance(value, bool):
    return Decimal(int(value))
  if isinstance(value, int):
    return Decimal(value)
  if isinstance(value, Fraction):
    return DECIMAL_CONTEXT.divide(Decimal(value.numerator), Decimal(value.denominator))
  if isinstance(value, float):
    # repr gives the shortest round-tripping form, not the binary expansion
    return Decimal(repr(value))
  if isinstance(value, str):
    return DECIMAL_CONTEXT.create_decimal(value.strip())
  # numpy scalars register with the numeric ABCs
  if isinstance(value, Integral):
    return Decimal(int(value))
  if isinstance(value, Real):
    return to_decimal(float(value))
  raise TypeError(f"cannot convert {type(value).__name__} to Decimal")


def simplify_exact(value: Number) -> Number:
  """Collapse a Fraction with denominator 1 to int"""
  if isinstance(value, Fraction) and value.denominator == 1:
    return value.numerator
  return value


def add_numbers(a: Number, b: Number) -> Number:
  if isinstance(a, Decimal) or isinstance(b, Decimal):
    return DECIMAL_CONTEXT.add(to_decimal(a), to_decimal(b))
  return simplify_exact(Fraction(a) + Fraction(b))


def multiply_numbers(a: Number, b: Number) -> Number:
  if isinstance(a, Decimal) or isinstance(b, Decimal):
    return DECIMAL_CONTEXT.multiply(to_decimal(a), to_decimal(b))
  return simplify_exact(Fraction(a) * Fraction(b))


def is_integral(value: Number) -> bool:
  if isinstance(value, int):
    return True
  if isinstance(value, Fraction):
    return value.denominator == 1
  return value.is_finite() and value == value.to_integral_value()


def format_decimal(value: Decimal) -> str:
  """Shortest plain rendering of a Decimal: 2.5, 6, 1e-9, 1.5e+30"""
  if not value.is_finite():
    return str(value)
  if value == 0:
    return "0"
  normalized = DECIMAL_CONTEXT.normalize(value)
  exponent = normalized.adjusted()
  if -7 < exponent < 21:
    return format(normalized, "f")
  return format(normalized, "e")
