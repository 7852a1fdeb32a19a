"""Exception hierarchy for evaluation and differentiation failures.

The simplifier never raises; everything here comes from ``evaluate`` and the
differentiator. Callers that sample expressions numerically should treat any
``AlgebraError`` at a point as "skip this point".
"""

from typing import Any


class AlgebraError(Exception):
  """Base class for all recoverable algebra errors"""


class UndefinedVariableError(AlgebraError, KeyError):
  """A variable referenced during evaluation has no binding"""

  def __init__(self, name: str):
    self.name = name
    super().__init__(name)

  def __str__(self) -> str:
    return f"undefined variable: {self.name}"


class DomainError(AlgebraError, ValueError):
  """A function was evaluated outside its real domain"""

  def __init__(self, function: str, argument: Any, detail: str = ""):
    self.function = function
    self.argument = argument
    self.detail = detail
    message = f"{function}: domain error at {argument}"
    if detail:
      message += f" ({detail})"
    super().__init__(message)


class ArityError(AlgebraError, TypeError):
  """A function node was evaluated with the wrong number of arguments"""

  def __init__(self, function: str, expected: str, got: int):
    self.function = function
    self.expected = expected
    self.got = got
    super().__init__(f"{function} expects {expected} argument(s), got {got}")


class UnknownFunctionError(AlgebraError):
  """Evaluation reached a function name outside the elementary table"""

  def __init__(self, name: str):
    self.name = name
    super().__init__(f"unsupported function: {name}")


class UnsupportedDifferentiationError(AlgebraError):
  """The differentiator has no rule for the node it reached"""

  def __init__(self, reason: str):
    self.reason = reason
    super().__init__(reason)


class InvalidDerivativeOrderError(AlgebraError, ValueError):
  """nth_derivative was asked for a negative order"""

  def __init__(self, order: int):
    self.order = order
    super().__init__(f"derivative order must be non-negative, got {order}")
