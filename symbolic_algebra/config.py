"""Configuration constants and option records for the algebra core."""

from dataclasses import dataclass

# Significant digits used for every decimal evaluation
DECIMAL_PRECISION = 50

# Simplify driver
DEFAULT_MAX_ITERATIONS = 10

# Expander
DEFAULT_MAX_DEGREE = 10
EXPAND_FULLY_ROUNDS = 5

# Largest |exponent| collect will fold for an exact numeric base
MAX_FOLDED_EXPONENT = 64


@dataclass(frozen=True)
class SimplifyOptions:
  """Options for collect, factor and the simplify driver"""
  single_pass: bool = False
  keep_negative_factoring: bool = False
  max_iterations: int = DEFAULT_MAX_ITERATIONS

  def __post_init__(self):
    """Validate fields after initialization"""
    if self.max_iterations < 0:
      raise ValueError(f"max_iterations must be non-negative, got {self.max_iterations}")


@dataclass(frozen=True)
class ExpandOptions:
  """Options for expand"""
  max_degree: int = DEFAULT_MAX_DEGREE
  expand_logs: bool = False
  expand_trig: bool = False

  def __post_init__(self):
    """Validate fields after initialization"""
    if self.max_degree < 0:
      raise ValueError(f"max_degree must be non-negative, got {self.max_degree}")
