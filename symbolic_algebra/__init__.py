"""Symbolic Algebra Package

Exact, high-precision expression trees with simplification (collect, factor,
expand, normalize and a fixed-point simplify driver) and symbolic
differentiation.
"""

from .expression_tree import (
  Expression, Node, IntegerNode, FloatNode, RationalNode, VariableNode, ConstantNode,
  AddNode, MulNode, PowNode, FuncNode, EqNode, NodeType, Relation,
  integer, real, rational, rational_preserved, var, constant,
  add, mul, power, func, eq,
  collect, factor, expand, expand_fully, normalize, simplify, semantically_equal,
  from_sympy, parse
)
from .differentiation import Differentiator, derivative, partial_derivative, nth_derivative, gradient
from .config import SimplifyOptions, ExpandOptions
from .errors import (
  AlgebraError, UndefinedVariableError, DomainError, ArityError,
  UnknownFunctionError, UnsupportedDifferentiationError, InvalidDerivativeOrderError
)
from .logging_system import LogLevel, get_logger, set_log_level, configure_logging

__version__ = "0.1.0"
__all__ = [
  "Expression", "Node", "IntegerNode", "FloatNode", "RationalNode", "VariableNode", "ConstantNode",
  "AddNode", "MulNode", "PowNode", "FuncNode", "EqNode", "NodeType", "Relation",
  "integer", "real", "rational", "rational_preserved", "var", "constant",
  "add", "mul", "power", "func", "eq",
  "collect", "factor", "expand", "expand_fully", "normalize", "simplify", "semantically_equal",
  "from_sympy", "parse",
  "Differentiator", "derivative", "partial_derivative", "nth_derivative", "gradient",
  "SimplifyOptions", "ExpandOptions",
  "AlgebraError", "UndefinedVariableError", "DomainError", "ArityError",
  "UnknownFunctionError", "UnsupportedDifferentiationError", "InvalidDerivativeOrderError",
  "LogLevel", "get_logger", "set_log_level", "configure_logging"
]
