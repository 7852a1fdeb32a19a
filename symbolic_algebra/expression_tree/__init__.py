"""Expression Tree Module

Immutable expression trees, their constructors and the rewrites over them.
"""

from .expression import Expression
from .core.node import (
    Node,
    NumericNode,
    IntegerNode,
    FloatNode,
    RationalNode,
    VariableNode,
    ConstantNode,
    AddNode,
    MulNode,
    PowNode,
    FuncNode,
    EqNode
)
from .core.operators import NodeType, Relation
from .builders import (
    as_node, integer, real, rational, rational_preserved, var, constant,
    add, mul, power, func, eq, negate, reciprocal
)
from .constants import ConstantTable, get_constant_table
from .utils import (
    ExpressionSimplifier, ExpressionExpander, SymPyBridge,
    collect, factor, expand, expand_fully, normalize, simplify, semantically_equal,
    from_sympy, parse
)

__all__ = [
    "Expression",
    "Node", "NumericNode", "IntegerNode", "FloatNode", "RationalNode", "VariableNode", "ConstantNode",
    "AddNode", "MulNode", "PowNode", "FuncNode", "EqNode",
    "NodeType", "Relation",
    "as_node", "integer", "real", "rational", "rational_preserved", "var", "constant",
    "add", "mul", "power", "func", "eq", "negate", "reciprocal",
    "ConstantTable", "get_constant_table",
    "ExpressionSimplifier", "ExpressionExpander", "SymPyBridge",
    "collect", "factor", "expand", "expand_fully", "normalize", "simplify", "semantically_equal",
    "from_sympy", "parse"
]
