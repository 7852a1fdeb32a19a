"""Core expression tree components."""

from .node import (
    Node, NumericNode, IntegerNode, FloatNode, RationalNode, VariableNode, ConstantNode,
    AddNode, MulNode, PowNode, FuncNode, EqNode
)
from .operators import (
    NodeType, Relation, NUMERIC_TYPES, FUNCTION_ARITY,
    canonical_function_name, evaluate_function, evaluate_function_array
)
from .numbers import Number, DECIMAL_CONTEXT, to_decimal, add_numbers, multiply_numbers, is_integral

__all__ = [
    'Node', 'NumericNode', 'IntegerNode', 'FloatNode', 'RationalNode', 'VariableNode', 'ConstantNode',
    'AddNode', 'MulNode', 'PowNode', 'FuncNode', 'EqNode',
    'NodeType', 'Relation', 'NUMERIC_TYPES', 'FUNCTION_ARITY',
    'canonical_function_name', 'evaluate_function', 'evaluate_function_array',
    'Number', 'DECIMAL_CONTEXT', 'to_decimal', 'add_numbers', 'multiply_numbers', 'is_integral'
]
