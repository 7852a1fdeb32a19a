"""Utilities for expression trees."""

from .simplifier import ExpressionSimplifier, collect, factor, normalize, simplify, semantically_equal
from .expander import ExpressionExpander, expand, expand_fully
from .sympy_utils import SymPyBridge, from_sympy, parse
from .tree_utils import (
    get_all_nodes, calculate_tree_depth, find_nodes_by_type, find_functions_by_name,
    get_variables, get_constants, get_variable_usage_counts,
    with_children, map_children, flatten_children, substitute
)

__all__ = [
    'ExpressionSimplifier', 'collect', 'factor', 'normalize', 'simplify', 'semantically_equal',
    'ExpressionExpander', 'expand', 'expand_fully',
    'SymPyBridge', 'from_sympy', 'parse',
    'get_all_nodes', 'calculate_tree_depth', 'find_nodes_by_type', 'find_functions_by_name',
    'get_variables', 'get_constants', 'get_variable_usage_counts',
    'with_children', 'map_children', 'flatten_children', 'substitute'
]
