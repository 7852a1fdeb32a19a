"""
Tree Utility Functions

Traversal, rebuilding and substitution helpers shared by the simplifier, the
expander and the differentiator.
"""

from collections import Counter, deque
from typing import Callable, Dict, Iterable, List, Sequence

from ..core.node import (
    Node, AddNode, MulNode, PowNode, FuncNode, EqNode, VariableNode, ConstantNode
)
from ..core.operators import NodeType


def get_all_nodes(node: Node, traversal_order: str = 'breadth_first') -> List[Node]:
    """
    Get all nodes in the tree using specified traversal order.

    Args:
        node: Root node of the tree
        traversal_order: 'breadth_first' (default) or 'depth_first'

    Returns:
        List of all nodes in the tree
    """
    if traversal_order == 'breadth_first':
        return _breadth_first_traversal(node)
    elif traversal_order == 'depth_first':
        return _depth_first_traversal(node)
    else:
        raise ValueError(f"Invalid traversal_order: {traversal_order}")


def _breadth_first_traversal(node: Node) -> List[Node]:
    nodes_to_visit = deque([node])
    all_nodes = []

    while nodes_to_visit:
        current_node = nodes_to_visit.popleft()
        all_nodes.append(current_node)
        nodes_to_visit.extend(current_node.children())

    return all_nodes


def _depth_first_traversal(node: Node) -> List[Node]:
    nodes = [node]
    for child in node.children():
        nodes.extend(_depth_first_traversal(child))
    return nodes


def calculate_tree_depth(node: Node) -> int:
    """
    Calculate the maximum depth of the tree.

    Args:
        node: Root node of the tree

    Returns:
        Maximum depth (leaf nodes have depth 1)
    """
    children = node.children()
    if not children:
        return 1
    return 1 + max(calculate_tree_depth(child) for child in children)


def find_nodes_by_type(node: Node, kind: NodeType) -> List[Node]:
    """All nodes of one variant, depth first"""
    return [n for n in _depth_first_traversal(node) if n.kind() == kind]


def find_functions_by_name(node: Node, name: str) -> List[FuncNode]:
    return [n for n in find_nodes_by_type(node, NodeType.FUNC) if n.name == name]


def get_variables(node: Node) -> List[VariableNode]:
    return find_nodes_by_type(node, NodeType.VARIABLE)


def get_constants(node: Node) -> List[ConstantNode]:
    return find_nodes_by_type(node, NodeType.CONSTANT)


def get_variable_usage_counts(node: Node) -> Dict[str, int]:
    """Count how many times each variable name occurs"""
    return dict(Counter(v.name for v in get_variables(node)))


def with_children(node: Node, children: Sequence[Node]) -> Node:
    """
    Build a node of the same variant as ``node`` over new children.

    Leaves are returned unchanged, as is any node whose children are
    identical (by object identity) to the ones given.
    """
    old_children = node.children()
    if not old_children:
        return node
    if len(old_children) == len(children) and all(a is b for a, b in zip(old_children, children)):
        return node

    kind = node.kind()
    if kind == NodeType.ADD:
        return AddNode(children)
    elif kind == NodeType.MUL:
        return MulNode(children)
    elif kind == NodeType.POW:
        return PowNode(children[0], children[1])
    elif kind == NodeType.FUNC:
        return FuncNode(node.name, children)
    elif kind == NodeType.EQ:
        return EqNode(children[0], children[1], node.relation)
    raise ValueError(f"cannot rebuild node of kind {kind.name}")


def map_children(node: Node, transform: Callable[[Node], Node]) -> Node:
    """Apply ``transform`` to each direct child and rebuild"""
    return with_children(node, [transform(child) for child in node.children()])


def flatten_children(nodes: Iterable[Node], kind: NodeType) -> List[Node]:
    """
    Splice nested sums (or products) into one flat list.

    Args:
        nodes: Terms of a sum or factors of a product
        kind: NodeType.ADD or NodeType.MUL

    Returns:
        The children with every nested node of ``kind`` replaced by its own
        (recursively flattened) children
    """
    flat = []
    for node in nodes:
        if node.kind() == kind:
            flat.extend(flatten_children(node.children(), kind))
        else:
            flat.append(node)
    return flat


def substitute(node: Node, name: str, replacement: Node) -> Node:
    """Replace every occurrence of the variable ``name`` with ``replacement``"""
    if node.kind() == NodeType.VARIABLE:
        return replacement if node.name == name else node
    return map_children(node, lambda child: substitute(child, name, replacement))
