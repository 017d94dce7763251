"""
Traction - Operator Splitter
Replaces the contents of every group (and of the top-level sequence)
with Operation / UnaryOp skeletons. Leaf text stays in UnknownNode
operands for the annotator.
"""

from typing import List

from .ast_nodes import Node, GroupNode
from .lexer import tokenize
from .parser import Parser, MissingOperandError
from .visitor import AstVisitor, VisitorActions, NodeState, DEFAULT_MAX_DEPTH


def _schedule(children: List[Node], nodes: List[Node], actions: VisitorActions) -> None:
    """Queue nodes in place of the whole children sequence."""
    for index, child in enumerate(children):
        state = NodeState(children, index, child)
        if index == 0:
            actions.replace(nodes, state)
        else:
            actions.remove(state)


def split_operators(sequence: List[Node], max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """
    Mutates sequence in place.
    Raises MissingOperandError or RecursionLimitExceeded; nodes built
    before the failure are kept in the tree.
    """
    root = GroupNode(children=sequence)

    # Inner groups are walked, and so scheduled, before the group holding them.
    def visit_groups_after(group: GroupNode, actions: VisitorActions) -> None:
        try:
            nodes = Parser(tokenize(group.children), max_depth=max_depth).parse()
        except MissingOperandError as e:
            if e.partial:
                _schedule(group.children, e.partial, actions)
            actions.set_error(e)
            return
        _schedule(group.children, nodes, actions)

    # One extra level for the root wrapper.
    visitor = AstVisitor(visit_groups_after=visit_groups_after, max_depth=max_depth + 1)
    try:
        visitor.walk([root])
    finally:
        visitor.actions.apply()

    if visitor.actions.error is not None:
        raise visitor.actions.error
