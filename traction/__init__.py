"""
Traction - parser and printers for Traction Algebra notation.

    >>> from traction import parse_expression, print_canonical, print_markup
    >>> result = parse_expression("(1+2)*w")
    >>> print_canonical(result)
    '(1+2)*w'
"""

__version__ = "0.1.0"

from .ast_nodes import (
    Node, IntegerNode, FloatNode, NameNode, GroupNode,
    OperationNode, UnaryOpNode, UnknownNode, OMEGA, OMEGA_VALUE,
)
from .visitor import (
    AstVisitor, VisitorActions, NodeState,
    TractionError, RecursionLimitExceeded, DEFAULT_MAX_DEPTH,
)
from .grouper import split_groups, UnbalancedGroupError
from .parser import MissingOperandError
from .splitter import split_operators
from .annotator import annotate_values, UnrecognizedValueError
from .interpret import ParseResult, parse_expression, ast_to_json
from .printer import print_canonical, print_markup

__all__ = [
    "parse_expression", "ParseResult", "print_canonical", "print_markup", "ast_to_json",
    "split_groups", "split_operators", "annotate_values",
    "AstVisitor", "VisitorActions", "NodeState",
    "Node", "IntegerNode", "FloatNode", "NameNode", "GroupNode",
    "OperationNode", "UnaryOpNode", "UnknownNode", "OMEGA", "OMEGA_VALUE",
    "TractionError", "UnbalancedGroupError", "MissingOperandError",
    "UnrecognizedValueError", "RecursionLimitExceeded", "DEFAULT_MAX_DEPTH",
]
