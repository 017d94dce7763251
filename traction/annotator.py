"""
Traction - Value Annotator
Classifies leftover leaf text into typed literals and resolves the
logarithm sugar. Unrecognized text stops the walk.
"""

import math
import re
from typing import List, Optional

from .ast_nodes import (
    Node, IntegerNode, FloatNode, NameNode, UnaryOpNode, UnknownNode, LOG_SUGAR,
)
from .visitor import AstVisitor, VisitorActions, TractionError, DEFAULT_MAX_DEPTH

_INTEGER_RE = re.compile(r'^([0-9]+)$')
_FLOAT_RE   = re.compile(r'^([0-9]+\.[0-9]*)$')
_NAME_RE    = re.compile(r'^([A-Za-z]+)$')

LOG_NAME = "log"
LOG_BASE = 0

# CPython's default int/str conversion cap
MAX_INTEGER_DIGITS = 4300


class UnrecognizedValueError(TractionError):
    pass


def classify(raw: str, offset: int = 0) -> Optional[Node]:
    """
    Integer, then float, then name; None when nothing matches.
    Raises UnrecognizedValueError for a literal that has no exact value:
    an integer past MAX_INTEGER_DIGITS or a float that overflows.
    """
    text = raw.strip()

    m = _INTEGER_RE.match(text)
    if m:
        digits = m.group(1)
        if len(digits) > MAX_INTEGER_DIGITS:
            raise UnrecognizedValueError(
                f"Integer literal longer than {MAX_INTEGER_DIGITS} digits", offset
            )
        try:
            value = int(digits)
        except ValueError as e:
            # sys.set_int_max_str_digits() below the default
            raise UnrecognizedValueError(str(e), offset) from e
        return IntegerNode(value=value, offset=offset)

    m = _FLOAT_RE.match(text)
    if m:
        value = float(m.group(1))
        if not math.isfinite(value):
            raise UnrecognizedValueError("Float literal out of range", offset)
        return FloatNode(value=value, offset=offset)

    m = _NAME_RE.match(text)
    if m:
        return NameNode(value=m.group(1), offset=offset)

    return None


def annotate_values(sequence: List[Node], max_depth: int = DEFAULT_MAX_DEPTH) -> None:
    """Mutates sequence in place. Raises UnrecognizedValueError."""

    def visit_unknown(node: UnknownNode, actions: VisitorActions) -> None:
        try:
            value = classify(node.raw, node.offset)
            if value is None:
                raise UnrecognizedValueError(f"Unexpected value {node.raw.strip()!r}", node.offset)
        except UnrecognizedValueError as e:
            node.error = True
            actions.set_error(e)
            return
        actions.replace(value)

    def visit_operations_before(node: Node, actions: VisitorActions) -> None:
        # Only base 0 is wired; general log_b is not part of the grammar.
        if isinstance(node, UnaryOpNode) and node.name == LOG_SUGAR:
            node.name = LOG_NAME
            node.base = LOG_BASE

    visitor = AstVisitor(
        visit_unknown=visit_unknown,
        visit_operations_before=visit_operations_before,
        max_depth=max_depth,
    )
    try:
        visitor.walk(sequence)
    finally:
        visitor.actions.apply()

    if visitor.actions.error is not None:
        raise visitor.actions.error
