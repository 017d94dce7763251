"""
Traction - Printers
Read-only traversals rendering an AST as canonical infix text or as
annotated markup. Printers never raise: an error-flagged node renders
as a placeholder and its subtree is skipped.
"""

import html
import math
from decimal import Decimal
from typing import List, Optional, Sequence

from .ast_nodes import (
    Node, FloatNode, NameNode, GroupNode,
    OperationNode, UnaryOpNode, UnknownNode,
)
from .visitor import AstVisitor, VisitorActions, TractionError, DEFAULT_MAX_DEPTH

PLACEHOLDER = "?"


def format_number(node: Node) -> Optional[str]:
    """Literal text that parses back to the same node; None if there is none."""
    if isinstance(node, FloatNode):
        value = float(node.value)
        if not math.isfinite(value):
            return None
        text = repr(value)
        if "e" in text or "E" in text:
            text = format(Decimal(text), "f")
        return text if "." in text else text + ".0"
    try:
        return str(node.value)
    except ValueError:
        # past the interpreter's int/str digit cap
        return None


def _nodes_of(ast) -> Sequence[Node]:
    # ParseResult, a plain node list or a single node
    if isinstance(ast, Node):
        return [ast]
    return getattr(ast, "nodes", ast)


class _Printer:
    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth
        self._parts: List[str] = []

    def render(self, ast) -> str:
        self._parts = []
        visitor = AstVisitor(
            visit_all_before=self._visit_all_before,
            visit_unknown=self._visit_unknown,
            visit_numbers=self._visit_numbers,
            visit_names=self._visit_names,
            visit_operations_before=self._visit_operations_before,
            visit_operations_middle=self._visit_operations_middle,
            visit_operations_after=self._visit_operations_after,
            visit_groups_before=self._visit_groups_before,
            visit_groups_after=self._visit_groups_after,
            max_depth=self.max_depth,
        )
        try:
            visitor.walk(list(_nodes_of(ast)))
        except TractionError:
            self._parts.append(self._placeholder())
        return self._finish("".join(self._parts))

    def _finish(self, text: str) -> str:
        return text

    def _placeholder(self) -> str:
        return PLACEHOLDER

    def _visit_all_before(self, node: Node, actions: VisitorActions) -> None:
        if getattr(node, "error", False):
            self._parts.append(self._placeholder())
            actions.skip()

    def _visit_unknown(self, node, actions): pass
    def _visit_numbers(self, node, actions): pass
    def _visit_names(self, node, actions): pass
    def _visit_operations_before(self, node, actions): pass
    def _visit_operations_middle(self, node, actions): pass
    def _visit_operations_after(self, node, actions): pass
    def _visit_groups_before(self, node, actions): pass
    def _visit_groups_after(self, node, actions): pass


class CanonicalPrinter(_Printer):
    """Minimal re-parseable infix text."""

    def _visit_unknown(self, node: UnknownNode, actions: VisitorActions) -> None:
        self._parts.append(node.raw.strip())

    def _visit_numbers(self, node: Node, actions: VisitorActions) -> None:
        text = format_number(node)
        self._parts.append(self._placeholder() if text is None else text)

    def _visit_names(self, node: NameNode, actions: VisitorActions) -> None:
        self._parts.append(node.value)

    def _visit_operations_before(self, node: Node, actions: VisitorActions) -> None:
        if isinstance(node, UnaryOpNode):
            label = node.name if node.base is None else f"{node.name}_{node.base}"
            self._parts.append(label)
            # log_0x would read back as a single bad value
            if not (node.right and isinstance(node.right[0], GroupNode)):
                self._parts.append(" ")

    def _visit_operations_middle(self, node: OperationNode, actions: VisitorActions) -> None:
        self._parts.append(node.operator)

    def _visit_groups_before(self, node: GroupNode, actions: VisitorActions) -> None:
        self._parts.append("(")

    def _visit_groups_after(self, node: GroupNode, actions: VisitorActions) -> None:
        self._parts.append(")")


def _span(css_class: str, text: str) -> str:
    return f"<span class='{css_class}'>{text}</span>"


class MarkupPrinter(_Printer):
    """
    Tagged text using the classes number, variable, symbol and error.
    Exponents go in <sup>, the log base in <sub>. Hidden copyonly spans
    keep copied text close to the canonical notation.
    """

    def _finish(self, text: str) -> str:
        return f"<div class='expression font-lg'>{text}</div>"

    def _placeholder(self) -> str:
        return _span("error", PLACEHOLDER)

    def _visit_unknown(self, node: UnknownNode, actions: VisitorActions) -> None:
        self._parts.append(_span("error", html.escape(node.raw.strip())))

    def _visit_numbers(self, node: Node, actions: VisitorActions) -> None:
        text = format_number(node)
        self._parts.append(self._placeholder() if text is None else _span("number", text))

    def _visit_names(self, node: NameNode, actions: VisitorActions) -> None:
        if node.is_omega:
            self._parts.append(_span("symbol", "&omega;"))
        else:
            self._parts.append(_span("variable", html.escape(node.value)))

    @staticmethod
    def _wraps_operand(node: UnaryOpNode) -> bool:
        return not (node.right and isinstance(node.right[0], GroupNode))

    def _visit_operations_before(self, node: Node, actions: VisitorActions) -> None:
        if not isinstance(node, UnaryOpNode):
            return
        self._parts.append(_span("variable", html.escape(node.name)))
        if node.base is not None:
            self._parts.append(_span("copyonly", "_"))
            self._parts.append(f"<sub>{_span('number', node.base)}</sub>")
        if self._wraps_operand(node):
            self._parts.append(_span("symbol", "("))

    def _visit_operations_middle(self, node: OperationNode, actions: VisitorActions) -> None:
        if node.operator == "^":
            self._parts.append("<sup>" + _span("copyonly", "^("))
        elif node.operator == "*":
            self._parts.append(_span("symbol", "&middot;"))
        else:
            self._parts.append(_span("symbol", html.escape(node.operator)))

    def _visit_operations_after(self, node: Node, actions: VisitorActions) -> None:
        if isinstance(node, UnaryOpNode):
            if self._wraps_operand(node):
                self._parts.append(_span("symbol", ")"))
        elif node.operator == "^":
            self._parts.append(_span("copyonly", ")") + "</sup>")

    def _visit_groups_before(self, node: GroupNode, actions: VisitorActions) -> None:
        self._parts.append(_span("symbol", "("))

    def _visit_groups_after(self, node: GroupNode, actions: VisitorActions) -> None:
        self._parts.append(_span("symbol", ")"))


def print_canonical(ast, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    return CanonicalPrinter(max_depth).render(ast)


def print_markup(ast, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    return MarkupPrinter(max_depth).render(ast)
