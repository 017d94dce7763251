"""
Traction - Pipeline
Runs the parsing stages in sequence on one expression and returns a
best-effort tree: on failure the last top-level node is flagged and the
partial tree is returned together with the error.
"""

import json
import sys
from dataclasses import dataclass, fields
from typing import Any, List, Optional

from .ast_nodes import Node
from .grouper import split_groups
from .splitter import split_operators
from .annotator import annotate_values
from .visitor import TractionError, DEFAULT_MAX_DEPTH


@dataclass
class ParseResult:
    nodes: List[Node]
    error: Optional[TractionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def mark_parse_error(nodes: List[Node]) -> None:
    if nodes:
        nodes[-1].error = True


def parse_expression(
    text: str,
    max_depth: int = DEFAULT_MAX_DEPTH,
    strict: bool = False,
    debug: bool = False,
) -> ParseResult:
    """
    Parse a single expression.

    Parameters
    ----------
    text       : one-line expression, e.g. "log_0(w^2) + 1"
    max_depth  : nesting limit for groups and log_0 chains; operator
                 chains are not limited
    strict     : re-raise the failure after flagging the partial tree
    debug      : print each phase summary to stderr

    Returns
    -------
    ParseResult with the top-level nodes and the error, if any
    """

    def log(msg):
        if debug:
            print(f"[traction] {msg}", file=sys.stderr)

    nodes: List[Node] = []
    try:
        # ── Phase 1: Grouping ────────────────────────────────────────────────
        log("Phase 1: Grouping")
        split_groups(text, nodes, max_depth=max_depth)
        log(f"  {len(nodes)} top-level fragments")

        # ── Phase 2: Operator splitting ──────────────────────────────────────
        log("Phase 2: Operator splitting")
        split_operators(nodes, max_depth=max_depth)
        log(f"  {len(nodes)} top-level nodes")

        # ── Phase 3: Value annotation ────────────────────────────────────────
        log("Phase 3: Value annotation")
        annotate_values(nodes, max_depth=max_depth)
    except TractionError as e:
        log(f"  {e}")
        mark_parse_error(nodes)
        if strict:
            raise
        return ParseResult(nodes, e)

    log("  Parse successful")
    return ParseResult(nodes)


def read_expressions(path: str) -> List[str]:
    """Non-blank lines of a file, skipping // comment lines."""
    with open(path, "r", encoding="utf-8") as f:
        lines = [line.strip() for line in f]
    return [line for line in lines if line and not line.startswith("//")]


# ── AST serialization ─────────────────────────────────────────────────────────

_INDENT = "  "


def ast_to_json(ast) -> str:
    """
    Indented JSON, one object per node with "_type" and the dataclass
    fields. Written from an explicit work stack so that long operator
    chains serialize at any depth; the layout matches json.dumps(indent=2).
    """
    parts: List[str] = []
    stack: List[Any] = [(getattr(ast, "nodes", ast), 0)]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue

        value, level = item
        pad = "\n" + _INDENT * (level + 1)
        close = "\n" + _INDENT * level
        if isinstance(value, list):
            if not value:
                parts.append("[]")
                continue
            work: List[Any] = ["["]
            for i, child in enumerate(value):
                work.append(pad if i == 0 else "," + pad)
                work.append((child, level + 1))
            work.append(close + "]")
        elif isinstance(value, Node):
            work = ["{", pad, '"_type": ' + json.dumps(type(value).__name__)]
            for f in fields(value):
                work.append("," + pad + json.dumps(f.name) + ": ")
                work.append((getattr(value, f.name), level + 1))
            work.append(close + "}")
        else:
            parts.append(json.dumps(value))
            continue
        stack.extend(reversed(work))

    return "".join(parts)
