"""
Traction - Grouper
Splits raw expression text into nested groups by bracket matching.
Operator and value analysis is left to the later stages.
"""

import re
from typing import List, Optional, Tuple

from .ast_nodes import Node, GroupNode, UnknownNode
from .visitor import TractionError, RecursionLimitExceeded, DEFAULT_MAX_DEPTH

# All three pairs nest transparently; the kind is not remembered.
_BRACKET_RE = re.compile(r'[(\[{)\]}]')
_OPENERS = "([{"


class UnbalancedGroupError(TractionError):
    pass


def _emit_text(sequence: List[Node], text: str, start: int, end: int) -> None:
    fragment = text[start:end]
    if fragment.strip():
        sequence.append(UnknownNode(raw=fragment, offset=start))


def split_groups(
    text: str,
    nodes: Optional[List[Node]] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> List[Node]:
    """
    Turn text into a sequence of UnknownNode / GroupNode.

    Nodes are appended to ``nodes`` when given, so whatever was built
    before a failure stays with the caller.
    Raises UnbalancedGroupError or RecursionLimitExceeded.
    """
    if nodes is None:
        nodes = []
    current = nodes
    # (parent sequence, open group) per nesting level
    stack: List[Tuple[List[Node], GroupNode]] = []
    pos = 0

    for m in _BRACKET_RE.finditer(text):
        _emit_text(current, text, pos, m.start())
        symbol = m.group(0)

        if symbol in _OPENERS:
            if len(stack) >= max_depth:
                raise RecursionLimitExceeded(
                    f"Groups nested deeper than {max_depth} levels", m.start()
                )
            group = GroupNode(offset=m.start())
            current.append(group)
            stack.append((current, group))
            current = group.children
        else:
            if not stack:
                raise UnbalancedGroupError(f"Unexpected {symbol!r} with no open group", m.start())
            current, _ = stack.pop()

        pos = m.end()

    _emit_text(current, text, pos, len(text))

    if stack:
        _, innermost = stack[-1]
        raise UnbalancedGroupError(
            f"{len(stack)} group(s) never closed", innermost.offset
        )
    return nodes
