"""
Traction - Lexer
Flattens one node sequence (text fragments and already-built groups)
into a typed token stream for the precedence parser.
"""

import re
from dataclasses import dataclass
from typing import List, Optional
from enum import Enum, auto

from .ast_nodes import Node, UnknownNode, LOG_SUGAR


class TokenType(Enum):
    OPERAND  = auto()   # leaf text or a prebuilt node (group)
    OPERATOR = auto()   # + - * / ^
    LOG      = auto()   # log_0
    EOF      = auto()


@dataclass
class Token:
    type: TokenType
    value: str
    offset: int
    node: Optional[Node] = None

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r}, offset={self.offset})"


# Ordered: the sugar must win over a plain operand run at the same position.
_TOKEN_SPEC = [
    (TokenType.LOG,      re.escape(LOG_SUGAR) + r'(?![A-Za-z0-9_.])'),
    (TokenType.OPERATOR, r'[-+*/^]'),
    # Internal whitespace stays so that "2 3" is rejected as one bad value.
    (TokenType.OPERAND,  r'[^-+*/^]+'),
]

_MASTER_RE = re.compile(
    '|'.join(f'(?P<{ttype.name}>{pattern})' for ttype, pattern in _TOKEN_SPEC)
)

_WHITESPACE_RE = re.compile(r'\s+')


def _tokenize_text(raw: str, base: int, tokens: List[Token]) -> None:
    pos = 0
    length = len(raw)

    while pos < length:
        m = _WHITESPACE_RE.match(raw, pos)
        if m:
            pos = m.end()
            continue

        m = _MASTER_RE.match(raw, pos)
        tok_type = TokenType[m.lastgroup]
        value = m.group(0)
        offset = base + pos

        if tok_type == TokenType.OPERAND:
            value = value.rstrip()
            tokens.append(Token(tok_type, value, offset, UnknownNode(raw=value, offset=offset)))
        else:
            tokens.append(Token(tok_type, value, offset))
        pos = m.end()


def tokenize(sequence: List[Node]) -> List[Token]:
    """
    Convert a node sequence into a list of Tokens ending with EOF.
    Text fragments are split; every other node becomes one OPERAND.
    """
    tokens: List[Token] = []
    end = 0

    for node in sequence:
        if isinstance(node, UnknownNode):
            _tokenize_text(node.raw, node.offset, tokens)
            end = node.offset + len(node.raw)
        else:
            tokens.append(Token(TokenType.OPERAND, "", node.offset, node))
            end = node.offset

    tokens.append(Token(TokenType.EOF, '', end))
    return tokens
