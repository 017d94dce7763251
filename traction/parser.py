"""
Traction - Precedence Parser
Builds Operation / UnaryOp skeletons from a token stream.

Tiers, lowest first: + -, then * /, then ^. Every tier is
left-associative. log_0 is a prefix form that binds tighter than any
binary operator and takes the single primary after it. Operands that
follow each other with no operator between them stay separate siblings.
"""

from typing import Callable, List, Optional
from .lexer import Token, TokenType
from .ast_nodes import Node, OperationNode, UnaryOpNode
from .visitor import TractionError, RecursionLimitExceeded, DEFAULT_MAX_DEPTH


class MissingOperandError(TractionError):
    """
    An operator without an operand on one side.

    ``partial`` holds the top-level nodes built before the failure, the
    incomplete operation last, so the caller can keep them in the tree.
    """

    def __init__(self, message: str, offset: int):
        super().__init__(message, offset)
        self.incomplete: Optional[Node] = None
        self.partial: List[Node] = []


class Parser:
    def __init__(self, tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH):
        self._tokens = tokens
        self._pos = 0
        self._depth = 0
        self._max_depth = max_depth

    # ------------------------------------------------------------------ helpers

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _previous(self) -> Optional[Token]:
        return self._tokens[self._pos - 1] if self._pos > 0 else None

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        self._pos += 1
        return tok

    def _match(self, *types: TokenType) -> bool:
        return self._peek().type in types

    def _match_operator(self, *operators: str) -> bool:
        tok = self._peek()
        return tok.type == TokenType.OPERATOR and tok.value in operators

    def _complete(self, node: Node, parse_operand: Callable[[], Node]) -> Node:
        """Parse the right operand of node; on failure record node as the incomplete one."""
        try:
            operand = parse_operand()
        except MissingOperandError as e:
            if e.incomplete is not None:
                node.right = [e.incomplete]
            e.incomplete = node
            raise
        node.right = [operand]
        return node

    # ------------------------------------------------------------------ public

    def parse(self) -> List[Node]:
        """Return the top-level nodes in textual order."""
        nodes: List[Node] = []
        try:
            while not self._match(TokenType.EOF):
                nodes.append(self._parse_additive())
        except MissingOperandError as e:
            if e.incomplete is not None:
                nodes.append(e.incomplete)
            e.partial = nodes
            raise
        return nodes

    # ------------------------------------------------------------------ tiers

    def _parse_additive(self) -> Node:
        left = self._parse_multiplicative()

        while self._match_operator('+', '-'):
            op_tok = self._advance()
            node = OperationNode(operator=op_tok.value, left=[left], offset=op_tok.offset)
            left = self._complete(node, self._parse_multiplicative)

        return left

    def _parse_multiplicative(self) -> Node:
        left = self._parse_exponent()

        while self._match_operator('*', '/'):
            op_tok = self._advance()
            node = OperationNode(operator=op_tok.value, left=[left], offset=op_tok.offset)
            left = self._complete(node, self._parse_exponent)

        return left

    def _parse_exponent(self) -> Node:
        left = self._parse_prefix()

        while self._match_operator('^'):
            op_tok = self._advance()
            node = OperationNode(operator=op_tok.value, left=[left], offset=op_tok.offset)
            left = self._complete(node, self._parse_prefix)

        return left

    def _parse_prefix(self) -> Node:
        if not self._match(TokenType.LOG):
            return self._parse_primary()

        log_tok = self._advance()
        if self._depth >= self._max_depth:
            raise RecursionLimitExceeded(
                f"{log_tok.value} nested deeper than {self._max_depth} levels", log_tok.offset
            )
        self._depth += 1
        try:
            node = UnaryOpNode(name=log_tok.value, offset=log_tok.offset)
            return self._complete(node, self._parse_prefix)
        finally:
            self._depth -= 1

    def _parse_primary(self) -> Node:
        tok = self._peek()

        if tok.type == TokenType.OPERAND:
            self._advance()
            return tok.node

        if tok.type == TokenType.OPERATOR:
            raise MissingOperandError(f"Operator {tok.value!r} has no left operand", tok.offset)

        prev = self._previous()
        raise MissingOperandError(
            f"{prev.value!r} has no right operand" if prev else "Expected an operand",
            tok.offset,
        )
