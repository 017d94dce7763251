"""
Traction - AST Node Definitions
Tagged node variants shared by every parsing stage and printer.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, List

OMEGA = "w"
OMEGA_VALUE = math.inf

LOG_SUGAR = "log_0"


@dataclass
class Node:
    """Base class for all AST nodes."""
    error: bool = False
    # Column of the source text; not part of structural equality.
    offset: int = field(default=0, compare=False, repr=False)


@dataclass
class IntegerNode(Node):
    """An unsigned integer literal."""
    value: int = 0


@dataclass
class FloatNode(Node):
    """A decimal literal with a single point."""
    value: float = 0.0


@dataclass
class NameNode(Node):
    """An alphabetic identifier. The name w is the infinite constant."""
    value: str = ""

    @property
    def is_omega(self) -> bool:
        return self.value == OMEGA

    @property
    def numeric_value(self) -> Optional[float]:
        """OMEGA_VALUE for w; other names are free variables with no value."""
        return OMEGA_VALUE if self.is_omega else None


@dataclass
class GroupNode(Node):
    """( ... ), [ ... ] or { ... }; the bracket kind is not kept."""
    children: List[Node] = field(default_factory=list)


@dataclass
class OperationNode(Node):
    """left operator right. Operands are singleton lists once resolved."""
    operator: str = ""
    left: List[Node] = field(default_factory=list)
    right: List[Node] = field(default_factory=list)


@dataclass
class UnaryOpNode(Node):
    """name_base right, e.g. log_0 x."""
    name: str = ""
    base: Optional[int] = None
    right: List[Node] = field(default_factory=list)


@dataclass
class UnknownNode(Node):
    """Text not yet classified. Only valid between stages."""
    raw: str = ""
