"""
Traction - Tree Visitor
Walks node sequences with per-variant hooks and batches structural
mutations so that sibling positions stay valid for the whole walk.

Hooks are plain callables taking (node, actions). A hook may schedule
mutations through ``actions`` (remove / replace), skip the current
subtree, or stop the walk by setting an error. Scheduled mutations touch
nothing until ``actions.apply()`` runs after the walk; every touched
sequence is then rebuilt once, in place.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .ast_nodes import (
    Node, IntegerNode, FloatNode, NameNode, GroupNode,
    OperationNode, UnaryOpNode, UnknownNode,
)

DEFAULT_MAX_DEPTH = 200

Hook = Callable[[Node, "VisitorActions"], None]


class TractionError(Exception):
    """Base class for every failure raised while parsing an expression."""

    def __init__(self, message: str, offset: int = 0):
        super().__init__(f"[{type(self).__name__}] Column {offset}: {message}")
        self.message = message
        self.offset = offset


class RecursionLimitExceeded(TractionError):
    pass


@dataclass(eq=False)
class NodeState:
    """Position of a node inside the sequence that owns it."""
    sequence: List[Node]
    index: int
    node: Node


# Tombstone for a removed position.
_REMOVED = object()


class VisitorActions:
    def __init__(self):
        self.sequence: Optional[List[Node]] = None
        self.index: Optional[int] = None
        self.error: Optional[TractionError] = None
        self.walking = False
        self._skip = False
        # id(sequence) -> (sequence, {index: replacement list or _REMOVED})
        self._pending: Dict[int, Tuple[List[Node], Dict[int, Any]]] = {}

    # ------------------------------------------------------------------ state

    def _sync(self, sequence: List[Node], index: int) -> None:
        self.sequence = sequence
        self.index = index

    def current_state(self) -> NodeState:
        return NodeState(self.sequence, self.index, self.sequence[self.index])

    # ------------------------------------------------------------------ mutations

    def _marks(self, sequence: List[Node]) -> Dict[int, Any]:
        entry = self._pending.get(id(sequence))
        if entry is None:
            entry = (sequence, {})
            self._pending[id(sequence)] = entry
        return entry[1]

    def remove(self, state: Optional[NodeState] = None) -> None:
        """Tombstone the given position, or the current one."""
        state = state or self.current_state()
        self._marks(state.sequence)[state.index] = _REMOVED

    def replace(self, nodes: Union[Node, List[Node]], state: Optional[NodeState] = None) -> None:
        """Put one node, or several in order, where the given node sits."""
        state = state or self.current_state()
        marks = self._marks(state.sequence)
        if marks.get(state.index) is _REMOVED:
            return
        marks[state.index] = list(nodes) if isinstance(nodes, list) else [nodes]

    def apply(self) -> None:
        """Rebuild every touched sequence once. Safe to call repeatedly."""
        if self.walking:
            raise RuntimeError("Mutations cannot be applied while the walk is running")
        for sequence, marks in self._pending.values():
            rebuilt: List[Node] = []
            for index, node in enumerate(sequence):
                mark = marks.get(index)
                if mark is None:
                    rebuilt.append(node)
                elif mark is not _REMOVED:
                    rebuilt.extend(mark)
            sequence[:] = rebuilt
        self._pending.clear()

    @property
    def pending(self) -> int:
        return sum(len(marks) for _, marks in self._pending.values())

    # ------------------------------------------------------------------ flow control

    def set_error(self, error: TractionError) -> None:
        """Stop the walk once the current hook returns."""
        self.error = error

    def skip(self) -> None:
        """Skip the rest of the current node, subtree included."""
        self._skip = True

    def _take_skip(self) -> bool:
        skip, self._skip = self._skip, False
        return skip


def _noop(node: Node, actions: VisitorActions) -> None:
    pass


class AstVisitor:
    """
    Visitor object to walk and mutate a node sequence.

    Hooks (all optional):
      visit_all_before / visit_all_after   every node
      visit_unknown, visit_numbers, visit_names   leaves
      visit_operations_before / _middle / _after   Operation and UnaryOp
      visit_groups_before / visit_groups_after     Group
    """

    def __init__(
        self,
        visit_all_before: Hook = _noop,
        visit_all_after: Hook = _noop,
        visit_unknown: Hook = _noop,
        visit_numbers: Hook = _noop,
        visit_names: Hook = _noop,
        visit_operations_before: Hook = _noop,
        visit_operations_middle: Hook = _noop,
        visit_operations_after: Hook = _noop,
        visit_groups_before: Hook = _noop,
        visit_groups_after: Hook = _noop,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.visit_all_before = visit_all_before
        self.visit_all_after = visit_all_after
        self.visit_unknown = visit_unknown
        self.visit_numbers = visit_numbers
        self.visit_names = visit_names
        self.visit_operations_before = visit_operations_before
        self.visit_operations_middle = visit_operations_middle
        self.visit_operations_after = visit_operations_after
        self.visit_groups_before = visit_groups_before
        self.visit_groups_after = visit_groups_after
        self.max_depth = max_depth

        self.actions = VisitorActions()

    def walk(self, sequence: List[Node]) -> None:
        """Visit every node of the sequence, depth first, left to right."""
        if self.actions.walking:
            raise RuntimeError("AstVisitor.walk is not re-entrant")
        self.actions.walking = True
        try:
            self._walk(sequence, 0)
        finally:
            self.actions.walking = False

    def _walk(self, sequence: List[Node], depth: int) -> None:
        # Explicit frame stack: [sequence, depth, index, node, plan]. Operands
        # of a binary operation share their operation's depth; only groups and
        # unary operands count toward max_depth.
        self._check_depth(sequence, depth)
        actions = self.actions
        frames = [[sequence, depth, 0, None, None]]
        while frames:
            frame = frames[-1]
            seq, level, index, node, plan = frame
            if plan is None:
                if index >= len(seq):
                    frames.pop()
                    continue
                node = frame[3] = seq[index]
                plan = frame[4] = self._plan(node)

            step = next(plan, None)
            if step is None:
                frame[2], frame[4] = index + 1, None
                continue

            if isinstance(step, list):
                child_depth = level if isinstance(node, OperationNode) else level + 1
                self._check_depth(step, child_depth)
                frames.append([step, child_depth, 0, None, None])
                continue

            actions._sync(seq, index)
            step(node, actions)
            if actions.error is not None:
                return
            if actions._take_skip():
                frame[2], frame[4] = index + 1, None

    def _check_depth(self, sequence: List[Node], depth: int) -> None:
        if depth > self.max_depth:
            offset = sequence[0].offset if sequence else 0
            raise RecursionLimitExceeded(f"Nesting deeper than {self.max_depth} levels", offset)

    def _plan(self, node: Node):
        """Hooks and child sequences for one node, in visiting order."""
        yield self.visit_all_before
        if isinstance(node, GroupNode):
            yield self.visit_groups_before
            yield node.children
            yield self.visit_groups_after
        elif isinstance(node, OperationNode):
            yield self.visit_operations_before
            yield node.left
            yield self.visit_operations_middle
            yield node.right
            yield self.visit_operations_after
        elif isinstance(node, UnaryOpNode):
            yield self.visit_operations_before
            yield node.right
            yield self.visit_operations_after
        elif isinstance(node, (IntegerNode, FloatNode)):
            yield self.visit_numbers
        elif isinstance(node, NameNode):
            yield self.visit_names
        elif isinstance(node, UnknownNode):
            yield self.visit_unknown
        yield self.visit_all_after
