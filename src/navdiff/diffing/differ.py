"""Navigation tree differ.

Turns a "last" and a "current" navigation tree into the ordered list of
actions that moves an imperative navigation stack from one to the other:

- pops (and pop-only composite changes) come first, deepest nodes first
- then pushes and composite changes, parents before descendants
- then active-child notifications, in post-order of the current tree

Nodes are matched across the two trees by value. Nodes are grouped under a
parent by identity. The differ never mutates either tree.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, ClassVar

from navdiff.models import ActionKind
from navdiff.tree.node import NavigationNode, TraversalOrder, validate_tree

logger = logging.getLogger(__name__)


# --- Actions ---


@dataclass(frozen=True)
class Push:
    """A single node was added with no removal on the same parent."""

    kind: ClassVar[ActionKind] = ActionKind.PUSH
    node: NavigationNode

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "node": self.node.value}

    def __str__(self) -> str:
        return f"push {self.node.value}"


@dataclass(frozen=True)
class Pop:
    """A single node was removed with no addition on the same parent."""

    kind: ClassVar[ActionKind] = ActionKind.POP
    node: NavigationNode

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "node": self.node.value}

    def __str__(self) -> str:
        return f"pop {self.node.value}"


@dataclass(frozen=True)
class Changed:
    """Composite replacement of children on one parent, applied atomically.

    ``pushed`` is the parent's full child list in the current tree, so it
    carries the final sibling order. It is empty for pop-only changes.
    """

    kind: ClassVar[ActionKind] = ActionKind.CHANGED
    popped: list[NavigationNode] = field(default_factory=list)
    pushed: list[NavigationNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "popped": [n.value for n in self.popped],
            "pushed": [n.value for n in self.pushed],
        }

    def __str__(self) -> str:
        popped = ", ".join(str(n.value) for n in self.popped)
        pushed = ", ".join(str(n.value) for n in self.pushed)
        return f"changed popped=[{popped}] pushed=[{pushed}]"


@dataclass(frozen=True)
class ChangedActiveChild:
    """The active child under some node differs from the last tree."""

    kind: ClassVar[ActionKind] = ActionKind.CHANGED_ACTIVE_CHILD
    child: NavigationNode

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "node": self.child.value}

    def __str__(self) -> str:
        return f"changed-active-child {self.child.value}"


@dataclass(frozen=True)
class SelectedActiveChild:
    """The active child is unchanged but reaffirmed."""

    kind: ClassVar[ActionKind] = ActionKind.SELECTED_ACTIVE_CHILD
    child: NavigationNode

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "node": self.child.value}

    def __str__(self) -> str:
        return f"selected-active-child {self.child.value}"


DiffAction = Push | Pop | Changed | ChangedActiveChild | SelectedActiveChild


# --- Diff ---


def diff(
    last: NavigationNode | None,
    current: NavigationNode | None,
    *,
    validate: bool = False,
) -> list[DiffAction]:
    """Compute the actions that turn *last* into *current*.

    Either tree may be None (absent). Neither tree is modified.

    Args:
        last: Root of the previous navigation tree.
        current: Root of the new navigation tree.
        validate: Check both trees with :func:`validate_tree` first.

    Raises:
        TreeError: Only when *validate* is set and a tree is malformed.
    """
    if validate:
        for root in (last, current):
            if root is not None:
                validate_tree(root)

    # Post-order: children are popped before their ancestors
    nodes_to_pop = [
        node for node in _walk(last, TraversalOrder.POST)
        if not _contains(current, node.value)
    ]
    # Pre-order: parents are pushed before their descendants
    nodes_to_push = [
        node for node in _walk(current, TraversalOrder.PRE)
        if not _contains(last, node.value)
    ]
    logger.debug("diff: %d node(s) to pop, %d node(s) to push", len(nodes_to_pop), len(nodes_to_push))

    insert_actions, remaining_pops = _insert_actions(nodes_to_push, nodes_to_pop, current)
    pop_actions = _pop_actions(remaining_pops)
    active_actions = _active_child_actions(last, current)

    logger.debug(
        "diff: %d pop action(s), %d insert action(s), %d active-child action(s)",
        len(pop_actions), len(insert_actions), len(active_actions),
    )
    return [*pop_actions, *insert_actions, *active_actions]


def _insert_actions(
    nodes_to_push: list[NavigationNode],
    nodes_to_pop: list[NavigationNode],
    current: NavigationNode | None,
) -> tuple[list[DiffAction], list[NavigationNode]]:
    """Group pushes by parent into Push / Changed actions.

    Returns the actions and the pops not absorbed into a Changed action.
    """
    actions: list[DiffAction] = []
    remaining_pops = list(nodes_to_pop)

    for parent in _unique_parents(nodes_to_push):
        pushes = [n for n in nodes_to_push if n.parent is parent]
        pops = [n for n in nodes_to_pop if _same_parent(n, parent)]

        if len(pushes) == 1 and not pops:
            actions.append(Push(pushes[0]))
            continue

        if parent is not None:
            siblings = parent.children
        else:
            siblings = [current] if current is not None else []
        actions.append(Changed(popped=pops, pushed=siblings))
        remaining_pops = [n for n in remaining_pops if not any(n is p for p in pops)]

    return actions, remaining_pops


def _pop_actions(nodes_to_pop: list[NavigationNode]) -> list[DiffAction]:
    """Single pops become Pop, several pops on one parent become Changed."""
    actions: list[DiffAction] = []
    for parent in _unique_parents(nodes_to_pop):
        pops = [n for n in nodes_to_pop if n.parent is parent]
        if len(pops) == 1:
            actions.append(Pop(pops[0]))
        else:
            actions.append(Changed(popped=pops, pushed=[]))
    return actions


def _active_child_actions(
    last: NavigationNode | None,
    current: NavigationNode | None,
) -> list[DiffAction]:
    """Report the active child of every current node that has one.

    Nodes without an active child in the current tree report nothing, even
    when their counterpart in the last tree had one.
    """
    actions: list[DiffAction] = []
    for node in _walk(current, TraversalOrder.POST):
        current_active = node.get_active_child()
        if current_active is None:
            continue

        last_node = last.find(node.value) if last is not None else None
        last_active = last_node.get_active_child() if last_node is not None else None

        if last_active is None or last_active.value != current_active.value:
            actions.append(ChangedActiveChild(current_active))
        else:
            actions.append(SelectedActiveChild(current_active))
    return actions


def _unique_parents(nodes: Iterable[NavigationNode]) -> list[NavigationNode | None]:
    """Distinct parents (by identity) in first-encounter order. None is the root level."""
    parents: list[NavigationNode | None] = []
    for node in nodes:
        if not any(p is node.parent for p in parents):
            parents.append(node.parent)
    return parents


def _same_parent(node: NavigationNode, parent: NavigationNode | None) -> bool:
    """Whether *node* (from the other tree) sits under the counterpart of *parent*."""
    if parent is None or node.parent is None:
        return parent is None and node.parent is None
    return node.parent is parent or node.parent.value == parent.value


def _walk(root: NavigationNode | None, order: TraversalOrder) -> Iterable[NavigationNode]:
    if root is None:
        return ()
    return root.traverse(order)


def _contains(root: NavigationNode | None, value: Any) -> bool:
    return root is not None and root.contains_value(value)
