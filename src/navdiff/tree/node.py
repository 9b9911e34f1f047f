"""Navigation tree node.

An ordered, rooted tree: each node holds an application-defined ``value``,
a back-reference to its ``parent``, an ordered list of children and an
optional *active child*. Sibling order is meaningful; it is the display /
stack order of the destinations.

Two nodes in different snapshots are "the same destination" when their
values are equal. Node objects themselves compare by identity.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from typing import Any


class TreeError(Exception):
    """Raised when a tree is malformed or the mutation API is misused."""


class TraversalOrder(enum.StrEnum):
    PRE = "pre"
    POST = "post"


class NavigationNode:
    """A single navigable destination in a navigation tree.

    The tree's owner builds and mutates it through :meth:`add_child`,
    :meth:`remove_child` and :meth:`set_active_child`. Readers such as the
    differ only use :meth:`traverse`, :meth:`find`, :meth:`contains_value`
    and :meth:`get_active_child`.
    """

    def __init__(self, value: Any, parent: NavigationNode | None = None) -> None:
        self.value = value
        self.parent = parent
        self._children: list[NavigationNode] = []
        self._active_index: int | None = None

    def __repr__(self) -> str:
        return f"NavigationNode({self.value!r})"

    def __len__(self) -> int:
        """Number of nodes in the subtree rooted here, self included."""
        return sum(1 for _ in self.traverse())

    def __contains__(self, value: object) -> bool:
        return self.contains_value(value)

    # --- Structure ---

    @property
    def children(self) -> list[NavigationNode]:
        return list(self._children)

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def root(self) -> NavigationNode:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def depth(self) -> int:
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def path(self) -> list[Any]:
        """Return the values from the root down to this node."""
        values: list[Any] = []
        node: NavigationNode | None = self
        while node is not None:
            values.append(node.value)
            node = node.parent
        values.reverse()
        return values

    def add_child(self, value: Any, *, active: bool = False) -> NavigationNode:
        """Append a new child holding *value* and return it."""
        child = NavigationNode(value, parent=self)
        self._children.append(child)
        if active:
            self._active_index = len(self._children) - 1
        return child

    def remove_child(self, child: NavigationNode) -> None:
        """Detach *child*. Clears or shifts the active selection as needed.

        Raises TreeError if *child* is not a child of this node.
        """
        index = self._index_of(child)
        del self._children[index]
        child.parent = None
        if self._active_index is None:
            return
        if self._active_index == index:
            self._active_index = None
        elif self._active_index > index:
            self._active_index -= 1

    def remove_all_children(self) -> None:
        for child in self._children:
            child.parent = None
        self._children = []
        self._active_index = None

    # --- Active child ---

    @property
    def active_child(self) -> NavigationNode | None:
        return self.get_active_child()

    def get_active_child(self) -> NavigationNode | None:
        """Return the active child, or None if no child is selected."""
        if self._active_index is None:
            return None
        return self._children[self._active_index]

    def set_active_child(self, child: NavigationNode | None) -> None:
        """Select *child* as active, or clear the selection with None.

        Raises TreeError if *child* is not a child of this node.
        """
        if child is None:
            self._active_index = None
            return
        self._active_index = self._index_of(child)

    def is_active_child(self, child: NavigationNode) -> bool:
        return self.get_active_child() is child

    def _index_of(self, child: NavigationNode) -> int:
        for i, candidate in enumerate(self._children):
            if candidate is child:
                return i
        raise TreeError(f"{child!r} is not a child of {self!r}")

    # --- Reading ---

    def traverse(self, order: TraversalOrder | str = TraversalOrder.PRE) -> Iterator[NavigationNode]:
        """Walk the subtree rooted at this node.

        Pre-order yields a node before its children, post-order after them.
        Children are visited in their stored order. Every call returns a
        fresh generator.
        """
        order = TraversalOrder(order)
        if order is TraversalOrder.PRE:
            return self._walk_pre()
        return self._walk_post()

    def _walk_pre(self) -> Iterator[NavigationNode]:
        stack: list[NavigationNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            # Reversed so the leftmost child is popped first
            stack.extend(reversed(node._children))

    def _walk_post(self) -> Iterator[NavigationNode]:
        stack: list[tuple[NavigationNode, bool]] = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded:
                yield node
                continue
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node._children))

    def find(self, value: Any) -> NavigationNode | None:
        """Return the first node (pre-order) whose value equals *value*."""
        for node in self.traverse():
            if node.value == value:
                return node
        return None

    def contains_value(self, value: Any) -> bool:
        return self.find(value) is not None


def validate_tree(root: NavigationNode) -> None:
    """Check that *root* satisfies the preconditions of a navigation tree.

    - no node is reachable twice (acyclic, single parent)
    - every child's ``parent`` points back at the node holding it
    - values are unique within the tree
    - the active child, if any, is one of the node's children

    Raises:
        TreeError: Describing the first violation found.
    """
    seen_ids: set[int] = set()
    seen_values: list[Any] = []
    stack: list[NavigationNode] = [root]
    while stack:
        node = stack.pop()
        if id(node) in seen_ids:
            raise TreeError(f"{node!r} is reachable more than once")
        seen_ids.add(id(node))

        # Values may be unhashable
        if node.value in seen_values:
            raise TreeError(f"Duplicate value in tree: {node.value!r}")
        seen_values.append(node.value)

        if node._active_index is not None and not 0 <= node._active_index < len(node._children):
            raise TreeError(f"Active child of {node!r} is out of range")

        for child in node._children:
            if child.parent is not node:
                raise TreeError(f"{child!r} does not point back at its parent {node!r}")
            stack.append(child)
