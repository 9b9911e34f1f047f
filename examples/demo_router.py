#!/usr/bin/env python3
"""Demo: Driving a screen stack from navigation-state snapshots.

A toy router keeps one stack of screen names per container. Each new
navigation state is diffed against the previous one and the resulting
actions are applied to the stacks, instead of re-deriving the delta by hand.

Run from the project root:
    python examples/demo_router.py
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from navdiff import (
    Changed,
    ChangedActiveChild,
    DiffAction,
    NavigationNode,
    Pop,
    Push,
    SelectedActiveChild,
    build_tree,
    diff,
)

# ANSI colors
GREEN = "\033[92m"
RED = "\033[91m"
YELLOW = "\033[93m"
CYAN = "\033[96m"
BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"


class ToyRouter:
    """Keeps one stack of screen names per container (parent value)."""

    def __init__(self) -> None:
        self.stacks: dict[object, list[object]] = {}
        self.visible: dict[object, object] = {}

    def apply(self, action: DiffAction) -> str:
        match action:
            case Pop(node=node):
                self.stacks.get(_container(node), []).remove(node.value)
                return f"{RED}pop{RESET}      {node.value}"
            case Push(node=node):
                self.stacks.setdefault(_container(node), []).append(node.value)
                return f"{GREEN}push{RESET}     {node.value}"
            case Changed(popped=popped, pushed=pushed):
                container = _container((pushed or popped)[0])
                stack = self.stacks.setdefault(container, [])
                for node in popped:
                    if node.value in stack:
                        stack.remove(node.value)
                if pushed:
                    # Splice: the pushed list is the container's final order
                    stack[:] = [n.value for n in pushed]
                return f"{YELLOW}splice{RESET}   {container}: {stack}"
            case ChangedActiveChild(child=child):
                self.visible[_container(child)] = child.value
                return f"{CYAN}show{RESET}     {child.value}"
            case SelectedActiveChild(child=child):
                return f"{DIM}keep{RESET}     {child.value}"
        raise TypeError(f"Unknown action: {action!r}")


def _container(node: NavigationNode) -> object:
    return node.parent.value if node.parent is not None else "<window>"


STATES = [
    ("launch", {
        "value": "tabs", "active": "feed",
        "children": [{"value": "feed"}, {"value": "profile"}],
    }),
    ("open a post", {
        "value": "tabs", "active": "feed",
        "children": [
            {"value": "feed", "active": "post-42", "children": [{"value": "post-42"}]},
            {"value": "profile"},
        ],
    }),
    ("switch tab", {
        "value": "tabs", "active": "profile",
        "children": [
            {"value": "feed", "active": "post-42", "children": [{"value": "post-42"}]},
            {"value": "profile"},
        ],
    }),
    ("replace feed with inbox", {
        "value": "tabs", "active": "inbox",
        "children": [{"value": "inbox"}, {"value": "profile"}],
    }),
    ("log out", None),
]


def main() -> None:
    router = ToyRouter()
    last: NavigationNode | None = None

    for title, spec in STATES:
        current = build_tree(spec)
        print(f"\n{BOLD}{title}{RESET}")
        actions = diff(last, current)
        if not actions:
            print(f"  {DIM}(no changes){RESET}")
        for action in actions:
            print(f"  {router.apply(action)}")
        last = current

    print(f"\n{BOLD}final stacks:{RESET} {router.stacks}")


if __name__ == "__main__":
    main()
