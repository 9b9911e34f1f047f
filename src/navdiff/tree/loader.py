"""Snapshot loader.

Builds navigation trees from snapshot documents (YAML or JSON files, or
already-parsed mappings) and serializes trees back to plain dicts.

Snapshot format::

    root:
      value: home
      active: feed
      children:
        - value: feed
        - value: settings
          children:
            - value: profile
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from navdiff.models import NodeSpec, SnapshotDocument
from navdiff.tree.node import NavigationNode, TreeError, validate_tree

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Raised when a snapshot cannot be read, parsed, or validated."""


def build_tree(
    spec: NodeSpec | dict[str, Any] | None,
    *,
    validate: bool = True,
) -> NavigationNode | None:
    """Build a navigation tree from a node spec or a plain mapping.

    Returns None for an absent tree. With *validate* off, tree invariants
    such as unique values are not checked.

    Raises:
        SnapshotError: If the mapping fails schema validation or the
            resulting tree breaks a tree invariant (e.g. duplicate values).
    """
    if spec is None:
        return None
    if not isinstance(spec, NodeSpec):
        try:
            spec = NodeSpec.model_validate(spec)
        except ValidationError as e:
            raise SnapshotError(f"Invalid node spec: {e}") from e

    root = NavigationNode(spec.value)
    pending: list[tuple[NavigationNode, NodeSpec]] = [(root, spec)]
    while pending:
        node, node_spec = pending.pop()
        for child_spec in node_spec.children:
            child = node.add_child(child_spec.value, active=child_spec.value == node_spec.active)
            pending.append((child, child_spec))

    if validate:
        try:
            validate_tree(root)
        except TreeError as e:
            raise SnapshotError(str(e)) from e
    return root


def parse_snapshot(
    raw: Any,
    source: str = "<snapshot>",
    *,
    validate: bool = True,
) -> NavigationNode | None:
    """Validate an already-decoded snapshot document and build its tree."""
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise SnapshotError(f"{source}: expected a mapping, got {type(raw).__name__}")
    try:
        doc = SnapshotDocument.model_validate(raw)
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot in {source}: {e}") from e

    try:
        return build_tree(doc.root, validate=validate)
    except SnapshotError as e:
        raise SnapshotError(f"{source}: {e}") from e


def load_snapshot(path: str | Path, *, validate: bool = True) -> NavigationNode | None:
    """Load a snapshot file. ``.json`` files are read as JSON, others as YAML.

    An empty file or ``root: null`` yields None (the absent tree).

    Raises:
        SnapshotError: If the file is missing, unparseable, or invalid.
    """
    path = Path(path)
    if not path.is_file():
        raise SnapshotError(f"Snapshot file not found: {path}")

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            raw = json.loads(text) if text.strip() else None
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise SnapshotError(f"Invalid YAML in {path}: {e}") from e

    root = parse_snapshot(raw, source=str(path), validate=validate)
    logger.debug("Loaded snapshot %s (%d nodes)", path, len(root) if root is not None else 0)
    return root


def tree_to_dict(node: NavigationNode) -> dict[str, Any]:
    """Serialize a tree to the node-spec mapping accepted by :func:`build_tree`."""
    data: dict[str, Any] = {"value": node.value}
    active = node.get_active_child()
    if active is not None:
        data["active"] = active.value
    if node.children:
        data["children"] = [tree_to_dict(child) for child in node.children]
    return data
