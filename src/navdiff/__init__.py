"""navdiff: turn two navigation-state trees into ordered stack actions."""

__version__ = "0.1.0"

from navdiff.config import NavdiffConfig, find_config, load_config
from navdiff.diffing.differ import (
    Changed,
    ChangedActiveChild,
    DiffAction,
    Pop,
    Push,
    SelectedActiveChild,
    diff,
)
from navdiff.models import ActionKind, NodeSpec, SnapshotDocument
from navdiff.tree.loader import SnapshotError, build_tree, load_snapshot, tree_to_dict
from navdiff.tree.node import NavigationNode, TraversalOrder, TreeError, validate_tree

__all__ = [
    "ActionKind",
    "Changed",
    "ChangedActiveChild",
    "DiffAction",
    "find_config",
    "load_config",
    "NavdiffConfig",
    "NavigationNode",
    "NodeSpec",
    "Pop",
    "Push",
    "SelectedActiveChild",
    "SnapshotDocument",
    "SnapshotError",
    "TraversalOrder",
    "TreeError",
    "build_tree",
    "diff",
    "load_snapshot",
    "tree_to_dict",
    "validate_tree",
    "__version__",
]
