"""Core data models for navdiff.

Defines the schemas for:
- Snapshot documents (one navigation tree serialized as YAML/JSON)
- Diff action kinds (the tags of the differ's output)
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

# --- Enums ---


class ActionKind(enum.StrEnum):
    PUSH = "push"
    POP = "pop"
    CHANGED = "changed"
    CHANGED_ACTIVE_CHILD = "changed_active_child"
    SELECTED_ACTIVE_CHILD = "selected_active_child"


# --- Snapshot Schema ---

NodeValue = str | int | float | bool


class NodeSpec(BaseModel):
    """One destination in a snapshot document.

    ``active`` names the value of the child that is currently selected.
    """

    model_config = ConfigDict(extra="forbid")

    value: NodeValue
    active: NodeValue | None = None
    children: list[NodeSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def _active_is_a_child(self) -> NodeSpec:
        if self.active is not None and not any(c.value == self.active for c in self.children):
            raise ValueError(f"active child {self.active!r} is not a child of {self.value!r}")
        return self


class SnapshotDocument(BaseModel):
    """Top-level snapshot file. ``root: null`` is the absent tree."""

    model_config = ConfigDict(extra="forbid")

    root: NodeSpec | None = None
