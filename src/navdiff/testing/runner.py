"""Navigation scenario runner.

Loads YAML scenario files, diffs each scenario's last/current trees and
compares the produced actions with the expected ones.

Scenario file format::

    scenarios:
      - name: replace-sibling
        last:
          value: A
          active: B
          children: [{value: B}, {value: C}]
        current:
          value: A
          active: D
          children: [{value: B}, {value: D}]
        expect:
          - {kind: changed, popped: [C], pushed: [B, D]}
          - {kind: changed_active_child, node: D}

``last`` and ``current`` may be omitted or null for an absent tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from navdiff.diffing.differ import diff
from navdiff.models import ActionKind
from navdiff.tree.loader import SnapshotError, build_tree


class ScenarioError(Exception):
    """Raised when a scenario file is malformed."""


@dataclass
class Scenario:
    """A single last/current/expect scenario."""

    name: str
    last: dict[str, Any] | None = None
    current: dict[str, Any] | None = None
    expect: list[dict[str, Any]] = field(default_factory=list)
    source_file: str = ""


@dataclass
class ScenarioResult:
    """Result of running a single scenario."""

    scenario: Scenario
    passed: bool
    actual: list[dict[str, Any]] = field(default_factory=list)
    reason: str = ""


@dataclass
class ScenarioSuiteResult:
    """Aggregated results from running all scenario files."""

    results: list[ScenarioResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.passed)

    @property
    def all_passed(self) -> bool:
        return self.failed == 0 and self.total > 0


_VALID_KINDS = {k.value for k in ActionKind}


def _check_expect(path: Path, name: str, expect: Any) -> list[dict[str, Any]]:
    if not isinstance(expect, list):
        raise ScenarioError(f"{path}: scenario '{name}' 'expect' must be a list")
    for j, action in enumerate(expect):
        if not isinstance(action, dict):
            raise ScenarioError(f"{path}: scenario '{name}' action #{j + 1} must be a mapping")
        kind = action.get("kind")
        if kind not in _VALID_KINDS:
            raise ScenarioError(
                f"{path}: scenario '{name}' action #{j + 1} has invalid kind '{kind}'. "
                f"Must be one of: {', '.join(sorted(_VALID_KINDS))}"
            )
    return expect


def load_scenario_file(path: Path) -> list[Scenario]:
    """Load scenarios from a YAML file.

    The file must have a top-level ``scenarios:`` key containing a list of
    scenario mappings.

    Raises:
        ScenarioError: If the file is malformed.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ScenarioError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict) or "scenarios" not in data:
        raise ScenarioError(f"{path}: must have a top-level 'scenarios' key")

    raw = data["scenarios"]
    if not isinstance(raw, list):
        raise ScenarioError(f"{path}: 'scenarios' must be a list")

    scenarios: list[Scenario] = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ScenarioError(f"{path}: scenario #{i + 1} must be a mapping")

        name = entry.get("name")
        if not name:
            raise ScenarioError(f"{path}: scenario #{i + 1} missing 'name'")

        if "expect" not in entry:
            raise ScenarioError(f"{path}: scenario '{name}' missing 'expect'")

        scenarios.append(Scenario(
            name=name,
            last=entry.get("last"),
            current=entry.get("current"),
            expect=_check_expect(path, name, entry["expect"] or []),
            source_file=str(path),
        ))

    return scenarios


def load_scenario_files(path: Path) -> list[Scenario]:
    """Load scenarios from a file or directory.

    If ``path`` is a directory, all ``*.yaml`` and ``*.yml`` files are loaded.
    If ``path`` is a file, just that file is loaded.

    Raises:
        ScenarioError: If any file is malformed or path doesn't exist.
    """
    if not path.exists():
        raise ScenarioError(f"Scenario path not found: {path}")

    if path.is_file():
        return load_scenario_file(path)

    files = sorted(
        list(path.glob("*.yaml")) + list(path.glob("*.yml"))
    )
    if not files:
        raise ScenarioError(f"No YAML scenario files found in {path}")

    scenarios: list[Scenario] = []
    for f in files:
        scenarios.extend(load_scenario_file(f))
    return scenarios


def run_scenarios(scenarios: list[Scenario]) -> ScenarioSuiteResult:
    """Diff every scenario and compare against its expected actions.

    A scenario whose trees cannot be built fails with the build error as
    its reason rather than aborting the whole suite.
    """
    suite = ScenarioSuiteResult()

    for scenario in scenarios:
        try:
            last = build_tree(scenario.last)
            current = build_tree(scenario.current)
        except SnapshotError as e:
            suite.results.append(ScenarioResult(scenario=scenario, passed=False, reason=str(e)))
            continue

        actual = [action.to_dict() for action in diff(last, current)]
        passed = actual == scenario.expect

        suite.results.append(ScenarioResult(
            scenario=scenario,
            passed=passed,
            actual=actual,
            reason="" if passed else f"expected {scenario.expect}, got {actual}",
        ))

    return suite
