"""Tests for the navigation scenario runner.

Covers:
- Scenario file loading (valid, malformed, missing)
- Scenario runner (pass, fail, mixed)
- Bundled scenario files
"""

from pathlib import Path

import pytest

from navdiff.testing.runner import (
    Scenario,
    ScenarioError,
    load_scenario_file,
    load_scenario_files,
    run_scenarios,
)

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

SCENARIOS_DIR = _PROJECT_ROOT / "scenarios"

VALID = """\
scenarios:
  - name: push-details
    last:
      value: app
      children: [{value: home}]
    current:
      value: app
      children: [{value: home}, {value: details}]
    expect:
      - {kind: push, node: details}
"""


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


# --- Loading ---


class TestLoadScenarioFile:
    def test_valid_file(self, tmp_path: Path):
        scenarios = load_scenario_file(_write(tmp_path, "s.yaml", VALID))
        assert len(scenarios) == 1
        s = scenarios[0]
        assert s.name == "push-details"
        assert s.last["value"] == "app"
        assert s.expect == [{"kind": "push", "node": "details"}]
        assert s.source_file.endswith("s.yaml")

    def test_missing_scenarios_key(self, tmp_path: Path):
        with pytest.raises(ScenarioError, match="top-level 'scenarios'"):
            load_scenario_file(_write(tmp_path, "s.yaml", "tests: []\n"))

    def test_scenarios_not_a_list(self, tmp_path: Path):
        with pytest.raises(ScenarioError, match="must be a list"):
            load_scenario_file(_write(tmp_path, "s.yaml", "scenarios: {}\n"))

    def test_missing_name(self, tmp_path: Path):
        with pytest.raises(ScenarioError, match="missing 'name'"):
            load_scenario_file(_write(tmp_path, "s.yaml", "scenarios:\n  - expect: []\n"))

    def test_missing_expect(self, tmp_path: Path):
        with pytest.raises(ScenarioError, match="missing 'expect'"):
            load_scenario_file(_write(tmp_path, "s.yaml", "scenarios:\n  - name: x\n"))

    def test_invalid_kind(self, tmp_path: Path):
        text = "scenarios:\n  - name: x\n    expect:\n      - {kind: teleport, node: a}\n"
        with pytest.raises(ScenarioError, match="invalid kind 'teleport'"):
            load_scenario_file(_write(tmp_path, "s.yaml", text))

    def test_invalid_yaml(self, tmp_path: Path):
        with pytest.raises(ScenarioError, match="Invalid YAML"):
            load_scenario_file(_write(tmp_path, "s.yaml", "scenarios: [unclosed\n"))


class TestLoadScenarioFiles:
    def test_directory(self, tmp_path: Path):
        _write(tmp_path, "a.yaml", VALID)
        _write(tmp_path, "b.yml", VALID.replace("push-details", "push-again"))
        names = [s.name for s in load_scenario_files(tmp_path)]
        assert names == ["push-details", "push-again"]

    def test_missing_path(self, tmp_path: Path):
        with pytest.raises(ScenarioError, match="not found"):
            load_scenario_files(tmp_path / "nope")

    def test_empty_directory(self, tmp_path: Path):
        with pytest.raises(ScenarioError, match="No YAML scenario files"):
            load_scenario_files(tmp_path)


# --- Running ---


class TestRunScenarios:
    def test_passing(self, tmp_path: Path):
        suite = run_scenarios(load_scenario_file(_write(tmp_path, "s.yaml", VALID)))
        assert suite.total == 1
        assert suite.all_passed

    def test_failing(self):
        scenario = Scenario(
            name="wrong",
            last={"value": "app"},
            current={"value": "app", "children": [{"value": "home"}]},
            expect=[{"kind": "pop", "node": "home"}],
        )
        suite = run_scenarios([scenario])
        assert suite.failed == 1
        result = suite.results[0]
        assert result.actual == [{"kind": "push", "node": "home"}]
        assert "expected" in result.reason

    def test_bad_tree_fails_scenario(self):
        scenario = Scenario(
            name="dup",
            current={"value": "a", "children": [{"value": "a"}]},
            expect=[],
        )
        suite = run_scenarios([scenario])
        assert not suite.all_passed
        assert "Duplicate value" in suite.results[0].reason

    def test_mixed(self):
        ok = Scenario(name="ok", expect=[])
        bad = Scenario(name="bad", current={"value": "x"}, expect=[])
        suite = run_scenarios([ok, bad])
        assert (suite.passed, suite.failed, suite.total) == (1, 1, 2)

    def test_empty_suite_is_not_all_passed(self):
        assert not run_scenarios([]).all_passed


class TestBundledScenarios:
    def test_all_pass(self):
        suite = run_scenarios(load_scenario_files(SCENARIOS_DIR))
        failures = [(r.scenario.name, r.reason) for r in suite.results if not r.passed]
        assert failures == []
        assert suite.total >= 10
