"""navdiff CLI: command-line interface for navdiff.

Commands:
    diff        Diff two snapshot files into navigation actions
    show        Print a snapshot as an indented tree
    validate    Validate snapshot files
    test        Run navigation scenario files
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from navdiff import __version__
from navdiff.config import OUTPUT_FORMATS, NavdiffConfig, load_config
from navdiff.diffing.differ import DiffAction, diff
from navdiff.models import ActionKind
from navdiff.testing.runner import ScenarioError, load_scenario_files, run_scenarios
from navdiff.tree.loader import SnapshotError, load_snapshot, tree_to_dict
from navdiff.tree.node import NavigationNode

# --- Defaults ---

DEFAULT_SCENARIOS = "./scenarios"
ABSENT_TREE = "-"


def _resolve_cfg() -> NavdiffConfig:
    """Load config from navdiff.yaml (auto-discover, never error)."""
    try:
        return load_config()
    except (OSError, ValueError):
        return NavdiffConfig()


def _or(explicit: Any, cfg_val: Any, fallback: Any) -> Any:
    """Return first non-None value: explicit CLI flag > config > fallback."""
    for val in (explicit, cfg_val):
        if val is not None:
            return val
    return fallback


def _load(path: str, validate: bool) -> NavigationNode | None:
    if path == ABSENT_TREE:
        return None
    try:
        return load_snapshot(path, validate=validate)
    except SnapshotError as e:
        click.echo(click.style("ERROR", fg="red") + f"  {e}", err=True)
        sys.exit(1)


_KIND_COLORS = {
    ActionKind.POP: "red",
    ActionKind.PUSH: "green",
    ActionKind.CHANGED: "yellow",
    ActionKind.CHANGED_ACTIVE_CHILD: "cyan",
    ActionKind.SELECTED_ACTIVE_CHILD: "blue",
}


def _format_action(action: DiffAction) -> str:
    text = str(action)
    verb, _, rest = text.partition(" ")
    return click.style(verb, fg=_KIND_COLORS[action.kind]) + f" {rest}"


# --- Root group ---


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """navdiff: diff navigation-state trees into push/pop/changed actions."""
    cfg = _resolve_cfg()
    level = logging.DEBUG if verbose else getattr(logging, cfg.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


# --- diff command ---


@cli.command("diff")
@click.argument("last")
@click.argument("current")
@click.option(
    "--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default=None,
    help="Output format (default from navdiff.yaml, else text)",
)
@click.option(
    "--validate/--no-validate", default=None,
    help="Check tree invariants (unique values, parent links) before diffing",
)
def diff_cmd(last: str, current: str, output_format: str | None, validate: bool | None) -> None:
    """Diff two snapshot files.

    LAST and CURRENT are YAML or JSON snapshot files. Pass "-" for either
    to diff against an absent (empty) tree.
    """
    cfg = _resolve_cfg()
    output_format = _or(output_format, cfg.format, "text")
    validate = _or(validate, cfg.validate, True)

    last_root = _load(last, validate)
    current_root = _load(current, validate)
    actions = diff(last_root, current_root, validate=validate)

    if output_format == "json":
        click.echo(json.dumps([a.to_dict() for a in actions], indent=2))
        return

    if not actions:
        click.echo("No changes.")
        return
    for action in actions:
        click.echo(_format_action(action))


# --- show command ---


def _render_tree(root: NavigationNode) -> list[str]:
    lines: list[str] = []
    for node in root.traverse():
        marker = "* " if node.parent is not None and node.parent.is_active_child(node) else "  "
        lines.append("  " * node.depth + marker + str(node.value))
    return lines


@cli.command()
@click.argument("snapshot")
@click.option(
    "--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default=None,
    help="Output format (default from navdiff.yaml, else text)",
)
def show(snapshot: str, output_format: str | None) -> None:
    """Print a snapshot as an indented tree. Active children are marked with *."""
    cfg = _resolve_cfg()
    output_format = _or(output_format, cfg.format, "text")
    root = _load(snapshot, cfg.validate)

    if output_format == "json":
        click.echo(json.dumps(tree_to_dict(root) if root is not None else None, indent=2))
        return

    if root is None:
        click.echo("(empty tree)")
        return
    for line in _render_tree(root):
        click.echo(line)


# --- validate command ---


@cli.command()
@click.argument("snapshots", nargs=-1, required=True)
def validate(snapshots: tuple[str, ...]) -> None:
    """Validate snapshot files."""
    errors: list[str] = []

    for snapshot in snapshots:
        try:
            root = load_snapshot(snapshot)
        except SnapshotError as e:
            errors.append(f"{snapshot}: {e}")
            click.echo(click.style("FAIL", fg="red") + f"  {e}")
            continue
        count = len(root) if root is not None else 0
        click.echo(
            click.style("OK", fg="green")
            + f"  {snapshot}: {count} node(s)"
        )

    if errors:
        click.echo(f"\n{len(errors)} error(s) found.")
        sys.exit(1)
    click.echo(f"\nAll {len(snapshots)} snapshot(s) valid.")


# --- test command ---


@cli.command("test")
@click.argument("scenario_path", required=False)
def test_scenarios(scenario_path: str | None) -> None:
    """Run navigation scenarios.

    SCENARIO_PATH is a YAML file or directory of YAML files. Each scenario
    declares a last tree, a current tree and the expected actions.
    Defaults to the ``scenarios`` entry of navdiff.yaml, else ./scenarios.
    """
    cfg = _resolve_cfg()
    scenario_path = _or(scenario_path, cfg.scenarios, DEFAULT_SCENARIOS)

    try:
        scenarios = load_scenario_files(Path(scenario_path))
    except ScenarioError as e:
        click.echo(click.style("ERROR", fg="red") + f"  {e}", err=True)
        sys.exit(1)

    suite = run_scenarios(scenarios)

    for result in suite.results:
        if result.passed:
            click.echo(
                click.style("  PASS", fg="green")
                + f"  {result.scenario.name}"
            )
        else:
            click.echo(
                click.style("  FAIL", fg="red")
                + f"  {result.scenario.name}"
            )
            click.echo(f"        reason: {result.reason}")

    click.echo("")
    if suite.all_passed:
        click.echo(click.style(
            f"All {suite.total} scenario(s) passed.", fg="green", bold=True,
        ))
    else:
        click.echo(
            click.style(f"{suite.failed} failed", fg="red", bold=True)
            + f", {suite.passed} passed, {suite.total} total."
        )
        sys.exit(1)
