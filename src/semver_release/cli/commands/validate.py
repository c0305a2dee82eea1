"""Implementation of the 'validate' command.

Loads the configuration and release rules and reports any error,
without reading the repository.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.table import Table

from semver_release.config import load_config, load_rules_file
from semver_release.exceptions import ConfigError

if TYPE_CHECKING:
    from rich.console import Console


def run_validate(
    path: str | None,
    rules_file: str | None,
    console: Console,
    err_console: Console,
) -> None:
    """Run the validate command.

    Args:
        path: Optional path to the project directory
        rules_file: Optional JSON release rules file
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    try:
        config = load_config(project_path)
        rules = load_rules_file(Path(rules_file)) if rules_file else config.rule_table
    except ConfigError as e:
        err_console.print(f"[red]Invalid configuration:[/] {e}")
        raise SystemExit(1) from e

    table = Table(title="Release rules")
    table.add_column("Commit type", style="cyan")
    table.add_column("Bump")
    for rule in rules:
        table.add_row(rule.commit_type, str(rule.bump))
    table.add_row("any breaking change", "major", style="dim")
    console.print(table)

    if config.is_monorepo:
        projects = Table(title="Projects")
        projects.add_column("Name", style="cyan")
        projects.add_column("Path")
        projects.add_column("Tag prefix")
        for target in config.release_targets():
            projects.add_row(target.name, ", ".join(target.paths), target.tag_prefix)
        console.print(projects)

    console.print(f"Tag prefix: [cyan]{config.effective_tag_prefix or '(none)'}[/]")
    console.print(f"Tagger: [cyan]{config.tagger.name} <{config.tagger.email}>[/]")
    console.print("[green]Configuration is valid.[/]")
