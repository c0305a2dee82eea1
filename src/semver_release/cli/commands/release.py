"""Implementation of the 'release' command.

The release command computes the next version from the commit history
and, with --execute, tags HEAD with it. In a monorepo every configured
project is versioned and tagged on its own.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.panel import Panel
from rich.table import Table

from semver_release.ci import JsonOutput, write_github_output
from semver_release.config import load_config, load_rules_file
from semver_release.core.engine import compute_releases, tag_release
from semver_release.core.version import validate_build_metadata, validate_prerelease
from semver_release.exceptions import ConfigError, GitError, VersionParseError
from semver_release.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from semver_release.core.engine import DerivationResult, ReleaseTarget


def run_release(
    path: str | None,
    execute: bool,
    push: bool | None,
    rules_file: str | None,
    tag_prefix: str | None,
    prerelease: str | None,
    build_metadata: str | None,
    json_output: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the release command.

    Args:
        path: Optional path to the repository
        execute: Whether to actually create the tag
        push: Push the tag after creating it (None: use config)
        rules_file: Optional JSON release rules file
        tag_prefix: Tag prefix override (e.g., "v")
        prerelease: Prerelease identifiers for a new release (e.g., "rc")
        build_metadata: Build metadata appended to the version
        json_output: Print a JSON document instead of rich output
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()

    # Load configuration and rules before touching history
    try:
        config = load_config(project_path)
        rules = load_rules_file(Path(rules_file)) if rules_file else config.rule_table
    except ConfigError as e:
        err_console.print(f"[red]Error loading config:[/] {e}")
        raise SystemExit(1) from e

    try:
        prerelease = validate_prerelease(prerelease) if prerelease else None
        build_metadata = validate_build_metadata(build_metadata) if build_metadata else None
    except VersionParseError as e:
        err_console.print(f"[red]Invalid option:[/] {e}")
        raise SystemExit(1) from e

    targets = config.release_targets(tag_prefix)
    should_push = config.push if push is None else push

    try:
        repo = GitRepository(project_path)
        releases = compute_releases(
            repo,
            rules,
            targets,
            skip_release_patterns=config.commits.skip_release_patterns,
            prerelease=prerelease or config.version.prerelease,
            build_metadata=build_metadata or config.version.build_metadata,
        )
    except GitError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(1) from e

    for target, result in releases:
        write_github_output(result, target.tag_prefix, project=target.name)

    if json_output:
        output = JsonOutput()
        for target, result in releases:
            output.add_release(result, target.tag_prefix, project=target.name)
        console.print_json(output.render())
    else:
        for target, result in releases:
            _print_result(target, result, execute, console)

    if not execute:
        return

    for target, result in releases:
        if not result.released:
            continue
        try:
            tag = tag_release(
                repo,
                result,
                tagger=config.tagger,
                prefix=target.tag_prefix,
                push=should_push,
                remote=config.remote,
            )
        except GitError as e:
            err_console.print(f"[red]Error creating tag:[/] {e}")
            raise SystemExit(1) from e

        if json_output:
            continue

        console.print(f"  [green]✓[/] Created tag [cyan]{tag}[/]")
        if should_push:
            console.print(f"  [green]✓[/] Pushed [cyan]{tag}[/] to [cyan]{config.remote}[/]")


def _print_result(
    target: ReleaseTarget,
    result: DerivationResult,
    execute: bool,
    console: Console,
) -> None:
    """Print the computed release as a rich summary."""
    mode_str = "[green]EXECUTING[/]" if execute else "[yellow]DRY-RUN[/]"
    if target.name:
        mode_str += f" [bold]{target.name}[/]"
    prefix = target.tag_prefix
    baseline = result.baseline
    previous = "none (first release)" if baseline.is_synthetic else baseline.tag_name

    if not result.released:
        console.print(
            f"\n{mode_str} - No releasable changes since [cyan]{previous}[/]. Nothing to do.\n"
        )
        return

    console.print(
        f"\n{mode_str} - Releasing [green]{result.tag_name(prefix)}[/] (previous: {previous})\n"
    )

    table = Table(title="Version bumps")
    table.add_column("Commit", style="dim")
    table.add_column("Bump")
    table.add_column("Message")
    table.add_column("Version", style="green")
    for applied in result.bumps:
        bump = f"[red]{applied.bump}[/]" if applied.commit.is_breaking else str(applied.bump)
        table.add_row(
            applied.commit.short_sha,
            bump,
            applied.commit.short_description,
            str(applied.version),
        )
    console.print(table)

    if not execute:
        console.print(
            Panel(
                f"[bold]Would create tag[/] [cyan]{result.tag_name(prefix)}[/] on HEAD",
                title="[yellow]Dry Run Preview[/]",
                border_style="yellow",
            )
        )
        console.print("\n[dim]Run with [cyan]--execute[/] to create the tag.[/]")
