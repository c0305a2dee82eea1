"""Command-line entry point for semver-release."""

from __future__ import annotations

import click
from rich.console import Console

from semver_release import __version__
from semver_release.logging import configure_logging

console = Console()
err_console = Console(stderr=True)

path_argument = click.argument("path", required=False, type=click.Path(file_okay=False))
rules_option = click.option(
    "--rules",
    "rules_file",
    type=click.Path(dir_okay=False),
    help="JSON file with release rules.",
)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="semver-release")
def app() -> None:
    """Compute the next semantic version from conventional commits and tag it."""


@app.command()
@path_argument
@click.option("--execute", is_flag=True, help="Create the tag instead of a dry run.")
@click.option("--push/--no-push", default=None, help="Push the created tag.")
@rules_option
@click.option("--tag-prefix", default=None, help="Prefix of release tag names.")
@click.option("--prerelease", default=None, help="Prerelease identifiers, e.g. rc.")
@click.option("--build-metadata", default=None, help="Build metadata to append.")
@click.option("--json", "json_output", is_flag=True, help="Print the result as JSON.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging.")
@click.option("-q", "--quiet", is_flag=True, help="Only log warnings.")
@click.option("--json-log", is_flag=True, help="Log as JSON lines.")
def release(
    path: str | None,
    execute: bool,
    push: bool | None,
    rules_file: str | None,
    tag_prefix: str | None,
    prerelease: str | None,
    build_metadata: str | None,
    json_output: bool,
    verbose: bool,
    quiet: bool,
    json_log: bool,
) -> None:
    """Compute the next version and optionally tag it."""
    from semver_release.cli.commands.release import run_release

    configure_logging(verbose=verbose, quiet=quiet, json_log=json_log)
    run_release(
        path=path,
        execute=execute,
        push=push,
        rules_file=rules_file,
        tag_prefix=tag_prefix,
        prerelease=prerelease,
        build_metadata=build_metadata,
        json_output=json_output,
        console=console,
        err_console=err_console,
    )


@app.command()
@path_argument
@rules_option
def validate(path: str | None, rules_file: str | None) -> None:
    """Validate configuration and release rules."""
    from semver_release.cli.commands.validate import run_validate

    configure_logging(quiet=True)
    run_validate(path=path, rules_file=rules_file, console=console, err_console=err_console)


@app.command()
def version() -> None:
    """Show the semver-release version."""
    console.print(f"semver-release {__version__}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
