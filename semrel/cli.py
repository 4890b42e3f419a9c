"""CLI entry point for semrel."""

from __future__ import annotations

import json
from pathlib import Path

import click

from semrel.conventional import ConventionalAnalyzer
from semrel.models import ReleaseData
from semrel.pipeline import compute_release
from semrel.repository import RepositoryError
from semrel.toml import Settings, load_settings

path_option = click.option(
    "--path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Repository to inspect.",
)
prefix_option = click.option(
    "--prefix",
    default=None,
    help="Tag prefix in front of versions (default: [tool.semrel] tag-prefix).",
)


def _configure(root: Path) -> tuple[Settings, ConventionalAnalyzer]:
    """Load [tool.semrel] and build the analyzer it describes."""
    try:
        settings = load_settings(root)
        return settings, ConventionalAnalyzer(settings.analyzer_options())
    except ValueError as exc:
        raise click.ClickException(f"Invalid [tool.semrel] configuration: {exc}")


def _release(path: Path, prefix: str | None) -> ReleaseData:
    settings, analyzer = _configure(path)
    tag_prefix = settings.tag_prefix if prefix is None else prefix
    try:
        return compute_release(path, tag_prefix, analyzer)
    except RepositoryError as exc:
        raise click.ClickException(str(exc))
    except ValueError as exc:
        raise click.ClickException(f"Cannot analyze commits: {exc}")


def release_json(release: ReleaseData) -> str:
    """Serialize a release for scripts."""
    return json.dumps(
        {
            "current_version": str(release.current_version),
            "next_version": str(release.next_version),
            "bump_level": release.bump_level.name.lower(),
            "time": release.time.isoformat() if release.time else None,
            "changes": {
                category: [c.model_dump(mode="json") for c in changes]
                for category, changes in release.changes.items()
            },
        },
        indent=2,
    )


@click.group()
@click.version_option(package_name="semrel")
def cli() -> None:
    """Compute the next semantic version from git history."""


@cli.command(name="next")
@path_option
@prefix_option
@click.option("--json", "as_json", is_flag=True, help="Print the full release as JSON.")
def next_version(path: Path, prefix: str | None, as_json: bool) -> None:
    """Print the version the next release should get."""
    release = _release(path, prefix)
    if as_json:
        click.echo(release_json(release))
    else:
        click.echo(str(release.next_version))


@cli.command()
@path_option
@prefix_option
def changes(path: Path, prefix: str | None) -> None:
    """Print the unreleased changes by category."""
    release = _release(path, prefix)
    for category, entries in release.changes.items():
        click.echo(f"{category}:")
        for change in entries:
            scope = f"({change.scope}) " if change.scope else ""
            marker = " [pre-released]" if change.pre_released else ""
            click.echo(f"  - {scope}{change.subject} {change.sha[:7]}{marker}")


@cli.command()
@click.argument("message")
@path_option
def lint(message: str, path: Path) -> None:
    """Check that MESSAGE is a conventional commit message."""
    _, analyzer = _configure(path)
    errors = analyzer.lint(message)
    if errors:
        raise click.ClickException("; ".join(errors))
    click.echo("✓ ok")
