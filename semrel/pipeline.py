"""Next-version pipeline: tags → walk → analyze.

This module orchestrates what the command line runs:
1. Read version tags and map them to commits
2. Walk history from HEAD to find the previous release and unreleased commits
3. Classify each unreleased commit and compute the next version

Progress is reported on stderr; the functions return the data so the
caller decides what to print on stdout.
"""

from __future__ import annotations

from pathlib import Path

from .graph import walk_unreleased
from .models import ReleaseData, VCSData
from .release import ChangeAnalyzer, aggregate
from .repository import GitRepository
from .shell import info, step
from .versions import build_registry


def collect_vcs_data(repo_path: Path, tag_prefix: str) -> VCSData:
    """Find the current version and unreleased commits, with progress output.

    Same result as graph.resolve().
    """
    step("Reading version tags")
    repo = GitRepository(repo_path)
    tags = repo.tags()
    versions = build_registry(tags, tag_prefix)
    info(f"{len(versions)} tagged commits ({len(tags)} tags)")

    step("Walking commit history")
    data = walk_unreleased(repo, versions)
    info(f"current version: {data.current_version}")
    info(f"unreleased commits: {len(data.unreleased_commits)}")
    return data


def compute_release(
    repo_path: Path, tag_prefix: str, analyzer: ChangeAnalyzer
) -> ReleaseData:
    """Run the full pipeline for the repository at `repo_path`.

    Raises:
        RepositoryError: If the repository cannot be read.
        Exception: Whatever the analyzer raises.
    """
    data = collect_vcs_data(repo_path, tag_prefix)

    step(f"Analyzing {len(data.unreleased_commits)} commits")
    release = aggregate(data, analyzer)
    for category, changes in release.changes.items():
        info(f"{category}: {len(changes)}")
    info(
        f"{release.current_version} → {release.next_version} "
        f"({release.bump_level.name.lower()})"
    )
    return release
