"""Commit graph traversal.

Finds the previous release and the commits made since then by walking the
commit DAG backwards from HEAD. Histories can be long and merge-heavy, so
the walk uses an explicit stack and remembers what it already knows about
each commit instead of re-walking shared ancestors.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

import semver

from .models import Commit, VCSData
from .repository import CommitObject, GitRepository
from .versions import build_registry, is_prerelease


class CommitSource(Protocol):
    """The part of a repository the walk reads from."""

    def head(self) -> str: ...

    def commit(self, sha: str) -> CommitObject: ...


def walk_unreleased(
    repo: CommitSource, versions: Mapping[str, semver.Version]
) -> VCSData:
    """Collect the current version and the unreleased commits.

    Every path from HEAD carries two flags: whether it is still unreleased
    and whether it has passed a pre-release tag. A release tag reached by a
    still-unreleased path closes that path and becomes a candidate for the
    current version. Pre-release (and build) tags only set the pre-release
    flag; they never close a path.

    A commit is unreleased if ANY path reaches it unreleased, and
    pre-released if ANY path reaching it is pre-released. A commit seen
    again is only re-expanded when one of its flags flips to true, so each
    commit is expanded at most three times and read from the repository
    once.

    Args:
        repo: Source of HEAD and commit objects.
        versions: Map of commit sha → tagged version (see build_registry).

    Returns:
        VCSData with the unreleased commits sorted by author time.

    Raises:
        RepositoryError: If HEAD or any commit on the way cannot be read.

    Example:
        initial ← "1" (tag 1.0.0) ← "2" (HEAD)
        → current_version 1.0.0, unreleased ["2"]
    """
    head = repo.head()
    current = semver.Version(0, 0, 0)
    objects: dict[str, CommitObject] = {}
    # sha → (unreleased, pre_released), the best known state
    state: dict[str, tuple[bool, bool]] = {}
    order: list[str] = []

    stack: list[tuple[str, bool, bool]] = [(head, True, False)]
    while stack:
        sha, unreleased, pre_released = stack.pop()

        tag = versions.get(sha)
        if tag is not None:
            if is_prerelease(tag):
                pre_released = True
            elif unreleased:
                # Release boundary for this path
                unreleased = False
                current = max(current, tag)

        known = state.get(sha)
        if known is None:
            objects[sha] = repo.commit(sha)
            order.append(sha)
        else:
            merged = (known[0] or unreleased, known[1] or pre_released)
            if merged == known:
                continue
            unreleased, pre_released = merged
        state[sha] = (unreleased, pre_released)

        # Reversed so that the first parent is walked first
        for parent in reversed(objects[sha].parents):
            stack.append((parent, unreleased, pre_released))

    commits = [
        Commit(
            message=objects[sha].message,
            sha=sha,
            time=objects[sha].time,
            pre_released=state[sha][1],
        )
        for sha in order
        if state[sha][0]
    ]
    # Stable sort: ties keep discovery order
    commits.sort(key=lambda c: c.time)

    return VCSData(
        current_version=current,
        unreleased_commits=commits,
        time=objects[head].time,
    )


def resolve(repo_path: str | Path, tag_prefix: str = "") -> VCSData:
    """Open the repository at `repo_path` and walk it from HEAD.

    Args:
        repo_path: Repository working tree (or any directory inside it).
        tag_prefix: Prefix in front of version tags (e.g., "release-").

    Raises:
        RepositoryError: If the repository cannot be opened or read. No
                         partial result is produced.
    """
    repo = GitRepository(repo_path)
    versions = build_registry(repo.tags(), tag_prefix)
    return walk_unreleased(repo, versions)
