"""End-to-end tests against real repositories built with the git executable."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from semrel.conventional import ConventionalAnalyzer
from semrel.graph import resolve
from semrel.models import BumpLevel
from semrel.pipeline import compute_release
from semrel.release import aggregate
from semrel.repository import RepositoryError

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")

GIT_CONFIG = [
    "-c",
    "user.name=semrel",
    "-c",
    "user.email=semrel@example.com",
    "-c",
    "commit.gpgsign=false",
    "-c",
    "tag.gpgsign=false",
]


def run_git(root: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-C", str(root), *GIT_CONFIG, *args],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def commit(root: Path, message: str) -> str:
    run_git(root, "commit", "--allow-empty", "-q", "-m", message)
    return run_git(root, "rev-parse", "HEAD")


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    run_git(tmp_path, "init", "-q")
    return tmp_path


class TestRealRepository:
    def test_release_then_commit(self, git_repo: Path) -> None:
        """initial → "1" (v1.0.0) → "2": only "2" is unreleased."""
        commit(git_repo, "initial")
        commit(git_repo, "1")
        run_git(git_repo, "tag", "v1.0.0")
        head = commit(git_repo, "2")

        data = resolve(git_repo)

        assert str(data.current_version) == "1.0.0"
        assert [c.message.strip() for c in data.unreleased_commits] == ["2"]
        assert data.unreleased_commits[0].sha == head

        release = aggregate(data, ConventionalAnalyzer())
        assert str(release.next_version) == "1.0.0"
        assert release.bump_level == BumpLevel.NO_BUMP

    def test_annotated_tag_and_feature(self, git_repo: Path) -> None:
        commit(git_repo, "initial")
        run_git(git_repo, "tag", "-a", "release-2.1.0", "-m", "Release 2.1.0")
        commit(git_repo, "fix: typo")
        commit(git_repo, "feat(walk): follow merges")

        release = compute_release(git_repo, "release-", ConventionalAnalyzer())

        assert str(release.current_version) == "2.1.0"
        assert str(release.next_version) == "2.2.0"
        assert [c.subject for c in release.changes["feature"]] == ["follow merges"]
        assert [c.subject for c in release.changes["fix"]] == ["typo"]

    def test_merge_of_released_and_unreleased_branch(self, git_repo: Path) -> None:
        commit(git_repo, "initial")
        base = run_git(git_repo, "symbolic-ref", "--short", "HEAD")
        run_git(git_repo, "checkout", "-q", "-b", "side")
        commit(git_repo, "fix: side")
        run_git(git_repo, "checkout", "-q", base)
        commit(git_repo, "main")
        run_git(git_repo, "tag", "1.0.0")
        run_git(git_repo, "merge", "-q", "--no-ff", "-m", "merge side", "side")

        data = resolve(git_repo)

        assert str(data.current_version) == "1.0.0"
        assert sorted(c.message.strip() for c in data.unreleased_commits) == [
            "fix: side",
            "initial",
            "merge side",
        ]

    def test_empty_repository(self, git_repo: Path) -> None:
        with pytest.raises(RepositoryError, match="HEAD"):
            resolve(git_repo)

    def test_not_a_repository(self, tmp_path: Path) -> None:
        plain = tmp_path / "plain"
        plain.mkdir()
        # Keep git from finding a repository above tmp_path
        (plain / ".git").write_text("gitdir: /nonexistent\n")

        with pytest.raises(RepositoryError):
            resolve(plain)
