"""Tests for semrel.pipeline."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from semrel.conventional import ConventionalAnalyzer
from semrel.pipeline import collect_vcs_data, compute_release
from semrel.repository import RepositoryError


class TestCollectVcsData:
    """Tests for collect_vcs_data()."""

    @patch("semrel.pipeline.GitRepository")
    def test_reports_progress(
        self,
        mock_repo_cls: MagicMock,
        repo,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Progress goes to stderr, nothing to stdout."""
        one = repo.add("1")
        repo.tag(one, "v1.0.0")
        repo.tag(one, "nightly")
        repo.add("2")
        mock_repo_cls.return_value = repo

        data = collect_vcs_data(Path("."), "")

        assert [c.message for c in data.unreleased_commits] == ["2"]
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Reading version tags" in captured.err
        assert "1 tagged commits (2 tags)" in captured.err
        assert "current version: 1.0.0" in captured.err
        assert "unreleased commits: 1" in captured.err

    @patch("semrel.pipeline.GitRepository")
    def test_repository_error_propagates(self, mock_repo_cls: MagicMock) -> None:
        mock_repo_cls.side_effect = RepositoryError("not a git repository")

        with pytest.raises(RepositoryError):
            collect_vcs_data(Path("."), "")


class TestComputeRelease:
    """Tests for compute_release()."""

    @patch("semrel.pipeline.GitRepository")
    def test_next_version(
        self,
        mock_repo_cls: MagicMock,
        repo,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        one = repo.add("feat: first")
        repo.tag(one, "v0.1.0")
        repo.add("fix: a")
        repo.add("feat(api): b")
        mock_repo_cls.return_value = repo

        release = compute_release(Path("."), "", ConventionalAnalyzer())

        assert str(release.next_version) == "0.2.0"
        assert list(release.changes) == ["fix", "feature"]
        assert "0.1.0 → 0.2.0 (minor)" in capsys.readouterr().err

    @patch("semrel.pipeline.GitRepository")
    def test_analyzer_error_propagates(
        self, mock_repo_cls: MagicMock, repo
    ) -> None:
        repo.add("anything")
        mock_repo_cls.return_value = repo
        analyzer = MagicMock()
        analyzer.analyze.side_effect = RuntimeError("analyzer broke")

        with pytest.raises(RuntimeError, match="analyzer broke"):
            compute_release(Path("."), "", analyzer)
