"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from semrel.repository import CommitObject, RepositoryError

EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeRepository:
    """In-memory commit graph with the GitRepository query interface.

    Commits get increasing author times in creation order. New commits are
    added on top of the current HEAD unless parents are given.
    """

    def __init__(self) -> None:
        self.objects: dict[str, CommitObject] = {}
        self.head_sha: str | None = None
        self.tag_list: list[tuple[str, str]] = []
        self.reads: dict[str, int] = {}

    def add(self, message: str, parents: list[str] | None = None) -> str:
        if parents is None:
            parents = [self.head_sha] if self.head_sha else []
        sha = f"{len(self.objects):040x}"
        self.objects[sha] = CommitObject(
            sha=sha,
            message=message,
            time=EPOCH + timedelta(minutes=len(self.objects)),
            parents=tuple(parents),
        )
        self.head_sha = sha
        return sha

    def tag(self, sha: str, name: str) -> None:
        self.tag_list.append((name, sha))

    def checkout(self, sha: str) -> None:
        self.head_sha = sha

    def head(self) -> str:
        if self.head_sha is None:
            raise RepositoryError("get HEAD: reference not found")
        return self.head_sha

    def commit(self, sha: str) -> CommitObject:
        self.reads[sha] = self.reads.get(sha, 0) + 1
        try:
            return self.objects[sha]
        except KeyError:
            raise RepositoryError(f"read commit {sha}: object not found") from None

    def tags(self) -> list[tuple[str, str]]:
        return list(self.tag_list)


@pytest.fixture
def repo() -> FakeRepository:
    """An empty in-memory repository."""
    return FakeRepository()
