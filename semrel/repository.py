"""Read-only access to a git repository through the git executable.

Only the three queries the history walk needs are exposed: the HEAD
commit, single commit objects and the tag list.
"""

from __future__ import annotations

import subprocess
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .shell import git

# NUL separated so that multi-line commit messages survive intact
_COMMIT_FORMAT = "%H%x00%P%x00%aI%x00%B"
_TAG_FORMAT = "%(refname:lstrip=2)%00%(objectname)%00%(*objectname)"


class RepositoryError(RuntimeError):
    """Raised when the repository cannot be opened or read."""


class CommitObject(BaseModel):
    """A commit as stored in git.

    Attributes:
        sha: Full commit hash.
        message: Full commit message.
        time: Author time.
        parents: Parent hashes in git order (first parent first).
    """

    model_config = ConfigDict(frozen=True)

    sha: str
    message: str
    time: datetime
    parents: tuple[str, ...] = ()


class GitRepository:
    """A git repository on disk.

    Every query shells out to `git -C <path> ...`. Failures of any kind
    (missing git, not a repository, unborn HEAD, corrupt objects) are
    reported as RepositoryError.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        if not self.path.is_dir():
            raise RepositoryError(f"{self.path}: no such directory")
        self._git("rev-parse", "--git-dir", what="open repository")

    def _git(self, *args: str, what: str) -> str:
        try:
            return git("-C", str(self.path), *args)
        except FileNotFoundError as exc:
            raise RepositoryError("git executable not found") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
            raise RepositoryError(f"{self.path}: {what}: {detail}") from exc

    def head(self) -> str:
        """Return the sha of the commit HEAD points at."""
        return self._git("rev-parse", "--verify", "HEAD^{commit}", what="get HEAD")

    def commit(self, sha: str) -> CommitObject:
        """Read one commit object."""
        out = self._git(
            "show", "-s", f"--format={_COMMIT_FORMAT}", sha, what=f"read commit {sha}"
        )
        fields = out.split("\x00", 3)
        if len(fields) != 4:
            raise RepositoryError(f"{self.path}: read commit {sha}: malformed output")
        full_sha, parents, when, message = fields
        try:
            time = datetime.fromisoformat(when)
        except ValueError as exc:
            raise RepositoryError(
                f"{self.path}: read commit {sha}: bad author date {when!r}"
            ) from exc
        return CommitObject(
            sha=full_sha,
            message=message,
            time=time,
            parents=tuple(parents.split()),
        )

    def tags(self) -> list[tuple[str, str]]:
        """List (tag name, commit sha) pairs.

        Covers lightweight and annotated tags; annotated tags are peeled
        to the object they point at.
        """
        out = self._git(
            "for-each-ref", f"--format={_TAG_FORMAT}", "refs/tags", what="list tags"
        )
        tags: list[tuple[str, str]] = []
        for line in out.splitlines():
            name, sha, peeled = line.split("\x00")
            tags.append((name, peeled or sha))
        return tags
