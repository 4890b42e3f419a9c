"""Data models for semrel.

These Pydantic models represent the core data structures passed between
the tag scan, the commit walk and the release aggregation.
"""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum

import semver
from pydantic import BaseModel, ConfigDict, Field


class BumpLevel(IntEnum):
    """Severity of a release, ordered NO_BUMP < PATCH < MINOR < MAJOR."""

    NO_BUMP = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    @classmethod
    def combine(cls, *levels: BumpLevel) -> BumpLevel:
        """Fold levels into the most severe one (NO_BUMP when empty)."""
        return cls(max(levels, default=cls.NO_BUMP))


class Commit(BaseModel):
    """A commit recorded by the history walk.

    Attributes:
        message: Full commit message.
        sha: Commit hash.
        time: Author time of the commit.
        pre_released: True if any path from HEAD reaching this commit
                      passes a pre-release tag.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    sha: str
    time: datetime
    pre_released: bool = False


class Change(BaseModel):
    """One release-note entry extracted from a commit message.

    Only category and bump_level matter for aggregation; the remaining
    fields describe the change for whoever renders the notes.
    """

    model_config = ConfigDict(frozen=True)

    category: str
    bump_level: BumpLevel = BumpLevel.NO_BUMP
    pre_released: bool = False
    commit_type: str = ""
    scope: str = ""
    subject: str = ""
    breaking_message: str = ""
    sha: str = ""


class VCSData(BaseModel):
    """What the repository says about the upcoming release.

    Attributes:
        current_version: Greatest release tag bounding the walk from HEAD,
                         0.0.0 when there is none.
        unreleased_commits: Commits not covered by a release tag, oldest first.
        time: Author time of HEAD.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    current_version: semver.Version = Field(
        default_factory=lambda: semver.Version(0, 0, 0)
    )
    unreleased_commits: list[Commit] = Field(default_factory=list)
    time: datetime | None = None


class ReleaseData(BaseModel):
    """The next release derived from VCSData and a change analyzer.

    Attributes:
        current_version: Version of the previous release.
        next_version: Version the release should be tagged with.
        bump_level: Most severe level across all changes.
        changes: Changes grouped by category, in the order they were produced.
        time: Author time of the commit being released.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    current_version: semver.Version
    next_version: semver.Version
    bump_level: BumpLevel = BumpLevel.NO_BUMP
    changes: dict[str, list[Change]] = Field(default_factory=dict)
    time: datetime | None = None
