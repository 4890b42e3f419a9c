"""Release aggregation: unreleased commits → next version.

Runs a change analyzer over every unreleased commit and folds the
resulting changes into one bump level and a categorized change list.
"""

from __future__ import annotations

from typing import Protocol

from .models import BumpLevel, Change, ReleaseData, VCSData
from .versions import bump


class ChangeAnalyzer(Protocol):
    """Classifies a commit message into release-note changes.

    Implementations must be pure functions of the message so that
    aggregation is reproducible. They may raise to reject a message; the
    error aborts the whole aggregation.
    """

    def analyze(self, message: str) -> list[Change]: ...


def aggregate(vcs_data: VCSData, analyzer: ChangeAnalyzer) -> ReleaseData:
    """Compute the next release from the unreleased commits.

    Each change is stamped with the sha and pre-release flag of the commit
    it came from. Changes are grouped by category in the order they were
    produced; the release bump is the most severe bump of any change.

    Args:
        vcs_data: Output of the commit walk. It is not modified, so it can be
                  aggregated again with a different analyzer.
        analyzer: Strategy used to classify each commit message.

    Returns:
        ReleaseData with the next version.

    Raises:
        Exception: Whatever the analyzer raises, on the first failing commit.
                   No partial ReleaseData is produced.
    """
    changes: dict[str, list[Change]] = {}
    level = BumpLevel.NO_BUMP

    for commit in vcs_data.unreleased_commits:
        for change in analyzer.analyze(commit.message):
            change = change.model_copy(
                update={"sha": commit.sha, "pre_released": commit.pre_released}
            )
            changes.setdefault(change.category, []).append(change)
            level = BumpLevel.combine(level, change.bump_level)

    return ReleaseData(
        current_version=vcs_data.current_version,
        next_version=bump(vcs_data.current_version, level),
        bump_level=level,
        changes=changes,
        time=vcs_data.time,
    )
