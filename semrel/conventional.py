"""Conventional (angular style) commit message analyzer.

Recognizes headers like "feat(parser): add x" or "fix: y" and breaking
change markers anywhere in the message:

    fix(cli): handle missing config

    BREAKING CHANGE: --config is now required

See https://www.conventionalcommits.org/ for the format.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import BumpLevel, Change

_FULL_HEAD = re.compile(r"^\s*([a-zA-Z]+)\s*\(([^)]+)\):\s*([^\n]*)")
_MINIMAL_HEAD = re.compile(r"^\s*([a-zA-Z]+):\s*([^\n]*)")
_TRIM = " \t\n"

CATEGORIES = {
    BumpLevel.MAJOR: "breaking",
    BumpLevel.MINOR: "feature",
    BumpLevel.PATCH: "fix",
    BumpLevel.NO_BUMP: "chore",
}


class AnalyzerOptions(BaseModel):
    """Which commit types bump which part of the version.

    Attributes:
        chore_types: Known types that never bump (only used by lint).
        fix_types: Types that bump the patch version.
        feature_types: Types that bump the minor version.
        breaking_change_markers: Regular expressions; a match anywhere in
                                 the message makes the change breaking.
    """

    model_config = ConfigDict(frozen=True)

    chore_types: list[str] = Field(default_factory=lambda: ["chore", "docs", "test"])
    fix_types: list[str] = Field(
        default_factory=lambda: ["fix", "refactor", "perf", "style"]
    )
    feature_types: list[str] = Field(default_factory=lambda: ["feat"])
    breaking_change_markers: list[str] = Field(
        default_factory=lambda: [r"BREAKING\s+CHANGE:", r"BREAKING\s+CHANGE", r"BREAKING:"]
    )

    @field_validator("chore_types", "fix_types", "feature_types")
    @classmethod
    def _types_normalized(cls, types: list[str]) -> list[str]:
        # Header types are lower-cased before lookup
        return [t.strip().lower() for t in types]

    @field_validator("breaking_change_markers")
    @classmethod
    def _markers_compile(cls, markers: list[str]) -> list[str]:
        for marker in markers:
            try:
                re.compile(marker)
            except re.error as exc:
                raise ValueError(
                    f"invalid breaking change marker {marker!r}: {exc}"
                ) from exc
        return markers


class Header(BaseModel):
    """Parsed first line of a commit message."""

    conventional: bool
    commit_type: str = ""
    scope: str = ""
    subject: str = ""


def parse_header(message: str) -> Header:
    """Split the message header into type, scope and subject.

    Type and scope are lower-cased; the subject keeps its case. A header
    that is not conventional keeps its trimmed first line as subject.
    """
    text = message.replace("\r", "")
    if match := _FULL_HEAD.match(text):
        return Header(
            conventional=True,
            commit_type=match[1].strip(_TRIM).lower(),
            scope=match[2].strip(_TRIM).lower(),
            subject=match[3].strip(_TRIM),
        )
    if match := _MINIMAL_HEAD.match(text):
        return Header(
            conventional=True,
            commit_type=match[1].strip(_TRIM).lower(),
            subject=match[2].strip(_TRIM),
        )
    return Header(conventional=False, subject=text.split("\n")[0].strip(_TRIM))


def parse_breaking_change(message: str, markers: list[str]) -> str | None:
    """Return the text after the first matching breaking change marker.

    Markers are tried in order. Returns None when no marker matches, and
    an empty string when a marker matches but has no description.
    """
    for marker in markers:
        match = re.search(marker + r"\s*(.*)", message, re.MULTILINE | re.DOTALL)
        if match:
            return match[1].strip(_TRIM)
    return None


class ConventionalAnalyzer:
    """Change analyzer for conventional commit messages.

    Produces exactly one Change per message. Messages that do not follow
    the convention, or use an unknown type, become NO_BUMP "chore" changes.
    """

    def __init__(self, options: AnalyzerOptions | None = None) -> None:
        self.options = options or AnalyzerOptions()

    def bump_level(self, header: Header, breaking: str | None) -> BumpLevel:
        if breaking is not None:
            return BumpLevel.MAJOR
        if header.commit_type in self.options.feature_types:
            return BumpLevel.MINOR
        if header.commit_type in self.options.fix_types:
            return BumpLevel.PATCH
        return BumpLevel.NO_BUMP

    def analyze(self, message: str) -> list[Change]:
        header = parse_header(message)
        breaking = parse_breaking_change(message, self.options.breaking_change_markers)
        level = self.bump_level(header, breaking)
        return [
            Change(
                category=CATEGORIES[level],
                bump_level=level,
                commit_type=header.commit_type,
                scope=header.scope,
                subject=header.subject,
                breaking_message=breaking or "",
            )
        ]

    def lint(self, message: str) -> list[str]:
        """Check the header format and that its type is a known one.

        Returns:
            Error messages; empty when the message is fine.
        """
        header = parse_header(message)
        if not header.conventional:
            return ["invalid message head"]
        known = (
            self.options.chore_types
            + self.options.feature_types
            + self.options.fix_types
        )
        if header.commit_type not in known:
            return ["invalid type"]
        return []
