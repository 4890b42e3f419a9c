"""Version parsing, bumping and the tag → version registry.

Tag names are parsed tolerantly: a leading "v" is dropped and incomplete
versions are padded (e.g., "v1.2" → "1.2.0"). Tags that still do not parse
as semver are not release tags and are skipped.
"""

from __future__ import annotations

from collections.abc import Iterable

import semver

from .models import BumpLevel


def parse_tolerant(version_str: str) -> semver.Version:
    """Parse a version string, accepting the usual tag spellings.

    - "v1.2.3" → "1.2.3"
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "1.2.3-rc.1+build.5" is kept as is

    Raises:
        ValueError: If the string is not a version. Short versions may not
                    carry pre-release or build metadata ("1.2-rc" is invalid).
    """
    s = version_str.strip()
    if s[:1] in ("v", "V"):
        s = s[1:]
    parts = s.split(".", 2)
    if len(parts) < 3:
        if any(c in parts[-1] for c in "+-"):
            raise ValueError(
                f"{version_str!r}: short version cannot carry pre-release/build"
            )
        # Pad with zeros to ensure we have 3 parts
        parts.extend(["0"] * (3 - len(parts)))
    return semver.Version.parse(".".join(parts))


def is_prerelease(version: semver.Version) -> bool:
    """True for versions carrying pre-release or build metadata."""
    return bool(version.prerelease or version.build)


def bump(version: semver.Version, level: BumpLevel) -> semver.Version:
    """Return the version that follows `version` for a release of `level`.

    Before 1.0.0 a breaking change only bumps the minor version, since
    pre-1.0 projects may break at any minor step:

        bump(0.2.1, MAJOR) → 0.3.0
        bump(1.2.1, MAJOR) → 2.0.0

    Bumped versions never carry pre-release or build metadata.
    """
    if level == BumpLevel.NO_BUMP:
        return version
    if level == BumpLevel.PATCH:
        return version.bump_patch()
    if level == BumpLevel.MAJOR and version.major > 0:
        return version.bump_major()
    return version.bump_minor()


def build_registry(
    tags: Iterable[tuple[str, str]], prefix: str = ""
) -> dict[str, semver.Version]:
    """Map commit sha → highest semantic version tagged on it.

    Args:
        tags: (tag name, commit sha) pairs. Annotated tags must already be
              peeled to the commit they point at.
        prefix: Optional tag prefix (e.g., "release-"). Removed before parsing
                when present; tags without it are still recognized.

    Returns:
        Map of sha to the tag with the highest semver precedence on that
        commit. Pre-releases rank below their release, so "1.0.0" wins over
        "1.0.0-rc.1", but "1.1.0-rc.1" wins over "1.0.0".
    """
    versions: dict[str, semver.Version] = {}
    for name, sha in tags:
        if prefix and name.startswith(prefix):
            name = name[len(prefix) :]
        try:
            version = parse_tolerant(name)
        except ValueError:
            # Not a version tag
            continue
        prev = versions.get(sha)
        if prev is None or version > prev:
            versions[sha] = version
    return versions
