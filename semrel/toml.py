"""Configuration from the [tool.semrel] table of pyproject.toml.

Example:

    [tool.semrel]
    tag-prefix = "release-"
    feature-types = ["feat", "feature"]
    fix-types = ["fix", "perf"]
    breaking-change-markers = ["BREAKING CHANGE:"]
"""

from __future__ import annotations

from pathlib import Path

import tomlkit
from pydantic import BaseModel, ConfigDict, Field

from .conventional import AnalyzerOptions


class Settings(BaseModel):
    """semrel settings. Keys are spelled with hyphens in pyproject.toml."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    tag_prefix: str = Field(default="", alias="tag-prefix")
    chore_types: list[str] | None = Field(default=None, alias="chore-types")
    fix_types: list[str] | None = Field(default=None, alias="fix-types")
    feature_types: list[str] | None = Field(default=None, alias="feature-types")
    breaking_change_markers: list[str] | None = Field(
        default=None, alias="breaking-change-markers"
    )

    def analyzer_options(self) -> AnalyzerOptions:
        """Build analyzer options, keeping defaults for keys not configured."""
        overrides = {
            name: value
            for name in (
                "chore_types",
                "fix_types",
                "feature_types",
                "breaking_change_markers",
            )
            if (value := getattr(self, name)) is not None
        }
        return AnalyzerOptions(**overrides)


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a pyproject.toml file."""
    return tomlkit.parse(path.read_text())


def load_settings(root: Path) -> Settings:
    """Read [tool.semrel] from `root`/pyproject.toml.

    A missing file or table gives the default settings.

    Raises:
        pydantic.ValidationError: On unknown keys or values of the wrong type.
        tomlkit.exceptions.ParseError: If pyproject.toml is not valid TOML.
    """
    pyproject = root / "pyproject.toml"
    if not pyproject.exists():
        return Settings()
    doc = load_pyproject(pyproject)
    table = doc.get("tool", {}).get("semrel", {})
    # unwrap() turns tomlkit items into plain str/list values
    return Settings.model_validate(table.unwrap() if table else {})
