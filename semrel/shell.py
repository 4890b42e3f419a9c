"""Shell and git utilities.

Provides a simple wrapper around subprocess calls to git, plus output
formatting helpers for the command line.
"""

from __future__ import annotations

import subprocess
import sys


def git(*args: str) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "-C", "repo", "rev-parse", "HEAD").

    Returns:
        Stripped stdout from the git command.

    Raises:
        subprocess.CalledProcessError: If git exits non-zero.
        FileNotFoundError: If the git executable is not installed.
    """
    result = subprocess.run(
        ["git", *args],
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        check=True,
    )
    return result.stdout.strip()


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Headers go to stderr so that stdout only carries results (versions,
    JSON) and stays usable from scripts.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}", file=sys.stderr)


def info(msg: str) -> None:
    """Print a detail line under the current step."""
    print(f"  {msg}", file=sys.stderr)
