"""Common path utilities.

Experiments are run from a checkout, but the package may also be imported from
an installed location. These helpers locate the project root (the directory
holding `config/`) so that relative data and results paths resolve the same
way in both cases.
"""

from __future__ import annotations

from pathlib import Path


def find_project_root(start: Path) -> Path:
    """Find the enclosing project root.

    Strategy: walk upward from `start` until we find a directory that looks
    like the project root (must contain `config/` and `zika_r0/`).

    Returns `start` if no such parent exists.
    """
    start = start.resolve()
    for candidate in (start, *start.parents):
        if (candidate / "config").is_dir() and (candidate / "zika_r0").is_dir():
            return candidate
    return start
