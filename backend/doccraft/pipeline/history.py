"""
Artifact version history.

Before a build overwrites `final.pdf`, the current file is copied to
`history/final-v<N>.pdf` where N is one more than the highest version
already there.  Versions are compared as integers: v10 comes after v9.
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path

from doccraft.pipeline.workspace import BuildWorkspace

_VERSION_RE = re.compile(r"^final-v(\d+)\.pdf$")


def existing_versions(history_dir: Path) -> list[int]:
    """Version numbers present in `history_dir`, ascending.  Unrelated files are ignored."""
    if not history_dir.is_dir():
        return []
    versions = []
    for entry in history_dir.iterdir():
        match = _VERSION_RE.match(entry.name)
        if match:
            versions.append(int(match.group(1)))
    return sorted(versions)


def next_history_path(history_dir: Path) -> Path:
    versions = existing_versions(history_dir)
    next_version = versions[-1] + 1 if versions else 1
    return history_dir / f"final-v{next_version}.pdf"


def rotate_history(workspace: BuildWorkspace) -> Path | None:
    """
    Copy the current artifact into the history directory.

    Returns the new history file, or None when there is no current
    artifact to keep.  Existing history files are never touched.
    """
    history_dir = workspace.history_dir
    history_dir.mkdir(parents=True, exist_ok=True)

    if not workspace.artifact_path.is_file():
        return None

    target = next_history_path(history_dir)
    shutil.copy2(workspace.artifact_path, target)
    return target
