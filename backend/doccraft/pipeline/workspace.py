"""
BuildWorkspace — the per-instance directory every build stage works in.

The workspace value is computed once per build from the instance's
sequence code and handed to every stage, so no stage re-derives paths
from the instance on its own.

On-disk layout (other tooling depends on it):

    uploads/contents/<instance_code>/
        template.tex, ...        copied from slugs/<layout slug>/
        content.md               header block + raw body
        qr.png                   QR code of the instance UUID
        final.pdf                latest artifact
        history/final-v<N>.pdf   earlier artifacts
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from doccraft.core.config import settings
from doccraft.core.constants import (
    ARTIFACT_FILENAME,
    CONTENTS_SUBDIR,
    HISTORY_SUBDIR,
    QR_FILENAME,
    SOURCE_FILENAME,
    TEMPLATE_FILENAME,
)
from doccraft.core.logging import get_logger
from doccraft.pipeline.errors import WorkspaceError

logger = get_logger(__name__)


def artifact_url(instance_code: str) -> str:
    """Public path of an instance's latest artifact (fixed form, independent of UPLOADS_DIR)."""
    return f"uploads/{CONTENTS_SUBDIR}/{instance_code}/{ARTIFACT_FILENAME}"


@dataclass(frozen=True)
class BuildWorkspace:
    """Paths of one instance's build directory."""

    root: Path

    @classmethod
    def for_instance(cls, instance_code: str, uploads_dir: str | Path | None = None) -> BuildWorkspace:
        base = Path(uploads_dir if uploads_dir is not None else settings.UPLOADS_DIR)
        return cls(root=base / CONTENTS_SUBDIR / instance_code)

    @property
    def source_path(self) -> Path:
        return self.root / SOURCE_FILENAME

    @property
    def template_path(self) -> Path:
        return self.root / TEMPLATE_FILENAME

    @property
    def artifact_path(self) -> Path:
        return self.root / ARTIFACT_FILENAME

    @property
    def qr_path(self) -> Path:
        return self.root / QR_FILENAME

    @property
    def history_dir(self) -> Path:
        return self.root / HISTORY_SUBDIR

    def ensure_root(self) -> None:
        """Create the workspace directory, raising WorkspaceError with the path on failure."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WorkspaceError(
                f"Cannot create build workspace ({exc.strerror or exc})",
                path=str(self.root),
            ) from exc

    def prepare(self, slug: str, slugs_dir: str | Path | None = None) -> list[str]:
        """
        Create the workspace and copy the layout's template bundle into it.

        A missing bundle is not fatal here: the renderer will fail on the
        missing template and that failure is recorded like any other build.
        Any other filesystem error aborts with the offending path.

        Returns the names of the copied top-level entries.
        """
        self.ensure_root()

        bundle = Path(slugs_dir if slugs_dir is not None else settings.SLUGS_DIR) / slug
        if not bundle.is_dir():
            logger.warning("Template bundle missing", slug=slug, bundle=str(bundle))
            return []

        try:
            shutil.copytree(bundle, self.root, dirs_exist_ok=True)
        except shutil.Error as exc:
            # shutil.Error carries a list of (src, dst, reason) tuples
            failed = exc.args[0][0][1] if exc.args and exc.args[0] else str(self.root)
            raise WorkspaceError("Cannot copy template bundle", path=str(failed)) from exc
        except OSError as exc:
            raise WorkspaceError(
                f"Cannot copy template bundle ({exc.strerror or exc})",
                path=str(exc.filename or self.root),
            ) from exc

        return sorted(entry.name for entry in bundle.iterdir())
