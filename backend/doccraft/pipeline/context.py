"""
BuildContext — mutable state object carried through every build step.

This is the single source of truth for one build.  The builder loads
everything the steps need from the database up front (field names,
serialized values, ordered assets), so steps never touch a session and
can run concurrently.  Each step reads from and writes to the context.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from doccraft.pipeline.workspace import BuildWorkspace


# ═══════════════════════════════════════════════════════════
#  AssetRef: a layout asset, detached from the ORM
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AssetRef:
    """
    One layout asset as the header step needs it.

    Args:
        name: Header key the template expects (e.g. "logo").
        file: Storage key of the asset file; None if never uploaded.
        uuid: Asset UUID, used for storage paths and logs.
    """

    name: str
    file: str | None
    uuid: str = ""


# ═══════════════════════════════════════════════════════════
#  StepResult
# ═══════════════════════════════════════════════════════════

@dataclass
class StepResult:
    """Outcome of a single pipeline step execution."""

    step_name: str
    status: str                     # StepStatus value
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_ms: int = 0
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialise for logs / task results."""
        return {
            "step_name": self.step_name,
            "status": self.status,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.duration_ms,
            "error": self.error,
            "metadata": self.metadata,
        }


# ═══════════════════════════════════════════════════════════
#  BuildContext
# ═══════════════════════════════════════════════════════════

@dataclass
class BuildContext:
    """
    Carries all state between build steps.

    Populated progressively: preparation fills the workspace and QR
    path, assembly fills the header and source file, rendering fills
    the exit code and output.
    """

    # ─── Identity (set at init) ────────────────────────
    instance_uuid: str
    instance_code: str
    workspace: BuildWorkspace
    execution_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # ─── Inputs (loaded by the builder) ───────────────
    layout_slug: str = ""
    field_names: list[str] = field(default_factory=list)
    serialized: dict[str, Any] = field(default_factory=dict)
    raw: str = ""
    assets: list[AssetRef] = field(default_factory=list)

    # ─── Produced by steps ────────────────────────────
    qr_path: Path | None = None
    header: str | None = None
    source_path: Path | None = None
    history_copy: Path | None = None
    exit_code: int | None = None
    output: str = ""

    # Held by the detached history rotation while it copies final.pdf
    # and by the render step while the renderer writes it.
    artifact_lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    # ─── Execution tracking ────────────────────────────
    current_step_index: int = 0
    total_steps: int = 0
    step_results: list[StepResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    # ─── Arbitrary step-to-step data ───────────────────
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def rendered(self) -> bool:
        """True once the renderer produced an exit code."""
        return self.exit_code is not None

    def add_error(self, error: str) -> None:
        """Record a non-fatal error."""
        self.errors.append(error)

    def set_extra(self, key: str, value: Any) -> None:
        """Store arbitrary data for downstream steps."""
        self.extra[key] = value

    def get_extra(self, key: str, default: Any = None) -> Any:
        """Retrieve data stored by an upstream step."""
        return self.extra.get(key, default)

    def to_summary_dict(self) -> dict[str, Any]:
        """Compact summary for logging / task results."""
        return {
            "execution_id": self.execution_id,
            "instance_uuid": self.instance_uuid,
            "instance_code": self.instance_code,
            "workspace": str(self.workspace.root),
            "layout_slug": self.layout_slug,
            "fields_declared": len(self.field_names),
            "assets": [a.name for a in self.assets],
            "qr_path": str(self.qr_path) if self.qr_path else None,
            "source_path": str(self.source_path) if self.source_path else None,
            "history_copy": str(self.history_copy) if self.history_copy else None,
            "exit_code": self.exit_code,
            "steps_completed": len(self.step_results),
            "total_steps": self.total_steps,
            "errors": self.errors,
        }
