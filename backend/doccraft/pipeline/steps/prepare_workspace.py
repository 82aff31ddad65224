"""
PrepareWorkspaceStep — creates uploads/contents/<code>/ and copies the
layout's template bundle into it.
"""

from __future__ import annotations

import asyncio

from doccraft.pipeline.context import BuildContext, StepResult
from doccraft.pipeline.step import PipelineStep


class PrepareWorkspaceStep(PipelineStep):
    """Create the build directory and copy the slug bundle."""

    name = "prepare_workspace"
    description = "Create build workspace and copy template bundle"

    def __init__(self, slugs_dir: str | None = None) -> None:
        self.slugs_dir = slugs_dir

    async def execute(self, ctx: BuildContext) -> StepResult:
        started_at = self._now()

        # WorkspaceError (a StepExecutionError) carries the failing path
        copied = await asyncio.to_thread(
            ctx.workspace.prepare, ctx.layout_slug, self.slugs_dir
        )
        if not copied:
            ctx.add_error(f"Template bundle '{ctx.layout_slug}' not found")

        return self._success(started_at, metadata={
            "workspace": str(ctx.workspace.root),
            "slug": ctx.layout_slug,
            "copied": copied,
        })
