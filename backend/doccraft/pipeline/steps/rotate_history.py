"""
RotateHistoryStep — keeps the previous final.pdf as history/final-v<N>.pdf.

Runs detached: the build does not wait for it.  It holds the context's
artifact lock while copying, and the render step takes the same lock
before the renderer writes final.pdf, so the copy is always of the
previous artifact.
"""

from __future__ import annotations

import asyncio

from doccraft.pipeline.context import BuildContext, StepResult
from doccraft.pipeline.history import rotate_history
from doccraft.pipeline.step import PipelineStep


class RotateHistoryStep(PipelineStep):
    name = "rotate_history"
    description = "Copy previous artifact into history"
    detached = True

    async def should_skip(self, ctx: BuildContext) -> bool:
        return not ctx.workspace.artifact_path.is_file()

    async def execute(self, ctx: BuildContext) -> StepResult:
        started_at = self._now()
        async with ctx.artifact_lock:
            ctx.history_copy = await asyncio.to_thread(rotate_history, ctx.workspace)

        return self._success(started_at, metadata={
            "history_copy": str(ctx.history_copy) if ctx.history_copy else None,
        })
