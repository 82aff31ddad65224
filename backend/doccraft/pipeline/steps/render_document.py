"""
RenderDocumentStep — runs the external renderer on the workspace.

The step COMPLETES whenever the renderer produced an exit code, zero or
not; the exit code and captured output go on the context for the
caller to record.
"""

from __future__ import annotations

from doccraft.pipeline.context import BuildContext, StepResult
from doccraft.pipeline.renderer import Renderer
from doccraft.pipeline.step import PipelineStep


class RenderDocumentStep(PipelineStep):
    name = "render_document"
    description = "Typeset final.pdf with the external renderer"

    def __init__(self, renderer: Renderer) -> None:
        self.renderer = renderer

    async def execute(self, ctx: BuildContext) -> StepResult:
        started_at = self._now()

        async with ctx.artifact_lock:
            outcome = await self.renderer.render(ctx.workspace)

        ctx.exit_code = outcome.exit_code
        ctx.output = outcome.output

        return self._success(started_at, metadata={
            "exit_code": outcome.exit_code,
            "timed_out": outcome.timed_out,
            "artifact": str(ctx.workspace.artifact_path),
        })
