"""GenerateQRStep — writes qr.png encoding the instance UUID."""

from __future__ import annotations

import asyncio

from doccraft.pipeline.context import BuildContext, StepResult
from doccraft.pipeline.errors import WorkspaceError
from doccraft.pipeline.qr import write_qr_png
from doccraft.pipeline.step import PipelineStep


class GenerateQRStep(PipelineStep):
    name = "generate_qr"
    description = "Generate QR code for the instance"

    async def execute(self, ctx: BuildContext) -> StepResult:
        started_at = self._now()
        destination = ctx.workspace.qr_path

        try:
            ctx.qr_path = await asyncio.to_thread(write_qr_png, ctx.instance_uuid, destination)
        except OSError as exc:
            raise WorkspaceError(
                f"Cannot write QR code ({exc.strerror or exc})",
                path=str(destination),
                execution_id=ctx.execution_id,
                step_name=self.name,
            ) from exc

        return self._success(started_at, metadata={"qr_path": str(ctx.qr_path)})
