"""
AssembleSourceStep — builds the header block and writes content.md.

Asset URLs are resolved here through the configured storage backend.
An asset that cannot be resolved aborts the build: a template that
references a missing asset key would fail in the renderer with a far
less useful message.
"""

from __future__ import annotations

import asyncio

from doccraft.core.logging import get_logger
from doccraft.pipeline.context import BuildContext, StepResult
from doccraft.pipeline.errors import AssetResolutionError, StorageError, WorkspaceError
from doccraft.pipeline.header import assemble_header, compose_source
from doccraft.pipeline.step import PipelineStep
from doccraft.storage.assets import AssetStorage

logger = get_logger(__name__)


class AssembleSourceStep(PipelineStep):
    name = "assemble_source"
    description = "Assemble header block and source document"

    def __init__(self, storage: AssetStorage) -> None:
        self.storage = storage

    async def execute(self, ctx: BuildContext) -> StepResult:
        started_at = self._now()

        asset_urls: list[tuple[str, str]] = []
        for asset in ctx.assets:
            try:
                asset_urls.append((asset.name, self.storage.url(asset)))
            except StorageError as exc:
                raise AssetResolutionError(
                    str(exc),
                    asset_name=asset.name,
                    execution_id=ctx.execution_id,
                    step_name=self.name,
                ) from exc

        qr_path = ctx.qr_path or ctx.workspace.qr_path
        ctx.header = assemble_header(
            ctx.field_names,
            ctx.serialized,
            asset_urls,
            qr_path=str(qr_path),
            workspace_path=str(ctx.workspace.root),
        )

        source = ctx.workspace.source_path
        try:
            await asyncio.to_thread(
                source.write_text, compose_source(ctx.header, ctx.raw), encoding="utf-8"
            )
        except OSError as exc:
            raise WorkspaceError(
                f"Cannot write source document ({exc.strerror or exc})",
                path=str(source),
                execution_id=ctx.execution_id,
                step_name=self.name,
            ) from exc
        ctx.source_path = source

        missing = [name for name in ctx.field_names if name not in ctx.serialized]
        if missing:
            logger.debug("Fields without value left out of header", fields=missing)

        return self._success(started_at, metadata={
            "fields_written": len(ctx.field_names) - len(missing),
            "assets_written": len(asset_urls),
            "source_path": str(source),
        })
