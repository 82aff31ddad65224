"""
DocumentBuilder — runs the build flow for one instance.

The builder never touches the database.  Callers hand it an instance,
the content type fields in declaration order and a layout whose assets
are loaded; it snapshots what the steps need into a BuildContext and runs
the flow through the PipelineEngine.

Builds of the same instance through one builder are serialised: the
per-instance lock is held from workspace preparation until the renderer
has exited.  Builders in other tasks or worker processes are kept apart
by the row lock `build_and_record` takes on the instance.
"""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from doccraft.core.logging import get_logger
from doccraft.db.models import ContentTypeField, Instance, Layout
from doccraft.pipeline.context import AssetRef, BuildContext
from doccraft.pipeline.engine import PipelineEngine, PipelineResult
from doccraft.pipeline.errors import BuildAbortedError
from doccraft.pipeline.flow import build_flow
from doccraft.pipeline.renderer import Renderer
from doccraft.pipeline.workspace import BuildWorkspace, artifact_url
from doccraft.storage.assets import AssetStorage, get_asset_storage

logger = get_logger(__name__)


@dataclass
class BuildOutcome:
    """What a finished build hands back to its caller."""

    instance_code: str
    exit_code: int
    output: str
    workspace: BuildWorkspace
    pipeline: PipelineResult

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def doc_url(self) -> str:
        return artifact_url(self.instance_code)


class DocumentBuilder:
    def __init__(
        self,
        renderer: Renderer | None = None,
        storage: AssetStorage | None = None,
        engine: PipelineEngine | None = None,
        uploads_dir: str | Path | None = None,
        slugs_dir: str | None = None,
    ) -> None:
        self.renderer = renderer or Renderer()
        self.storage = storage or get_asset_storage()
        self.engine = engine or PipelineEngine()
        self.uploads_dir = uploads_dir
        self.slugs_dir = slugs_dir
        # An entry lives only while some build of that instance holds or awaits it
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def context_for(
        self,
        instance: Instance,
        fields: Iterable[ContentTypeField],
        layout: Layout,
    ) -> BuildContext:
        """Snapshot an instance, its content type fields and a layout (with assets)."""
        return BuildContext(
            instance_uuid=str(instance.uuid),
            instance_code=instance.instance_id,
            workspace=BuildWorkspace.for_instance(instance.instance_id, self.uploads_dir),
            layout_slug=layout.slug,
            field_names=[f.name for f in fields],
            serialized=dict(instance.serialized or {}),
            raw=instance.raw or "",
            assets=[
                AssetRef(name=a.name, file=a.file, uuid=str(a.uuid))
                for a in layout.assets
            ],
        )

    def lock_for(self, instance_code: str) -> asyncio.Lock:
        lock = self._locks.get(instance_code)
        if lock is None:
            lock = self._locks[instance_code] = asyncio.Lock()
        return lock

    @property
    def active_locks(self) -> int:
        return len(self._locks)

    async def build(
        self,
        instance: Instance,
        fields: Iterable[ContentTypeField],
        layout: Layout,
    ) -> BuildOutcome:
        return await self.run(self.context_for(instance, fields, layout))

    async def run(self, ctx: BuildContext) -> BuildOutcome:
        """
        Run the flow for a prepared context.

        Raises BuildAbortedError when the flow stopped before the renderer
        produced an exit code (filesystem or asset failures).
        """
        async with self.lock_for(ctx.instance_code):
            result = await self.engine.run_steps(
                ctx, build_flow(self.renderer, self.storage, self.slugs_dir)
            )

        if not ctx.rendered:
            raise BuildAbortedError(
                f"Build of {ctx.instance_code} aborted: {result.error}",
                execution_id=ctx.execution_id,
                details=ctx.to_summary_dict(),
            ) from result.failed_exception

        return BuildOutcome(
            instance_code=ctx.instance_code,
            exit_code=ctx.exit_code,
            output=ctx.output,
            workspace=ctx.workspace,
            pipeline=result,
        )

    async def drain(self) -> None:
        """Wait for detached work (history rotation) started by past builds."""
        await self.engine.drain()
