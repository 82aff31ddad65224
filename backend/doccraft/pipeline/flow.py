"""
Build flow — the ordered step list for one document build.

    1. rotate_history               detached, never awaited by the build
    2. prepare_workspace + qr       concurrent, joined
    3. assemble_source              header block + content.md
    4. render_document              external renderer -> final.pdf
"""

from __future__ import annotations

from doccraft.pipeline.renderer import Renderer
from doccraft.pipeline.step import PipelineStep, StepGroup
from doccraft.pipeline.steps import (
    AssembleSourceStep,
    GenerateQRStep,
    PrepareWorkspaceStep,
    RenderDocumentStep,
    RotateHistoryStep,
)
from doccraft.storage.assets import AssetStorage


def build_flow(
    renderer: Renderer,
    storage: AssetStorage,
    slugs_dir: str | None = None,
) -> list[PipelineStep]:
    return [
        RotateHistoryStep(),
        StepGroup(
            PrepareWorkspaceStep(slugs_dir=slugs_dir),
            GenerateQRStep(),
            name="prepare",
        ),
        AssembleSourceStep(storage),
        RenderDocumentStep(renderer),
    ]
