"""
Build steps, in the order the default flow runs them:

    RotateHistoryStep     (detached)
    PrepareWorkspaceStep  ┐ concurrent
    GenerateQRStep        ┘
    AssembleSourceStep
    RenderDocumentStep
"""

from doccraft.pipeline.steps.assemble_source import AssembleSourceStep
from doccraft.pipeline.steps.generate_qr import GenerateQRStep
from doccraft.pipeline.steps.prepare_workspace import PrepareWorkspaceStep
from doccraft.pipeline.steps.render_document import RenderDocumentStep
from doccraft.pipeline.steps.rotate_history import RotateHistoryStep

__all__ = [
    "AssembleSourceStep",
    "GenerateQRStep",
    "PrepareWorkspaceStep",
    "RenderDocumentStep",
    "RotateHistoryStep",
]
