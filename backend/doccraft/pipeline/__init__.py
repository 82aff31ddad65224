"""
Build pipeline — turns a document instance into final.pdf.

This package provides the step-based engine that prepares an
instance's workspace, writes its source document, runs the external
renderer and hands the exit status back for recording.

The DocumentBuilder lives in doccraft.pipeline.builder; it is not
re-exported here because it pulls in the storage backends, which
themselves depend on this package's context and errors.
"""

from doccraft.pipeline.engine import PipelineEngine, PipelineResult
from doccraft.pipeline.context import AssetRef, BuildContext, StepResult
from doccraft.pipeline.step import PipelineStep, StepGroup

__all__ = [
    "AssetRef",
    "BuildContext",
    "PipelineEngine",
    "PipelineResult",
    "PipelineStep",
    "StepGroup",
    "StepResult",
]
