"""
Domain-specific exception hierarchy for the build pipeline.

All pipeline exceptions inherit from PipelineError so callers can
catch broadly or narrowly as needed.  Each exception carries structured
context (step name, execution ID, etc.) for logging/debugging.

A renderer that exits non-zero is NOT an exception: its exit code is
build data and ends up in BuildHistory.  Exceptions here mean the
build could not get as far as producing an exit code.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(
        self,
        message: str,
        *,
        execution_id: str | None = None,
        step_name: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.execution_id = execution_id
        self.step_name = step_name
        self.details = details or {}
        super().__init__(message)


class StepExecutionError(PipelineError):
    """A step failed during execution."""
    pass


class WorkspaceError(StepExecutionError):
    """Creating or populating the build workspace failed on the filesystem."""

    def __init__(
        self,
        message: str,
        *,
        path: str,
        **kwargs,
    ) -> None:
        self.path = path
        super().__init__(f"{message}: {path}", **kwargs)


class AssetResolutionError(StepExecutionError):
    """A layout asset could not be turned into a URL for the header."""

    def __init__(
        self,
        message: str,
        *,
        asset_name: str,
        **kwargs,
    ) -> None:
        self.asset_name = asset_name
        super().__init__(message, **kwargs)


class StorageError(PipelineError):
    """Asset storage operation (local or S3/MinIO) failed."""
    pass


class BuildAbortedError(PipelineError):
    """The build stopped before the renderer produced an exit code."""
    pass
