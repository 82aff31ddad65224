"""
PipelineStep — abstract base class for all build steps.

Every step in the build pipeline inherits from this class.
The engine calls execute() and records timing, logging, and errors
automatically.  Steps only need to implement the business logic.

Two ways of running steps besides one-after-another:

    StepGroup(a, b)       runs a and b concurrently; the pipeline waits
                          for both before the next step
    step.detached = True  the engine starts the step as a background
                          task and moves on without waiting for it
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from doccraft.core.constants import StepStatus
from doccraft.core.logging import get_logger
from doccraft.pipeline.context import BuildContext, StepResult
from doccraft.pipeline.errors import StepExecutionError

logger = get_logger(__name__)


class PipelineStep(ABC):
    """
    Base class for every build step.

    Subclasses MUST implement:
        - name (str)          — unique identifier, e.g. "render_document"
        - description (str)   — human-readable label for logs
        - execute(ctx)        — the actual business logic

    Subclasses MAY implement:
        - rollback(ctx)       — cleanup on failure
        - should_skip(ctx)    — return True to skip this step conditionally
    """

    name: str = "unnamed_step"
    description: str = "No description"
    detached: bool = False

    @abstractmethod
    async def execute(self, ctx: BuildContext) -> StepResult:
        """
        Run the step's logic.  Must return a StepResult.

        Read from and write to `ctx` to pass data between steps.
        Raise StepExecutionError on failure.
        """
        ...

    async def rollback(self, ctx: BuildContext) -> None:
        """Optional cleanup when this step fails (e.g. delete temp files)."""
        pass

    async def should_skip(self, ctx: BuildContext) -> bool:
        """Return True to skip this step.  Default: never skip."""
        return False

    # ─── Helpers available to all steps ────────────────

    def _success(
        self,
        started_at: datetime,
        metadata: dict[str, Any] | None = None,
    ) -> StepResult:
        """Build a successful StepResult with timing."""
        now = datetime.now(timezone.utc)
        duration_ms = int((now - started_at).total_seconds() * 1000)
        return StepResult(
            step_name=self.name,
            status=StepStatus.COMPLETED,
            started_at=started_at,
            completed_at=now,
            duration_ms=duration_ms,
            metadata=metadata or {},
        )

    def _failure(
        self,
        started_at: datetime,
        error: str,
        metadata: dict[str, Any] | None = None,
    ) -> StepResult:
        """Build a failed StepResult with timing and error message."""
        now = datetime.now(timezone.utc)
        duration_ms = int((now - started_at).total_seconds() * 1000)
        return StepResult(
            step_name=self.name,
            status=StepStatus.FAILED,
            started_at=started_at,
            completed_at=now,
            duration_ms=duration_ms,
            error=error,
            metadata=metadata or {},
        )

    def _now(self) -> datetime:
        """UTC-aware now."""
        return datetime.now(timezone.utc)


class StepGroup(PipelineStep):
    """
    Runs independent steps concurrently and joins them.

    Every member runs to completion even if a sibling fails; the first
    failure (in member order) is then re-raised so the engine stops the
    pipeline.  Member results are appended to ctx.step_results.
    """

    def __init__(self, *steps: PipelineStep, name: str | None = None) -> None:
        self.steps = list(steps)
        self.name = name or "+".join(s.name for s in self.steps)
        self.description = " & ".join(s.description for s in self.steps)

    async def execute(self, ctx: BuildContext) -> StepResult:
        started_at = self._now()

        outcomes = await asyncio.gather(
            *(self._run_member(step, ctx) for step in self.steps),
            return_exceptions=True,
        )

        first_error: BaseException | None = None
        for step, outcome in zip(self.steps, outcomes):
            if isinstance(outcome, BaseException):
                ctx.step_results.append(self._member_failure(step, outcome))
                first_error = first_error or outcome
            else:
                ctx.step_results.append(outcome)

        if first_error is not None:
            if isinstance(first_error, StepExecutionError):
                raise first_error
            raise StepExecutionError(
                f"Unexpected: {first_error}",
                execution_id=ctx.execution_id,
                step_name=self.name,
            ) from first_error

        return self._success(started_at, metadata={
            "members": [s.name for s in self.steps],
        })

    async def rollback(self, ctx: BuildContext) -> None:
        for step in self.steps:
            await step.rollback(ctx)

    async def _run_member(self, step: PipelineStep, ctx: BuildContext) -> StepResult:
        if await step.should_skip(ctx):
            logger.info("Step skipped", step_name=step.name)
            now = self._now()
            return StepResult(
                step_name=step.name,
                status=StepStatus.SKIPPED,
                started_at=now,
                completed_at=now,
            )
        return await step.execute(ctx)

    def _member_failure(self, step: PipelineStep, exc: BaseException) -> StepResult:
        now = self._now()
        return StepResult(
            step_name=step.name,
            status=StepStatus.FAILED,
            started_at=now,
            completed_at=now,
            error=str(exc),
        )
