"""
PipelineEngine — the orchestrator that runs build steps.

Responsibilities:
    - Execute each step with timing, logging, and error handling
    - Start detached steps as background tasks with their own error
      channel (logged, never propagated to the build)
    - Stop at the first failing step and give it a chance to roll back
    - Return a complete PipelineResult

Renderer exit codes are not the engine's business: a render step that
ran the renderer COMPLETES even when the renderer exited non-zero.
"""

from __future__ import annotations

import asyncio
import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from doccraft.core.constants import PipelineStatus, StepStatus
from doccraft.pipeline.context import BuildContext, StepResult
from doccraft.pipeline.errors import StepExecutionError
from doccraft.pipeline.step import PipelineStep


@dataclass
class PipelineResult:
    """Final outcome of a pipeline execution."""

    execution_id: str
    status: str                     # PipelineStatus value
    started_at: datetime | None = None
    completed_at: datetime | None = None
    total_duration_ms: int = 0
    steps_completed: int = 0
    total_steps: int = 0
    step_results: list[dict[str, Any]] = field(default_factory=list)
    context_summary: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    failed_exception: BaseException | None = None


class PipelineEngine:
    """
    Runs a sequence of PipelineStep objects against a BuildContext.

    Usage::

        engine = PipelineEngine()
        result = await engine.run_steps(ctx, build_flow(renderer, storage))
        ...
        await engine.drain()   # before the event loop goes away
    """

    def __init__(self) -> None:
        self.logger = structlog.get_logger("pipeline.engine")
        # asyncio only keeps weak references to tasks
        self._background: set[asyncio.Task] = set()

    async def run_steps(
        self,
        ctx: BuildContext,
        steps: list[PipelineStep],
    ) -> PipelineResult:
        """Execute an ordered list of steps against a context."""
        started_at = datetime.now(timezone.utc)
        ctx.total_steps = len(steps)

        log = self.logger.bind(
            execution_id=ctx.execution_id,
            instance_code=ctx.instance_code,
            total_steps=len(steps),
        )
        log.info("Pipeline started", workspace=str(ctx.workspace.root))

        pipeline_status = PipelineStatus.RUNNING
        steps_completed = 0
        error: str | None = None
        failed_exception: BaseException | None = None

        for index, step in enumerate(steps):
            ctx.current_step_index = index
            step_number = index + 1

            step_log = log.bind(
                step_name=step.name,
                step_index=step_number,
                step_description=step.description,
            )

            # ── Detached: start and move on ───────────
            if step.detached:
                await self._spawn_detached(step, ctx, step_log)
                steps_completed += 1
                continue

            # ── Check skip condition ──────────────────
            try:
                if await step.should_skip(ctx):
                    step_log.info("Step skipped")
                    now = datetime.now(timezone.utc)
                    ctx.step_results.append(StepResult(
                        step_name=step.name,
                        status=StepStatus.SKIPPED,
                        started_at=now,
                        completed_at=now,
                    ))
                    steps_completed += 1
                    continue
            except Exception as exc:
                step_log.warning("should_skip raised, running step anyway", error=str(exc))

            # ── Execute step ──────────────────────────
            step_log.info(f"Step {step_number}/{len(steps)}: {step.description}")

            result, exc = await self._execute(step, ctx, step_log)
            ctx.step_results.append(result)

            if result.status == StepStatus.COMPLETED:
                steps_completed += 1
                step_log.info(
                    "Step completed",
                    duration_ms=result.duration_ms,
                    metadata=result.metadata,
                )
                continue

            step_log.error(
                "Step failed — pipeline stopping",
                error=result.error,
                duration_ms=result.duration_ms,
            )
            ctx.add_error(f"Step '{step.name}' failed: {result.error}")
            pipeline_status = PipelineStatus.FAILED
            error = result.error
            failed_exception = exc

            try:
                await step.rollback(ctx)
                step_log.info("Rollback completed")
            except Exception as rollback_exc:
                step_log.warning("Rollback failed", error=str(rollback_exc))

            break

        # ── Finalise ──────────────────────────────────
        completed_at = datetime.now(timezone.utc)
        total_duration_ms = int((completed_at - started_at).total_seconds() * 1000)

        if pipeline_status != PipelineStatus.FAILED:
            pipeline_status = PipelineStatus.COMPLETED

        log.info(
            "Pipeline finished",
            status=pipeline_status,
            steps_completed=steps_completed,
            duration_ms=total_duration_ms,
            exit_code=ctx.exit_code,
        )

        return PipelineResult(
            execution_id=ctx.execution_id,
            status=pipeline_status,
            started_at=started_at,
            completed_at=completed_at,
            total_duration_ms=total_duration_ms,
            steps_completed=steps_completed,
            total_steps=len(steps),
            step_results=[sr.to_dict() for sr in ctx.step_results],
            context_summary=ctx.to_summary_dict(),
            error=error,
            failed_exception=failed_exception,
        )

    async def drain(self) -> None:
        """Wait for every detached step started by this engine to finish."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    @property
    def pending_background(self) -> int:
        return len(self._background)

    async def _execute(
        self,
        step: PipelineStep,
        ctx: BuildContext,
        log: structlog.BoundLogger,
    ) -> tuple[StepResult, BaseException | None]:
        """Execute a step once.  Builds are never retried."""
        started_at = datetime.now(timezone.utc)
        try:
            return await step.execute(ctx), None

        except StepExecutionError as exc:
            return StepResult(
                step_name=step.name,
                status=StepStatus.FAILED,
                started_at=started_at,
                completed_at=datetime.now(timezone.utc),
                error=str(exc),
            ), exc

        except Exception as exc:
            log.exception("Unexpected error in step", error=str(exc))
            return StepResult(
                step_name=step.name,
                status=StepStatus.FAILED,
                started_at=started_at,
                completed_at=datetime.now(timezone.utc),
                error=f"Unexpected: {exc}",
                metadata={"traceback": traceback.format_exc()},
            ), exc

    async def _spawn_detached(
        self,
        step: PipelineStep,
        ctx: BuildContext,
        log: structlog.BoundLogger,
    ) -> None:
        """Start a step as a background task; failures are logged only."""

        async def _run() -> None:
            try:
                if await step.should_skip(ctx):
                    log.info("Detached step skipped")
                    return
                result = await step.execute(ctx)
                log.info(
                    "Detached step completed",
                    duration_ms=result.duration_ms,
                    metadata=result.metadata,
                )
            except Exception as exc:
                log.exception("Detached step failed", error=str(exc))

        task = asyncio.create_task(_run(), name=f"{step.name}:{ctx.instance_code}")
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        log.info("Detached step started")

        # Let the task take its first slice (and any locks it needs)
        # before the pipeline moves on.
        await asyncio.sleep(0)
