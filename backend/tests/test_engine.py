"""PipelineEngine scheduling: sequential, grouped and detached steps."""

import asyncio

import pytest

from doccraft.core.constants import PipelineStatus, StepStatus
from doccraft.pipeline.context import BuildContext
from doccraft.pipeline.engine import PipelineEngine
from doccraft.pipeline.errors import StepExecutionError
from doccraft.pipeline.step import PipelineStep, StepGroup
from doccraft.pipeline.workspace import BuildWorkspace


class RecordingStep(PipelineStep):
    def __init__(self, name, log, delay=0.0, fail=False, detached=False):
        self.name = name
        self.description = f"record {name}"
        self.log = log
        self.delay = delay
        self.fail = fail
        self.detached = detached
        self.rolled_back = False

    async def execute(self, ctx):
        started_at = self._now()
        self.log.append(f"{self.name}:start")
        await asyncio.sleep(self.delay)
        if self.fail:
            raise StepExecutionError(f"{self.name} broke", step_name=self.name)
        self.log.append(f"{self.name}:end")
        return self._success(started_at)

    async def rollback(self, ctx):
        self.rolled_back = True


class CrashingStep(RecordingStep):
    async def execute(self, ctx):
        raise RuntimeError("disk on fire")


@pytest.fixture
def ctx(tmp_path):
    return BuildContext(
        instance_uuid="3f1c0c1e-0000-4000-8000-000000000001",
        instance_code="OFF0001",
        workspace=BuildWorkspace.for_instance("OFF0001", tmp_path),
    )


@pytest.mark.asyncio
async def test_sequential_steps_complete(ctx):
    log = []
    result = await PipelineEngine().run_steps(ctx, [RecordingStep("a", log), RecordingStep("b", log)])

    assert result.status == PipelineStatus.COMPLETED
    assert result.steps_completed == 2
    assert log == ["a:start", "a:end", "b:start", "b:end"]


@pytest.mark.asyncio
async def test_group_members_run_concurrently(ctx):
    log = []
    group = StepGroup(RecordingStep("slow", log, delay=0.05), RecordingStep("fast", log), name="prep")

    result = await PipelineEngine().run_steps(ctx, [group, RecordingStep("after", log)])

    assert result.status == PipelineStatus.COMPLETED
    # both members started before the slow one finished
    assert log.index("fast:start") < log.index("slow:end")
    assert log[-2:] == ["after:start", "after:end"]
    names = [r["step_name"] for r in result.step_results]
    assert names == ["slow", "fast", "prep", "after"]


@pytest.mark.asyncio
async def test_failure_stops_pipeline_and_rolls_back(ctx):
    log = []
    broken = RecordingStep("broken", log, fail=True)
    never = RecordingStep("never", log)

    result = await PipelineEngine().run_steps(ctx, [broken, never])

    assert result.status == PipelineStatus.FAILED
    assert result.error == "broken broke"
    assert isinstance(result.failed_exception, StepExecutionError)
    assert broken.rolled_back
    assert "never:start" not in log
    assert ctx.errors == ["Step 'broken' failed: broken broke"]


@pytest.mark.asyncio
async def test_group_failure_waits_for_siblings(ctx):
    log = []
    group = StepGroup(
        RecordingStep("bad", log, fail=True),
        RecordingStep("good", log, delay=0.02),
    )

    result = await PipelineEngine().run_steps(ctx, [group])

    assert result.status == PipelineStatus.FAILED
    assert "good:end" in log
    statuses = {r["step_name"]: r["status"] for r in result.step_results}
    assert statuses["bad"] == StepStatus.FAILED
    assert statuses["good"] == StepStatus.COMPLETED


@pytest.mark.asyncio
async def test_unexpected_exception_is_captured(ctx):
    result = await PipelineEngine().run_steps(ctx, [CrashingStep("crash", [])])

    assert result.status == PipelineStatus.FAILED
    assert result.error == "Unexpected: disk on fire"
    assert isinstance(result.failed_exception, RuntimeError)


@pytest.mark.asyncio
async def test_detached_step_not_awaited_and_errors_not_propagated(ctx):
    log = []
    engine = PipelineEngine()
    background = RecordingStep("bg", log, delay=0.05, fail=True, detached=True)

    result = await engine.run_steps(ctx, [background, RecordingStep("main", log)])

    assert result.status == PipelineStatus.COMPLETED
    assert log.index("bg:start") < log.index("main:start")
    assert "bg:end" not in log
    assert engine.pending_background == 1

    await engine.drain()
    assert engine.pending_background == 0
    assert "bg:end" not in log
