"""
Celery tasks — document builds.

Wires the DocumentBuilder into the Celery task system.  A build is
never retried: its exit code, good or bad, is the recorded outcome.
"""

import asyncio

import structlog

from doccraft.pipeline.db_persist import RecordedBuild, run_build
from doccraft.pipeline.errors import BuildAbortedError
from doccraft.tasks import celery_app

logger = structlog.get_logger("tasks.build")


@celery_app.task(bind=True, name="doccraft.tasks.build_tasks.build_instance")
def build_instance(self, instance_uuid: str, user_id: int):
    """
    Build an instance's PDF and append a BuildHistory row.

    Returns a JSON-safe summary; raises when the build could not reach
    the renderer (nothing is recorded in that case).
    """
    task_log = logger.bind(
        task_id=self.request.id,
        instance_uuid=instance_uuid,
        user_id=user_id,
    )
    task_log.info("Build task started")

    try:
        recorded: RecordedBuild = asyncio.run(run_build(instance_uuid, user_id))
    except BuildAbortedError as exc:
        task_log.error("Build aborted", error=str(exc), details=exc.details)
        raise
    except Exception as exc:
        task_log.exception("Build task failed", error=str(exc))
        raise

    outcome = recorded.outcome
    task_log.info(
        "Build task finished",
        instance_code=outcome.instance_code,
        exit_code=outcome.exit_code,
        delay_ms=recorded.history.delay,
    )

    return {
        "instance_code": outcome.instance_code,
        "exit_code": outcome.exit_code,
        "status": recorded.history.status,
        "delay_ms": recorded.history.delay,
        "execution_id": outcome.pipeline.execution_id,
        "doc_url": outcome.doc_url if outcome.succeeded else None,
    }
