"""
Build persistence — runs a build and records it in BuildHistory.

`build_and_record` works on a caller's session (API, tests).
`run_build` is the Celery entry point: it uses a FRESH engine per call
to avoid event loop conflicts when called from Celery workers (which
use asyncio.run() in a sync context), and waits for detached build work
before the loop closes.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from doccraft.core.config import settings
from doccraft.core.logging import get_logger
from doccraft.db.models.base import utcnow
from doccraft.db.models.build_history import BuildHistory
from doccraft.db.models.user import User
from doccraft.pipeline.builder import BuildOutcome, DocumentBuilder
from doccraft.pipeline.errors import BuildAbortedError
from doccraft.repositories import build_histories as history_repository
from doccraft.repositories import instances as instance_repository
from doccraft.repositories import users as user_repository

logger = get_logger(__name__)


@dataclass
class RecordedBuild:
    outcome: BuildOutcome
    history: BuildHistory


def _make_session():
    """Create a fresh async engine + session (avoids event loop conflicts in Celery)."""
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return factory, engine


async def build_and_record(
    db: AsyncSession,
    user: User,
    instance_uuid: uuid.UUID | str,
    *,
    builder: DocumentBuilder | None = None,
) -> RecordedBuild:
    """
    Build one instance and insert its BuildHistory row.

    The instance row stays locked until the caller ends the transaction,
    so builds of one instance never overlap across workers.

    Raises:
        LookupError: the instance does not exist.
        BuildAbortedError: the build stopped before the renderer ran
            (no layout, filesystem or asset failure); nothing is recorded.
    """
    builder = builder or DocumentBuilder()

    # Held until the caller commits, so the history row lands inside it too
    await instance_repository.lock_instance_for_build(db, instance_uuid)
    instance = await instance_repository.get_instance_for_build(db, instance_uuid)
    if instance is None:
        raise LookupError(f"Instance {instance_uuid} not found")

    content_type = instance.content_type
    if content_type.layout is None:
        raise BuildAbortedError(
            f"Content type '{content_type.name}' has no layout",
            details={"instance_code": instance.instance_id},
        )

    log = logger.bind(instance_code=instance.instance_id, user_id=user.id)
    log.info("Build started", layout=content_type.layout.slug)

    start_time = utcnow()
    outcome = await builder.build(instance, content_type.fields, content_type.layout)
    end_time = utcnow()

    history = await history_repository.add_build_history(
        db, user, instance, start_time, end_time, outcome.exit_code
    )

    log.info(
        "Build recorded",
        exit_code=outcome.exit_code,
        status=history.status,
        delay_ms=history.delay,
    )
    if not outcome.succeeded:
        # Renderer output is the only diagnostic a failed build leaves behind
        log.warning("Renderer failed", output=outcome.output[-4000:])

    return RecordedBuild(outcome=outcome, history=history)


async def run_build(
    instance_uuid: str,
    user_id: int,
    *,
    builder: DocumentBuilder | None = None,
) -> RecordedBuild:
    """Build and record in a transaction of its own."""
    builder = builder or DocumentBuilder()
    session_factory, engine = _make_session()
    try:
        async with session_factory() as session:
            async with session.begin():
                user = await user_repository.get_active_user_by_id(session, user_id)
                if user is None:
                    raise LookupError(f"User {user_id} not found or inactive")
                recorded = await build_and_record(
                    session, user, instance_uuid, builder=builder
                )
        return recorded
    finally:
        await builder.drain()
        await engine.dispose()
