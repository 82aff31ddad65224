"""
Instance repository — document instances and their sequence codes.

An instance's code (`instance_id`) is the content type prefix followed
by the content type's counter, zero-padded to SEQUENCE_PADDING digits:
OFF0001, OFF0002, ...  It also names the build workspace, so it is
assigned once here and never rewritten.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from doccraft.core.config import settings
from doccraft.core.logging import get_logger
from doccraft.db.models.base import as_uuid
from doccraft.db.models.content_type import ContentType
from doccraft.db.models.instance import Instance
from doccraft.db.models.layout import Layout
from doccraft.db.models.layout_asset import LayoutAsset
from doccraft.db.models.state import State
from doccraft.db.models.user import User
from doccraft.pipeline.workspace import artifact_url
from doccraft.repositories.build_histories import latest_successful_build
from doccraft.repositories.counters import next_count, subject_for
from doccraft.repositories.states import get_state

logger = get_logger(__name__)


def format_code(prefix: str, count: int) -> str:
    return f"{prefix}{str(count).zfill(settings.SEQUENCE_PADDING)}"


async def create_instance(
    db: AsyncSession,
    user: User,
    content_type: ContentType,
    state: State | None = None,
    serialized: dict[str, Any] | None = None,
    raw: str = "",
) -> Instance:
    """Create an instance with the next sequence code of its content type."""
    count = await next_count(db, subject_for(content_type))
    instance = Instance(
        instance_id=format_code(content_type.prefix, count),
        serialized=dict(serialized or {}),
        raw=raw,
        content_type_id=content_type.id,
        state_id=state.id if state else None,
        creator_id=user.id,
    )
    db.add(instance)
    await db.flush()
    logger.info(
        "Instance created",
        instance_code=instance.instance_id,
        content_type=content_type.name,
        creator_id=user.id,
    )
    return instance


async def get_instance(db: AsyncSession, instance_uuid: uuid.UUID | str) -> Instance | None:
    """Fetch an instance by UUID with its content type and state."""
    stmt = (
        select(Instance)
        .options(selectinload(Instance.content_type), selectinload(Instance.state))
        .where(Instance.uuid == as_uuid(instance_uuid))
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_instance_by_code(db: AsyncSession, code: str) -> Instance | None:
    result = await db.execute(select(Instance).where(Instance.instance_id == code))
    return result.scalar_one_or_none()


async def get_instance_for_build(db: AsyncSession, instance_uuid: uuid.UUID | str) -> Instance | None:
    """Fetch an instance with everything a build reads: fields, layout and its assets."""
    content_type = selectinload(Instance.content_type)
    stmt = (
        select(Instance)
        .options(
            content_type.selectinload(ContentType.fields),
            content_type.selectinload(ContentType.layout)
            .selectinload(Layout.layout_assets)
            .selectinload(LayoutAsset.asset),
        )
        .where(Instance.uuid == as_uuid(instance_uuid))
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def lock_instance_for_build(db: AsyncSession, instance_uuid: uuid.UUID | str) -> None:
    """
    Take an exclusive lock on an instance row for the rest of the transaction.

    Concurrent builds of the instance, in this process or another worker,
    wait here until the holder commits or rolls back.  Postgres locks the
    row with SELECT ... FOR UPDATE.  SQLite has no row locks, so a no-op
    UPDATE takes the database write lock instead.
    """
    key = as_uuid(instance_uuid)
    if db.get_bind().dialect.name == "sqlite":
        await db.execute(
            update(Instance)
            .where(Instance.uuid == key)
            # Both columns set to themselves so updated_at does not move
            .values(instance_id=Instance.instance_id, updated_at=Instance.updated_at)
            .execution_options(synchronize_session=False)
        )
    else:
        await db.execute(select(Instance.id).where(Instance.uuid == key).with_for_update())


async def show_instance(db: AsyncSession, instance_uuid: uuid.UUID | str) -> Instance | None:
    """
    Fetch an instance for display.

    Sets `instance.build` to the artifact path when at least one build
    exited with code 0, and to None otherwise.
    """
    instance = await get_instance(db, instance_uuid)
    if instance is None:
        return None
    latest = await latest_successful_build(db, instance)
    instance.build = artifact_url(instance.instance_id) if latest else None
    return instance


async def update_instance(
    db: AsyncSession,
    instance_uuid: uuid.UUID | str,
    *,
    serialized: dict[str, Any] | None = None,
    raw: str | None = None,
    state_uuid: uuid.UUID | str | None = None,
) -> Instance | None:
    """
    Update content and optionally move the instance to another state.

    Raises LookupError when `state_uuid` names no state.
    """
    instance = await get_instance(db, instance_uuid)
    if instance is None:
        return None

    if serialized is not None:
        instance.serialized = dict(serialized)
    if raw is not None:
        instance.raw = raw
    if state_uuid is not None:
        state = await get_state(db, state_uuid)
        if state is None:
            raise LookupError(f"State {state_uuid} not found")
        instance.state_id = state.id
        instance.state = state

    await db.flush()
    return instance


async def delete_instance(db: AsyncSession, instance_uuid: uuid.UUID | str) -> bool:
    """Delete an instance and its build history. Returns True when it existed."""
    stmt = (
        select(Instance)
        .options(selectinload(Instance.build_histories))
        .where(Instance.uuid == as_uuid(instance_uuid))
        .execution_options(populate_existing=True)
    )
    instance = (await db.execute(stmt)).scalar_one_or_none()
    if instance is None:
        return False
    await db.delete(instance)
    await db.flush()
    logger.info("Instance deleted", instance_code=instance.instance_id)
    return True


async def list_instances(
    db: AsyncSession,
    content_type: ContentType,
    *,
    offset: int = 0,
    limit: int = 50,
) -> list[Instance]:
    """Instances of one content type, newest first."""
    stmt = (
        select(Instance)
        .where(Instance.content_type_id == content_type.id)
        .order_by(Instance.created_at.desc(), Instance.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def list_instances_for_organisation(
    db: AsyncSession,
    organisation_id: int,
    *,
    offset: int = 0,
    limit: int = 50,
) -> list[Instance]:
    """Instances created by members of an organisation, newest first."""
    stmt = (
        select(Instance)
        .join(User, Instance.creator_id == User.id)
        .where(User.organisation_id == organisation_id)
        .order_by(Instance.created_at.desc(), Instance.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
