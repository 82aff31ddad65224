"""
BuildHistory repository — the append-only log of build attempts.

Rows are inserted once and never updated.  `add_build_history` lets
insert errors propagate: a build whose outcome cannot be recorded must
not look recorded.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from doccraft.core.constants import BuildStatus
from doccraft.db.models.build_history import BuildHistory
from doccraft.db.models.instance import Instance
from doccraft.db.models.user import User


def status_for(exit_code: int) -> BuildStatus:
    return BuildStatus.SUCCESS if exit_code == 0 else BuildStatus.FAILED


def delay_ms(start_time: datetime, end_time: datetime) -> int:
    """Wall-clock duration in whole milliseconds."""
    return (end_time - start_time) // timedelta(milliseconds=1)


async def add_build_history(
    db: AsyncSession,
    user: User,
    instance: Instance,
    start_time: datetime,
    end_time: datetime,
    exit_code: int,
) -> BuildHistory:
    """Record one finished build attempt."""
    history = BuildHistory(
        instance_id=instance.id,
        creator_id=user.id,
        start_time=start_time,
        end_time=end_time,
        delay=delay_ms(start_time, end_time),
        exit_code=exit_code,
        status=status_for(exit_code).value,
    )
    db.add(history)
    await db.flush()
    return history


async def latest_successful_build(db: AsyncSession, instance: Instance) -> BuildHistory | None:
    """Most recent history row with exit code 0, if any."""
    stmt = (
        select(BuildHistory)
        .where(BuildHistory.instance_id == instance.id, BuildHistory.exit_code == 0)
        .order_by(BuildHistory.inserted_at.desc(), BuildHistory.id.desc())
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_build_history(
    db: AsyncSession,
    instance: Instance,
    *,
    offset: int = 0,
    limit: int = 50,
) -> list[BuildHistory]:
    """Build attempts for an instance, newest first."""
    stmt = (
        select(BuildHistory)
        .where(BuildHistory.instance_id == instance.id)
        .order_by(BuildHistory.inserted_at.desc(), BuildHistory.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
