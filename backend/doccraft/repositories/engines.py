"""Engine repository — typesetting backends layouts can reference."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from doccraft.db.models.base import as_uuid
from doccraft.db.models.engine import Engine


async def add_engine(db: AsyncSession, *, name: str, api_route: str | None = None) -> Engine:
    engine = Engine(name=name.strip(), api_route=api_route)
    db.add(engine)
    await db.flush()
    return engine


async def get_engine(db: AsyncSession, engine_uuid: uuid.UUID | str) -> Engine | None:
    result = await db.execute(select(Engine).where(Engine.uuid == as_uuid(engine_uuid)))
    return result.scalar_one_or_none()


async def engines_list(db: AsyncSession, *, offset: int = 0, limit: int = 50) -> list[Engine]:
    """All engines, by name."""
    stmt = select(Engine).order_by(Engine.name).offset(offset).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())
