"""Theme repository — fonts and type scales of an organisation."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from doccraft.core.logging import get_logger
from doccraft.db.models.base import as_uuid
from doccraft.db.models.theme import Theme
from doccraft.db.models.user import User

logger = get_logger(__name__)


async def create_theme(
    db: AsyncSession,
    user: User,
    *,
    name: str,
    font: str,
    typescale: dict[str, Any] | None = None,
    file: str | None = None,
) -> Theme:
    """Create a theme in the user's organisation; `file` is an uploaded storage key."""
    theme = Theme(
        name=name.strip(),
        font=font.strip(),
        typescale=dict(typescale or {}),
        file=file,
        organisation_id=user.organisation_id,
        creator_id=user.id,
    )
    db.add(theme)
    await db.flush()
    return theme


async def get_theme(db: AsyncSession, theme_uuid: uuid.UUID | str) -> Theme | None:
    result = await db.execute(select(Theme).where(Theme.uuid == as_uuid(theme_uuid)))
    return result.scalar_one_or_none()


async def show_theme(db: AsyncSession, theme_uuid: uuid.UUID | str) -> Theme | None:
    """Fetch a theme with its creator loaded."""
    stmt = (
        select(Theme)
        .options(selectinload(Theme.creator))
        .where(Theme.uuid == as_uuid(theme_uuid))
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def theme_index(
    db: AsyncSession,
    organisation_id: int,
    *,
    offset: int = 0,
    limit: int = 50,
) -> list[Theme]:
    """Themes of an organisation, newest first."""
    stmt = (
        select(Theme)
        .where(Theme.organisation_id == organisation_id)
        .order_by(Theme.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_theme(
    db: AsyncSession,
    theme_uuid: uuid.UUID | str,
    *,
    name: str | None = None,
    font: str | None = None,
    typescale: dict[str, Any] | None = None,
    file: str | None = None,
) -> Theme | None:
    theme = await get_theme(db, theme_uuid)
    if theme is None:
        return None
    if name is not None:
        theme.name = name.strip()
    if font is not None:
        theme.font = font.strip()
    if typescale is not None:
        theme.typescale = dict(typescale)
    if file is not None:
        theme.file = file
    await db.flush()
    return theme


async def delete_theme(db: AsyncSession, theme_uuid: uuid.UUID | str) -> bool:
    theme = await get_theme(db, theme_uuid)
    if theme is None:
        return False
    await db.delete(theme)
    await db.flush()
    logger.info("Theme deleted", theme=theme.name)
    return True
