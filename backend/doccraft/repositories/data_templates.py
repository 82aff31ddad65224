"""
Data template repository — prepared starting content per content type.

Templates belong to a content type; the organisation listing goes
through the creator, the same way instance listings do.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from doccraft.db.models.base import as_uuid
from doccraft.db.models.content_type import ContentType
from doccraft.db.models.data_template import DataTemplate
from doccraft.db.models.user import User


async def create_data_template(
    db: AsyncSession,
    user: User,
    content_type: ContentType,
    *,
    title: str,
    title_template: str,
    data: str = "",
    serialized: dict[str, Any] | None = None,
) -> DataTemplate:
    template = DataTemplate(
        title=title.strip(),
        title_template=title_template,
        data=data,
        serialized=dict(serialized or {}),
        content_type_id=content_type.id,
        creator_id=user.id,
    )
    db.add(template)
    await db.flush()
    return template


async def get_data_template(db: AsyncSession, template_uuid: uuid.UUID | str) -> DataTemplate | None:
    stmt = select(DataTemplate).where(DataTemplate.uuid == as_uuid(template_uuid))
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def show_data_template(db: AsyncSession, template_uuid: uuid.UUID | str) -> DataTemplate | None:
    """Fetch a data template with its creator and content type loaded."""
    stmt = (
        select(DataTemplate)
        .options(selectinload(DataTemplate.creator), selectinload(DataTemplate.content_type))
        .where(DataTemplate.uuid == as_uuid(template_uuid))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def data_template_index(
    db: AsyncSession,
    content_type_uuid: uuid.UUID | str,
    *,
    offset: int = 0,
    limit: int = 50,
) -> list[DataTemplate]:
    """Data templates of one content type, newest first."""
    stmt = (
        select(DataTemplate)
        .join(ContentType, DataTemplate.content_type_id == ContentType.id)
        .where(ContentType.uuid == as_uuid(content_type_uuid))
        .order_by(DataTemplate.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def data_templates_index_of_an_organisation(
    db: AsyncSession,
    organisation_id: int,
    *,
    offset: int = 0,
    limit: int = 50,
) -> list[DataTemplate]:
    """Data templates created by members of an organisation, newest first."""
    stmt = (
        select(DataTemplate)
        .join(User, DataTemplate.creator_id == User.id)
        .where(User.organisation_id == organisation_id)
        .order_by(DataTemplate.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_data_template(
    db: AsyncSession,
    template_uuid: uuid.UUID | str,
    *,
    title: str | None = None,
    title_template: str | None = None,
    data: str | None = None,
    serialized: dict[str, Any] | None = None,
) -> DataTemplate | None:
    """Update a data template; returns it with creator and content type loaded."""
    template = await get_data_template(db, template_uuid)
    if template is None:
        return None
    if title is not None:
        template.title = title.strip()
    if title_template is not None:
        template.title_template = title_template
    if data is not None:
        template.data = data
    if serialized is not None:
        template.serialized = dict(serialized)
    await db.flush()
    return await show_data_template(db, template_uuid)


async def delete_data_template(db: AsyncSession, template_uuid: uuid.UUID | str) -> bool:
    template = await get_data_template(db, template_uuid)
    if template is None:
        return False
    await db.delete(template)
    await db.flush()
    return True
