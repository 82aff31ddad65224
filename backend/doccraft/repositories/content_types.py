"""
ContentType repository — document schemas and their declared fields.

Field order is significant: it is the order of the field lines in the
header block of every build.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from doccraft.core.logging import get_logger
from doccraft.db.models.base import as_uuid
from doccraft.db.models.content_type import ContentType
from doccraft.db.models.content_type_field import ContentTypeField
from doccraft.db.models.data_template import DataTemplate
from doccraft.db.models.instance import Instance
from doccraft.db.models.layout import Layout
from doccraft.db.models.user import User
from doccraft.repositories.errors import RecordInUseError
from doccraft.repositories.layouts import get_layout

logger = get_logger(__name__)


async def create_content_type(
    db: AsyncSession,
    user: User,
    *,
    name: str,
    prefix: str,
    layout: Layout | None = None,
    fields: Iterable[tuple[str, str]] = (),
    description: str | None = None,
) -> ContentType:
    """Create a content type with its fields, in the given order."""
    content_type = ContentType(
        name=name.strip(),
        prefix=prefix.strip(),
        description=description,
        organisation_id=user.organisation_id,
        creator_id=user.id,
        layout_id=layout.id if layout else None,
        fields=[
            ContentTypeField(name=field_name, field_type=field_type, position=position)
            for position, (field_name, field_type) in enumerate(fields)
        ],
    )
    db.add(content_type)
    await db.flush()
    return content_type


async def get_content_type(db: AsyncSession, content_type_uuid: uuid.UUID | str) -> ContentType | None:
    stmt = select(ContentType).where(ContentType.uuid == as_uuid(content_type_uuid))
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_content_type_with_fields(
    db: AsyncSession,
    content_type_uuid: uuid.UUID | str,
) -> ContentType | None:
    """Fetch a content type with its fields loaded in declaration order."""
    stmt = (
        select(ContentType)
        .options(selectinload(ContentType.fields))
        .where(ContentType.uuid == as_uuid(content_type_uuid))
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def content_type_index(
    db: AsyncSession,
    organisation_id: int,
    *,
    offset: int = 0,
    limit: int = 50,
) -> list[ContentType]:
    """Content types of an organisation, newest first, with layout and fields loaded."""
    stmt = (
        select(ContentType)
        .options(selectinload(ContentType.layout), selectinload(ContentType.fields))
        .where(ContentType.organisation_id == organisation_id)
        .order_by(ContentType.id.desc())
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_content_type(
    db: AsyncSession,
    content_type_uuid: uuid.UUID | str,
    *,
    name: str | None = None,
    description: str | None = None,
    layout_uuid: uuid.UUID | str | None = None,
    fields: Iterable[tuple[str, str]] = (),
) -> ContentType | None:
    """
    Update a content type and append new fields after the declared ones.

    Fields whose name is already declared are left as they are, so the
    header order of existing fields never changes.  The prefix is fixed at
    creation since it is part of every instance code.  Raises LookupError
    for an unknown layout.
    """
    content_type = await get_content_type_with_fields(db, content_type_uuid)
    if content_type is None:
        return None

    if layout_uuid is not None:
        layout = await get_layout(db, layout_uuid)
        if layout is None:
            raise LookupError(f"Layout {layout_uuid} not found")
        content_type.layout_id = layout.id
        content_type.layout = layout
    if name is not None:
        content_type.name = name.strip()
    if description is not None:
        content_type.description = description

    declared = {f.name for f in content_type.fields}
    position = max((f.position for f in content_type.fields), default=-1) + 1
    for field_name, field_type in fields:
        if field_name in declared:
            continue
        content_type.fields.append(
            ContentTypeField(name=field_name, field_type=field_type, position=position)
        )
        declared.add(field_name)
        position += 1

    await db.flush()
    return content_type


async def delete_content_type(db: AsyncSession, content_type_uuid: uuid.UUID | str) -> bool:
    """
    Delete a content type with its fields and data templates.

    Raises RecordInUseError while instances of it exist.
    """
    content_type = await get_content_type_with_fields(db, content_type_uuid)
    if content_type is None:
        return False

    dependents = await db.scalar(
        select(func.count()).select_from(Instance).where(Instance.content_type_id == content_type.id)
    )
    if dependents:
        raise RecordInUseError(
            f"Content type '{content_type.name}' has {dependents} instance(s)",
            dependents=dependents,
        )

    await db.execute(
        delete(DataTemplate)
        .where(DataTemplate.content_type_id == content_type.id)
        .execution_options(synchronize_session="fetch")
    )
    await db.delete(content_type)
    await db.flush()
    logger.info("Content type deleted", content_type=content_type.name)
    return True
