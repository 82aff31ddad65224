"""
Field type repository — the registry of field types.

Content type fields refer to their type by name.  Renaming a field type
rewrites those fields in the same transaction, and a field type that
fields still use cannot be deleted.
"""

from __future__ import annotations

import uuid

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from doccraft.core.logging import get_logger
from doccraft.db.models.base import as_uuid
from doccraft.db.models.content_type_field import ContentTypeField
from doccraft.db.models.field_type import FieldType
from doccraft.db.models.user import User
from doccraft.repositories.errors import RecordInUseError

logger = get_logger(__name__)


async def create_field_type(
    db: AsyncSession,
    user: User,
    *,
    name: str,
    description: str | None = None,
) -> FieldType:
    field_type = FieldType(name=name.strip(), description=description, creator_id=user.id)
    db.add(field_type)
    await db.flush()
    return field_type


async def get_field_type(db: AsyncSession, field_type_uuid: uuid.UUID | str) -> FieldType | None:
    result = await db.execute(select(FieldType).where(FieldType.uuid == as_uuid(field_type_uuid)))
    return result.scalar_one_or_none()


async def field_type_index(db: AsyncSession, *, offset: int = 0, limit: int = 50) -> list[FieldType]:
    """All field types, newest first."""
    stmt = select(FieldType).order_by(FieldType.id.desc()).offset(offset).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_field_type(
    db: AsyncSession,
    field_type_uuid: uuid.UUID | str,
    *,
    name: str | None = None,
    description: str | None = None,
) -> FieldType | None:
    field_type = await get_field_type(db, field_type_uuid)
    if field_type is None:
        return None

    if name is not None and name.strip() != field_type.name:
        old_name, new_name = field_type.name, name.strip()
        await db.execute(
            update(ContentTypeField)
            .where(ContentTypeField.field_type == old_name)
            .values(field_type=new_name)
            .execution_options(synchronize_session="fetch")
        )
        field_type.name = new_name
        logger.info("Field type renamed", old_name=old_name, new_name=new_name)
    if description is not None:
        field_type.description = description

    await db.flush()
    return field_type


async def delete_field_type(db: AsyncSession, field_type_uuid: uuid.UUID | str) -> bool:
    """Delete a field type.  Raises RecordInUseError while fields declare it."""
    field_type = await get_field_type(db, field_type_uuid)
    if field_type is None:
        return False

    dependents = await db.scalar(
        select(func.count())
        .select_from(ContentTypeField)
        .where(ContentTypeField.field_type == field_type.name)
    )
    if dependents:
        raise RecordInUseError(
            f"Field type '{field_type.name}' is used by {dependents} field(s)",
            dependents=dependents,
        )

    await db.delete(field_type)
    await db.flush()
    return True
