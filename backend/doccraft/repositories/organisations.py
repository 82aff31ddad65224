"""Organisation repository."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from doccraft.db.models.organisation import Organisation


async def create_organisation(db: AsyncSession, *, name: str) -> Organisation:
    organisation = Organisation(name=name.strip())
    db.add(organisation)
    await db.flush()
    return organisation
