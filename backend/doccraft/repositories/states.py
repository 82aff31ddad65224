"""State repository — workflow states an instance can be in."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from doccraft.db.models.base import as_uuid
from doccraft.db.models.organisation import Organisation
from doccraft.db.models.state import State


async def create_state(
    db: AsyncSession,
    *,
    state: str,
    order: int = 1,
    organisation: Organisation | None = None,
) -> State:
    row = State(
        state=state.strip(),
        order=order,
        organisation_id=organisation.id if organisation else None,
    )
    db.add(row)
    await db.flush()
    return row


async def get_state(db: AsyncSession, state_uuid: uuid.UUID | str) -> State | None:
    result = await db.execute(select(State).where(State.uuid == as_uuid(state_uuid)))
    return result.scalar_one_or_none()


async def list_states(db: AsyncSession, organisation_id: int | None = None) -> list[State]:
    """States in workflow order, optionally for one organisation."""
    stmt = select(State).order_by(State.order, State.id)
    if organisation_id is not None:
        stmt = stmt.where(State.organisation_id == organisation_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())
