"""
Counter repository — per-subject sequence numbers.

`next_count` is the only way a count moves.  It is one statement:

    INSERT INTO counters (subject, count) VALUES (:subject, 1)
    ON CONFLICT (subject) DO UPDATE SET count = counters.count + 1
    RETURNING count

so two sessions asking for the same subject at the same time are
serialised by the database and always see different values.  Dialects
without ON CONFLICT fall back to SELECT ... FOR UPDATE and an update.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from doccraft.db.models.content_type import ContentType
from doccraft.db.models.counter import Counter

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def subject_for(content_type: ContentType) -> str:
    """Counter subject used for a content type's instance codes."""
    return f"ContentType:{content_type.id}"


async def next_count(db: AsyncSession, subject: str) -> int:
    """Increment the counter for `subject` (creating it at 1) and return the new value."""
    insert = _INSERTS.get(db.get_bind().dialect.name)
    if insert is None:
        return await _next_count_locked(db, subject)

    stmt = (
        insert(Counter)
        .values(subject=subject, count=1)
        .on_conflict_do_update(
            index_elements=[Counter.subject],
            set_={"count": Counter.count + 1},
        )
        .returning(Counter.count)
    )
    result = await db.execute(stmt)
    return result.scalar_one()


async def _next_count_locked(db: AsyncSession, subject: str) -> int:
    """Row-locking increment for dialects without an upsert construct."""
    stmt = (
        select(Counter)
        .where(Counter.subject == subject)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    counter = (await db.execute(stmt)).scalar_one_or_none()
    if counter is None:
        counter = Counter(subject=subject, count=1)
        db.add(counter)
    else:
        counter.count += 1
    await db.flush()
    return counter.count


async def current_count(db: AsyncSession, subject: str) -> int:
    """Last value handed out for `subject`; 0 if none yet."""
    result = await db.execute(select(Counter.count).where(Counter.subject == subject))
    return result.scalar_one_or_none() or 0
