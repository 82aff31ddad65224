"""
Counter — per-subject monotonic sequence.

Rows are keyed by subject, e.g. "ContentType:42".  The count only ever
moves up by one through `repositories.counters.next_count`, which does
the increment as a single upsert so concurrent callers never observe
the same value.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from doccraft.db.models.base import Base


class Counter(Base):
    __tablename__ = "counters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    subject: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        return f"<Counter {self.subject}={self.count}>"
