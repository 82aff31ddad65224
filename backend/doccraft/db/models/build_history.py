"""
BuildHistory — one row per build attempt of an instance.

Append-only audit log: the pipeline inserts rows and never updates or
deletes them (they go away only with their instance).  `exit_code` is
the renderer's real exit status, untranslated; the download link logic
keys off `exit_code == 0`.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from doccraft.db.models.base import Base, utcnow


class BuildHistory(Base):
    __tablename__ = "build_histories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    instance_id: Mapped[int] = mapped_column(
        ForeignKey("instances.id", ondelete="CASCADE"), nullable=False, index=True
    )
    creator_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    # ── Timing (UTC) ─────────────────────────
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    delay: Mapped[int] = mapped_column(Integer, nullable=False)  # ms

    # ── Outcome ───────────────────────────────
    exit_code: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)

    inserted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

    instance: Mapped["Instance"] = relationship(back_populates="build_histories")

    def __repr__(self) -> str:
        return f"<BuildHistory instance={self.instance_id} exit={self.exit_code} status={self.status} delay={self.delay}ms>"
