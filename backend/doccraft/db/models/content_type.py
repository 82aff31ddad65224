"""
ContentType model — the schema for a class of documents.

`prefix` seeds every instance's sequence code (prefix + zero-padded
counter), so it is part of the human-facing document identity and
should not change once instances exist.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from doccraft.db.models.base import Base, generate_uuid, utcnow


class ContentType(Base):
    __tablename__ = "content_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[uuid.UUID] = mapped_column(Uuid, default=generate_uuid, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    prefix: Mapped[str] = mapped_column(String(20), nullable=False)

    # ── Ownership ─────────────────────────────
    organisation_id: Mapped[int | None] = mapped_column(
        ForeignKey("organisations.id", ondelete="CASCADE"), nullable=True, index=True
    )
    creator_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    layout_id: Mapped[int | None] = mapped_column(
        ForeignKey("layouts.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # ── Relationships ─────────────────────────
    fields: Mapped[list["ContentTypeField"]] = relationship(
        back_populates="content_type",
        cascade="all, delete-orphan",
        order_by="[ContentTypeField.position, ContentTypeField.id]",
    )
    layout: Mapped["Layout | None"] = relationship()

    def __repr__(self) -> str:
        return f"<ContentType id={self.id} {self.name} prefix={self.prefix}>"
