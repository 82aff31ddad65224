"""
DataTemplate model — reusable starting content for a content type.

`title_template` and `data` hold the text new instances are seeded
from; `serialized` holds default field values.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from doccraft.db.models.base import Base, JSONType, generate_uuid, utcnow


class DataTemplate(Base):
    __tablename__ = "data_templates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[uuid.UUID] = mapped_column(Uuid, default=generate_uuid, unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    title_template: Mapped[str] = mapped_column(String(500), nullable=False)
    data: Mapped[str] = mapped_column(Text, default="", nullable=False)
    serialized: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)

    content_type_id: Mapped[int] = mapped_column(
        ForeignKey("content_types.id", ondelete="CASCADE"), nullable=False, index=True
    )
    creator_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    content_type: Mapped["ContentType"] = relationship()
    creator: Mapped["User | None"] = relationship()

    def __repr__(self) -> str:
        return f"<DataTemplate id={self.id} {self.title} content_type={self.content_type_id}>"
