"""
Theme model — typography for an organisation's documents.

`file` is the storage key of an uploaded font or style archive, resolved
the same way as asset files.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from doccraft.db.models.base import Base, JSONType, generate_uuid, utcnow


class Theme(Base):
    __tablename__ = "themes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[uuid.UUID] = mapped_column(Uuid, default=generate_uuid, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    font: Mapped[str] = mapped_column(String(255), nullable=False)
    typescale: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)
    file: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    organisation_id: Mapped[int | None] = mapped_column(
        ForeignKey("organisations.id", ondelete="CASCADE"), nullable=True, index=True
    )
    creator_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    creator: Mapped["User | None"] = relationship()

    def __repr__(self) -> str:
        return f"<Theme id={self.id} {self.name} font={self.font}>"
