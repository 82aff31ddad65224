"""
Asset model — a named file (logo, signature, watermark) used by layouts.

`file` is the storage key; the public URL is produced on demand by the
configured asset storage backend, never stored.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from doccraft.db.models.base import Base, generate_uuid, utcnow


class Asset(Base):
    __tablename__ = "assets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[uuid.UUID] = mapped_column(Uuid, default=generate_uuid, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
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

    def __repr__(self) -> str:
        return f"<Asset id={self.id} {self.name} file={self.file}>"
