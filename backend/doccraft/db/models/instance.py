"""
Instance model — one concrete document created from a content type.

`instance_id` is the human-readable sequence code (prefix + zero-padded
counter) and is also the name of the document's build workspace under
`uploads/contents/`.  It is assigned once at creation and never changes.

`show_instance` attaches a transient `build` attribute (the artifact
path) when a successful build exists; it is not a column.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from doccraft.db.models.base import Base, JSONType, generate_uuid, utcnow


class Instance(Base):
    __tablename__ = "instances"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[uuid.UUID] = mapped_column(Uuid, default=generate_uuid, unique=True, nullable=False)
    instance_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)

    # ── Content ───────────────────────────────
    serialized: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)
    raw: Mapped[str] = mapped_column(Text, default="", nullable=False)

    # ── References ────────────────────────────
    content_type_id: Mapped[int] = mapped_column(
        ForeignKey("content_types.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    state_id: Mapped[int | None] = mapped_column(
        ForeignKey("states.id", ondelete="SET NULL"), nullable=True
    )
    creator_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # ── Audit timestamps ─────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    # ── Relationships ─────────────────────────
    content_type: Mapped["ContentType"] = relationship()
    state: Mapped["State | None"] = relationship()
    creator: Mapped["User | None"] = relationship()
    build_histories: Mapped[list["BuildHistory"]] = relationship(
        back_populates="instance",
        cascade="all, delete-orphan",
        order_by="BuildHistory.id",
    )

    def __repr__(self) -> str:
        return f"<Instance id={self.id} code={self.instance_id} content_type={self.content_type_id}>"
