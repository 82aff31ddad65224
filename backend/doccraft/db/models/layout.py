"""
Layout model — a template bundle on disk plus its ordered assets.

`slug` names the directory under SLUGS_DIR that is copied into every
build workspace (template.tex and friends).  Assets are reached through
LayoutAsset so the association keeps its own ordering.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from doccraft.db.models.base import Base, generate_uuid, utcnow


class Layout(Base):
    __tablename__ = "layouts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[uuid.UUID] = mapped_column(Uuid, default=generate_uuid, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    engine_id: Mapped[int | None] = mapped_column(
        ForeignKey("engines.id", ondelete="SET NULL"), nullable=True
    )

    organisation_id: Mapped[int | None] = mapped_column(
        ForeignKey("organisations.id", ondelete="CASCADE"), nullable=True, index=True
    )
    creator_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    engine: Mapped["Engine | None"] = relationship()
    layout_assets: Mapped[list["LayoutAsset"]] = relationship(
        back_populates="layout",
        cascade="all, delete-orphan",
        order_by="[LayoutAsset.position, LayoutAsset.id]",
    )

    @property
    def assets(self) -> list["Asset"]:
        """Assets in association order (requires layout_assets + asset loaded)."""
        return [link.asset for link in self.layout_assets]

    def __repr__(self) -> str:
        return f"<Layout id={self.id} {self.name} slug={self.slug}>"
