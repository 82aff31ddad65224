"""LayoutAsset — ordered association between a layout and an asset."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from doccraft.db.models.base import Base


class LayoutAsset(Base):
    __tablename__ = "layout_assets"
    __table_args__ = (UniqueConstraint("layout_id", "asset_id", name="uq_layout_asset"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    layout_id: Mapped[int] = mapped_column(
        ForeignKey("layouts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    asset_id: Mapped[int] = mapped_column(
        ForeignKey("assets.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    creator_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    layout: Mapped["Layout"] = relationship(back_populates="layout_assets")
    asset: Mapped["Asset"] = relationship()
