"""
ContentTypeField — one declared field of a content type.

Only the name matters to the build: it is the key looked up in an
instance's `serialized` map when the header block is assembled.
"""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from doccraft.db.models.base import Base


class ContentTypeField(Base):
    __tablename__ = "content_type_fields"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content_type_id: Mapped[int] = mapped_column(
        ForeignKey("content_types.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    field_type: Mapped[str] = mapped_column(String(50), nullable=False, default="string")
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    content_type: Mapped["ContentType"] = relationship(back_populates="fields")

    def __repr__(self) -> str:
        return f"<ContentTypeField {self.name}:{self.field_type} pos={self.position}>"
