"""
Wine Catalog Backend — Picture SQLAlchemy Model
=================================================

What:  ORM model for the `pictures` table (front/back label photos).

Lifecycle:
    1. Uploaded under a client upload session (wine_id is NULL)
    2. Linked to a wine when that session's wine is saved
    3. Deleted (row and file) when the wine is deleted
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID, TIMESTAMP

from app.database import Base

LABEL_SIDES = ("front", "back")


class Picture(Base):
    __tablename__ = "pictures"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    # What: Name of the stored file, without the "<side>-label-" prefix
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    original_filename: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)

    # Values: 'front' | 'back'
    label_side: Mapped[str] = mapped_column(String(10), nullable=False)
    image_url: Mapped[str] = mapped_column(String(512), nullable=False)

    session_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    wine_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("wines.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Both lookups run on every wine save/delete
    __table_args__ = (
        Index("idx_pictures_session_id", "session_id"),
        Index("idx_pictures_wine_id", "wine_id"),
    )

    def __repr__(self) -> str:
        return f"<Picture(id={self.id}, side='{self.label_side}', wine_id={self.wine_id})>"
