"""
Wine Catalog Backend — Wine SQLAlchemy Model
==============================================

What:  ORM model representing the `wines` table in PostgreSQL.
Who:   Used by WineService for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - Catalog fields (producer, variety, ...) are plain nullable strings: the
      web client fills them from the lookup lists but may also type free text.
    - vintage is TEXT, not INTEGER: "NV" (non-vintage) is a legitimate value.
    - The four tasting ratings are opaque JSONB objects owned by the client.
    - attributes (JSONB) keeps any other key the client sends, so the catalog
      can grow new fields without a migration.
    - session_id records the upload session whose pictures were linked to the
      wine on creation.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import Index, String, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import JSONB, UUID, TIMESTAMP

from app.database import Base

# Columns the client may write directly (JSON camelCase ↔ snake_case here)
WINE_FIELDS = (
    "name",
    "producer",
    "variety",
    "country",
    "region",
    "appellation",
    "vintage",
    "front_label",
    "back_label",
    "front_label_picture_id",
    "back_label_picture_id",
    "color_rating",
    "nose_rating",
    "palate_rating",
    "overall_rating",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Wine(Base):
    """
    A catalogued wine.

    Lifecycle:
        1. Created by POST /add-wine (pictures of the upload session get linked)
        2. Rated piecewise via POST /{aspect}-rating/{id}
        3. Edited via PUT /wines/{id} or a second POST /add-wine with its _id
        4. Deleted together with its label pictures
    """

    __tablename__ = "wines"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    producer: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    variety: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    region: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    appellation: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    vintage: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    # ── Label pictures ────────────────────────────────────────────────────
    # front_label/back_label hold the stored filename shown by the client;
    # the *_picture_id columns reference `pictures` rows (soft reference, no FK)
    front_label: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    back_label: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    front_label_picture_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        nullable=True,
    )
    back_label_picture_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        nullable=True,
    )

    # ── Tasting ratings ───────────────────────────────────────────────────
    color_rating: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    nose_rating: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    palate_rating: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    overall_rating: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSONB, nullable=True)

    attributes: Mapped[Dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default=text("'{}'::jsonb"),
        comment="Client fields without a dedicated column",
    )

    session_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_wines_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Wine(id={self.id}, name='{self.name}', vintage='{self.vintage}')>"
