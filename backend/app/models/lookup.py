"""
Wine Catalog Backend — Reference List Models
==============================================

What:  ORM models for the six lookup lists that feed the wine form dropdowns
       (varieties, countries, appellations, vintages, regions, producers).
How:   Every list is its own small table sharing the LookupMixin columns; the
       value column is named after the JSON field the client sends
       (`{"variety": "Syrah"}` → varieties.variety).
Why:   Separate tables keep each list independently indexed and let a unique
       constraint reject duplicate entries per list.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Type

from sqlalchemy import String, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID, TIMESTAMP

from app.database import Base


class LookupMixin:
    """Columns shared by every lookup table."""

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )


class Variety(LookupMixin, Base):
    __tablename__ = "varieties"
    variety: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)


class Country(LookupMixin, Base):
    __tablename__ = "countries"
    country: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)


class Appellation(LookupMixin, Base):
    __tablename__ = "appellations"
    appellation: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)


class Vintage(LookupMixin, Base):
    __tablename__ = "vintages"
    vintage: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)


class Region(LookupMixin, Base):
    __tablename__ = "regions"
    region: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)


class Producer(LookupMixin, Base):
    __tablename__ = "producers"
    producer: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)


@dataclass(frozen=True)
class LookupList:
    """
    Describes one lookup list end to end.

    Attributes:
        key:    Registry key, also the table name (e.g. "varieties")
        model:  ORM model class
        field:  Value column / JSON field name (e.g. "variety")
        path:   HTTP path serving the list (e.g. "/wine-varieties")
        label:  Human-readable singular used in messages (e.g. "Variety")
    """
    key: str
    model: Type[Base]
    field: str
    path: str
    label: str


LOOKUP_LISTS: Dict[str, LookupList] = {
    entry.key: entry
    for entry in (
        LookupList("varieties", Variety, "variety", "/wine-varieties", "Variety"),
        LookupList("countries", Country, "country", "/countries", "Country"),
        LookupList("appellations", Appellation, "appellation", "/appellations", "Appellation"),
        LookupList("vintages", Vintage, "vintage", "/vintages", "Vintage"),
        LookupList("regions", Region, "region", "/regions", "Region"),
        LookupList("producers", Producer, "producer", "/producers", "Producer"),
    )
}
