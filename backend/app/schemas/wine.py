"""
Wine Catalog Backend — Wine Request/Response Schemas
======================================================

What:  Pydantic models for the wine endpoints.
How:   WineIn accepts any extra keys (the catalog is open-ended); known keys
       land in columns, the rest in Wine.attributes. WineResponse flattens
       attributes back to the top level so a client sees one document.

Example body for POST /add-wine:
    {
        "name": "Côte-Rôtie La Landonne",
        "producer": "Guigal",
        "vintage": 2015,
        "frontLabel": "8c3c...e1.jpg",
        "frontLabelPictureId": "0b6f...",
        "cellarLocation": "rack 3"      ← stored in attributes
    }
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.wine import WINE_FIELDS, Wine
from app.schemas.common import CamelModel

# Keys that are never stored as free-form attributes
RESERVED_KEYS = {"_id", "id", "createdAt", "updatedAt", "sessionId"}


class RatingAspect(str, Enum):
    """The four tasting steps the client rates separately."""
    COLOR = "color"
    NOSE = "nose"
    PALATE = "palate"
    OVERALL = "overall"

    @property
    def column(self) -> str:
        return f"{self.value}_rating"


class WineIn(CamelModel):
    """
    Body of POST /add-wine and PUT /wines/{id}.

    Every field is optional: PUT applies only the keys present in the body,
    and add-wine merges onto an existing wine when `_id` matches one.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,  # "vintage": 2015 → "2015"
    )

    id: Optional[str] = Field(default=None, alias="_id")
    session_id: Optional[str] = Field(default=None, max_length=64)

    name: Optional[str] = Field(default=None, max_length=255)
    producer: Optional[str] = Field(default=None, max_length=255)
    variety: Optional[str] = Field(default=None, max_length=255)
    country: Optional[str] = Field(default=None, max_length=255)
    region: Optional[str] = Field(default=None, max_length=255)
    appellation: Optional[str] = Field(default=None, max_length=255)
    vintage: Optional[str] = Field(default=None, max_length=32)

    front_label: Optional[str] = Field(default=None, max_length=255)
    back_label: Optional[str] = Field(default=None, max_length=255)
    front_label_picture_id: Optional[uuid.UUID] = None
    back_label_picture_id: Optional[uuid.UUID] = None

    color_rating: Optional[Dict[str, Any]] = None
    nose_rating: Optional[Dict[str, Any]] = None
    palate_rating: Optional[Dict[str, Any]] = None
    overall_rating: Optional[Dict[str, Any]] = None

    def column_values(self) -> Dict[str, Any]:
        """Column writes for the keys the client actually sent."""
        sent = self.model_fields_set
        return {name: getattr(self, name) for name in WINE_FIELDS if name in sent}

    def extra_attributes(self) -> Dict[str, Any]:
        """Keys without a column, minus server-managed ones."""
        return {
            key: value
            for key, value in (self.model_extra or {}).items()
            if key not in RESERVED_KEYS
        }

    def wine_uuid(self) -> Optional[uuid.UUID]:
        """`_id` as a UUID, or None when absent or not a UUID."""
        if not self.id:
            return None
        try:
            return uuid.UUID(str(self.id))
        except ValueError:
            return None


class WineResponse(CamelModel):
    """A wine as the client sees it: columns plus flattened attributes."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: uuid.UUID = Field(alias="_id")
    name: Optional[str] = None
    producer: Optional[str] = None
    variety: Optional[str] = None
    country: Optional[str] = None
    region: Optional[str] = None
    appellation: Optional[str] = None
    vintage: Optional[str] = None
    front_label: Optional[str] = None
    back_label: Optional[str] = None
    front_label_picture_id: Optional[uuid.UUID] = None
    back_label_picture_id: Optional[uuid.UUID] = None
    color_rating: Optional[Dict[str, Any]] = None
    nose_rating: Optional[Dict[str, Any]] = None
    palate_rating: Optional[Dict[str, Any]] = None
    overall_rating: Optional[Dict[str, Any]] = None
    session_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, wine: Wine) -> "WineResponse":
        columns = {name: getattr(wine, name) for name in WINE_FIELDS}
        extras = {
            key: value
            for key, value in (wine.attributes or {}).items()
            if key not in RESERVED_KEYS and key not in cls.model_fields
        }
        return cls(
            id=wine.id,
            session_id=wine.session_id,
            created_at=wine.created_at,
            updated_at=wine.updated_at,
            **columns,
            **extras,
        )


class WineSavedResponse(CamelModel):
    """Returned by POST /add-wine with HTTP 201."""
    wine_id: uuid.UUID
    message: str = "Wine added successfully"


class RatingResponse(CamelModel):
    """Returned by POST /{aspect}-rating/{wine_id} with HTTP 201."""
    message: str
    inserted_id: uuid.UUID
