"""
Wine Catalog Backend — Picture Schemas
========================================

What:  Response models for label uploads and picture lookups.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class PictureResponse(CamelModel):
    """A stored label picture record."""
    id: uuid.UUID = Field(alias="_id")
    filename: str
    original_filename: Optional[str] = None
    content_type: str
    size: int
    label_side: str = Field(description="front or back")
    image_url: str = Field(description="Path serving the image, e.g. /images/front-label-<file>")
    session_id: Optional[str] = None
    wine_id: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None


class UploadResponse(CamelModel):
    """
    Returned by POST /upload-{side}-label/{session_id} with HTTP 201.

    The client keeps `pictureId` and `filename` and sends them back as
    frontLabelPictureId/frontLabel (or back*) when saving the wine.
    """
    picture_id: uuid.UUID
    filename: str
    image_url: str
    message: str
