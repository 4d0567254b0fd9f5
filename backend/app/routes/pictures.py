"""
Wine Catalog Backend — Picture Route Handlers
===============================================

What:  Label uploads, picture lookups and image serving.
How:   Reads the multipart upload, delegates to PictureService, returns JSON.
Who:   Called by the wine form (uploads) and by <img> tags (GET /images/...).

Request Flow (upload):
    1. Client sends multipart/form-data with a 'picture' field
    2. The path carries the client's upload session id
    3. PictureService validates → stores → inserts the picture row
    4. 201 Created with {pictureId, filename, imageUrl, message}
"""

import logging
import mimetypes
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, Path, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import NotFoundError
from app.schemas.common import ErrorResponse
from app.schemas.picture import PictureResponse, UploadResponse
from app.services.file_service import file_service
from app.services.picture_service import picture_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pictures"])

UPLOAD_RESPONSES = {
    201: {"description": "Picture stored", "model": UploadResponse},
    400: {"description": "Invalid file type or size", "model": ErrorResponse},
    429: {"description": "Rate limit exceeded", "model": ErrorResponse},
    500: {"description": "Storage or database failure", "model": ErrorResponse},
}


async def _upload(side: str, session_id: str, picture: UploadFile, db: AsyncSession) -> UploadResponse:
    content = await picture.read()
    logger.info(
        "Received %s label upload: filename=%s, size=%d bytes, session=%s",
        side,
        picture.filename or "unknown",
        len(content),
        session_id,
    )
    try:
        return await picture_service.upload_label(
            db=db,
            side=side,
            session_id=session_id,
            filename=picture.filename or "label.jpg",
            content=content,
            content_length=picture.size,
        )
    finally:
        await picture.close()


@router.post(
    "/upload-front-label/{session_id}",
    status_code=201,
    response_model=UploadResponse,
    responses=UPLOAD_RESPONSES,
    summary="Upload the front label picture",
)
async def upload_front_label(
    session_id: str = Path(..., min_length=1, max_length=64, description="Client upload session id"),
    picture: UploadFile = File(..., description="PNG or JPEG image of the front label"),
    db: AsyncSession = Depends(get_db_session),
) -> UploadResponse:
    return await _upload("front", session_id, picture, db)


@router.post(
    "/upload-back-label/{session_id}",
    status_code=201,
    response_model=UploadResponse,
    responses=UPLOAD_RESPONSES,
    summary="Upload the back label picture",
)
async def upload_back_label(
    session_id: str = Path(..., min_length=1, max_length=64, description="Client upload session id"),
    picture: UploadFile = File(..., description="PNG or JPEG image of the back label"),
    db: AsyncSession = Depends(get_db_session),
) -> UploadResponse:
    return await _upload("back", session_id, picture, db)


@router.get(
    "/pictures/{wine_id}",
    response_model=List[PictureResponse],
    summary="List the pictures linked to a wine",
)
async def list_pictures(
    wine_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> List[PictureResponse]:
    return await picture_service.list_for_wine(db=db, wine_id=wine_id)


@router.get(
    "/picture/{picture_id}",
    response_model=PictureResponse,
    responses={404: {"description": "Picture not found", "model": ErrorResponse}},
    summary="Get one picture record",
)
async def get_picture(
    picture_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> PictureResponse:
    return await picture_service.get_picture(db=db, picture_id=picture_id)


@router.get(
    "/images/{filename}",
    summary="Serve a stored label image",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Invalid image path", "model": ErrorResponse},
        404: {"description": "Image not found", "model": ErrorResponse},
    },
)
async def serve_image(filename: str) -> FileResponse:
    """
    Serve a label image from the image directory.

    Security:
        file_service.resolve_image() rejects any name that resolves outside
        the image directory (../, absolute paths).
    """
    full_path = file_service.resolve_image(filename)
    if not full_path.is_file():
        raise NotFoundError(resource="image", resource_id=filename)

    media_type = mimetypes.guess_type(full_path.name)[0] or "application/octet-stream"
    return FileResponse(
        path=str(full_path),
        media_type=media_type,
        headers={"Cache-Control": "public, max-age=86400"},
    )
