"""
Wine Catalog Backend — Wine Route Handlers
============================================

What:  CRUD endpoints for wines plus the four tasting-rating endpoints.
Who:   Called by the catalog list, the wine form and the tasting screens.

Endpoints:
    GET    /wines                      all wines, newest first
    POST   /add-wine                   add, or merge onto the wine named by _id
    POST   /{aspect}-rating/{wine_id}  aspect in color|nose|palate|overall
    GET    /wines/{wine_id}
    PUT    /wines/{wine_id}            partial update
    DELETE /wines/{wine_id}            also removes the label pictures
"""

import logging
from typing import Any, Dict, List
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes.auth import SESSION_UPLOAD_KEY
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.wine import (
    RatingAspect,
    RatingResponse,
    WineIn,
    WineResponse,
    WineSavedResponse,
)
from app.services.wine_service import wine_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Wines"])

NOT_FOUND = {404: {"description": "Wine not found", "model": ErrorResponse}}


@router.get(
    "/wines",
    response_model=List[WineResponse],
    summary="List all wines",
)
async def list_wines(db: AsyncSession = Depends(get_db_session)) -> List[WineResponse]:
    return await wine_service.list_wines(db=db)


@router.post(
    "/add-wine",
    status_code=201,
    response_model=WineSavedResponse,
    summary="Add a wine (or update the wine named by _id)",
    description=(
        "Keys without a dedicated column are kept as free-form attributes. "
        "Pictures uploaded under the upload session (sessionId in the body, or "
        "the caller's server-side session from GET /session) and not yet linked "
        "to a wine are linked to this one."
    ),
)
async def add_wine(
    request: Request,
    payload: WineIn,
    db: AsyncSession = Depends(get_db_session),
) -> WineSavedResponse:
    return await wine_service.add_or_update_wine(
        db=db,
        payload=payload,
        fallback_session_id=request.session.get(SESSION_UPLOAD_KEY),
    )


@router.post(
    "/{aspect}-rating/{wine_id}",
    status_code=201,
    response_model=RatingResponse,
    responses=NOT_FOUND,
    summary="Store a tasting rating on a wine",
)
async def add_rating(
    aspect: RatingAspect,
    wine_id: UUID,
    rating: Dict[str, Any] = Body(..., description="Opaque rating object from the tasting screen"),
    db: AsyncSession = Depends(get_db_session),
) -> RatingResponse:
    return await wine_service.rate_wine(db=db, wine_id=wine_id, aspect=aspect, rating=rating)


@router.get(
    "/wines/{wine_id}",
    response_model=WineResponse,
    responses=NOT_FOUND,
    summary="Get a single wine",
)
async def get_wine(wine_id: UUID, db: AsyncSession = Depends(get_db_session)) -> WineResponse:
    return await wine_service.get_wine(db=db, wine_id=wine_id)


@router.put(
    "/wines/{wine_id}",
    response_model=MessageResponse,
    responses=NOT_FOUND,
    summary="Update a wine",
)
async def update_wine(
    wine_id: UUID,
    payload: WineIn,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await wine_service.update_wine(db=db, wine_id=wine_id, payload=payload)
    return MessageResponse(message="Wine updated successfully")


@router.delete(
    "/wines/{wine_id}",
    response_model=MessageResponse,
    responses=NOT_FOUND,
    summary="Delete a wine and its label pictures",
)
async def delete_wine(wine_id: UUID, db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    await wine_service.delete_wine(db=db, wine_id=wine_id)
    return MessageResponse(message="Wine deleted successfully")
