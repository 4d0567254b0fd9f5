"""
Wine Catalog Backend — Wine Service
=====================================

What:  Business logic for the wine catalog: listing, add-or-update, ratings,
       partial updates and deletion.
How:   Works on the `wines` table and delegates everything picture related to
       PictureService.
Who:   Called by the wine routes.

Add-or-Update Flow (POST /add-wine):
    ┌──────────────┐    ┌──────────────────┐    ┌──────────────────────┐
    │  _id known?  │─Y─▶│  merge body onto │───▶│  link the session's  │
    │              │    │  existing wine   │    │  unlinked pictures   │
    └──────┬───────┘    └──────────────────┘    └──────────────────────┘
           N                                              ▲
           └──────────▶  insert new wine  ────────────────┘

Error Handling Strategy:
    Our own exceptions (NotFoundError, ...) propagate unchanged. Anything else
    coming out of the database layer is logged and wrapped in DatabaseError,
    so the client never sees SQL.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError, WineCatalogError
from app.models.wine import Wine
from app.schemas.wine import (
    RatingAspect,
    RatingResponse,
    WineIn,
    WineResponse,
    WineSavedResponse,
)
from app.services.picture_service import LABEL_FIELDS, picture_service

logger = logging.getLogger(__name__)


class WineService:
    """
    Stateless business logic layer for wines.

    Every method receives the request's AsyncSession; commits happen in
    get_db_session() once the route returns.
    """

    async def _load(self, db: AsyncSession, wine_id: uuid.UUID) -> Wine:
        wine = await db.get(Wine, wine_id)
        if wine is None:
            raise NotFoundError(resource="wine", resource_id=str(wine_id))
        return wine

    def _apply(self, wine: Wine, payload: WineIn) -> None:
        """Write the sent columns and merge the free-form keys into attributes."""
        for name, value in payload.column_values().items():
            setattr(wine, name, value)

        extras = payload.extra_attributes()
        if extras:
            # A new dict, so the JSONB column is flagged as changed
            merged: Dict[str, Any] = dict(wine.attributes or {})
            merged.update(extras)
            wine.attributes = merged

    async def list_wines(self, db: AsyncSession) -> List[WineResponse]:
        """All wines, newest first."""
        try:
            result = await db.execute(select(Wine).order_by(desc(Wine.created_at)))
            wines = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing wines: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch wines",
                context={"error_type": type(e).__name__},
            )
        return [WineResponse.from_model(wine) for wine in wines]

    async def get_wine(self, db: AsyncSession, wine_id: uuid.UUID) -> WineResponse:
        """
        Raises:
            NotFoundError: No wine with this id (→ 404)
            DatabaseError: Query failed (→ 500)
        """
        try:
            wine = await self._load(db, wine_id)
        except WineCatalogError:
            raise
        except Exception as e:
            logger.error("Database error fetching wine %s: %s", wine_id, str(e))
            raise DatabaseError(
                message="Failed to fetch wine",
                context={"wine_id": str(wine_id)},
            )
        return WineResponse.from_model(wine)

    async def add_or_update_wine(
        self,
        db: AsyncSession,
        payload: WineIn,
        fallback_session_id: Optional[str] = None,
    ) -> WineSavedResponse:
        """
        Insert a wine, or merge the body onto the wine named by `_id`.

        Args:
            db: Async database session
            payload: The request body
            fallback_session_id: Server-side upload session of the caller, used
                                 when the body carries no sessionId

        Returns:
            WineSavedResponse with the id of the saved wine
        """
        session_id = payload.session_id or fallback_session_id
        requested_id = payload.wine_uuid()

        try:
            wine = await db.get(Wine, requested_id) if requested_id else None
            created = wine is None
            if created:
                wine = Wine(id=requested_id or uuid.uuid4(), attributes={})
                db.add(wine)

            self._apply(wine, payload)
            if session_id:
                wine.session_id = session_id
            await db.flush()

            if session_id:
                await picture_service.associate_with_wine(db, session_id, wine.id)

        except WineCatalogError:
            raise
        except Exception as e:
            logger.error("Failed to save wine: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to add wine",
                context={"error_type": type(e).__name__},
            )

        logger.info("Wine %s %s", wine.id, "added" if created else "updated")
        return WineSavedResponse(
            wine_id=wine.id,
            message="Wine added successfully" if created else "Wine updated successfully",
        )

    async def rate_wine(
        self,
        db: AsyncSession,
        wine_id: uuid.UUID,
        aspect: RatingAspect,
        rating: Dict[str, Any],
    ) -> RatingResponse:
        """Store one tasting rating (color, nose, palate or overall) on a wine."""
        try:
            wine = await self._load(db, wine_id)
            setattr(wine, aspect.column, dict(rating))
            await db.flush()
        except WineCatalogError:
            raise
        except Exception as e:
            logger.error("Failed to save %s rating for wine %s: %s", aspect.value, wine_id, str(e))
            raise DatabaseError(
                message=f"Failed to add {aspect.value} rating",
                context={"wine_id": str(wine_id)},
            )

        logger.info("%s rating stored for wine %s", aspect.value.capitalize(), wine_id)
        return RatingResponse(
            message=f"{aspect.value.capitalize()} rating added successfully",
            inserted_id=wine.id,
        )

    async def update_wine(
        self, db: AsyncSession, wine_id: uuid.UUID, payload: WineIn
    ) -> None:
        """
        Partial update. `_id` in the body is ignored; the path decides.

        When frontLabel or backLabel is part of the body, the referenced
        picture records get the new filename as well.
        """
        try:
            wine = await self._load(db, wine_id)
            self._apply(wine, payload)
            if payload.session_id:
                wine.session_id = payload.session_id
            await db.flush()

            changed_labels = set(LABEL_FIELDS) & payload.model_fields_set
            if changed_labels:
                await picture_service.sync_label_filenames(db, wine, changed_labels)

        except WineCatalogError:
            raise
        except Exception as e:
            logger.error("Failed to update wine %s: %s", wine_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update wine",
                context={"wine_id": str(wine_id)},
            )

        logger.info("Wine updated: %s", wine_id)

    async def delete_wine(self, db: AsyncSession, wine_id: uuid.UUID) -> None:
        """Delete a wine together with its label pictures (rows and files)."""
        try:
            wine = await self._load(db, wine_id)
            await picture_service.delete_for_wine(db, wine)
            await db.delete(wine)
            await db.flush()
        except WineCatalogError:
            raise
        except Exception as e:
            logger.error("Failed to delete wine %s: %s", wine_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete wine",
                context={"wine_id": str(wine_id)},
            )

        logger.info("Wine deleted: %s", wine_id)


# ── Singleton Instance ────────────────────────────────────────────────────
wine_service = WineService()
