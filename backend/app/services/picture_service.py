"""
Wine Catalog Backend — Picture Service
========================================

What:  Label picture records: upload, lookup, linking to wines, removal.
How:   Composes FileService (disk) with the `pictures` table (database).
Who:   Called by the picture routes and by WineService.

Upload Flow (POST /upload-front-label/{session_id}):
    ┌──────────┐    ┌──────────────┐    ┌─────────────┐
    │  Upload  │───▶│  Validate &  │───▶│  Insert row │
    │  (Route) │    │  store file  │    │  (pictures) │
    └──────────┘    └──────────────┘    └─────────────┘
    A failed insert removes the file that was just stored.

Linking:
    Pictures are uploaded before their wine exists. They carry the client's
    upload session id; saving the wine links every still-unlinked picture of
    that session to it.
"""

import logging
import uuid
from typing import Iterable, List, Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError
from app.models.picture import Picture
from app.models.wine import Wine
from app.schemas.picture import PictureResponse, UploadResponse
from app.services.file_service import file_service, label_filename

logger = logging.getLogger(__name__)

LABEL_FIELDS = ("front_label", "back_label")


class PictureService:
    """Stateless; every method receives the request's database session."""

    async def upload_label(
        self,
        db: AsyncSession,
        side: str,
        session_id: str,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> UploadResponse:
        """
        Store one label picture and record it under the upload session.

        Raises:
            ValidationError: Unsupported type, empty or oversized picture
            FileStorageError: Disk write or rename failed
            DatabaseError: The picture row could not be inserted
        """
        stored_name, image_path, mime_type = await file_service.validate_and_store(
            filename=filename,
            content=content,
            side=side,
            content_length=content_length,
        )

        try:
            picture = Picture(
                id=uuid.uuid4(),
                filename=stored_name,
                original_filename=filename[:255],
                content_type=mime_type,
                size=len(content),
                label_side=side,
                image_url=f"/images/{label_filename(side, stored_name)}",
                session_id=session_id,
            )
            db.add(picture)
            await db.flush()
        except Exception as e:
            await file_service.cleanup_file(str(image_path))
            logger.error("Failed to record %s label picture: %s", side, str(e), exc_info=True)
            raise DatabaseError(
                message=f"Failed to upload {side} label",
                context={"session_id": session_id, "error_type": type(e).__name__},
            )

        logger.info("%s label picture %s added for session %s", side.capitalize(), picture.id, session_id)
        return UploadResponse(
            picture_id=picture.id,
            filename=stored_name,
            image_url=picture.image_url,
            message=f"{side.capitalize()} label uploaded successfully",
        )

    async def get_picture(self, db: AsyncSession, picture_id: uuid.UUID) -> PictureResponse:
        """Raises NotFoundError for an unknown id."""
        try:
            picture = await db.get(Picture, picture_id)
        except Exception as e:
            logger.error("Database error fetching picture %s: %s", picture_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the picture. Please try again.",
                context={"picture_id": str(picture_id)},
            )
        if picture is None:
            raise NotFoundError(resource="picture", resource_id=str(picture_id))
        return PictureResponse.model_validate(picture)

    async def list_for_wine(self, db: AsyncSession, wine_id: uuid.UUID) -> List[PictureResponse]:
        """All pictures linked to a wine, oldest first. Unknown wine → []."""
        try:
            result = await db.execute(
                select(Picture)
                .where(Picture.wine_id == wine_id)
                .order_by(Picture.created_at)
            )
            pictures = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing pictures for wine %s: %s", wine_id, str(e))
            raise DatabaseError(
                message="Failed to fetch pictures",
                context={"wine_id": str(wine_id)},
            )
        return [PictureResponse.model_validate(p) for p in pictures]

    async def associate_with_wine(
        self, db: AsyncSession, session_id: str, wine_id: uuid.UUID
    ) -> int:
        """
        Link the session's unlinked pictures to a wine.

        Returns: Number of pictures linked.

        Already-linked pictures are left alone, so a client reusing one upload
        session for several wines does not move earlier labels.
        """
        result = await db.execute(
            update(Picture)
            .where(Picture.session_id == session_id, Picture.wine_id.is_(None))
            .values(wine_id=wine_id)
        )
        linked = result.rowcount or 0
        if linked:
            logger.info("Linked %d picture(s) of session %s to wine %s", linked, session_id, wine_id)
        return linked

    async def sync_label_filenames(
        self, db: AsyncSession, wine: Wine, labels: Iterable[str] = LABEL_FIELDS
    ) -> None:
        """
        Copy the wine's label filenames onto the referenced pictures.

        Args:
            labels: Label fields that changed ("front_label", "back_label").
                    Pictures of the other label are left untouched.
        """
        changed = set(labels)
        pairs = (
            ("front_label", wine.front_label_picture_id, wine.front_label),
            ("back_label", wine.back_label_picture_id, wine.back_label),
        )
        for field, picture_id, filename in pairs:
            if field in changed and picture_id and filename:
                await db.execute(
                    update(Picture).where(Picture.id == picture_id).values(filename=filename)
                )
        logger.info("Pictures updated for wine: %s", wine.id)

    async def delete_for_wine(self, db: AsyncSession, wine: Wine) -> int:
        """
        Delete the wine's label pictures (rows and files).

        Covers the front/back pictures referenced by the wine plus any picture
        linked to it through wine_id.

        Returns: Number of picture rows deleted.
        """
        conditions = [Picture.wine_id == wine.id]
        referenced = [pid for pid in (wine.front_label_picture_id, wine.back_label_picture_id) if pid]
        if referenced:
            conditions.append(Picture.id.in_(referenced))

        result = await db.execute(select(Picture).where(or_(*conditions)))
        pictures = list(result.scalars().all())
        for picture in pictures:
            await db.delete(picture)
        await db.flush()

        for picture in pictures:
            await file_service.delete_image(picture.image_url)

        logger.info("Deleted %d picture(s) of wine %s", len(pictures), wine.id)
        return len(pictures)


# ── Singleton Instance ────────────────────────────────────────────────────
picture_service = PictureService()
