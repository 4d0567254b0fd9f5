"""
Wine Catalog Backend — Picture Service Unit Tests
===================================================

What:  Upload recording, lookups, session linking and deletion of pictures.
How:   The database is mock_db_session; FileService calls are patched.
"""

import uuid
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.exceptions import DatabaseError, NotFoundError, ValidationError
from app.models.picture import Picture
from app.services.picture_service import PictureService


def make_picture(**overrides):
    values = dict(
        id=uuid.uuid4(),
        filename="abc.jpg",
        original_filename="front.jpg",
        content_type="image/jpeg",
        size=20,
        label_side="front",
        image_url="/images/front-label-abc.jpg",
        session_id="sess-1",
        wine_id=None,
        created_at=datetime.now(timezone.utc),
    )
    values.update(overrides)
    return Picture(**values)


class TestUploadLabel:

    def setup_method(self):
        self.service = PictureService()

    @pytest.mark.asyncio
    async def test_upload_records_picture(self, mock_db_session, sample_image_bytes):
        with patch("app.services.picture_service.file_service") as mock_files:
            mock_files.validate_and_store = AsyncMock(
                return_value=("abc.jpg", Path("/tmp/front-label-abc.jpg"), "image/jpeg")
            )

            result = await self.service.upload_label(
                db=mock_db_session,
                side="front",
                session_id="sess-1",
                filename="front.jpg",
                content=sample_image_bytes,
            )

        picture = mock_db_session.add.call_args.args[0]
        assert picture.session_id == "sess-1"
        assert picture.label_side == "front"
        assert picture.wine_id is None
        assert result.filename == "abc.jpg"
        assert result.image_url == "/images/front-label-abc.jpg"
        assert result.picture_id == picture.id
        assert result.message == "Front label uploaded successfully"
        mock_db_session.flush.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_upload_validation_error_propagates(self, mock_db_session):
        with patch("app.services.picture_service.file_service") as mock_files:
            mock_files.validate_and_store = AsyncMock(
                side_effect=ValidationError(message="File type '.gif' is not supported.")
            )
            with pytest.raises(ValidationError):
                await self.service.upload_label(
                    db=mock_db_session, side="back", session_id="s", filename="x.gif", content=b"x"
                )
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_upload_db_failure_removes_file(self, mock_db_session, sample_image_bytes):
        mock_db_session.flush.side_effect = RuntimeError("connection lost")
        stored = Path("/tmp/back-label-abc.jpg")

        with patch("app.services.picture_service.file_service") as mock_files:
            mock_files.validate_and_store = AsyncMock(return_value=("abc.jpg", stored, "image/jpeg"))
            mock_files.cleanup_file = AsyncMock()

            with pytest.raises(DatabaseError, match="Failed to upload back label"):
                await self.service.upload_label(
                    db=mock_db_session,
                    side="back",
                    session_id="sess-1",
                    filename="back.jpg",
                    content=sample_image_bytes,
                )

            mock_files.cleanup_file.assert_awaited_once_with(str(stored))


class TestPictureLookups:

    def setup_method(self):
        self.service = PictureService()

    @pytest.mark.asyncio
    async def test_get_picture(self, mock_db_session):
        picture = make_picture()
        mock_db_session.get.return_value = picture

        result = await self.service.get_picture(mock_db_session, picture.id)

        assert result.id == picture.id
        assert result.model_dump(by_alias=True)["_id"] == picture.id
        assert result.model_dump(by_alias=True)["imageUrl"] == picture.image_url

    @pytest.mark.asyncio
    async def test_get_picture_not_found(self, mock_db_session):
        mock_db_session.get.return_value = None
        with pytest.raises(NotFoundError):
            await self.service.get_picture(mock_db_session, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_list_for_wine(self, mock_db_session):
        wine_id = uuid.uuid4()
        pictures = [make_picture(wine_id=wine_id), make_picture(wine_id=wine_id, label_side="back")]
        mock_db_session.execute.return_value = MagicMock()
        mock_db_session.execute.return_value.scalars.return_value.all.return_value = pictures

        result = await self.service.list_for_wine(mock_db_session, wine_id)

        assert [p.label_side for p in result] == ["front", "back"]

    @pytest.mark.asyncio
    async def test_list_for_wine_db_error(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("boom")
        with pytest.raises(DatabaseError):
            await self.service.list_for_wine(mock_db_session, uuid.uuid4())


class TestPictureLinking:

    def setup_method(self):
        self.service = PictureService()

    @pytest.mark.asyncio
    async def test_associate_returns_linked_count(self, mock_db_session, executed_sql):
        mock_db_session.execute.return_value = MagicMock(rowcount=2)

        linked = await self.service.associate_with_wine(mock_db_session, "sess-1", uuid.uuid4())

        assert linked == 2
        mock_db_session.execute.assert_awaited_once()
        sql = str(executed_sql(0))
        assert sql.startswith("UPDATE pictures SET wine_id")
        assert "pictures.session_id = " in sql
        assert "pictures.wine_id IS NULL" in sql

    @pytest.mark.asyncio
    async def test_sync_label_filenames_only_for_set_labels(self, mock_db_session, sample_wine):
        # sample_wine has a front picture id and no back picture
        await self.service.sync_label_filenames(mock_db_session, sample_wine)
        assert mock_db_session.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_sync_label_filenames_leaves_unchanged_label(
        self, mock_db_session, executed_sql, sample_wine
    ):
        sample_wine.front_label = "new.jpg"
        sample_wine.back_label = "display-name-back"
        sample_wine.back_label_picture_id = uuid.uuid4()

        await self.service.sync_label_filenames(mock_db_session, sample_wine, {"front_label"})

        assert mock_db_session.execute.await_count == 1
        compiled = executed_sql(0)
        assert compiled.params["filename"] == "new.jpg"
        assert sample_wine.front_label_picture_id in compiled.params.values()
        assert sample_wine.back_label_picture_id not in compiled.params.values()

    @pytest.mark.asyncio
    async def test_delete_for_wine_removes_rows_and_files(self, mock_db_session, sample_wine):
        pictures = [
            make_picture(id=sample_wine.front_label_picture_id, image_url="/images/front-label-a.jpg"),
            make_picture(label_side="back", image_url="/images/back-label-b.jpg", wine_id=sample_wine.id),
        ]
        mock_db_session.execute.return_value = MagicMock()
        mock_db_session.execute.return_value.scalars.return_value.all.return_value = pictures

        with patch("app.services.picture_service.file_service") as mock_files:
            mock_files.delete_image = AsyncMock()
            deleted = await self.service.delete_for_wine(mock_db_session, sample_wine)

        assert deleted == 2
        assert mock_db_session.delete.await_count == 2
        mock_files.delete_image.assert_any_await("/images/front-label-a.jpg")
        mock_files.delete_image.assert_any_await("/images/back-label-b.jpg")
