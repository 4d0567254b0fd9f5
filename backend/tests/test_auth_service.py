"""
Wine Catalog Backend — Auth Service Tests
===========================================

What:  Registration, password verification and user lookup.
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from app.exceptions import AuthenticationError, ConflictError
from app.models.user import User
from app.services.auth_service import PWD_CTX, AuthService


def user_result(user):
    result = MagicMock()
    result.scalar_one_or_none.return_value = user
    return result


@pytest.fixture
def existing_user():
    return User(
        id=uuid.uuid4(),
        username="sommelier",
        password_hash=PWD_CTX.hash("decanter"),
        created_at=datetime.now(timezone.utc),
    )


class TestAuthService:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_register_hashes_password(self, mock_db_session):
        mock_db_session.execute.return_value = user_result(None)

        result = await self.service.register(mock_db_session, "sommelier", "decanter")

        user = mock_db_session.add.call_args.args[0]
        assert user.username == "sommelier"
        assert user.password_hash != "decanter"
        assert PWD_CTX.verify("decanter", user.password_hash)
        assert result.user_id == user.id

    @pytest.mark.asyncio
    async def test_register_duplicate(self, mock_db_session, existing_user):
        mock_db_session.execute.return_value = user_result(existing_user)

        with pytest.raises(ConflictError):
            await self.service.register(mock_db_session, "sommelier", "another")

    @pytest.mark.asyncio
    async def test_authenticate_success(self, mock_db_session, existing_user):
        mock_db_session.execute.return_value = user_result(existing_user)

        user = await self.service.authenticate(mock_db_session, "sommelier", "decanter")

        assert user is existing_user

    @pytest.mark.asyncio
    async def test_authenticate_wrong_password(self, mock_db_session, existing_user):
        mock_db_session.execute.return_value = user_result(existing_user)

        with pytest.raises(AuthenticationError):
            await self.service.authenticate(mock_db_session, "sommelier", "corkscrew")

    @pytest.mark.asyncio
    async def test_authenticate_unknown_user(self, mock_db_session):
        mock_db_session.execute.return_value = user_result(None)

        with pytest.raises(AuthenticationError, match="Invalid username or password"):
            await self.service.authenticate(mock_db_session, "nobody", "whatever")

    @pytest.mark.asyncio
    async def test_get_user(self, mock_db_session, existing_user):
        mock_db_session.get.return_value = existing_user

        result = await self.service.get_user(mock_db_session, existing_user.id)

        assert result.model_dump(by_alias=True)["_id"] == existing_user.id
        assert "password_hash" not in result.model_dump()

    @pytest.mark.asyncio
    async def test_get_user_gone(self, mock_db_session):
        with pytest.raises(AuthenticationError):
            await self.service.get_user(mock_db_session, uuid.uuid4())
