"""
Wine Catalog Backend — Auth Route Handlers
============================================

What:  Register, login, logout, current user, and the server-side upload session.
How:   Starlette's SessionMiddleware keeps a signed cookie; these handlers only
       read and write request.session.

Session keys:
    user_id             set by /login, cleared by /logout
    upload_session_id   created on first GET /session
"""

import logging
import uuid

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import AuthenticationError
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UploadSessionResponse,
    UserResponse,
)
from app.schemas.common import ErrorResponse, MessageResponse
from app.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])

SESSION_USER_KEY = "user_id"
SESSION_UPLOAD_KEY = "upload_session_id"


@router.post(
    "/register",
    status_code=201,
    response_model=RegisterResponse,
    responses={409: {"description": "Username already exists", "model": ErrorResponse}},
    summary="Register a user",
)
async def register(
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> RegisterResponse:
    return await auth_service.register(db=db, username=payload.username, password=payload.password)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"description": "Invalid username or password", "model": ErrorResponse}},
    summary="Log in and start a session",
)
async def login(
    request: Request,
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    user = await auth_service.authenticate(db=db, username=payload.username, password=payload.password)
    request.session[SESSION_USER_KEY] = str(user.id)
    return LoginResponse(username=user.username)


@router.post("/logout", response_model=MessageResponse, summary="End the session")
async def logout(request: Request) -> MessageResponse:
    request.session.clear()
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"description": "Not logged in", "model": ErrorResponse}},
    summary="Current user",
)
async def me(request: Request, db: AsyncSession = Depends(get_db_session)) -> UserResponse:
    raw_id = request.session.get(SESSION_USER_KEY)
    if not raw_id:
        raise AuthenticationError(message="Not logged in")
    try:
        user_id = uuid.UUID(raw_id)
    except ValueError:
        request.session.pop(SESSION_USER_KEY, None)
        raise AuthenticationError(message="Not logged in")
    return await auth_service.get_user(db=db, user_id=user_id)


@router.get(
    "/session",
    response_model=UploadSessionResponse,
    summary="Server-side upload session id",
    description=(
        "Returns an id to use in /upload-*-label/{sessionId}. It is created on "
        "first use and kept in the session cookie; POST /add-wine falls back to "
        "it when the body has no sessionId."
    ),
)
async def upload_session(request: Request) -> UploadSessionResponse:
    session_id = request.session.get(SESSION_UPLOAD_KEY)
    if not session_id:
        session_id = uuid.uuid4().hex
        request.session[SESSION_UPLOAD_KEY] = session_id
        logger.info("Upload session created: %s", session_id)
    return UploadSessionResponse(session_id=session_id)
