"""
Wine Catalog Backend — Auth Schemas
=====================================

What:  Request/response models for register, login and session lookups.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    username: str = Field(min_length=3, max_length=64, pattern=r"^[A-Za-z0-9_.@-]+$")
    password: str = Field(min_length=6, max_length=128)


class LoginRequest(CamelModel):
    # No length rules here: a wrong password should be a 401, not a 422
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=128)


class RegisterResponse(CamelModel):
    message: str = "User registered successfully"
    user_id: uuid.UUID


class LoginResponse(CamelModel):
    message: str = "Login successful"
    username: str


class UserResponse(CamelModel):
    id: uuid.UUID = Field(alias="_id")
    username: str
    created_at: Optional[datetime] = None


class UploadSessionResponse(CamelModel):
    """Server-issued upload session id (GET /session)."""
    session_id: str
