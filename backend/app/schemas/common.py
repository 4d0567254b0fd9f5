"""
Wine Catalog Backend — Shared Pydantic Schemas
================================================

What:  Base model and response shapes shared by every route module.
Why:   The web client speaks camelCase JSON with Mongo-style `_id` keys;
       CamelModel maps that onto snake_case Python attributes once, so no
       route has to rename keys by hand.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for API models: snake_case attributes, camelCase JSON.

    populate_by_name: services construct models with Python names
    from_attributes:  models can be built straight from ORM rows
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Plain acknowledgement returned by update/delete/logout endpoints."""
    message: str = Field(description="Human-readable result")


class ErrorResponse(CamelModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "wine with ID '...' was not found",
            "requestId": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(CamelModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    storage: str = Field(description="Picture storage: writable, unwritable")
    uptime_seconds: float = Field(description="Seconds since service started")
