"""
Tutorial API - Pydantic Request/Response Schemas
================================================

What:  Pydantic models defining the API contract for the tutorial resource.
How:   Request bodies (JSON or form-encoded) are validated against the
       *Create/*Update models before they reach the service layer; responses
       are serialized from the `Tutorial` model.

Schemas are separate from the document model in models/tutorial.py: the API
exposes `id` as a string and never returns raw ObjectIds.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from tutorial_api.models.tutorial import TutorialDocument


def _reject_blank_title(v: Optional[str]) -> Optional[str]:
    if v is not None and not v.strip():
        raise PydanticCustomError("blank_title", "title can not be empty")
    return v


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class TutorialCreate(BaseModel):
    """
    Body of POST /tutorials.

    Unknown fields (including a client-supplied `id`) are ignored.
    """
    title: str = Field(description="Tutorial title (required, non-blank)")
    description: Optional[str] = Field(default=None, description="Free-text description")
    published: bool = Field(default=False, description="Whether the tutorial is published")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return _reject_blank_title(v)


class TutorialUpdate(BaseModel):
    """
    Body of PUT /tutorials/{id}: a partial record.

    Only fields present in the body are written. An explicit null is treated
    as absent, so `{"title": null}` leaves the title unchanged.
    """
    title: Optional[str] = Field(default=None, description="New title (non-blank if given)")
    description: Optional[str] = Field(default=None, description="New description")
    published: Optional[bool] = Field(default=None, description="New published flag")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        return _reject_blank_title(v)

    def to_update_fields(self) -> Dict[str, Any]:
        """The fields to `$set`, excluding ones the client did not send."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class Tutorial(BaseModel):
    """
    Full representation of a tutorial, returned by every read endpoint.

    Example:
        {
            "id": "65a1f0c2e4b0a1b2c3d4e5f6",
            "title": "Learn FastAPI",
            "description": "Routing and dependencies",
            "published": false,
            "created_at": "2024-01-15T12:00:00Z",
            "updated_at": "2024-01-15T12:00:00Z"
        }
    """
    id: str = Field(description="Unique tutorial identifier (24-char hex ObjectId)")
    title: str
    description: Optional[str] = None
    published: bool = False
    created_at: datetime = Field(description="When the tutorial was created (UTC)")
    updated_at: datetime = Field(description="When the tutorial was last updated (UTC)")

    @classmethod
    def from_document(cls, document: TutorialDocument) -> "Tutorial":
        return cls(
            id=str(document.id),
            title=document.title,
            description=document.description,
            published=document.published,
            created_at=document.created_at,
            updated_at=document.updated_at,
        )


class MessageResponse(BaseModel):
    """Confirmation body for PUT and DELETE /tutorials/{id}."""
    message: str


class DeleteAllResponse(BaseModel):
    """Body of DELETE /tutorials: how many documents were removed."""
    message: str
    deleted_count: int = Field(ge=0)


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
