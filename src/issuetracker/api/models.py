"""Pydantic models for REST API."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Issue request models


class IssueCreate(BaseModel):
    """Request model for creating an issue.

    Fields are untyped so that every rule is checked by the issue validation
    layer and reported together. Non-string values are coerced to text there.
    """

    title: Any = None
    description: Any = None
    status: Any = None
    priority: Any = None

    def supplied(self) -> dict[str, Any]:
        """Fields present in the request body, including explicit nulls."""
        return self.model_dump(exclude_unset=True)


class IssueUpdate(IssueCreate):
    """Request model for updating an issue (partial update)."""


# Issue response models


class IssueResponse(BaseModel):
    """Response model for an issue."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None
    status: str
    priority: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # Stored timestamps are naive UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


def issue_to_response(issue: Any) -> IssueResponse:
    """Convert an Issue model to IssueResponse."""
    return IssueResponse.model_validate(issue)


class DeleteIssueResponse(BaseModel):
    """Response model for a deleted issue."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    deleted_issue: IssueResponse = Field(alias="deletedIssue")


# Error envelopes


class FieldErrorResponse(BaseModel):
    """A single field validation error."""

    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """Body returned when input validation fails."""

    errors: list[FieldErrorResponse]


class MessageResponse(BaseModel):
    """Plain message body, used for not-found responses."""

    message: str


class ErrorDetail(BaseModel):
    """Error description."""

    message: str


class ErrorResponse(BaseModel):
    """Body returned for server-side failures."""

    error: ErrorDetail


def error_response(message: str) -> dict[str, Any]:
    """Build an ``{"error": {"message": ...}}`` body."""
    return ErrorResponse(error=ErrorDetail(message=message)).model_dump()


# Health models


class DatabaseHealthResponse(BaseModel):
    """Response model for the database connectivity check."""

    message: str
    time: str
