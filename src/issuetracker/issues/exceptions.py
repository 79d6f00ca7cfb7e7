"""Exceptions for the issue service."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from issuetracker.issues.validation import FieldError


class IssueServiceError(Exception):
    """Base exception for issue service errors."""


class IssueValidationError(IssueServiceError):
    """Input failed one or more field rules."""

    def __init__(self, errors: list[FieldError]) -> None:
        fields = ", ".join(error.field for error in errors)
        super().__init__(f"Validation failed for: {fields}")
        self.errors = list(errors)
