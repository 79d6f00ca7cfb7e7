"""Issue service - validation and CRUD operations for issues."""

from issuetracker.issues.exceptions import IssueServiceError, IssueValidationError
from issuetracker.issues.service import IssueService
from issuetracker.issues.validation import (
    FieldError,
    validate_issue_id,
    validate_issue_payload,
)

__all__ = [
    "FieldError",
    "IssueService",
    "IssueServiceError",
    "IssueValidationError",
    "validate_issue_id",
    "validate_issue_payload",
]
