"""REST API for the issue tracker."""

from issuetracker.api.app import create_app
from issuetracker.api.models import (
    DeleteIssueResponse,
    IssueCreate,
    IssueResponse,
    IssueUpdate,
)

__all__ = [
    "DeleteIssueResponse",
    "IssueCreate",
    "IssueResponse",
    "IssueUpdate",
    "create_app",
]
