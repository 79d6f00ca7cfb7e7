"""Issue Store - Persistent storage for issues."""

from issuetracker.store.exceptions import (
    IssueNotFoundError,
    StoreError,
    StoreUnavailableError,
)
from issuetracker.store.models import (
    UNSET,
    Issue,
    IssueChanges,
    IssuePriority,
    IssueStatus,
)
from issuetracker.store.store import IssueStore

__all__ = [
    "UNSET",
    "Issue",
    "IssueChanges",
    "IssueNotFoundError",
    "IssuePriority",
    "IssueStatus",
    "IssueStore",
    "StoreError",
    "StoreUnavailableError",
]
