"""IssueService - validated CRUD operations over the Issue Store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, NoReturn

from issuetracker.issues.exceptions import IssueValidationError
from issuetracker.issues.validation import (
    ISSUE_FIELDS,
    clean_text,
    parse_issue_id,
    validate_issue_id,
    validate_issue_payload,
)
from issuetracker.logging import truncate_output
from issuetracker.store import (
    UNSET,
    IssueChanges,
    IssueNotFoundError,
    IssuePriority,
    IssueStatus,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from issuetracker.issues.validation import FieldError
    from issuetracker.store import Issue, IssueStore

logger = logging.getLogger(__name__)

# Largest id SQLite can store; anything above it cannot name an existing issue
MAX_ISSUE_ID = 2**63 - 1


class IssueService:
    """Create, read, update and delete issues.

    Each operation validates its input first and raises
    ``IssueValidationError`` with every problem found before the store is
    touched. Missing records raise ``IssueNotFoundError``; database failures
    surface as ``StoreUnavailableError``. Nothing is retried.
    """

    def __init__(self, store: IssueStore) -> None:
        """Initialize the service.

        Args:
            store: IssueStore used for persistence.
        """
        self.store = store

    def list_issues(self) -> list[Issue]:
        """List all issues, newest first."""
        return self.store.list_issues()

    def get_issue(self, raw_id: Any) -> Issue:
        """Get a single issue.

        Args:
            raw_id: Identifier as received from the caller.

        Raises:
            IssueValidationError: If the id is not a positive integer.
            IssueNotFoundError: If no issue has this id.
        """
        issue_id = self._require_id(raw_id)
        return self.store.get_issue(issue_id)

    def create_issue(self, payload: Mapping[str, Any]) -> Issue:
        """Create an issue.

        Missing status and priority fall back to Open and Medium.

        Args:
            payload: Supplied fields (title, description, status, priority).

        Raises:
            IssueValidationError: If any field is invalid.
        """
        errors = validate_issue_payload(payload)
        if errors:
            self._reject(errors, payload)

        status = clean_text(payload.get("status"))
        priority = clean_text(payload.get("priority"))
        return self.store.create_issue(
            title=clean_text(payload["title"]) or "",
            description=clean_text(payload.get("description")) or None,
            status=IssueStatus(status) if status else IssueStatus.OPEN,
            priority=IssuePriority(priority) if priority else IssuePriority.MEDIUM,
        )

    def update_issue(self, raw_id: Any, payload: Mapping[str, Any]) -> Issue:
        """Merge supplied fields into an existing issue.

        Fields absent from ``payload`` keep their stored values. A description
        supplied as empty or null is cleared.

        Args:
            raw_id: Identifier as received from the caller.
            payload: Fields to change.

        Raises:
            IssueValidationError: If the id or any supplied field is invalid.
            IssueNotFoundError: If no issue has this id.
        """
        errors = validate_issue_id(raw_id) + validate_issue_payload(payload, partial=True)
        if errors:
            self._reject(errors, payload)

        issue_id = self._require_id(raw_id)
        return self.store.update_issue(issue_id, build_changes(payload))

    def delete_issue(self, raw_id: Any) -> Issue:
        """Delete an issue.

        Args:
            raw_id: Identifier as received from the caller.

        Returns:
            The issue as it was before deletion.

        Raises:
            IssueValidationError: If the id is not a positive integer.
            IssueNotFoundError: If no issue has this id.
        """
        issue_id = self._require_id(raw_id)
        return self.store.delete_issue(issue_id)

    def _require_id(self, raw_id: Any) -> int:
        issue_id = parse_issue_id(raw_id)
        if issue_id is None:
            self._reject(validate_issue_id(raw_id), {})
        if issue_id > MAX_ISSUE_ID:
            raise IssueNotFoundError(issue_id)
        return issue_id

    def _reject(self, errors: list[FieldError], payload: Mapping[str, Any]) -> NoReturn:
        logger.info(
            "Rejected issue input (%s): %s",
            ", ".join(f"{e.field}: {e.message}" for e in errors),
            truncate_output(repr(dict(payload))),
        )
        raise IssueValidationError(errors)


def build_changes(payload: Mapping[str, Any]) -> IssueChanges:
    """Turn a validated update payload into an ``IssueChanges``.

    Keys that are absent stay ``UNSET``; supplied values are trimmed.
    """
    values: dict[str, Any] = {}
    for name in ISSUE_FIELDS:
        if name not in payload:
            continue
        value = clean_text(payload[name])
        if name == "description":
            values[name] = value or None
        elif name == "status":
            values[name] = IssueStatus(value)
        elif name == "priority":
            values[name] = IssuePriority(value)
        else:
            values[name] = value
    return IssueChanges(
        title=values.get("title", UNSET),
        description=values.get("description", UNSET),
        status=values.get("status", UNSET),
        priority=values.get("priority", UNSET),
    )
