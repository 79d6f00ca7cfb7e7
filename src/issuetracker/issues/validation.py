"""Field validation for issue payloads and identifiers.

Every check here is a pure function: it reads the candidate values and
returns the list of problems found, never touching storage. All rules run
before anything is reported, so a caller gets every error in one pass.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from issuetracker.store import IssuePriority, IssueStatus

if TYPE_CHECKING:
    from collections.abc import Mapping

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 5000

ISSUE_FIELDS = ("title", "description", "status", "priority")

TITLE_REQUIRED = "Title is required."
TITLE_TOO_LONG = f"Title cannot exceed {TITLE_MAX_LENGTH} characters."
DESCRIPTION_TOO_LONG = f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters."
INVALID_STATUS = "Invalid status value."
INVALID_PRIORITY = "Invalid priority value."
INVALID_ID = "ID must be a positive integer."

_INTEGER_RE = re.compile(r"[-+]?[0-9]+")


@dataclass(frozen=True)
class FieldError:
    """A single validation problem."""

    field: str
    message: str


def clean_text(value: Any) -> str | None:
    """Trim surrounding whitespace. ``None`` stays ``None``."""
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    return value.strip()


def validate_issue_id(raw_id: Any) -> list[FieldError]:
    """Check that a path identifier is a positive integer.

    Args:
        raw_id: The identifier as received, usually a string from the URL.

    Returns:
        Empty list if valid, otherwise a single ``id`` error.
    """
    if parse_issue_id(raw_id) is None:
        return [FieldError("id", INVALID_ID)]
    return []


def parse_issue_id(raw_id: Any) -> int | None:
    """Parse an identifier, returning ``None`` unless it is an integer above zero."""
    if isinstance(raw_id, bool):
        return None
    if isinstance(raw_id, int):
        return raw_id if raw_id > 0 else None
    if not isinstance(raw_id, str) or not _INTEGER_RE.fullmatch(raw_id):
        return None
    value = int(raw_id)
    return value if value > 0 else None


def validate_issue_payload(
    payload: Mapping[str, Any], *, partial: bool = False
) -> list[FieldError]:
    """Validate issue fields.

    Args:
        payload: Candidate field values. A key that is absent was not supplied;
            a key mapped to ``None`` was supplied as null.
        partial: When True (updates) an absent title is allowed and keeps
            the stored value. A supplied title must still be non-empty.

    Returns:
        Errors in field order: title, description, status, priority.
    """
    errors: list[FieldError] = []

    if not partial or "title" in payload:
        title = clean_text(payload.get("title"))
        if not title:
            errors.append(FieldError("title", TITLE_REQUIRED))
        elif len(title) > TITLE_MAX_LENGTH:
            errors.append(FieldError("title", TITLE_TOO_LONG))

    if "description" in payload:
        description = clean_text(payload["description"])
        if description and len(description) > DESCRIPTION_MAX_LENGTH:
            errors.append(FieldError("description", DESCRIPTION_TOO_LONG))

    if "status" in payload:
        status = clean_text(payload["status"])
        if status not in {s.value for s in IssueStatus}:
            errors.append(FieldError("status", INVALID_STATUS))

    if "priority" in payload:
        priority = clean_text(payload["priority"])
        if priority not in {p.value for p in IssuePriority}:
            errors.append(FieldError("priority", INVALID_PRIORITY))

    return errors
