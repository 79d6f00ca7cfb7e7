"""SQLAlchemy models for the Issue Store."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import UTC, datetime
from enum import Enum, StrEnum
from typing import Any, Final

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class IssueStatus(StrEnum):
    """Issue status enum."""

    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    CLOSED = "Closed"


class IssuePriority(StrEnum):
    """Issue priority enum."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form SQLite stores."""
    return datetime.now(UTC).replace(tzinfo=None)


def _in_clause(column: str, enum: type[StrEnum]) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum)
    return f"{column} IN ({values})"


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Issue(Base):
    """Issue model - a single tracked issue."""

    __tablename__ = "issues"
    __table_args__ = (
        CheckConstraint(_in_clause("status", IssueStatus), name="ck_issues_status"),
        CheckConstraint(_in_clause("priority", IssuePriority), name="ck_issues_priority"),
        CheckConstraint("updated_at >= created_at", name="ck_issues_timestamps"),
        # AUTOINCREMENT keeps SQLite from handing out the id of a deleted last row again
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    priority: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __init__(
        self,
        title: str,
        description: str | None = None,
        status: str | None = None,
        priority: str | None = None,
        created_at: datetime | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.title = title
        self.description = description
        self.status = status if status is not None else IssueStatus.OPEN.value
        self.priority = priority if priority is not None else IssuePriority.MEDIUM.value
        self.created_at = created_at if created_at is not None else utc_now()
        self.updated_at = self.created_at

    def __repr__(self) -> str:
        return f"<Issue(id={self.id!r}, title={self.title!r}, status={self.status!r})>"


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset.UNSET
"""Marks a field that was not supplied in a partial update."""


@dataclass(frozen=True)
class IssueChanges:
    """Partial update for an issue.

    Each field is either ``UNSET`` (keep the stored value) or the new value.
    ``description`` may be set to ``None`` to clear it.
    """

    title: str | _Unset = UNSET
    description: str | None | _Unset = UNSET
    status: IssueStatus | _Unset = UNSET
    priority: IssuePriority | _Unset = UNSET

    def provided(self) -> dict[str, Any]:
        """Return only the fields that were supplied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        return {name: value for name, value in values.items() if value is not UNSET}
