"""IssueStore - Main API for Issue Store operations."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import timedelta
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import delete, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from issuetracker.store.database import Database
from issuetracker.store.exceptions import IssueNotFoundError, StoreUnavailableError
from issuetracker.store.models import (
    Issue,
    IssueChanges,
    IssuePriority,
    IssueStatus,
    utc_now,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class IssueStore:
    """Main API for Issue Store operations.

    Every public method runs in its own session and transaction, so each
    insert, update or delete is applied in full or not at all.
    """

    def __init__(self, db_path: str = "issuetracker.db") -> None:
        """Initialize Issue Store with SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file
        """
        self._db = Database(db_path)
        try:
            self._db.create_tables()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Could not initialize database at {db_path}") from e

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._db.get_session()
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("Issue store operation failed")
            raise StoreUnavailableError("Issue store operation failed") from e
        finally:
            session.close()

    def ping(self) -> str:
        """Run a trivial query against the database.

        Returns:
            The database's current timestamp.

        Raises:
            StoreUnavailableError: If the database cannot be reached
        """
        with self._session() as session:
            return str(session.execute(text("SELECT CURRENT_TIMESTAMP")).scalar_one())

    def list_issues(self) -> list[Issue]:
        """List all issues.

        Returns:
            All issues, newest first. Issues created at the same instant are
            ordered by descending id.
        """
        with self._session() as session:
            stmt = select(Issue).order_by(Issue.created_at.desc(), Issue.id.desc())
            return list(session.execute(stmt).scalars().all())

    def get_issue(self, issue_id: int) -> Issue:
        """Get issue by ID.

        Args:
            issue_id: The issue's unique ID

        Returns:
            The Issue object

        Raises:
            IssueNotFoundError: If issue doesn't exist
        """
        with self._session() as session:
            issue = session.get(Issue, issue_id)
            if issue is None:
                raise IssueNotFoundError(issue_id)
            return issue

    def create_issue(
        self,
        title: str,
        description: str | None = None,
        status: IssueStatus = IssueStatus.OPEN,
        priority: IssuePriority = IssuePriority.MEDIUM,
    ) -> Issue:
        """Create a new issue.

        Args:
            title: Issue title
            description: Optional longer description
            status: Initial status
            priority: Initial priority

        Returns:
            Created Issue with generated ID and equal created_at/updated_at
        """
        with self._session() as session:
            issue = Issue(
                title=title,
                description=description,
                status=status.value,
                priority=priority.value,
            )
            session.add(issue)
            session.commit()
            session.refresh(issue)
            logger.info("Created issue %s", issue.id)
            return issue

    def update_issue(self, issue_id: int, changes: IssueChanges) -> Issue:
        """Apply a partial update. Only supplied fields are changed.

        updated_at is always moved forward, even when no field is supplied.

        Args:
            issue_id: The issue's unique ID
            changes: Fields to overwrite

        Returns:
            The updated Issue object

        Raises:
            IssueNotFoundError: If issue doesn't exist
        """
        with self._session() as session:
            issue = session.get(Issue, issue_id)
            if issue is None:
                raise IssueNotFoundError(issue_id)

            for name, value in changes.provided().items():
                setattr(issue, name, value.value if isinstance(value, StrEnum) else value)

            now = utc_now()
            if now <= issue.updated_at:
                now = issue.updated_at + timedelta(microseconds=1)
            issue.updated_at = now

            try:
                session.commit()
            except StaleDataError as e:
                # Row vanished between the read and the write
                session.rollback()
                raise IssueNotFoundError(issue_id) from e
            session.refresh(issue)
            logger.info("Updated issue %s", issue_id)
            return issue

    def delete_issue(self, issue_id: int) -> Issue:
        """Delete an issue.

        Args:
            issue_id: The issue's unique ID

        Returns:
            The Issue as it was immediately before deletion

        Raises:
            IssueNotFoundError: If issue doesn't exist
        """
        with self._session() as session:
            issue = session.get(Issue, issue_id)
            if issue is None:
                raise IssueNotFoundError(issue_id)

            result = session.execute(
                delete(Issue).where(Issue.id == issue_id),
                execution_options={"synchronize_session": False},
            )
            if result.rowcount == 0:
                # Removed by another writer after the read above
                session.rollback()
                raise IssueNotFoundError(issue_id)
            session.commit()
            logger.info("Deleted issue %s", issue_id)
            return issue
