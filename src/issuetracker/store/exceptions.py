"""Custom exceptions for the Issue Store."""


class StoreError(Exception):
    """Base exception for Issue Store errors."""


class IssueNotFoundError(StoreError):
    """Issue with given ID does not exist."""

    def __init__(self, issue_id: int) -> None:
        super().__init__(f"Issue with id {issue_id} not found")
        self.issue_id = issue_id


class StoreUnavailableError(StoreError):
    """The database could not complete the operation."""
