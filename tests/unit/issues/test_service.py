"""Unit tests for IssueService."""

from unittest.mock import MagicMock

import pytest

from issuetracker.issues import IssueService, IssueValidationError
from issuetracker.issues.service import build_changes
from issuetracker.issues.validation import INVALID_ID, TITLE_REQUIRED
from issuetracker.store import (
    UNSET,
    IssueNotFoundError,
    IssuePriority,
    IssueStatus,
    IssueStore,
)


@pytest.fixture
def service(store: IssueStore) -> IssueService:
    """Create an IssueService over an in-memory store."""
    return IssueService(store)


@pytest.fixture
def mock_store() -> MagicMock:
    """A store double that records every call."""
    return MagicMock(spec=IssueStore)


@pytest.mark.unit
class TestCreate:
    """Tests for create_issue."""

    def test_create_applies_defaults(self, service: IssueService) -> None:
        """Missing status and priority become Open and Medium."""
        issue = service.create_issue({"title": "Bug A"})

        assert issue.status == "Open"
        assert issue.priority == "Medium"
        assert issue.created_at == issue.updated_at

    def test_create_trims_values(self, service: IssueService) -> None:
        """Text fields are stored trimmed."""
        issue = service.create_issue(
            {
                "title": "  Bug  ",
                "description": "  details ",
                "status": " Closed ",
                "priority": "High ",
            }
        )

        assert issue.title == "Bug"
        assert issue.description == "details"
        assert issue.status == "Closed"
        assert issue.priority == "High"

    def test_create_blank_description_stored_as_null(self, service: IssueService) -> None:
        """Whitespace-only description is stored as None."""
        issue = service.create_issue({"title": "Bug", "description": "   "})

        assert issue.description is None

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_create_blank_title_no_write(self, mock_store: MagicMock, title: str | None) -> None:
        """Blank titles are rejected before the store is touched."""
        service = IssueService(mock_store)

        with pytest.raises(IssueValidationError) as exc_info:
            service.create_issue({"title": title})

        assert exc_info.value.errors[0].message == TITLE_REQUIRED
        mock_store.create_issue.assert_not_called()

    def test_create_reports_all_errors(self, service: IssueService) -> None:
        """Every invalid field is in the error."""
        with pytest.raises(IssueValidationError) as exc_info:
            service.create_issue({"title": "", "status": "Done", "priority": "Urgent"})

        assert [e.field for e in exc_info.value.errors] == ["title", "status", "priority"]


@pytest.mark.unit
class TestGet:
    """Tests for get_issue."""

    def test_round_trip(self, service: IssueService) -> None:
        """Get returns what Create returned."""
        created = service.create_issue({"title": "Bug", "description": "details"})

        fetched = service.get_issue(str(created.id))

        fields = ("id", "title", "description", "status", "priority", "created_at", "updated_at")
        for field in fields:
            assert getattr(fetched, field) == getattr(created, field)

    def test_get_missing(self, service: IssueService) -> None:
        """IssueNotFoundError for an unknown id."""
        with pytest.raises(IssueNotFoundError):
            service.get_issue("999")

    def test_get_huge_id_not_found(self, mock_store: MagicMock) -> None:
        """Ids beyond the storable range cannot exist."""
        service = IssueService(mock_store)

        with pytest.raises(IssueNotFoundError):
            service.get_issue(str(2**70))

        mock_store.get_issue.assert_not_called()


@pytest.mark.unit
class TestInvalidIds:
    """Every id-addressed operation rejects bad ids before the store."""

    @pytest.mark.parametrize("raw_id", ["0", "-3", "abc", "2.5"])
    def test_rejects_bad_ids(self, mock_store: MagicMock, raw_id: str) -> None:
        """ValidationFailed with an id error; store never called."""
        service = IssueService(mock_store)
        operations = [
            lambda: service.get_issue(raw_id),
            lambda: service.update_issue(raw_id, {"status": "Closed"}),
            lambda: service.delete_issue(raw_id),
        ]

        for operation in operations:
            with pytest.raises(IssueValidationError) as exc_info:
                operation()
            assert exc_info.value.errors[0].field == "id"
            assert exc_info.value.errors[0].message == INVALID_ID

        assert mock_store.method_calls == []


@pytest.mark.unit
class TestUpdate:
    """Tests for update_issue."""

    def test_update_merge(self, service: IssueService) -> None:
        """Only the status changes; updated_at advances."""
        created = service.create_issue(
            {"title": "Bug", "description": "details", "priority": "Low"}
        )

        updated = service.update_issue(str(created.id), {"status": "Closed"})

        assert updated.status == "Closed"
        assert updated.title == "Bug"
        assert updated.description == "details"
        assert updated.priority == "Low"
        assert updated.updated_at > created.updated_at

    def test_update_clears_description(self, service: IssueService) -> None:
        """Empty description clears the stored value."""
        created = service.create_issue({"title": "Bug", "description": "details"})

        updated = service.update_issue(str(created.id), {"description": ""})

        assert updated.description is None

    def test_update_blank_title_no_write(self, mock_store: MagicMock) -> None:
        """A blank title is rejected and nothing is written."""
        service = IssueService(mock_store)

        with pytest.raises(IssueValidationError):
            service.update_issue("1", {"title": "  "})

        mock_store.update_issue.assert_not_called()

    def test_update_reports_id_and_body_errors_together(self, service: IssueService) -> None:
        """Id and body errors come back in one error, id first."""
        with pytest.raises(IssueValidationError) as exc_info:
            service.update_issue("zero", {"title": "", "status": "Done"})

        assert [e.field for e in exc_info.value.errors] == ["id", "title", "status"]

    def test_update_missing_never_creates(self, service: IssueService) -> None:
        """IssueNotFoundError and the store stays empty."""
        with pytest.raises(IssueNotFoundError):
            service.update_issue("5", {"title": "Ghost"})

        assert service.list_issues() == []


@pytest.mark.unit
class TestDelete:
    """Tests for delete_issue."""

    def test_delete_then_not_found(self, service: IssueService) -> None:
        """Delete succeeds once, then reports not found."""
        created = service.create_issue({"title": "Bug"})

        deleted = service.delete_issue(str(created.id))
        assert deleted.id == created.id
        assert deleted.title == "Bug"

        with pytest.raises(IssueNotFoundError):
            service.delete_issue(str(created.id))

    def test_delete_missing_twice(self, service: IssueService) -> None:
        """Deleting an unknown id is not found every time."""
        for _ in range(2):
            with pytest.raises(IssueNotFoundError):
                service.delete_issue("77")


@pytest.mark.unit
class TestBuildChanges:
    """Tests for build_changes."""

    def test_absent_fields_unset(self) -> None:
        """Fields not in the payload stay UNSET."""
        changes = build_changes({"status": " In Progress "})

        assert changes.status is IssueStatus.IN_PROGRESS
        assert changes.title is UNSET
        assert changes.description is UNSET
        assert changes.priority is UNSET

    def test_all_fields(self) -> None:
        """Every supplied field is converted."""
        changes = build_changes(
            {"title": " New ", "description": None, "status": "Open", "priority": "High"}
        )

        assert changes.provided() == {
            "title": "New",
            "description": None,
            "status": IssueStatus.OPEN,
            "priority": IssuePriority.HIGH,
        }
