"""Integration tests for issue routes."""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from issuetracker.api.app import create_app
from issuetracker.config import Settings


def _parse(timestamp: str) -> datetime:
    return datetime.fromisoformat(timestamp.replace("Z", "+00:00"))


@pytest.fixture
def temp_db_path() -> str:
    """Create a temporary database path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        return f.name


@pytest.fixture
def client(temp_db_path: str):
    """Create a test client whose lifespan opens a file database."""
    app = create_app(Settings(db_path=temp_db_path))
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
    # Cleanup
    Path(temp_db_path).unlink(missing_ok=True)
    Path(f"{temp_db_path}-wal").unlink(missing_ok=True)
    Path(f"{temp_db_path}-shm").unlink(missing_ok=True)


@pytest.mark.integration
class TestIssueLifecycle:
    """Integration test for the full issue lifecycle."""

    def test_issue_crud_full_flow(self, client: TestClient) -> None:
        """Create -> Update -> Delete -> Get flow."""
        # 1. Create
        create_response = client.post("/api/issues", json={"title": "Bug A"})
        assert create_response.status_code == 201
        created = create_response.json()
        assert created["status"] == "Open"
        assert created["priority"] == "Medium"
        assert created["created_at"] == created["updated_at"]
        issue_id = created["id"]

        # 2. Update
        update_response = client.put(f"/api/issues/{issue_id}", json={"status": "In Progress"})
        assert update_response.status_code == 200
        updated = update_response.json()
        assert updated["status"] == "In Progress"
        assert updated["title"] == "Bug A"
        assert _parse(updated["updated_at"]) > _parse(created["updated_at"])

        # 3. Delete
        delete_response = client.delete(f"/api/issues/{issue_id}")
        assert delete_response.status_code == 200
        assert delete_response.json()["deletedIssue"] == updated

        # 4. Verify deleted
        get_response = client.get(f"/api/issues/{issue_id}")
        assert get_response.status_code == 404

    def test_list_reflects_changes(self, client: TestClient) -> None:
        """List shows created issues and drops deleted ones."""
        ids = [
            client.post("/api/issues", json={"title": f"Issue {n}"}).json()["id"] for n in range(3)
        ]

        client.delete(f"/api/issues/{ids[1]}")

        listed = client.get("/api/issues").json()
        assert [i["id"] for i in listed] == [ids[2], ids[0]]


@pytest.mark.integration
class TestPersistence:
    """Data survives an application restart."""

    def test_issues_persist_across_app_instances(self, temp_db_path: str) -> None:
        """A second app on the same file sees the first app's issues."""
        with TestClient(create_app(Settings(db_path=temp_db_path))) as first:
            issue_id = first.post("/api/issues", json={"title": "Persistent"}).json()["id"]

        with TestClient(create_app(Settings(db_path=temp_db_path))) as second:
            response = second.get(f"/api/issues/{issue_id}")

        assert response.status_code == 200
        assert response.json()["title"] == "Persistent"

        Path(temp_db_path).unlink(missing_ok=True)
        Path(f"{temp_db_path}-wal").unlink(missing_ok=True)
        Path(f"{temp_db_path}-shm").unlink(missing_ok=True)


@pytest.mark.integration
class TestOpenAPIDocs:
    """The generated API schema lists the issue routes."""

    def test_openapi_paths(self, client: TestClient) -> None:
        """All issue paths are documented."""
        schema = client.get("/openapi.json").json()

        assert "/api/issues" in schema["paths"]
        assert set(schema["paths"]["/api/issues/{issue_id}"]) == {"get", "put", "delete"}
