"""Issue CRUD endpoints."""

from fastapi import APIRouter, status

from issuetracker.api.dependencies import IssueServiceDep
from issuetracker.api.models import (
    DeleteIssueResponse,
    IssueCreate,
    IssueResponse,
    IssueUpdate,
    MessageResponse,
    ValidationErrorResponse,
    issue_to_response,
)

router = APIRouter(prefix="/issues", tags=["issues"])

_INVALID = {status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse}}
_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": MessageResponse}}


@router.get("", response_model=list[IssueResponse])
def list_issues(service: IssueServiceDep) -> list[IssueResponse]:
    """List all issues, newest first."""
    return [issue_to_response(issue) for issue in service.list_issues()]


@router.post(
    "",
    response_model=IssueResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_INVALID,
)
def create_issue(service: IssueServiceDep, payload: IssueCreate | None = None) -> IssueResponse:
    """Create a new issue."""
    created = service.create_issue(payload.supplied() if payload else {})
    return issue_to_response(created)


@router.get("/{issue_id}", response_model=IssueResponse, responses={**_INVALID, **_NOT_FOUND})
def get_issue(issue_id: str, service: IssueServiceDep) -> IssueResponse:
    """Get an issue by ID."""
    return issue_to_response(service.get_issue(issue_id))


@router.put("/{issue_id}", response_model=IssueResponse, responses={**_INVALID, **_NOT_FOUND})
def update_issue(
    issue_id: str, service: IssueServiceDep, payload: IssueUpdate | None = None
) -> IssueResponse:
    """Update an issue (partial update)."""
    updated = service.update_issue(issue_id, payload.supplied() if payload else {})
    return issue_to_response(updated)


@router.delete(
    "/{issue_id}",
    response_model=DeleteIssueResponse,
    responses={**_INVALID, **_NOT_FOUND},
)
def delete_issue(issue_id: str, service: IssueServiceDep) -> DeleteIssueResponse:
    """Delete an issue and return it as it was."""
    deleted = service.delete_issue(issue_id)
    return DeleteIssueResponse(
        message="Issue deleted successfully",
        deleted_issue=issue_to_response(deleted),
    )
