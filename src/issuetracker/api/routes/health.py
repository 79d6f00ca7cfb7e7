"""Service health endpoints."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from issuetracker.api.dependencies import IssueStoreDep
from issuetracker.api.models import DatabaseHealthResponse, ErrorResponse, error_response
from issuetracker.store import StoreUnavailableError

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "/db",
    response_model=DatabaseHealthResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
def check_database(store: IssueStoreDep) -> DatabaseHealthResponse | JSONResponse:
    """Check that the database answers queries."""
    try:
        db_time = store.ping()
    except StoreUnavailableError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response("Failed to connect to database"),
        )
    return DatabaseHealthResponse(message="Database connection successful!", time=db_time)
