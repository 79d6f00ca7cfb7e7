"""FastAPI dependencies for dependency injection.

The IssueStore is owned by the application (``app.state.store``), created
by the lifespan manager or passed to ``create_app``, and handed to each
request through these dependencies.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from issuetracker.issues import IssueService
from issuetracker.store import IssueStore


def get_issue_store(request: Request) -> IssueStore:
    """Dependency that provides the application's IssueStore."""
    store: IssueStore | None = getattr(request.app.state, "store", None)
    if store is None:
        raise RuntimeError("IssueStore not initialized. Start the app through its lifespan.")
    return store


# Type alias for dependency injection
IssueStoreDep = Annotated[IssueStore, Depends(get_issue_store)]


def get_issue_service(store: IssueStoreDep) -> IssueService:
    """Dependency that provides an IssueService bound to the store."""
    return IssueService(store)


# Type alias for dependency injection
IssueServiceDep = Annotated[IssueService, Depends(get_issue_service)]
