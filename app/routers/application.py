"""Application lifecycle router."""

from typing import Annotated
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.database.database import get_session
from app.core.dependencies import (
    get_current_ngo,
    get_current_volunteer,
    get_role_strategy,
)
from app.models.application import (
    ApplicationCreate,
    ApplicationList,
    ApplicationPublic,
    ApplicationStatusUpdate,
)
from app.models.enums import ApplicationStatus
from app.models.user import User
from app.services import application as application_service
from app.services.roles import RoleStrategy
from app.utils.validation import ensure_id

router = APIRouter(prefix="/applications", tags=["applications"])


@router.post("/", response_model=ApplicationPublic, status_code=status.HTTP_201_CREATED)
def submit_application(
    application_in: ApplicationCreate,
    session: Annotated[Session, Depends(get_session)],
    current_volunteer: Annotated[User, Depends(get_current_volunteer)],
) -> ApplicationPublic:
    """
    Apply to an open opportunity.

    The application is created as `pending`.

    Raises:
        `404 NotFoundError`: If the opportunity doesn't exist.
        `409 DuplicateApplicationError`: "You have already applied to this opportunity".
        `422 ValidationError`: If the opportunity is closed.
        `503 BackendUnavailableError`: If the application could not be stored.
    """
    application = application_service.submit_application(
        session,
        application_in.opportunity_id,
        ensure_id(current_volunteer.id_user, "User"),
        application_in.cover_letter,
    )
    session.commit()
    session.refresh(application)
    return ApplicationPublic.model_validate(application)


@router.get("/", response_model=ApplicationList)
def list_applications(
    session: Annotated[Session, Depends(get_session)],
    strategy: Annotated[RoleStrategy, Depends(get_role_strategy)],
    search: str | None = Query(
        default=None,
        description="Case-insensitive search in opportunity title, volunteer name and email",
    ),
    status_filter: Annotated[
        ApplicationStatus | None,
        Query(alias="status", description="Keep only this status; omit for all"),
    ] = None,
) -> ApplicationList:
    """
    Applications visible to the caller, newest first.

    Volunteers get their own applications; NGOs get applications to their opportunities.
    Stats count every visible application regardless of the filters.
    """
    applications = application_service.list_applications(session, strategy)
    return ApplicationList(
        applications=application_service.filter_applications(
            applications, search=search, status=status_filter
        ),
        stats=application_service.count_by_status(applications),
    )


@router.patch("/{application_id}/status", response_model=ApplicationPublic)
def set_application_status(
    application_id: int,
    status_update: ApplicationStatusUpdate,
    session: Annotated[Session, Depends(get_session)],
    current_ngo: Annotated[User, Depends(get_current_ngo)],
) -> ApplicationPublic:
    """
    Accept or reject a pending application.

    ### Authorization:
    - Must be authenticated as the NGO owning the application's opportunity

    Raises:
        `403 InsufficientPermissionsError`: If the caller doesn't own the opportunity.
        `404 NotFoundError`: If the application doesn't exist.
        `409 InvalidTransitionError`: If the application was already decided or the
            requested status is `pending`.
    """
    application = application_service.set_application_status(
        session,
        application_id,
        status_update.status,
        ensure_id(current_ngo.id_user, "User"),
    )
    session.commit()
    session.refresh(application)
    return ApplicationPublic.model_validate(application)
