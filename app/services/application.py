"""Application lifecycle: submitting, listing and deciding on applications."""

from datetime import datetime, timezone
from typing import Iterable
from sqlmodel import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.models.application import (
    Application,
    ApplicationStats,
    ApplicationWithDetails,
)
from app.models.enums import ApplicationStatus, OpportunityStatus, DECISION_STATUSES
from app.models.opportunity import Opportunity
from app.models.user import User
from app.services.roles import RoleStrategy, strategy_for
from app.exceptions import (
    BackendUnavailableError,
    DuplicateApplicationError,
    InsufficientPermissionsError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from app.utils.logger import logger


def submit_application(
    session: Session, opportunity_id: int, volunteer_id: int, cover_letter: str
) -> Application:
    """
    Apply to an opportunity on behalf of a volunteer.

    The application starts as PENDING. Uniqueness of (opportunity, volunteer) is enforced
    by the database constraint; a violation is reported as a duplicate and no row is kept.

    Args:
        session: Database session
        opportunity_id: Opportunity being applied to
        volunteer_id: Applying user, must have the volunteer role
        cover_letter: Free text sent to the NGO

    Returns:
        Application: The created application

    Raises:
        NotFoundError: If the opportunity or the volunteer doesn't exist
        InsufficientPermissionsError: If the user is not a volunteer
        ValidationError: If the opportunity is closed or the cover letter is blank
        DuplicateApplicationError: If the volunteer already applied to this opportunity
        BackendUnavailableError: If the insert fails for any other reason
    """
    volunteer = session.get(User, volunteer_id)
    if not volunteer:
        raise NotFoundError("User", volunteer_id)
    if not strategy_for(volunteer).can_apply:
        raise InsufficientPermissionsError("apply to opportunities")

    opportunity = session.get(Opportunity, opportunity_id)
    if not opportunity:
        raise NotFoundError("Opportunity", opportunity_id)
    if opportunity.status != OpportunityStatus.OPEN:
        raise ValidationError("This opportunity is closed", field="status")

    cover_letter = cover_letter.strip()
    if not cover_letter:
        raise ValidationError("A cover letter is required", field="cover_letter")

    application = Application(
        opportunity_id=opportunity_id,
        volunteer_id=volunteer_id,
        cover_letter=cover_letter,
        status=ApplicationStatus.PENDING,
    )
    session.add(application)
    try:
        session.flush()
    except IntegrityError:
        session.rollback()
        logger.info(
            f"Volunteer {volunteer_id} already applied to opportunity {opportunity_id}"
        )
        raise DuplicateApplicationError(opportunity_id)
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Failed to submit application")
        raise BackendUnavailableError("submit the application")

    session.refresh(application)
    logger.info(
        f"Application {application.id_application} submitted by volunteer "
        f"{volunteer_id} for opportunity {opportunity_id}"
    )
    return application


def to_application_details(
    application: Application,
    opportunity: Opportunity | None,
    volunteer: User | None,
    ngo: User | None,
) -> ApplicationWithDetails:
    return ApplicationWithDetails(
        **application.model_dump(exclude={"opportunity", "volunteer"}),
        opportunity_title=opportunity.title if opportunity else None,
        opportunity_ngo_id=opportunity.ngo_id if opportunity else None,
        ngo_name=ngo.name if ngo else None,
        ngo_organization_name=ngo.organization_name if ngo else None,
        volunteer_name=volunteer.name if volunteer else None,
        volunteer_email=volunteer.email if volunteer else None,
        volunteer_skills=list(volunteer.skills) if volunteer else [],
        volunteer_location=volunteer.location if volunteer else None,
        volunteer_bio=volunteer.bio if volunteer else None,
    )


def list_applications(
    session: Session, strategy: RoleStrategy
) -> list[ApplicationWithDetails]:
    """
    List the applications visible to the caller, newest first.

    Volunteers see the applications they submitted. NGOs see applications to the
    opportunities they own; an application whose opportunity is gone is not listed.
    A database failure is logged and yields an empty list.

    Args:
        session: Database session
        strategy: Role strategy of the authenticated user

    Returns:
        list[ApplicationWithDetails]: Applications with opportunity and volunteer details
    """
    try:
        rows = session.exec(strategy.applications_statement()).all()
    except SQLAlchemyError:
        logger.exception(f"Failed to load applications for user {strategy.user_id}")
        return []
    return [
        to_application_details(application, opportunity, volunteer, ngo)
        for application, opportunity, volunteer, ngo in rows
    ]


def set_application_status(
    session: Session,
    application_id: int,
    new_status: ApplicationStatus,
    ngo_id: int,
) -> Application:
    """
    Accept or reject a pending application.

    Only the NGO owning the application's opportunity may decide, and only
    pending -> accepted or pending -> rejected is allowed; both targets are terminal.

    Args:
        session: Database session
        application_id: Application to update
        new_status: ACCEPTED or REJECTED
        ngo_id: Authenticated user taking the decision

    Returns:
        Application: The updated application

    Raises:
        NotFoundError: If the application or the caller doesn't exist
        InsufficientPermissionsError: If the caller doesn't own the opportunity
        InvalidTransitionError: If the application is not pending or the target
            status is not a decision
        BackendUnavailableError: If the update fails
    """
    application = session.get(Application, application_id)
    if not application:
        raise NotFoundError("Application", application_id)

    ngo = session.get(User, ngo_id)
    if not ngo:
        raise NotFoundError("User", ngo_id)

    opportunity = session.get(Opportunity, application.opportunity_id)
    if not strategy_for(ngo).owns(opportunity):
        raise InsufficientPermissionsError("update this application")

    if (
        application.status != ApplicationStatus.PENDING
        or new_status not in DECISION_STATUSES
    ):
        raise InvalidTransitionError(
            ApplicationStatus(application.status).value,
            ApplicationStatus(new_status).value,
        )

    application.status = new_status
    application.updated_at = datetime.now(timezone.utc)
    session.add(application)
    try:
        session.flush()
    except SQLAlchemyError:
        session.rollback()
        logger.exception(f"Failed to update application {application_id}")
        raise BackendUnavailableError("update the application")

    session.refresh(application)
    logger.info(f"Application {application_id} {new_status.value} by NGO {ngo_id}")
    return application


def filter_applications(
    applications: Iterable[ApplicationWithDetails],
    search: str | None = None,
    status: ApplicationStatus | None = None,
) -> list[ApplicationWithDetails]:
    """
    Filter loaded applications without touching the input.

    `search` is a case-insensitive substring matched against the opportunity title, the
    volunteer's name and the volunteer's email; `status` keeps exact matches. With no
    criteria the result equals the input, in the same order.
    """
    filtered = list(applications)

    if search and search.strip():
        term = search.strip().lower()
        filtered = [
            a
            for a in filtered
            if term in (a.opportunity_title or "").lower()
            or term in (a.volunteer_name or "").lower()
            or term in (a.volunteer_email or "").lower()
        ]

    if status is not None:
        filtered = [a for a in filtered if a.status == status]

    return filtered


def count_by_status(applications: Iterable[ApplicationWithDetails]) -> ApplicationStats:
    stats = ApplicationStats()
    for application in applications:
        field = ApplicationStatus(application.status).value
        setattr(stats, field, getattr(stats, field) + 1)
    return stats
