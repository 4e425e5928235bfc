"""Opportunity catalog: postings, their listing per role and client-side filtering."""

from datetime import datetime, timezone
from typing import Iterable
from sqlmodel import Session
from sqlalchemy.exc import SQLAlchemyError

from app.models.opportunity import (
    Opportunity,
    OpportunityCreate,
    OpportunityFilter,
    OpportunityPublic,
    OpportunityUpdate,
)
from app.models.user import User, UserSummary
from app.services.roles import RoleStrategy, strategy_for
from app.exceptions import (
    BackendUnavailableError,
    InsufficientPermissionsError,
    NotFoundError,
    ValidationError,
)
from app.utils.logger import logger
from app.utils.validation import clean_skills, ensure_id

# Optional text fields a PATCH may blank out by sending null
CLEARABLE_FIELDS = {"duration", "location"}


def to_user_summary(user: User | None) -> UserSummary | None:
    if user is None or user.id_user is None:
        return None
    return UserSummary(
        id_user=user.id_user,
        name=user.name,
        role=user.role,
        organization_name=user.organization_name,
        location=user.location,
    )


def to_opportunity_public(
    opportunity: Opportunity, ngo: User | None = None
) -> OpportunityPublic:
    """Convert an Opportunity row and its owner into the public representation."""
    return OpportunityPublic(
        **opportunity.model_dump(exclude={"ngo", "applications"}),
        ngo=to_user_summary(ngo),
    )


def create_opportunity(
    session: Session, ngo: User, opportunity_in: OpportunityCreate
) -> Opportunity:
    """
    Post a new opportunity owned by the calling NGO.

    Parameters:
        session: Database session.
        ngo: Authenticated user; must have the NGO role.
        opportunity_in: Posting data. Skill labels are trimmed and blanks dropped.

    Returns:
        Opportunity: The created row.

    Raises:
        InsufficientPermissionsError: If the caller is not an NGO.
        ValidationError: If no skill remains once blanks are removed.
        BackendUnavailableError: If the insert fails.
    """
    if not strategy_for(ngo).can_post_opportunities:
        raise InsufficientPermissionsError("post opportunities")

    skills = clean_skills(opportunity_in.required_skills)
    if not skills:
        raise ValidationError("At least one skill is required", field="required_skills")

    opportunity = Opportunity.model_validate(
        opportunity_in,
        update={"ngo_id": ensure_id(ngo.id_user, "User"), "required_skills": skills},
    )
    session.add(opportunity)
    try:
        session.flush()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Failed to create opportunity")
        raise BackendUnavailableError("create the opportunity")
    session.refresh(opportunity)
    logger.info(
        f"Opportunity {opportunity.id_opportunity} posted by NGO {opportunity.ngo_id}"
    )
    return opportunity


def get_opportunity(session: Session, opportunity_id: int) -> Opportunity | None:
    return session.get(Opportunity, opportunity_id)


def get_opportunity_public(session: Session, opportunity_id: int) -> OpportunityPublic:
    """
    Retrieve one opportunity with its owner's public identity.

    Raises:
        NotFoundError: If the opportunity does not exist.
    """
    opportunity = get_opportunity(session, opportunity_id)
    if not opportunity:
        raise NotFoundError("Opportunity", opportunity_id)
    return to_opportunity_public(opportunity, opportunity.ngo)


def update_opportunity(
    session: Session,
    opportunity_id: int,
    opportunity_update: OpportunityUpdate,
    ngo: User,
) -> Opportunity:
    """
    Edit an opportunity, including opening or closing it.

    Status changes are free-form: the owner may close and reopen at will.

    Raises:
        NotFoundError: If the opportunity does not exist.
        InsufficientPermissionsError: If the caller does not own it.
        ValidationError: If the update would leave it without skills.
    """
    opportunity = get_opportunity(session, opportunity_id)
    if not opportunity:
        raise NotFoundError("Opportunity", opportunity_id)

    if not strategy_for(ngo).owns(opportunity):
        raise InsufficientPermissionsError("update this opportunity")

    update_data = opportunity_update.model_dump(exclude_unset=True)
    if "required_skills" in update_data:
        update_data["required_skills"] = clean_skills(update_data["required_skills"])
        if not update_data["required_skills"]:
            raise ValidationError(
                "At least one skill is required", field="required_skills"
            )

    for key, value in update_data.items():
        if value is None:
            if key not in CLEARABLE_FIELDS:
                continue
            value = ""
        setattr(opportunity, key, value)
    opportunity.updated_at = datetime.now(timezone.utc)

    session.add(opportunity)
    try:
        session.flush()
    except SQLAlchemyError:
        session.rollback()
        logger.exception(f"Failed to update opportunity {opportunity_id}")
        raise BackendUnavailableError("update the opportunity")
    session.refresh(opportunity)
    return opportunity


def list_opportunities(
    session: Session, strategy: RoleStrategy, *, limit: int | None = None
) -> list[OpportunityPublic]:
    """
    List the opportunities visible to the caller, newest first.

    Volunteers get every open posting; NGOs get their own postings in any status.
    A database failure is logged and yields an empty list.
    """
    statement = strategy.opportunities_statement()
    if limit is not None:
        statement = statement.limit(limit)
    try:
        rows = session.exec(statement).all()
    except SQLAlchemyError:
        logger.exception("Failed to load opportunities")
        return []
    return [to_opportunity_public(opportunity, ngo) for opportunity, ngo in rows]


def _matches_search(opportunity: OpportunityPublic, term: str) -> bool:
    return (
        term in opportunity.title.lower()
        or term in opportunity.description.lower()
        or any(term in skill.lower() for skill in opportunity.required_skills)
    )


def filter_opportunities(
    opportunities: Iterable[OpportunityPublic], criteria: OpportunityFilter
) -> list[OpportunityPublic]:
    """
    Apply the catalog filters to an already loaded list.

    - search: case-insensitive substring of the title, the description or any skill
    - skills: keeps postings requiring ANY of the given skills
    - location: case-insensitive substring of the posting's location
    - status: exact match; None keeps every status

    The input is never modified; a new list is returned in the original order.
    """
    filtered = list(opportunities)

    if criteria.search and criteria.search.strip():
        term = criteria.search.strip().lower()
        filtered = [o for o in filtered if _matches_search(o, term)]

    if criteria.skills:
        wanted = set(criteria.skills)
        filtered = [o for o in filtered if wanted.intersection(o.required_skills)]

    if criteria.location and criteria.location.strip():
        location = criteria.location.strip().lower()
        filtered = [o for o in filtered if location in (o.location or "").lower()]

    if criteria.status is not None:
        filtered = [o for o in filtered if o.status == criteria.status]

    return filtered


def available_skills(opportunities: Iterable[OpportunityPublic]) -> list[str]:
    """Sorted union of the required skills across the loaded postings."""
    skills: set[str] = set()
    for opportunity in opportunities:
        skills.update(opportunity.required_skills)
    return sorted(skills)
