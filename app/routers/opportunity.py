"""Opportunity catalog router."""

from typing import Annotated, Literal
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.database.database import get_session
from app.core.dependencies import get_current_ngo, get_current_user, get_role_strategy
from app.models.enums import OpportunityStatus
from app.models.opportunity import (
    OpportunityCatalog,
    OpportunityCreate,
    OpportunityFilter,
    OpportunityPublic,
    OpportunityUpdate,
)
from app.models.user import User
from app.services import opportunity as opportunity_service
from app.services.roles import RoleStrategy

router = APIRouter(prefix="/opportunities", tags=["opportunities"])


@router.get("/", response_model=OpportunityCatalog)
def list_opportunities(
    session: Annotated[Session, Depends(get_session)],
    strategy: Annotated[RoleStrategy, Depends(get_role_strategy)],
    search: str | None = Query(
        default=None,
        description="Case-insensitive text search in title, description and skills",
    ),
    skills: Annotated[
        str | None,
        Query(
            description="Comma-separated skills (postings requiring ANY of them)",
            examples=["Teaching,First aid"],
        ),
    ] = None,
    location: str | None = Query(
        default=None, description="Case-insensitive location substring"
    ),
    status_filter: Annotated[
        Literal["open", "closed", "all"],
        Query(alias="status", description="Posting status, or `all`"),
    ] = "open",
) -> OpportunityCatalog:
    """
    Browse the opportunities visible to the caller.

    Volunteers see every open posting; NGOs see their own postings. Filters run over the
    loaded list, and `available_skills` lists every skill found in that list before
    filtering, for building the skill picker.

    ### Example queries:
    - `/opportunities` - open postings
    - `/opportunities?skills=Teaching,Cooking` - postings needing Teaching OR Cooking
    - `/opportunities?status=all&location=lyon`
    """
    loaded = opportunity_service.list_opportunities(session, strategy)
    criteria = OpportunityFilter(
        search=search,
        skills=[s.strip() for s in skills.split(",") if s.strip()] if skills else [],
        location=location,
        status=None if status_filter == "all" else OpportunityStatus(status_filter),
    )
    return OpportunityCatalog(
        opportunities=opportunity_service.filter_opportunities(loaded, criteria),
        available_skills=opportunity_service.available_skills(loaded),
    )


@router.post("/", response_model=OpportunityPublic, status_code=status.HTTP_201_CREATED)
def create_opportunity(
    opportunity_in: OpportunityCreate,
    session: Annotated[Session, Depends(get_session)],
    current_ngo: Annotated[User, Depends(get_current_ngo)],
) -> OpportunityPublic:
    """
    Post a new opportunity owned by the authenticated NGO.

    Raises:
        `403 InsufficientPermissionsError`: If the caller is a volunteer.
        `503 BackendUnavailableError`: If the posting could not be stored.
    """
    opportunity = opportunity_service.create_opportunity(
        session, current_ngo, opportunity_in
    )
    session.commit()
    session.refresh(opportunity)
    return opportunity_service.to_opportunity_public(opportunity, current_ngo)


@router.get("/{opportunity_id}", response_model=OpportunityPublic)
def read_opportunity(
    opportunity_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> OpportunityPublic:
    """
    Details of one opportunity, including the owning NGO's public identity.

    Raises:
        `404 NotFoundError`: If the opportunity doesn't exist.
    """
    return opportunity_service.get_opportunity_public(session, opportunity_id)


@router.patch("/{opportunity_id}", response_model=OpportunityPublic)
def update_opportunity(
    opportunity_id: int,
    opportunity_update: OpportunityUpdate,
    session: Annotated[Session, Depends(get_session)],
    current_ngo: Annotated[User, Depends(get_current_ngo)],
) -> OpportunityPublic:
    """
    Edit an opportunity, e.g. `{"status": "closed"}` to stop accepting applications.

    Raises:
        `403 InsufficientPermissionsError`: If the caller doesn't own the opportunity.
        `404 NotFoundError`: If the opportunity doesn't exist.
    """
    opportunity = opportunity_service.update_opportunity(
        session, opportunity_id, opportunity_update, current_ngo
    )
    session.commit()
    session.refresh(opportunity)
    return opportunity_service.to_opportunity_public(opportunity, current_ngo)
