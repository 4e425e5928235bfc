"""Role-specific dashboard router."""

from typing import Annotated
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.database.database import get_session
from app.core.dependencies import get_role_strategy
from app.models.dashboard import NGODashboard, VolunteerDashboard
from app.services.roles import RoleStrategy

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/", response_model=VolunteerDashboard | NGODashboard)
def read_dashboard(
    session: Annotated[Session, Depends(get_session)],
    strategy: Annotated[RoleStrategy, Depends(get_role_strategy)],
) -> VolunteerDashboard | NGODashboard:
    """
    Dashboard of the authenticated user.

    Volunteers get recent open opportunities and their applications; NGOs get their
    postings with application counts and the applications they received. The `role`
    field tells the two shapes apart.
    """
    return strategy.build_dashboard(session)
