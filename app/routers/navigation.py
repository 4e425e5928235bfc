"""Navigation menu and fragment resolution router."""

from typing import Annotated
from fastapi import APIRouter, Depends, Query

from app.core.dependencies import get_role_strategy
from app.exceptions import InsufficientPermissionsError
from app.models.navigation import NavigationItem, ViewTarget
from app.services.navigation import resolve_fragment
from app.services.roles import RoleStrategy

router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.get("/", response_model=list[NavigationItem])
def read_navigation(
    strategy: Annotated[RoleStrategy, Depends(get_role_strategy)],
) -> list[NavigationItem]:
    return list(strategy.navigation)


@router.get("/resolve", response_model=ViewTarget)
def resolve_navigation(
    strategy: Annotated[RoleStrategy, Depends(get_role_strategy)],
    fragment: str = Query(default="", description="Hash fragment, with or without `#`"),
) -> ViewTarget:
    """
    Resolve a navigation token such as `#opportunity/12` into the view it selects.

    Raises:
        `403 InsufficientPermissionsError`: If the caller's role cannot open that view.
        `422 ValidationError`: If the token is unknown.
    """
    target = resolve_fragment(fragment)
    if not strategy.allows_view(target):
        raise InsufficientPermissionsError("open this view")
    return target
