"""User profile router."""

from typing import Annotated
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.database.database import get_session
from app.core.dependencies import get_current_user
from app.models.user import User, UserPublic, UserSummary, UserUpdate
from app.services import user as user_service
from app.services.opportunity import to_user_summary
from app.exceptions import NotFoundError
from app.utils.validation import ensure_id

router = APIRouter(prefix="/users", tags=["users"])


@router.patch("/me", response_model=UserPublic)
def update_current_user(
    user_update: UserUpdate,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserPublic:
    """
    Edit the authenticated user's profile.

    The role cannot be changed. Organization fields are rejected for volunteers.

    Raises:
        `422 ValidationError`: If a volunteer sends organization fields.
    """
    user = user_service.update_user(
        session, ensure_id(current_user.id_user, "User"), user_update
    )
    session.commit()
    session.refresh(user)
    return UserPublic.model_validate(user)


@router.get("/{user_id}", response_model=UserSummary)
def read_user(
    user_id: int,
    session: Annotated[Session, Depends(get_session)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserSummary:
    """
    Public identity of another user (name, role, organization, location).

    Raises:
        `404 NotFoundError`: If no user exists with the given ID.
    """
    summary = to_user_summary(user_service.get_user(session, user_id))
    if summary is None:
        raise NotFoundError("User", user_id)
    return summary
