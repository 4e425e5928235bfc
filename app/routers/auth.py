from typing import Annotated
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session

from app.database.database import get_session
from app.core.dependencies import get_current_user
from app.core.security import (
    authenticate_user,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from app.exceptions import InvalidCredentialsError, InvalidTokenError
from app.models.token import Token, TokenRefreshRequest
from app.models.user import User, UserCreate, UserPublic
from app.services import user as user_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_tokens(user: User) -> Token:
    claims = {"sub": user.email, "role": user.role.value}
    return Token(
        access_token=create_access_token(claims),
        refresh_token=create_refresh_token(claims),
        token_type="bearer",
    )


@router.post("/signup", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def signup(
    user_in: UserCreate,
    session: Annotated[Session, Depends(get_session)],
) -> UserPublic:
    """
    Create a volunteer or NGO account.

    The role chosen here can never be changed afterwards. Organization details are
    kept only for NGO accounts.

    Raises:
        `409 AlreadyExistsError`: If the email is already registered.
    """
    user = user_service.create_user(session, user_in)
    session.commit()
    session.refresh(user)
    return UserPublic.model_validate(user)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    session: Annotated[Session, Depends(get_session)],
) -> Token:
    """
    Exchange email (sent as the OAuth2 `username` field) and password for tokens.

    Raises:
        `401 InvalidCredentialsError`: If the email or password is wrong.
    """
    user = authenticate_user(session, form_data.username, form_data.password)
    if not user:
        raise InvalidCredentialsError()
    return _issue_tokens(user)


@router.post("/refresh", response_model=Token)
def refresh_token(
    request_data: TokenRefreshRequest,
    session: Annotated[Session, Depends(get_session)],
) -> Token:
    """
    Issue a new access token from a refresh token.

    The refresh token itself is returned unchanged.
    """
    email = decode_token(request_data.refresh_token, "refresh")
    user = user_service.get_user_by_email(session, email)
    if not user:
        raise InvalidTokenError()
    return Token(
        access_token=create_access_token({"sub": user.email, "role": user.role.value}),
        refresh_token=request_data.refresh_token,
        token_type="bearer",
    )


@router.get("/me", response_model=UserPublic)
def read_current_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserPublic:
    """Return the authenticated user's identity and role."""
    return UserPublic.model_validate(current_user)
