from functools import lru_cache
from typing import Annotated
from fastapi import Depends, Query, WebSocketException, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session, select

from app.core.config import get_settings
from app.core.security import decode_token
from app.database.database import get_session
from app.exceptions import (
    InsufficientPermissionsError,
    InvalidTokenError,
    AuthenticationError,
)
from app.models.user import User
from app.services.realtime import MessageBroker
from app.services.roles import RoleStrategy, strategy_for


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _user_from_token(session: Session, token: str) -> User:
    email = decode_token(token, "access")
    user = session.exec(select(User).where(User.email == email)).first()
    if user is None:
        raise InvalidTokenError()
    return user


def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: Annotated[Session, Depends(get_session)],
) -> User:
    """
    Resolve the authenticated user from an access JWT.

    Returns:
        user (User): The User whose email matches the token's subject.

    Raises:
        InvalidTokenError: If the token is invalid, not an access token, or no matching user exists.
        TokenExpiredError: If the token has expired.
    """
    return _user_from_token(session, token)


def get_role_strategy(
    current_user: Annotated[User, Depends(get_current_user)],
) -> RoleStrategy:
    """Select the caller's role strategy once for the whole request."""
    return strategy_for(current_user)


def get_current_volunteer(
    strategy: Annotated[RoleStrategy, Depends(get_role_strategy)],
) -> User:
    if not strategy.can_apply:
        raise InsufficientPermissionsError("perform volunteer actions")
    return strategy.user


def get_current_ngo(
    strategy: Annotated[RoleStrategy, Depends(get_role_strategy)],
) -> User:
    if not strategy.can_post_opportunities:
        raise InsufficientPermissionsError("perform NGO actions")
    return strategy.user


def get_websocket_user(
    session: Annotated[Session, Depends(get_session)],
    token: Annotated[str, Query()],
) -> User:
    """
    Resolve the user of a WebSocket connection from its `token` query parameter.

    Browsers cannot set an Authorization header on WebSocket upgrades, so the access
    token travels in the query string instead.

    Raises:
        WebSocketException: Policy-violation close (1008) when the token is not accepted.
    """
    try:
        return _user_from_token(session, token)
    except AuthenticationError as e:
        raise WebSocketException(
            code=status.WS_1008_POLICY_VIOLATION, reason=str(e)
        )


@lru_cache()
def get_message_broker() -> MessageBroker:
    """Process-wide broker shared by every request and WebSocket."""
    return MessageBroker(max_queue_size=get_settings().REALTIME_QUEUE_SIZE)
