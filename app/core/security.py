from typing import Literal
from datetime import datetime, timedelta, timezone

import jwt
from jwt.exceptions import ExpiredSignatureError, PyJWTError
from sqlmodel import Session, select

from app.core.config import get_settings
from app.core.password import DUMMY_HASH, verify_password
from app.exceptions import InvalidTokenError, TokenExpiredError
from app.models.user import User

TokenType = Literal["access", "refresh"]


def authenticate_user(session: Session, email: str, password: str) -> User | None:
    """
    Authenticate a user by email and password.

    Returns:
        User if authentication succeeds, `None` otherwise.
    """
    statement = select(User).where(User.email == email.strip().lower())
    user = session.exec(statement).first()
    hash_to_verify = user.hashed_password if user else DUMMY_HASH
    if verify_password(password, hash_to_verify) and user:
        return user
    return None


def create_token(data: dict, expires_delta: timedelta, type: TokenType) -> str:
    """
    Create a JSON Web Token with the given payload, expiration, and token type.

    Parameters:
        data (dict): Payload claims to include in the token.
        expires_delta (timedelta): Time span from now after which the token expires.
        type (Literal["access", "refresh"]): Token classification included in the token claims.

    Returns:
        token (str): Encoded JWT string.
    """
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire, "type": type})
    return jwt.encode(
        to_encode,
        settings.SECRET_KEY.get_secret_value(),
        algorithm=settings.ALGORITHM,
    )


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token containing the provided payload.

    If `expires_delta` is None, ACCESS_TOKEN_EXPIRE_MINUTES from the settings is used.
    """
    expires_delta = (
        expires_delta
        if expires_delta
        else timedelta(minutes=get_settings().ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return create_token(data, expires_delta=expires_delta, type="access")


def create_refresh_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT refresh token containing the provided payload.

    If `expires_delta` is None, REFRESH_TOKEN_EXPIRE_DAYS from the settings is used.
    """
    expires_delta = (
        expires_delta
        if expires_delta
        else timedelta(days=get_settings().REFRESH_TOKEN_EXPIRE_DAYS)
    )
    return create_token(data, expires_delta=expires_delta, type="refresh")


def decode_token(token: str, expected_type: TokenType) -> str:
    """
    Decode a JWT and return its subject (the user's email).

    Parameters:
        token (str): Encoded JWT.
        expected_type (Literal["access", "refresh"]): The `type` claim the token must carry.

    Returns:
        str: The `sub` claim.

    Raises:
        TokenExpiredError: If the token's `exp` is in the past.
        InvalidTokenError: If the signature is bad, the subject is missing, or the type differs.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY.get_secret_value(),
            algorithms=[settings.ALGORITHM],
        )
    except ExpiredSignatureError:
        raise TokenExpiredError(expected_type)
    except PyJWTError:
        raise InvalidTokenError()

    subject: str | None = payload.get("sub")
    if subject is None or payload.get("type") != expected_type:
        raise InvalidTokenError()
    return subject
