"""User service module for sign-up and profile operations."""

from sqlmodel import Session, select, col
from sqlalchemy.exc import IntegrityError

from app.models.enums import UserRole
from app.models.user import User, UserCreate, UserUpdate
from app.core.password import get_password_hash
from app.exceptions import NotFoundError, AlreadyExistsError, ValidationError
from app.utils.logger import logger
from app.utils.validation import clean_skills, mask_email

ORGANIZATION_FIELDS = ("organization_name", "organization_description", "website_url")


def create_user(session: Session, user_in: UserCreate) -> User:
    """
    Create and persist a new user with a hashed password.

    Emails are stored lower-cased. Organization fields are dropped for volunteers since
    they only describe NGO accounts.

    Parameters:
        user_in (UserCreate): Sign-up data; must include a plaintext `password`.

    Returns:
        User: The created User model instance.

    Raises:
        AlreadyExistsError: If a user with the same email already exists.
    """
    email = user_in.email.strip().lower()
    update = {
        "email": email,
        "hashed_password": get_password_hash(user_in.password),
        "skills": clean_skills(user_in.skills),
    }
    if user_in.role == UserRole.VOLUNTEER:
        update.update({field: None for field in ORGANIZATION_FIELDS})

    db_user = User.model_validate(user_in, update=update)

    session.add(db_user)
    try:
        session.flush()
    except IntegrityError:
        session.rollback()
        raise AlreadyExistsError("User", "email", email)
    session.refresh(db_user)
    logger.info(f"User {mask_email(email)} signed up as {db_user.role.value}")
    return db_user


def get_user(session: Session, user_id: int) -> User | None:
    """
    Retrieve a user by ID.

    Args:
        session: Database session
        user_id: The user's primary key

    Returns:
        User | None: The user record or None if not found
    """
    return session.get(User, user_id)


def get_user_by_email(session: Session, email: str) -> User | None:
    statement = select(User).where(User.email == email.strip().lower())
    return session.exec(statement).first()


def get_users_by_ids(session: Session, user_ids: set[int]) -> list[User]:
    """Fetch several users at once, ordered by name."""
    if not user_ids:
        return []
    statement = (
        select(User).where(col(User.id_user).in_(user_ids)).order_by(User.name)
    )
    return list(session.exec(statement).all())


def update_user(session: Session, user_id: int, user_update: UserUpdate) -> User:
    """
    Update a user's profile.

    Parameters:
        user_id (int): Primary key of the user to update.
        user_update (UserUpdate): Partial update data; only provided fields are applied.
            A provided `password` is hashed into `hashed_password`.

    Returns:
        User: The updated user record.

    Raises:
        NotFoundError: If no user exists with the given `user_id`.
        ValidationError: If a volunteer tries to set organization fields.
    """
    db_user = get_user(session, user_id)
    if not db_user:
        raise NotFoundError("User", user_id)

    user_data = user_update.model_dump(exclude_unset=True)

    if db_user.role == UserRole.VOLUNTEER:
        for field in ORGANIZATION_FIELDS:
            if user_data.get(field) is not None:
                raise ValidationError(
                    "Organization details are only available to NGO accounts",
                    field=field,
                )

    if "password" in user_data:
        password = user_data.pop("password")
        if password is not None:
            user_data["hashed_password"] = get_password_hash(password)

    if "skills" in user_data:
        user_data["skills"] = clean_skills(user_data["skills"])

    for key, value in user_data.items():
        setattr(db_user, key, value)

    session.add(db_user)
    session.flush()
    session.refresh(db_user)
    return db_user
