"""Messaging service for direct conversations between two users."""

from typing import Iterable
from sqlmodel import Session, select, func, or_, and_
from sqlalchemy.exc import SQLAlchemyError

from app.models.message import Message, MessagePublic
from app.models.user import User
from app.services import user as user_service
from app.exceptions import (
    BackendUnavailableError,
    EmptyMessageError,
    NotFoundError,
    ValidationError,
)
from app.utils.logger import logger


def list_conversations(session: Session, user_id: int) -> list[User]:
    """
    List everyone the user has exchanged at least one message with.

    Counterparts are collected from both sent and received messages and returned
    once each. A database failure is logged and yields an empty list.

    Args:
        session: Database session
        user_id: The current user

    Returns:
        list[User]: Distinct counterparts ordered by name
    """
    try:
        sent_to = session.exec(
            select(Message.receiver_id).where(Message.sender_id == user_id).distinct()
        ).all()
        received_from = session.exec(
            select(Message.sender_id).where(Message.receiver_id == user_id).distinct()
        ).all()
        counterpart_ids = set(sent_to) | set(received_from)
        counterpart_ids.discard(user_id)
        return user_service.get_users_by_ids(session, counterpart_ids)
    except SQLAlchemyError:
        logger.exception(f"Failed to load conversations for user {user_id}")
        return []


def filter_conversations(users: Iterable[User], search: str | None = None) -> list[User]:
    """Case-insensitive substring match on the counterpart's name or organization."""
    users = list(users)
    if not search or not search.strip():
        return users
    term = search.strip().lower()
    return [
        u
        for u in users
        if term in u.name.lower() or term in (u.organization_name or "").lower()
    ]


def _thread_condition(user_id: int, other_user_id: int):
    return or_(
        and_(Message.sender_id == user_id, Message.receiver_id == other_user_id),
        and_(Message.sender_id == other_user_id, Message.receiver_id == user_id),
    )


def load_thread(session: Session, user_id: int, other_user_id: int) -> list[Message]:
    """
    Load the conversation between two users and mark the incoming part as read.

    Messages are ordered oldest first. Every unread message sent by `other_user_id` to
    `user_id` is flagged read; loading the same thread again changes nothing.
    A failure while reading is logged and yields an empty thread.

    Args:
        session: Database session
        user_id: The user opening the thread (the reader)
        other_user_id: The counterpart

    Returns:
        list[Message]: The thread, oldest first
    """
    statement = (
        select(Message)
        .where(_thread_condition(user_id, other_user_id))
        .order_by(Message.created_at, Message.id_message)  # type: ignore
    )
    try:
        messages = list(session.exec(statement).all())
    except SQLAlchemyError:
        logger.exception(
            f"Failed to load thread between users {user_id} and {other_user_id}"
        )
        return []

    marked = 0
    for message in messages:
        if (
            message.receiver_id == user_id
            and message.sender_id == other_user_id
            and not message.read
        ):
            message.read = True
            session.add(message)
            marked += 1

    if marked:
        try:
            session.flush()
        except SQLAlchemyError:
            session.rollback()
            logger.exception(f"Failed to mark messages read for user {user_id}")
            return messages
        logger.info(f"Marked {marked} message(s) from {other_user_id} read for {user_id}")
    return messages


def send_message(
    session: Session, sender_id: int, receiver_id: int, content: str
) -> Message:
    """
    Send a direct message.

    Args:
        session: Database session
        sender_id: Author of the message
        receiver_id: Recipient
        content: Text; surrounding whitespace is removed before storing

    Returns:
        Message: The created message, unread

    Raises:
        EmptyMessageError: If the content is blank
        ValidationError: If a user messages themselves
        NotFoundError: If the receiver doesn't exist
        BackendUnavailableError: If the insert fails
    """
    content = content.strip()
    if not content:
        raise EmptyMessageError()
    if sender_id == receiver_id:
        raise ValidationError("You cannot send a message to yourself", field="receiver_id")
    if not session.get(User, receiver_id):
        raise NotFoundError("User", receiver_id)

    message = Message(sender_id=sender_id, receiver_id=receiver_id, content=content)
    session.add(message)
    try:
        session.flush()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Failed to send message")
        raise BackendUnavailableError("send the message")
    session.refresh(message)
    logger.info(f"Message {message.id_message} sent from {sender_id} to {receiver_id}")
    return message


def get_unread_count(session: Session, user_id: int) -> int:
    """Number of messages addressed to the user that they haven't opened yet."""
    return session.exec(
        select(func.count())
        .select_from(Message)
        .where(
            Message.receiver_id == user_id,
            Message.read == False,  # noqa: E712
        )
    ).one()


def to_message_public(message: Message) -> MessagePublic:
    return MessagePublic.model_validate(message)
