"""Direct message models."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime


class MessageBase(SQLModel):
    content: str = Field(max_length=5000)


class Message(MessageBase, table=True):
    id_message: int | None = Field(default=None, primary_key=True)
    sender_id: int = Field(foreign_key="user.id_user", index=True)
    receiver_id: int = Field(foreign_key="user.id_user", index=True)
    # Only the receiver flips this, by opening the thread
    read: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )


class MessageCreate(MessageBase):
    receiver_id: int


class MessagePublic(MessageBase):
    id_message: int
    sender_id: int
    receiver_id: int
    read: bool
    created_at: datetime


class UnreadCount(SQLModel):
    unread_count: int
