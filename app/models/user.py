from datetime import datetime, timezone
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, DateTime, JSON
from .enums import UserRole

if TYPE_CHECKING:
    from app.models.opportunity import Opportunity


class UserBase(SQLModel):
    email: str = Field(unique=True, index=True, max_length=255)
    name: str = Field(min_length=1, max_length=100)
    role: UserRole = Field(index=True)
    skills: list[str] = Field(default_factory=list)
    location: str = Field(default="", max_length=200)
    bio: str = Field(default="", max_length=1000)
    # Only meaningful for NGO accounts
    organization_name: str | None = Field(default=None, max_length=200)
    organization_description: str | None = Field(default=None, max_length=2000)
    website_url: str | None = Field(default=None, max_length=500)


class User(UserBase, table=True):
    id_user: int | None = Field(default=None, primary_key=True)
    hashed_password: str
    skills: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    opportunities: list["Opportunity"] = Relationship(back_populates="ngo")


class UserCreate(UserBase):
    password: str = Field(min_length=8)


class UserPublic(UserBase):
    id_user: int
    created_at: datetime


class UserSummary(SQLModel):
    """Identity fields embedded in opportunities, applications and conversations."""

    id_user: int
    name: str
    role: UserRole
    organization_name: str | None = None
    location: str = ""


class UserUpdate(SQLModel):
    # role is fixed at sign-up and intentionally absent here
    name: str | None = Field(default=None, min_length=1, max_length=100)
    skills: list[str] | None = None
    location: str | None = Field(default=None, max_length=200)
    bio: str | None = Field(default=None, max_length=1000)
    organization_name: str | None = Field(default=None, max_length=200)
    organization_description: str | None = Field(default=None, max_length=2000)
    website_url: str | None = Field(default=None, max_length=500)
    password: str | None = Field(default=None, min_length=8)
