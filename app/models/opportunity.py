from datetime import datetime, timezone
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, DateTime, JSON
from .enums import OpportunityStatus
from .user import UserSummary

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.application import Application


class OpportunityBase(SQLModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    required_skills: list[str] = Field(default_factory=list)
    duration: str = Field(default="", max_length=100)
    location: str = Field(default="", max_length=200)
    status: OpportunityStatus = Field(default=OpportunityStatus.OPEN, index=True)


class Opportunity(OpportunityBase, table=True):
    id_opportunity: int | None = Field(default=None, primary_key=True)
    ngo_id: int = Field(foreign_key="user.id_user", index=True)
    required_skills: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    ngo: "User" = Relationship(back_populates="opportunities")
    applications: list["Application"] = Relationship(back_populates="opportunity")


class OpportunityCreate(OpportunityBase):
    required_skills: list[str] = Field(min_length=1)


class OpportunityPublic(OpportunityBase):
    id_opportunity: int
    ngo_id: int
    created_at: datetime
    updated_at: datetime
    ngo: UserSummary | None = None


class OpportunityUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1, max_length=5000)
    required_skills: list[str] | None = None
    duration: str | None = Field(default=None, max_length=100)
    location: str | None = Field(default=None, max_length=200)
    status: OpportunityStatus | None = None


class OpportunityCatalog(SQLModel):
    opportunities: list[OpportunityPublic] = Field(default_factory=list)
    # Derived from every loaded posting, before filters are applied
    available_skills: list[str] = Field(default_factory=list)


class OpportunityFilter(SQLModel):
    """Client-side catalog criteria; every field left empty matches everything."""

    search: str | None = None
    skills: list[str] = Field(default_factory=list)
    location: str | None = None
    status: OpportunityStatus | None = None
