from datetime import datetime, timezone
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, DateTime, UniqueConstraint
from .enums import ApplicationStatus

if TYPE_CHECKING:
    from app.models.opportunity import Opportunity
    from app.models.user import User


class ApplicationBase(SQLModel):
    cover_letter: str = Field(min_length=1, max_length=5000)


class Application(ApplicationBase, table=True):
    # A volunteer applies to a given opportunity at most once
    __table_args__ = (
        UniqueConstraint(
            "opportunity_id",
            "volunteer_id",
            name="uq_application_opportunity_volunteer",
        ),
    )

    id_application: int | None = Field(default=None, primary_key=True)
    opportunity_id: int = Field(foreign_key="opportunity.id_opportunity", index=True)
    volunteer_id: int = Field(foreign_key="user.id_user", index=True)
    status: ApplicationStatus = Field(default=ApplicationStatus.PENDING, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    opportunity: "Opportunity" = Relationship(back_populates="applications")
    volunteer: "User" = Relationship()


class ApplicationCreate(ApplicationBase):
    opportunity_id: int


class ApplicationPublic(ApplicationBase):
    id_application: int
    opportunity_id: int
    volunteer_id: int
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime


class ApplicationWithDetails(ApplicationPublic):
    """Application row joined with the fields both list views display and search on."""

    opportunity_title: str | None = None
    opportunity_ngo_id: int | None = None
    ngo_name: str | None = None
    ngo_organization_name: str | None = None
    volunteer_name: str | None = None
    volunteer_email: str | None = None
    volunteer_skills: list[str] = Field(default_factory=list)
    volunteer_location: str | None = None
    volunteer_bio: str | None = None


class ApplicationStatusUpdate(SQLModel):
    status: ApplicationStatus


class ApplicationStats(SQLModel):
    pending: int = 0
    accepted: int = 0
    rejected: int = 0


class ApplicationList(SQLModel):
    applications: list[ApplicationWithDetails] = Field(default_factory=list)
    # Counted over every visible application, before filters
    stats: ApplicationStats = Field(default_factory=ApplicationStats)
