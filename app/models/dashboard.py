"""Read-only dashboard aggregates composed from opportunities and applications."""

from typing import Literal
from sqlmodel import SQLModel, Field

from app.models.application import ApplicationWithDetails
from app.models.enums import UserRole
from app.models.opportunity import OpportunityPublic


class VolunteerStats(SQLModel):
    applications: int = 0
    accepted: int = 0
    pending: int = 0
    skills: int = 0


class NGOStats(SQLModel):
    total_opportunities: int = 0
    active_opportunities: int = 0
    total_applications: int = 0
    active_volunteers: int = 0
    pending_applications: int = 0


class OpportunityWithApplicationCount(OpportunityPublic):
    application_count: int = 0


class VolunteerDashboard(SQLModel):
    role: Literal[UserRole.VOLUNTEER] = UserRole.VOLUNTEER
    stats: VolunteerStats
    recent_opportunities: list[OpportunityPublic] = Field(default_factory=list)
    applications: list[ApplicationWithDetails] = Field(default_factory=list)


class NGODashboard(SQLModel):
    role: Literal[UserRole.NGO] = UserRole.NGO
    stats: NGOStats
    opportunities: list[OpportunityWithApplicationCount] = Field(default_factory=list)
    applications: list[ApplicationWithDetails] = Field(default_factory=list)
