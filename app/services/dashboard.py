"""Dashboard composition for volunteers and NGOs."""

from collections import Counter
from sqlmodel import Session

from app.core.config import get_settings
from app.models.dashboard import (
    NGODashboard,
    NGOStats,
    OpportunityWithApplicationCount,
    VolunteerDashboard,
    VolunteerStats,
)
from app.models.enums import OpportunityStatus
from app.services import application as application_service
from app.services import opportunity as opportunity_service
from app.services.roles import NGOStrategy, VolunteerStrategy


def build_volunteer_dashboard(
    session: Session, strategy: VolunteerStrategy
) -> VolunteerDashboard:
    """
    Recent open opportunities, the volunteer's applications and summary counters.

    The number of recent opportunities is capped by DASHBOARD_RECENT_LIMIT.
    """
    recent = opportunity_service.list_opportunities(
        session, strategy, limit=get_settings().DASHBOARD_RECENT_LIMIT
    )
    applications = application_service.list_applications(session, strategy)
    by_status = application_service.count_by_status(applications)

    return VolunteerDashboard(
        stats=VolunteerStats(
            applications=len(applications),
            accepted=by_status.accepted,
            pending=by_status.pending,
            skills=len(strategy.user.skills or []),
        ),
        recent_opportunities=recent,
        applications=applications,
    )


def build_ngo_dashboard(session: Session, strategy: NGOStrategy) -> NGODashboard:
    """The NGO's postings with their application counts, incoming applications and counters."""
    opportunities = opportunity_service.list_opportunities(session, strategy)
    applications = application_service.list_applications(session, strategy)
    by_status = application_service.count_by_status(applications)
    per_opportunity = Counter(a.opportunity_id for a in applications)

    return NGODashboard(
        stats=NGOStats(
            total_opportunities=len(opportunities),
            active_opportunities=sum(
                1 for o in opportunities if o.status == OpportunityStatus.OPEN
            ),
            total_applications=len(applications),
            active_volunteers=by_status.accepted,
            pending_applications=by_status.pending,
        ),
        opportunities=[
            OpportunityWithApplicationCount(
                **o.model_dump(exclude={"ngo"}),
                ngo=o.ngo,
                application_count=per_opportunity[o.id_opportunity],
            )
            for o in opportunities
        ],
        applications=applications,
    )
