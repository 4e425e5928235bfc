"""Shared fixtures for benchmark tests."""

from datetime import datetime, timedelta, timezone
import pytest

from app.models.application import ApplicationWithDetails
from app.models.enums import ApplicationStatus, OpportunityStatus
from app.models.opportunity import OpportunityPublic

SKILLS = ["Teaching", "Cooking", "Driving", "First aid", "Gardening", "Translation"]
STATUSES = list(ApplicationStatus)


@pytest.fixture(name="opportunity_catalog")
def opportunity_catalog_fixture() -> list[OpportunityPublic]:
    """
    A catalog of 500 loaded postings, newest first, spread over skills and cities.
    """
    now = datetime.now(timezone.utc)
    return [
        OpportunityPublic(
            id_opportunity=500 - i,
            ngo_id=i % 20 + 1,
            title=f"Opportunity {i}",
            description=f"Help needed for project {i} in the community",
            required_skills=[SKILLS[i % len(SKILLS)], SKILLS[(i + 2) % len(SKILLS)]],
            location=["Paris", "Lyon", "Marseille", "Lille"][i % 4],
            status=OpportunityStatus.OPEN if i % 5 else OpportunityStatus.CLOSED,
            created_at=now - timedelta(minutes=i),
            updated_at=now - timedelta(minutes=i),
        )
        for i in range(500)
    ]


@pytest.fixture(name="application_list")
def application_list_fixture() -> list[ApplicationWithDetails]:
    """500 loaded applications as an NGO would see them."""
    now = datetime.now(timezone.utc)
    return [
        ApplicationWithDetails(
            id_application=500 - i,
            opportunity_id=i % 50 + 1,
            volunteer_id=i + 1,
            cover_letter="I would like to help",
            status=STATUSES[i % len(STATUSES)],
            created_at=now - timedelta(minutes=i),
            updated_at=now - timedelta(minutes=i),
            opportunity_title=f"Opportunity {i % 50}",
            volunteer_name=f"Volunteer {i}",
            volunteer_email=f"volunteer{i}@example.com",
        )
        for i in range(500)
    ]
