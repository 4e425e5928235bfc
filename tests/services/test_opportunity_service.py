"""Tests for the opportunity catalog service."""

from datetime import datetime, timezone
from unittest.mock import MagicMock
import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from app.exceptions import (
    InsufficientPermissionsError,
    NotFoundError,
    ValidationError,
)
from app.models.enums import OpportunityStatus
from app.models.opportunity import (
    OpportunityCreate,
    OpportunityFilter,
    OpportunityPublic,
    OpportunityUpdate,
)
from app.services import opportunity as opportunity_service
from app.services.roles import strategy_for


def _posting(id_opportunity: int, **fields) -> OpportunityPublic:
    now = datetime.now(timezone.utc)
    defaults = dict(
        id_opportunity=id_opportunity,
        ngo_id=1,
        title=f"Posting {id_opportunity}",
        description="Help needed",
        required_skills=["Teaching"],
        location="Paris",
        status=OpportunityStatus.OPEN,
        created_at=now,
        updated_at=now,
    )
    defaults.update(fields)
    return OpportunityPublic(**defaults)


class TestCreateOpportunity:
    def test_ngo_posts_open_opportunity(self, session: Session, ngo):
        opportunity = opportunity_service.create_opportunity(
            session,
            ngo,
            OpportunityCreate(
                title="Soup kitchen",
                description="Serve meals on Sundays",
                required_skills=[" Cooking ", "", "Cooking", "Hygiene"],
            ),
        )

        assert opportunity.id_opportunity is not None
        assert opportunity.ngo_id == ngo.id_user
        assert opportunity.status == OpportunityStatus.OPEN
        assert opportunity.required_skills == ["Cooking", "Hygiene"]

    def test_volunteer_cannot_post(self, session: Session, volunteer):
        with pytest.raises(InsufficientPermissionsError):
            opportunity_service.create_opportunity(
                session,
                volunteer,
                OpportunityCreate(
                    title="Nope", description="Nope", required_skills=["Any"]
                ),
            )

    def test_blank_skills_only_rejected(self, session: Session, ngo):
        with pytest.raises(ValidationError) as exc_info:
            opportunity_service.create_opportunity(
                session,
                ngo,
                OpportunityCreate(title="T", description="D", required_skills=["  "]),
            )
        assert exc_info.value.field == "required_skills"


class TestUpdateOpportunity:
    def test_owner_closes_and_reopens(self, session: Session, opportunity, ngo):
        closed = opportunity_service.update_opportunity(
            session,
            opportunity.id_opportunity,
            OpportunityUpdate(status=OpportunityStatus.CLOSED),
            ngo,
        )
        assert closed.status == OpportunityStatus.CLOSED

        reopened = opportunity_service.update_opportunity(
            session,
            opportunity.id_opportunity,
            OpportunityUpdate(status=OpportunityStatus.OPEN, title="Tree planting day"),
            ngo,
        )
        assert reopened.status == OpportunityStatus.OPEN
        assert reopened.title == "Tree planting day"
        assert reopened.description == "Plant 500 trees along the river banks"

    def test_null_clears_optional_text_fields(self, session: Session, opportunity, ngo):
        updated = opportunity_service.update_opportunity(
            session,
            opportunity.id_opportunity,
            OpportunityUpdate(location=None, duration=None, title=None),
            ngo,
        )

        assert updated.location == ""
        assert updated.duration == ""
        # Required fields ignore an explicit null
        assert updated.title == "Tree planting weekend"

    def test_non_owner_forbidden(self, session: Session, opportunity, other_ngo):
        with pytest.raises(InsufficientPermissionsError):
            opportunity_service.update_opportunity(
                session,
                opportunity.id_opportunity,
                OpportunityUpdate(title="Hijacked"),
                other_ngo,
            )

    def test_missing(self, session: Session, ngo):
        with pytest.raises(NotFoundError):
            opportunity_service.update_opportunity(
                session, 999, OpportunityUpdate(title="Ghost"), ngo
            )


class TestListOpportunities:
    def test_volunteer_sees_open_postings_of_every_ngo(
        self,
        session: Session,
        volunteer,
        opportunity,
        closed_opportunity,
        foreign_opportunity,
    ):
        listed = opportunity_service.list_opportunities(session, strategy_for(volunteer))

        assert [o.id_opportunity for o in listed] == [
            foreign_opportunity.id_opportunity,
            opportunity.id_opportunity,
        ]
        assert listed[0].ngo is not None
        assert listed[0].ngo.organization_name == "City Food Bank"

    def test_ngo_sees_own_postings_in_any_status(
        self, session: Session, ngo, opportunity, closed_opportunity, foreign_opportunity
    ):
        listed = opportunity_service.list_opportunities(session, strategy_for(ngo))

        assert [o.id_opportunity for o in listed] == [
            closed_opportunity.id_opportunity,
            opportunity.id_opportunity,
        ]

    def test_limit(self, session: Session, volunteer, opportunity, foreign_opportunity):
        listed = opportunity_service.list_opportunities(
            session, strategy_for(volunteer), limit=1
        )
        assert [o.id_opportunity for o in listed] == [foreign_opportunity.id_opportunity]

    def test_read_failure_degrades_to_empty_list(self, volunteer):
        session = MagicMock()
        session.exec.side_effect = OperationalError("SELECT", {}, Exception("down"))

        assert opportunity_service.list_opportunities(session, strategy_for(volunteer)) == []

    def test_get_opportunity_public_includes_ngo(self, session: Session, opportunity, ngo):
        public = opportunity_service.get_opportunity_public(
            session, opportunity.id_opportunity
        )
        assert public.ngo is not None
        assert public.ngo.id_user == ngo.id_user


class TestFilterOpportunities:
    @pytest.fixture(name="loaded")
    def loaded_fixture(self):
        return [
            _posting(
                3,
                title="Math tutoring",
                required_skills=["Teaching", "Math"],
                location="Paris 11e",
            ),
            _posting(
                2,
                title="Food drive",
                description="Sort donations with the TEACHING staff",
                required_skills=["Logistics"],
                location="Lyon",
            ),
            _posting(
                1,
                title="First aid stand",
                required_skills=["First aid"],
                location="Marseille",
                status=OpportunityStatus.CLOSED,
            ),
        ]

    def test_empty_criteria_is_identity(self, loaded):
        result = opportunity_service.filter_opportunities(loaded, OpportunityFilter())
        assert result == loaded
        assert result is not loaded

    def test_search_matches_title_description_and_skills(self, loaded):
        result = opportunity_service.filter_opportunities(
            loaded, OpportunityFilter(search="teaching")
        )
        assert [o.id_opportunity for o in result] == [3, 2]

    def test_skills_match_any(self, loaded):
        result = opportunity_service.filter_opportunities(
            loaded, OpportunityFilter(skills=["Math", "First aid"])
        )
        assert [o.id_opportunity for o in result] == [3, 1]

    def test_location_and_status(self, loaded):
        result = opportunity_service.filter_opportunities(
            loaded, OpportunityFilter(location="PARIS", status=OpportunityStatus.OPEN)
        )
        assert [o.id_opportunity for o in result] == [3]

    def test_idempotent_and_input_untouched(self, loaded):
        criteria = OpportunityFilter(search="a", skills=["Teaching", "Logistics"])
        snapshot = [o.model_copy() for o in loaded]

        once = opportunity_service.filter_opportunities(loaded, criteria)
        twice = opportunity_service.filter_opportunities(once, criteria)

        assert once == twice
        assert loaded == snapshot

    def test_available_skills_sorted_union(self, loaded):
        assert opportunity_service.available_skills(loaded) == [
            "First aid",
            "Logistics",
            "Math",
            "Teaching",
        ]
