"""Performance benchmarks for the in-memory catalog and application filters."""

from pytest_codspeed import BenchmarkFixture

from app.models.enums import ApplicationStatus, OpportunityStatus
from app.models.opportunity import OpportunityFilter
from app.services import application as application_service
from app.services import opportunity as opportunity_service


def test_filter_opportunities_performance(
    benchmark: BenchmarkFixture, opportunity_catalog
):
    """Benchmark combined search, skill, location and status filtering."""
    criteria = OpportunityFilter(
        search="community",
        skills=["Teaching", "Driving"],
        location="paris",
        status=OpportunityStatus.OPEN,
    )

    @benchmark
    def run():
        return opportunity_service.filter_opportunities(opportunity_catalog, criteria)


def test_available_skills_performance(benchmark: BenchmarkFixture, opportunity_catalog):
    """Benchmark deriving the skill picker from the loaded catalog."""
    benchmark(opportunity_service.available_skills, opportunity_catalog)


def test_filter_applications_performance(benchmark: BenchmarkFixture, application_list):
    """Benchmark searching and status-filtering applications."""

    @benchmark
    def run():
        return application_service.filter_applications(
            application_list, search="volunteer1", status=ApplicationStatus.PENDING
        )


def test_count_by_status_performance(benchmark: BenchmarkFixture, application_list):
    benchmark(application_service.count_by_status, application_list)
