import os

# The engine and settings are built at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only-min-32-chars")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402
from sqlmodel.pool import StaticPool  # noqa: E402

from app.core.dependencies import get_message_broker  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.database.database import get_session  # noqa: E402
from app.main import app  # noqa: E402
from app.models.application import Application  # noqa: E402
from app.models.enums import OpportunityStatus, UserRole  # noqa: E402
from app.models.opportunity import Opportunity, OpportunityCreate  # noqa: E402
from app.models.user import User, UserCreate  # noqa: E402
from app.services import application as application_service  # noqa: E402
from app.services import opportunity as opportunity_service  # noqa: E402
from app.services import user as user_service  # noqa: E402
from app.services.realtime import MessageBroker  # noqa: E402

TEST_PASSWORD = "Password123"


@pytest.fixture(name="session")
def session_fixture():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="broker")
def broker_fixture() -> MessageBroker:
    return MessageBroker(max_queue_size=10)


@pytest.fixture(name="client")
def client_fixture(session: Session, broker: MessageBroker):
    """TestClient wired to the test session and an isolated broker."""
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_message_broker] = lambda: broker
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def make_user(session: Session, email: str, role: UserRole, **fields) -> User:
    """Create and commit a user with the shared test password."""
    user = user_service.create_user(
        session,
        UserCreate(
            email=email,
            name=fields.pop("name", email.split("@")[0].title()),
            role=role,
            password=TEST_PASSWORD,
            **fields,
        ),
    )
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="volunteer")
def volunteer_fixture(session: Session) -> User:
    return make_user(
        session,
        "alice@example.com",
        UserRole.VOLUNTEER,
        name="Alice Martin",
        skills=["Teaching", "First aid"],
        location="Paris",
    )


@pytest.fixture(name="other_volunteer")
def other_volunteer_fixture(session: Session) -> User:
    return make_user(
        session, "bob@example.com", UserRole.VOLUNTEER, name="Bob Durand", location="Lyon"
    )


@pytest.fixture(name="ngo")
def ngo_fixture(session: Session) -> User:
    return make_user(
        session,
        "contact@greenearth.org",
        UserRole.NGO,
        name="Green Earth",
        organization_name="Green Earth NGO",
        location="Paris",
    )


@pytest.fixture(name="other_ngo")
def other_ngo_fixture(session: Session) -> User:
    return make_user(
        session,
        "hello@foodbank.org",
        UserRole.NGO,
        name="City Food Bank",
        organization_name="City Food Bank",
    )


def token_for(user: User) -> str:
    return create_access_token({"sub": user.email, "role": user.role.value})


@pytest.fixture(name="auth_headers")
def auth_headers_fixture():
    """Build the Authorization header of a given user."""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {token_for(user)}"}

    return _headers


@pytest.fixture(name="access_token")
def access_token_fixture():
    return token_for


@pytest.fixture(name="user_factory")
def user_factory_fixture(session: Session):
    """Create extra users: `user_factory(email, role, **profile)`."""

    def _create(email: str, role: UserRole, **fields) -> User:
        return make_user(session, email, role, **fields)

    return _create


@pytest.fixture(name="opportunity")
def opportunity_fixture(session: Session, ngo: User) -> Opportunity:
    """Open opportunity owned by `ngo`."""
    opportunity = opportunity_service.create_opportunity(
        session,
        ngo,
        OpportunityCreate(
            title="Tree planting weekend",
            description="Plant 500 trees along the river banks",
            required_skills=["Gardening", "First aid"],
            duration="2 days",
            location="Paris",
        ),
    )
    session.commit()
    session.refresh(opportunity)
    return opportunity


@pytest.fixture(name="closed_opportunity")
def closed_opportunity_fixture(session: Session, ngo: User) -> Opportunity:
    opportunity = opportunity_service.create_opportunity(
        session,
        ngo,
        OpportunityCreate(
            title="Warehouse renovation",
            description="Shelving and painting",
            required_skills=["Construction"],
            location="Lyon",
            status=OpportunityStatus.CLOSED,
        ),
    )
    session.commit()
    session.refresh(opportunity)
    return opportunity


@pytest.fixture(name="foreign_opportunity")
def foreign_opportunity_fixture(session: Session, other_ngo: User) -> Opportunity:
    """Open opportunity owned by `other_ngo`."""
    opportunity = opportunity_service.create_opportunity(
        session,
        other_ngo,
        OpportunityCreate(
            title="Delivery drivers",
            description="Collect unsold food from partner shops",
            required_skills=["Driving"],
            location="Lyon",
        ),
    )
    session.commit()
    session.refresh(opportunity)
    return opportunity


@pytest.fixture(name="application")
def application_fixture(
    session: Session, opportunity: Opportunity, volunteer: User
) -> Application:
    """Pending application of `volunteer` to `opportunity`."""
    application = application_service.submit_application(
        session,
        opportunity.id_opportunity,
        volunteer.id_user,
        "I planted trees with my school last spring.",
    )
    session.commit()
    session.refresh(application)
    return application
