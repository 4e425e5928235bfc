"""Sample data initialization script for non-production environments.

Seeds the database with a small, realistic dataset for development and staging:
- Volunteers and NGOs with profiles
- Opportunities, one of them closed
- Applications in every status
- A short message thread, partly unread

Idempotent: if the first sample account already exists nothing is created.
Refuses to run in production.
"""

from typing import Any
from sqlmodel import Session, select
from loguru import logger

from app.core.config import get_settings
from app.models.enums import ApplicationStatus, OpportunityStatus, UserRole
from app.models.opportunity import OpportunityCreate, OpportunityUpdate
from app.models.user import User, UserCreate
from app.services import application as application_service
from app.services import messaging as messaging_service
from app.services import opportunity as opportunity_service
from app.services import user as user_service
from app.utils.validation import ensure_id

SAMPLE_PASSWORD = "password"

VOLUNTEERS: list[dict[str, Any]] = [
    {
        "email": "alice@example.com",
        "name": "Alice Johnson",
        "skills": ["Teaching", "First aid"],
        "location": "Paris",
        "bio": "Loves nature and helping people.",
    },
    {
        "email": "bob@example.com",
        "name": "Bob Smith",
        "skills": ["Construction", "Driving"],
        "location": "Lyon",
        "bio": "Can fix anything.",
    },
]

NGOS: list[dict[str, Any]] = [
    {
        "email": "contact@greenearth.org",
        "name": "Green Earth",
        "organization_name": "Green Earth NGO",
        "organization_description": "Protecting the planet one step at a time.",
        "website_url": "https://greenearth.example.org",
        "location": "Paris",
    },
    {
        "email": "hello@foodbank.org",
        "name": "City Food Bank",
        "organization_name": "City Food Bank",
        "organization_description": "Fighting food waste and hunger in the city.",
        "location": "Lyon",
    },
]

OPPORTUNITIES: list[dict[str, Any]] = [
    {
        "ngo": "contact@greenearth.org",
        "title": "Tree planting weekend",
        "description": "Help us plant 500 trees along the river banks.",
        "required_skills": ["Gardening", "First aid"],
        "duration": "2 days",
        "location": "Paris",
    },
    {
        "ngo": "contact@greenearth.org",
        "title": "Environmental workshop for kids",
        "description": "Run short recycling workshops in primary schools.",
        "required_skills": ["Teaching"],
        "duration": "3 months",
        "location": "Paris",
    },
    {
        "ngo": "hello@foodbank.org",
        "title": "Delivery drivers",
        "description": "Drive the van that collects unsold food from partner shops.",
        "required_skills": ["Driving"],
        "duration": "Ongoing",
        "location": "Lyon",
    },
    {
        "ngo": "hello@foodbank.org",
        "title": "Warehouse renovation",
        "description": "Shelving and painting before the winter season.",
        "required_skills": ["Construction"],
        "duration": "1 week",
        "location": "Lyon",
        "closed": True,
    },
]


def init_sample_data(session: Session) -> None:
    """
    Initialize sample data for non-production environments.

    Args:
        session: Database session for data creation

    Raises:
        RuntimeError: If attempted to run in production environment
    """
    settings = get_settings()
    if settings.ENVIRONMENT == "production":
        raise RuntimeError(
            "Sample data initialization cannot run in production environment! "
            "This is a safety measure to prevent accidental data seeding in production."
        )

    if session.exec(select(User).where(User.email == VOLUNTEERS[0]["email"])).first():
        logger.info("Sample data already exists. Skipping initialization.")
        return

    logger.info(f"Initializing sample data for {settings.ENVIRONMENT} environment...")

    users: dict[str, User] = {}
    for config in VOLUNTEERS:
        users[config["email"]] = user_service.create_user(
            session,
            UserCreate(role=UserRole.VOLUNTEER, password=SAMPLE_PASSWORD, **config),
        )
    for config in NGOS:
        users[config["email"]] = user_service.create_user(
            session, UserCreate(role=UserRole.NGO, password=SAMPLE_PASSWORD, **config)
        )
    logger.info(f"Created {len(users)} users")

    opportunities = []
    for config in OPPORTUNITIES:
        config = dict(config)
        ngo = users[config.pop("ngo")]
        closed = config.pop("closed", False)
        opportunity = opportunity_service.create_opportunity(
            session, ngo, OpportunityCreate(**config)
        )
        if closed:
            opportunity_service.update_opportunity(
                session,
                ensure_id(opportunity.id_opportunity, "Opportunity"),
                OpportunityUpdate(status=OpportunityStatus.CLOSED),
                ngo,
            )
        opportunities.append(opportunity)
    logger.info(f"Created {len(opportunities)} opportunities")

    alice = users["alice@example.com"]
    bob = users["bob@example.com"]
    green_earth = users["contact@greenearth.org"]
    food_bank = users["hello@foodbank.org"]

    # (volunteer, opportunity index, cover letter, decision)
    applications_config = [
        (alice, 0, "I volunteered at two planting events last year.", None),
        (alice, 1, "I teach primary school and would love to help.", ApplicationStatus.ACCEPTED),
        (bob, 2, "I have a van licence and free mornings.", ApplicationStatus.REJECTED),
        (bob, 0, "Happy to carry saplings all weekend.", None),
    ]
    for volunteer, index, cover_letter, decision in applications_config:
        opportunity = opportunities[index]
        application = application_service.submit_application(
            session,
            ensure_id(opportunity.id_opportunity, "Opportunity"),
            ensure_id(volunteer.id_user, "User"),
            cover_letter,
        )
        if decision is not None:
            application_service.set_application_status(
                session,
                ensure_id(application.id_application, "Application"),
                decision,
                opportunity.ngo_id,
            )
    logger.info(f"Created {len(applications_config)} applications")

    thread = [
        (green_earth, alice, "Hi Alice, thanks for applying to the workshop!"),
        (alice, green_earth, "Thank you! When does it start?"),
        (green_earth, alice, "Next Monday at 9am, see you there."),
        (bob, food_bank, "Hello, is the driver position still open?"),
    ]
    for sender, receiver, content in thread:
        messaging_service.send_message(
            session,
            ensure_id(sender.id_user, "User"),
            ensure_id(receiver.id_user, "User"),
            content,
        )
    logger.info(f"Created {len(thread)} messages")

    session.commit()
    logger.info("Sample data initialization complete")
