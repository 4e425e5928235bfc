from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import get_settings, parse_comma_separated_origins
from app.core.error_handlers import register_exception_handlers
from app.core.telemetry import setup_telemetry
from app.database.database import create_db_and_tables
from app.routers import (
    application,
    auth,
    dashboard,
    message,
    navigation,
    opportunity,
    user,
)
from app.utils.logger import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Perform application startup tasks before the FastAPI app begins serving requests.

    Runs logging setup, creates the database tables and initializes telemetry.
    """
    setup_logging()
    create_db_and_tables()
    setup_telemetry(app)
    yield


app = FastAPI(
    title="Volunteer Connect API",
    description="Volunteers browse and apply to opportunities, NGOs post them and review applicants, both sides message each other",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        str(origin).rstrip("/")
        for origin in parse_comma_separated_origins(get_settings().BACKEND_CORS_ORIGINS)
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health", include_in_schema=False)
def health_check():
    """
    Provide the application's liveness state for health checks.

    Returns:
        dict: A mapping with key "status" and value "ok" indicating the service is healthy.
    """
    return {"status": "ok"}


app.include_router(auth.router)
app.include_router(user.router)
app.include_router(opportunity.router)
app.include_router(application.router)
app.include_router(message.router)
app.include_router(dashboard.router)
app.include_router(navigation.router)
