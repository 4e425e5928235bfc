"""Table models, imported together so SQLModel.metadata sees every table."""

from app.models.user import User
from app.models.opportunity import Opportunity
from app.models.application import Application
from app.models.message import Message

__all__ = ["User", "Opportunity", "Application", "Message"]
