from enum import Enum


class UserRole(str, Enum):
    VOLUNTEER = "volunteer"
    NGO = "ngo"


class OpportunityStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# Statuses an NGO may move a pending application into; both are terminal.
DECISION_STATUSES = frozenset({ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED})
