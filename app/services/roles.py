"""
Role strategies for volunteer and NGO accounts.

Every decision that depends on the caller's role lives on one of these classes:
which opportunities and applications the caller can see, which actions they may
take, which navigation entries they get and how their dashboard is composed.
The strategy is chosen once per request from the authenticated user
(see `strategy_for` and `app.core.dependencies.get_role_strategy`).
"""

from sqlalchemy.orm import aliased
from sqlmodel import Session, select

from app.models.application import Application
from app.models.enums import OpportunityStatus, UserRole
from app.models.navigation import NavigationItem, ViewTarget
from app.models.opportunity import Opportunity
from app.models.user import User
from app.utils.validation import ensure_id

VolunteerUser = aliased(User, name="volunteer_user")
NGOUser = aliased(User, name="ngo_user")

NAVIGATION = (
    NavigationItem(name="Dashboard", href="#dashboard"),
    NavigationItem(name="Opportunities", href="#opportunities"),
    NavigationItem(name="Applications", href="#applications"),
    NavigationItem(name="Messages", href="#messages"),
)


def select_opportunity_rows():
    """Opportunities paired with their owning NGO, newest first."""
    return (
        select(Opportunity, NGOUser)
        .outerjoin(NGOUser, Opportunity.ngo_id == NGOUser.id_user)  # type: ignore
        .order_by(
            Opportunity.created_at.desc(),  # type: ignore
            Opportunity.id_opportunity.desc(),  # type: ignore
        )
    )


def select_application_rows(*, require_opportunity: bool):
    """
    Applications joined with their opportunity, volunteer and the opportunity's NGO.

    Parameters:
        require_opportunity: Inner-join the opportunity when True, so applications whose
            opportunity is missing drop out; outer-join otherwise.

    Returns:
        A select over (Application, Opportunity, volunteer User, NGO User) ordered newest first.
    """
    statement = select(Application, Opportunity, VolunteerUser, NGOUser)
    opportunity_on = Application.opportunity_id == Opportunity.id_opportunity
    if require_opportunity:
        statement = statement.join(Opportunity, opportunity_on)  # type: ignore
    else:
        statement = statement.outerjoin(Opportunity, opportunity_on)  # type: ignore
    return (
        statement.outerjoin(
            VolunteerUser,
            Application.volunteer_id == VolunteerUser.id_user,  # type: ignore
        )
        .outerjoin(NGOUser, Opportunity.ngo_id == NGOUser.id_user)  # type: ignore
        .order_by(
            Application.created_at.desc(),  # type: ignore
            Application.id_application.desc(),  # type: ignore
        )
    )


class RoleStrategy:
    """Behaviour shared by both roles; subclasses fill in the role-specific parts."""

    role: UserRole
    can_apply: bool = False
    can_post_opportunities: bool = False
    navigation: tuple[NavigationItem, ...] = NAVIGATION

    def __init__(self, user: User):
        self.user = user

    @property
    def user_id(self) -> int:
        return ensure_id(self.user.id_user, "User")

    def opportunities_statement(self):
        raise NotImplementedError

    def applications_statement(self):
        raise NotImplementedError

    def build_dashboard(self, session: Session):
        raise NotImplementedError

    def allows_view(self, target: ViewTarget) -> bool:
        return True

    def owns(self, opportunity: Opportunity | None) -> bool:
        return False


class VolunteerStrategy(RoleStrategy):
    role = UserRole.VOLUNTEER
    can_apply = True

    def opportunities_statement(self):
        # Volunteers browse every open posting
        return select_opportunity_rows().where(
            Opportunity.status == OpportunityStatus.OPEN
        )

    def applications_statement(self):
        return select_application_rows(require_opportunity=False).where(
            Application.volunteer_id == self.user_id
        )

    def build_dashboard(self, session: Session):
        from app.services import dashboard as dashboard_service

        return dashboard_service.build_volunteer_dashboard(session, self)

    def allows_view(self, target: ViewTarget) -> bool:
        return not target.show_opportunity_form


class NGOStrategy(RoleStrategy):
    role = UserRole.NGO
    can_post_opportunities = True

    def opportunities_statement(self):
        # NGOs manage their own postings, open or closed
        return select_opportunity_rows().where(Opportunity.ngo_id == self.user_id)

    def applications_statement(self):
        # Inner join: applications without an opportunity never reach an NGO
        return select_application_rows(require_opportunity=True).where(
            Opportunity.ngo_id == self.user_id
        )

    def build_dashboard(self, session: Session):
        from app.services import dashboard as dashboard_service

        return dashboard_service.build_ngo_dashboard(session, self)

    def owns(self, opportunity: Opportunity | None) -> bool:
        return opportunity is not None and opportunity.ngo_id == self.user_id


_STRATEGIES: dict[UserRole, type[RoleStrategy]] = {
    UserRole.VOLUNTEER: VolunteerStrategy,
    UserRole.NGO: NGOStrategy,
}


def strategy_for(user: User) -> RoleStrategy:
    """
    Select the strategy matching the user's role tag.

    Parameters:
        user: The authenticated user.

    Returns:
        RoleStrategy: A strategy bound to `user`.
    """
    return _STRATEGIES[UserRole(user.role)](user)
