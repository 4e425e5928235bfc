"""Resolution of hash-fragment navigation tokens into views."""

from app.models.navigation import ViewTarget
from app.exceptions import ValidationError

VIEWS = ("dashboard", "opportunities", "applications", "messages")
CREATE_OPPORTUNITY = "create-opportunity"
OPPORTUNITY_PREFIX = "opportunity/"


def resolve_fragment(fragment: str | None) -> ViewTarget:
    """
    Map a navigation token to the view it selects.

    Accepted tokens: `dashboard`, `opportunities`, `applications`, `messages`,
    `create-opportunity` (the creation form shown over the opportunities view) and
    `opportunity/<id>` (the opportunities view focused on one posting). A leading `#`
    is ignored and an empty token means the dashboard.

    Raises:
        ValidationError: For an unknown token or a non-numeric opportunity id.
    """
    token = (fragment or "").strip().lstrip("#")
    if not token:
        return ViewTarget(view="dashboard")
    if token in VIEWS:
        return ViewTarget(view=token)
    if token == CREATE_OPPORTUNITY:
        return ViewTarget(view="opportunities", show_opportunity_form=True)
    if token.startswith(OPPORTUNITY_PREFIX):
        raw_id = token[len(OPPORTUNITY_PREFIX) :]
        if raw_id.isdigit():
            return ViewTarget(view="opportunities", opportunity_id=int(raw_id))
    raise ValidationError(f"Unknown navigation target '{token}'", field="fragment")
