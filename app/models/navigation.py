from sqlmodel import SQLModel


class NavigationItem(SQLModel):
    name: str
    href: str


class ViewTarget(SQLModel):
    """The view a navigation fragment selects."""

    view: str
    opportunity_id: int | None = None
    show_opportunity_form: bool = False
