"""Read-only snapshot of the session handed to a renderer."""

from pydantic import BaseModel

from connect3.domain import Person, RelationView
from connect3.session.states import PersonBuffer, RelationBuffer, View


class Screen(BaseModel):
    """Everything a renderer needs to draw the current view."""

    view: View
    title: str = ""
    people: list[Person] = []
    people_cursor: int = 0
    people_filter: str = ""
    person: Person | None = None
    relations: list[RelationView] = []
    relation_cursor: int = 0
    person_form: PersonBuffer | None = None
    relation_form: RelationBuffer | None = None
    relation_counterpart: str = ""
    tag_search: str = ""
    tag_candidates: list[str] = []
    tag_cursor: int = 0
    notice: str = ""
    error: str = ""
