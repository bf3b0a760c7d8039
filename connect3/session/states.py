"""Views of the session and the edit buffers that belong to them."""

from enum import Enum

from pydantic import BaseModel

STRENGTH_INPUT_LIMIT = 1


class View(str, Enum):
    LIST_PEOPLE = "list_people"
    DETAIL = "detail"
    PERSON_FORM = "person_form"
    RELATION_TARGET_SELECT = "relation_target_select"
    RELATION_FORM = "relation_form"
    CONFIRM_DELETE_PERSON = "confirm_delete_person"
    CONFIRM_DELETE_RELATION = "confirm_delete_relation"
    TAG_SELECT = "tag_select"


class FormMode(str, Enum):
    CREATING = "creating"
    EDITING = "editing"


class PersonField(str, Enum):
    NAME = "name"
    NOTES = "notes"


class RelationField(str, Enum):
    STRENGTH = "strength"
    DESCRIPTION = "description"


class PersonBuffer(BaseModel):
    """Uncommitted values of the person form."""

    mode: FormMode = FormMode.CREATING
    focus: PersonField = PersonField.NAME
    name: str = ""
    notes: str = ""
    tags: list[str] = []

    def toggle_focus(self) -> None:
        self.focus = PersonField.NOTES if self.focus is PersonField.NAME else PersonField.NAME

    def set_focused(self, text: str) -> None:
        if self.focus is PersonField.NAME:
            self.name = text
        else:
            self.notes = text


class RelationBuffer(BaseModel):
    """Uncommitted values of the relation form.

    Attributes:
        relation_id: Relation being edited, None while creating
        target_id: Person the new relation points to, None while editing
    """

    mode: FormMode = FormMode.CREATING
    focus: RelationField = RelationField.STRENGTH
    strength: str = ""
    description: str = ""
    relation_id: str | None = None
    target_id: str | None = None

    def toggle_focus(self) -> None:
        if self.focus is RelationField.STRENGTH:
            self.focus = RelationField.DESCRIPTION
        else:
            self.focus = RelationField.STRENGTH

    def set_focused(self, text: str) -> None:
        if self.focus is RelationField.STRENGTH:
            self.strength = text[:STRENGTH_INPUT_LIMIT]
        else:
            self.description = text

    def parsed_strength(self) -> int:
        """The typed strength as a number. Anything unparseable counts as 0."""
        try:
            return int(self.strength.strip())
        except ValueError:
            return 0
