"""Input events understood by the session controller."""

from enum import Enum

from pydantic import BaseModel


class EventKind(str, Enum):
    NEW = "new"
    SELECT = "select"
    BACK = "back"
    EDIT_PERSON = "edit_person"
    MANAGE_TAGS = "manage_tags"
    DELETE_PERSON = "delete_person"
    NEW_RELATION = "new_relation"
    EDIT_RELATION = "edit_relation"
    DELETE_RELATION = "delete_relation"
    CANCEL = "cancel"
    COMMIT = "commit"
    TOGGLE_FOCUS = "toggle_focus"
    INPUT = "input"
    YES = "yes"
    NO = "no"
    UP = "up"
    DOWN = "down"
    FILTER = "filter"
    REMOVE_TAG = "remove_tag"
    RETRY_SAVE = "retry_save"


class Event(BaseModel):
    """A single user action.

    Attributes:
        kind: What the user asked for
        text: Typed text for INPUT, FILTER and REMOVE_TAG
        index: Zero-based list position for SELECT, overriding the cursor
    """

    kind: EventKind
    text: str = ""
    index: int | None = None
