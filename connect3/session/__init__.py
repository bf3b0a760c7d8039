from connect3.session.controller import SessionController
from connect3.session.events import Event, EventKind
from connect3.session.screen import Screen
from connect3.session.states import (
    FormMode,
    PersonBuffer,
    PersonField,
    RelationBuffer,
    RelationField,
    View,
)

__all__ = [
    "Event",
    "EventKind",
    "FormMode",
    "PersonBuffer",
    "PersonField",
    "RelationBuffer",
    "RelationField",
    "Screen",
    "SessionController",
    "View",
]
