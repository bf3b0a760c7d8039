"""Translation of typed lines into session events.

Views that show a list take short commands (``n``, ``e``, ``j``...). Views
that edit text take the typed line as input and reserve ``:``-prefixed
words for commands.
"""

from connect3.session.events import Event, EventKind
from connect3.session.states import View

TEXT_VIEWS = {View.PERSON_FORM, View.RELATION_FORM, View.TAG_SELECT}
FORM_VIEWS = {View.PERSON_FORM, View.RELATION_FORM}

LIST_KEYS: dict[str, EventKind] = {
    "": EventKind.SELECT,
    "enter": EventKind.SELECT,
    "j": EventKind.DOWN,
    "down": EventKind.DOWN,
    "k": EventKind.UP,
    "up": EventKind.UP,
}

VIEW_KEYS: dict[View, dict[str, EventKind]] = {
    View.LIST_PEOPLE: {
        "n": EventKind.NEW,
    },
    View.DETAIL: {
        "E": EventKind.EDIT_PERSON,
        "D": EventKind.DELETE_PERSON,
        "t": EventKind.MANAGE_TAGS,
        "ctrl+g": EventKind.MANAGE_TAGS,
        "n": EventKind.NEW_RELATION,
        "e": EventKind.EDIT_RELATION,
        "d": EventKind.DELETE_RELATION,
        "b": EventKind.BACK,
        "esc": EventKind.BACK,
        "backspace": EventKind.BACK,
    },
    View.RELATION_TARGET_SELECT: {
        "b": EventKind.CANCEL,
        "esc": EventKind.CANCEL,
    },
    View.CONFIRM_DELETE_PERSON: {
        "y": EventKind.YES,
        "Y": EventKind.YES,
        "n": EventKind.NO,
        "N": EventKind.NO,
        "esc": EventKind.CANCEL,
    },
    View.CONFIRM_DELETE_RELATION: {
        "y": EventKind.YES,
        "Y": EventKind.YES,
        "n": EventKind.NO,
        "N": EventKind.NO,
        "esc": EventKind.CANCEL,
    },
}

TEXT_COMMANDS: dict[str, EventKind] = {
    "tab": EventKind.TOGGLE_FOCUS,
    "esc": EventKind.CANCEL,
    "tags": EventKind.MANAGE_TAGS,
    "up": EventKind.UP,
    "down": EventKind.DOWN,
    "rm": EventKind.REMOVE_TAG,
}

CONFIRM_VIEWS = {View.CONFIRM_DELETE_PERSON, View.CONFIRM_DELETE_RELATION}


def wants_quit(view: View, line: str) -> bool:
    """Whether the line ends the session instead of producing events."""
    word = line.strip()
    return word == ":q" or (view is View.LIST_PEOPLE and word == "q")


def translate(view: View, line: str) -> list[Event]:
    """Turn one typed line into the events it stands for in the given view.

    Args:
        view: View the line was typed in
        line: The line without its trailing newline

    Returns:
        Events to feed to the session controller, in order. Unknown input
        gives an empty list.
    """
    if line.strip() == ":w":
        return [Event(kind=EventKind.RETRY_SAVE)]
    if view in TEXT_VIEWS:
        return _translate_text(view, line)
    return _translate_list(view, line.strip())


def _translate_text(view: View, line: str) -> list[Event]:
    if line.startswith(":"):
        command, _, argument = line[1:].partition(" ")
        if command == "clear" and view in FORM_VIEWS:
            return [Event(kind=EventKind.INPUT, text="")]
        if command.isdigit() and view is View.TAG_SELECT:
            return [Event(kind=EventKind.SELECT, index=int(command) - 1)]
        kind = TEXT_COMMANDS.get(command)
        if kind is None:
            return []
        return [Event(kind=kind, text=argument)]

    if not line:
        return [Event(kind=EventKind.COMMIT)]
    if view is View.TAG_SELECT:
        return [Event(kind=EventKind.INPUT, text=line)]
    return [Event(kind=EventKind.INPUT, text=line), Event(kind=EventKind.COMMIT)]


def _translate_list(view: View, word: str) -> list[Event]:
    if view is View.LIST_PEOPLE and word.startswith("/"):
        return [Event(kind=EventKind.FILTER, text=word[1:])]
    if word.isdigit() and view not in CONFIRM_VIEWS:
        return [Event(kind=EventKind.SELECT, index=int(word) - 1)]

    kind = VIEW_KEYS.get(view, {}).get(word)
    if kind is None and view not in CONFIRM_VIEWS:
        kind = LIST_KEYS.get(word)
    if kind is None:
        return []
    return [Event(kind=kind)]
