"""Plain text rendering of the session views."""

from typing import Callable

from connect3.domain import Person, RelationView
from connect3.rendering.base import Renderer
from connect3.rendering.theme import Theme
from connect3.session.screen import Screen
from connect3.session.states import PersonField, RelationField, View

LIST_HELP = "n: New Person | /text: Filter | number or Enter: Open | j/k: Move | q: Quit"
DETAIL_HELP = (
    "E: Edit Person | D: Delete Person | t: Tags | n: New Rel | e: Edit Rel | d: Del Rel | "
    "j/k: Move | b: Back"
)
TARGET_HELP = "number or Enter: Connect | j/k: Move | esc: Back"
PERSON_FORM_HELP = "Enter on Notes to Save | :tab: Switch Field | :tags: Manage Tags | :esc: Cancel"
TAG_HELP = "type to search or create | Enter: Add highlighted (or typed) tag | :esc: Back"
RELATION_FORM_HELP = "Enter on Description to Save | :tab: Switch Field | :esc: Cancel"


class TextRenderer(Renderer):
    """Renders each view as a block of text, styled with the given theme."""

    def __init__(self, theme: Theme | None = None) -> None:
        self.theme = theme or Theme()
        self._views: dict[View, Callable[[Screen], str]] = {
            View.LIST_PEOPLE: self._render_people_list,
            View.RELATION_TARGET_SELECT: self._render_people_list,
            View.DETAIL: self._render_detail,
            View.PERSON_FORM: self._render_person_form,
            View.TAG_SELECT: self._render_tag_select,
            View.RELATION_FORM: self._render_relation_form,
            View.CONFIRM_DELETE_PERSON: self._render_confirm,
            View.CONFIRM_DELETE_RELATION: self._render_confirm,
        }

    def render(self, screen: Screen) -> str:
        body = self._views[screen.view](screen)
        banners = []
        if screen.error:
            banners.append(self.theme.warn_text(screen.error))
        if screen.notice:
            banners.append(self.theme.info_text(screen.notice))
        return "\n\n".join([*banners, body])

    def render_relation(self, view: RelationView) -> str:
        """One relation row, e.g. ``🟢 -> Bob (3/5)``."""
        strength = view.relation.strength
        icon = self.theme.strength_icon(strength)
        return f"{icon} {view.direction.value} {view.other_name} ({strength}/5)"

    def _render_people_list(self, screen: Screen) -> str:
        lines = [self.theme.title_text(screen.title)]
        if screen.people_filter:
            lines.append(self.theme.info_text(f"Filter: {screen.people_filter}"))
        lines.append("")
        if not screen.people:
            lines.append(self.theme.info_text("No people yet."))
        for i, person in enumerate(screen.people):
            lines.extend(self._list_entry(i, screen.people_cursor, person))
        lines.append("")
        help_text = LIST_HELP if screen.view is View.LIST_PEOPLE else TARGET_HELP
        lines.append(self.theme.info_text(help_text))
        return "\n".join(lines)

    def _list_entry(self, index: int, cursor: int, person: Person) -> list[str]:
        marker = self._marker(index == cursor)
        entry = [f"{marker}{index + 1}. {person.name}"]
        if person.notes:
            first_line = person.notes.splitlines()[0]
            entry.append(" " * (len(marker) + 3) + self.theme.info_text(first_line))
        return entry

    def _render_detail(self, screen: Screen) -> str:
        person = screen.person
        if person is None:
            return "Error: No person selected."

        lines = [self.theme.title_text(person.name), self.theme.info_text(person.notes), ""]
        if person.tags:
            lines.extend([self.theme.tags_text(person.tags), ""])
        lines.extend(
            [self.theme.info_text(DETAIL_HELP), "", self.theme.heading_text("Connections:")]
        )

        if not screen.relations:
            lines.append(self.theme.info_text("No connections."))
        for i, view in enumerate(screen.relations):
            marker = self._marker(i == screen.relation_cursor)
            lines.append(f"{marker}{self.render_relation(view)}")
            if view.relation.description:
                lines.append(" " * len(marker) + self.theme.info_text(view.relation.description))
        return "\n".join(lines)

    def _render_person_form(self, screen: Screen) -> str:
        form = screen.person_form
        if form is None:
            return ""
        if form.tags:
            tags = self.theme.tags_text(form.tags)
        else:
            tags = self.theme.info_text("(No tags - :tags to add)")
        return "\n".join(
            [
                self.theme.title_text(screen.title),
                "",
                self._field_label("Name", form.focus is PersonField.NAME),
                form.name,
                "",
                self._field_label("Notes", form.focus is PersonField.NOTES),
                form.notes,
                "",
                "Tags:",
                tags,
                "",
                self.theme.info_text(PERSON_FORM_HELP),
            ]
        )

    def _render_tag_select(self, screen: Screen) -> str:
        lines = [
            self.theme.title_text(screen.title),
            "",
            f"Search: {screen.tag_search}",
            "",
            self.theme.info_text("Existing Tags:"),
        ]
        if not screen.tag_candidates:
            lines.append(self.theme.info_text("(No existing tags found - Type to create new)"))
        for i, tag in enumerate(screen.tag_candidates):
            marker = self._marker(i == screen.tag_cursor)
            lines.append(f"{marker}{i + 1}. {tag}")
        lines.extend(["", self.theme.info_text(TAG_HELP)])
        return "\n".join(lines)

    def _render_relation_form(self, screen: Screen) -> str:
        form = screen.relation_form
        if form is None:
            return ""
        return "\n".join(
            [
                f"Connection with {self.theme.title_text(screen.relation_counterpart)}",
                "",
                self._field_label("Strength (1-5)", form.focus is RelationField.STRENGTH),
                form.strength,
                "",
                self._field_label("Description", form.focus is RelationField.DESCRIPTION),
                form.description,
                "",
                self.theme.info_text(RELATION_FORM_HELP),
            ]
        )

    def _render_confirm(self, screen: Screen) -> str:
        if screen.view is View.CONFIRM_DELETE_PERSON:
            question = "Do you really want to delete this person?"
        else:
            question = "Do you really want to delete this connection?"
        return f"{self.theme.warn_text(screen.title)}\n\n{question}\n\n(y/n)"

    def _marker(self, highlighted: bool) -> str:
        return self.theme.cursor if highlighted else " " * len(self.theme.cursor)

    def _field_label(self, label: str, focused: bool) -> str:
        text = f"{label}:"
        return f"{self.theme.cursor}{text}" if focused else text
