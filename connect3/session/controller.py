"""State machine that turns user events into repository changes and view switches."""

from typing import Callable

from loguru import logger

from connect3.domain import Person, RelationView
from connect3.migrations.migrator import Migrator
from connect3.repository import PersistenceError, Repository
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
from connect3.tags import MAX_TAG_LENGTH, add_tag, candidate_pool, filter_tags, remove_tag

APP_TITLE = "Connect3"
CORRUPT_STORE_NOTICE = "The store file could not be read. Starting empty."
CORRUPT_COPY_NOTICE = "A copy of the unreadable file was kept at {path}."


def _clamp(cursor: int, length: int) -> int:
    return max(0, min(cursor, length - 1))


class SessionController:
    """Dispatches every event to the handler of the current view.

    Selections are kept as identifiers and looked up in the repository on
    every access. Edit buffers live here until a form is committed or
    cancelled.
    """

    def __init__(self, repository: Repository) -> None:
        self.repository = repository
        self.view = View.LIST_PEOPLE

        self.selected_person_id: str | None = None
        self.selected_relation_id: str | None = None

        self.person_form = PersonBuffer()
        self.relation_form = RelationBuffer()
        self.tag_search = ""

        self.people_filter = ""
        self.people_cursor = 0
        self.relation_cursor = 0
        self.target_cursor = 0
        self.tag_cursor = 0

        self.notice = ""
        self.error = ""

        self._handlers: dict[View, Callable[[Event], None]] = {
            View.LIST_PEOPLE: self._handle_list_people,
            View.DETAIL: self._handle_detail,
            View.PERSON_FORM: self._handle_person_form,
            View.TAG_SELECT: self._handle_tag_select,
            View.RELATION_TARGET_SELECT: self._handle_relation_target_select,
            View.RELATION_FORM: self._handle_relation_form,
            View.CONFIRM_DELETE_PERSON: self._handle_confirm_delete_person,
            View.CONFIRM_DELETE_RELATION: self._handle_confirm_delete_relation,
        }

    @classmethod
    def boot(cls, repository: Repository, migrator: Migrator) -> "SessionController":
        """Bring the store up to date, load it and start at the people list.

        Raises:
            MigrationError: The store could not be migrated
        """
        migrator.run(repository.path)
        repository.load()
        controller = cls(repository)
        if repository.recovered_from_corrupt:
            controller.notice = CORRUPT_STORE_NOTICE
            if repository.corrupt_backup_path is not None:
                copy_notice = CORRUPT_COPY_NOTICE.format(path=repository.corrupt_backup_path)
                controller.notice = f"{CORRUPT_STORE_NOTICE} {copy_notice}"
        return controller

    def handle(self, event: Event) -> View:
        """Handle one event completely and return the view that follows."""
        self.notice = ""
        if event.kind is EventKind.RETRY_SAVE:
            self._retry_save()
        else:
            self._handlers[self.view](event)
        return self.view

    # --- Lookups ---

    @property
    def selected_person(self) -> Person | None:
        if self.selected_person_id is None:
            return None
        return self.repository.get_person(self.selected_person_id)

    @property
    def visible_people(self) -> list[Person]:
        term = self.people_filter.lower()
        return [p for p in self.repository.people if term in p.name.lower()]

    @property
    def relation_views(self) -> list[RelationView]:
        if self.selected_person_id is None:
            return []
        return self.repository.relations_for(self.selected_person_id)

    @property
    def tag_candidates(self) -> list[str]:
        pool = candidate_pool(self.repository.people, self.person_form.tags)
        return filter_tags(pool, self.tag_search)

    # --- Handlers ---

    def _handle_list_people(self, event: Event) -> None:
        people = self.visible_people
        kind = event.kind
        if kind is EventKind.NEW:
            self.person_form = PersonBuffer(mode=FormMode.CREATING)
            self.view = View.PERSON_FORM
        elif kind is EventKind.SELECT:
            if event.index is not None:
                self.people_cursor = event.index
            if not people or not 0 <= self.people_cursor < len(people):
                self.people_cursor = _clamp(self.people_cursor, len(people))
                return
            self.selected_person_id = people[self.people_cursor].id
            self.relation_cursor = 0
            self.view = View.DETAIL
        elif kind is EventKind.UP:
            self.people_cursor = _clamp(self.people_cursor - 1, len(people))
        elif kind is EventKind.DOWN:
            self.people_cursor = _clamp(self.people_cursor + 1, len(people))
        elif kind is EventKind.FILTER:
            self.people_filter = event.text.strip()
            self.people_cursor = 0

    def _handle_detail(self, event: Event) -> None:
        person = self.selected_person
        if person is None:
            self._back_to_list()
            return

        relations = self.relation_views
        kind = event.kind
        if kind in (EventKind.BACK, EventKind.CANCEL):
            self._back_to_list()
        elif kind is EventKind.EDIT_PERSON:
            self.person_form = self._seed_person_form(person)
            self.view = View.PERSON_FORM
        elif kind is EventKind.MANAGE_TAGS:
            self.person_form = self._seed_person_form(person)
            self._open_tag_select()
        elif kind is EventKind.DELETE_PERSON:
            self.view = View.CONFIRM_DELETE_PERSON
        elif kind is EventKind.NEW_RELATION:
            self.target_cursor = 0
            self.view = View.RELATION_TARGET_SELECT
        elif kind is EventKind.EDIT_RELATION:
            highlighted = self._highlighted_relation(relations)
            if highlighted is None:
                return
            relation = highlighted.relation
            self.selected_relation_id = relation.id
            self.relation_form = RelationBuffer(
                mode=FormMode.EDITING,
                strength=str(relation.strength),
                description=relation.description,
                relation_id=relation.id,
            )
            self.view = View.RELATION_FORM
        elif kind is EventKind.DELETE_RELATION:
            highlighted = self._highlighted_relation(relations)
            if highlighted is None:
                return
            self.selected_relation_id = highlighted.relation.id
            self.view = View.CONFIRM_DELETE_RELATION
        elif kind is EventKind.UP:
            self.relation_cursor = _clamp(self.relation_cursor - 1, len(relations))
        elif kind is EventKind.DOWN:
            self.relation_cursor = _clamp(self.relation_cursor + 1, len(relations))
        elif kind is EventKind.SELECT and event.index is not None:
            self.relation_cursor = _clamp(event.index, len(relations))

    def _handle_person_form(self, event: Event) -> None:
        form = self.person_form
        kind = event.kind
        if kind is EventKind.CANCEL:
            self.person_form = PersonBuffer()
            self.view = self._person_form_exit(form)
        elif kind is EventKind.MANAGE_TAGS:
            self._open_tag_select()
        elif kind is EventKind.TOGGLE_FOCUS:
            form.toggle_focus()
        elif kind is EventKind.INPUT:
            form.set_focused(event.text)
        elif kind is EventKind.REMOVE_TAG:
            form.tags = remove_tag(form.tags, event.text)
        elif kind is EventKind.COMMIT:
            if form.focus is PersonField.NAME:
                form.focus = PersonField.NOTES
                return
            self._commit_person_form(form)

    def _handle_tag_select(self, event: Event) -> None:
        kind = event.kind
        if kind is EventKind.CANCEL:
            self._return_to_person_form()
        elif kind is EventKind.INPUT:
            self.tag_search = event.text[:MAX_TAG_LENGTH]
            self.tag_cursor = 0
        elif kind is EventKind.UP:
            self.tag_cursor = _clamp(self.tag_cursor - 1, len(self.tag_candidates))
        elif kind is EventKind.DOWN:
            self.tag_cursor = _clamp(self.tag_cursor + 1, len(self.tag_candidates))
        elif kind in (EventKind.SELECT, EventKind.COMMIT):
            candidates = self.tag_candidates
            if event.index is not None:
                self.tag_cursor = _clamp(event.index, len(candidates))
            if candidates:
                chosen = candidates[_clamp(self.tag_cursor, len(candidates))]
            else:
                chosen = self.tag_search
            self.person_form.tags = add_tag(self.person_form.tags, chosen)
            self._return_to_person_form()

    def _handle_relation_target_select(self, event: Event) -> None:
        people = self.repository.people
        kind = event.kind
        if kind in (EventKind.CANCEL, EventKind.BACK):
            self.view = View.DETAIL
        elif kind is EventKind.UP:
            self.target_cursor = _clamp(self.target_cursor - 1, len(people))
        elif kind is EventKind.DOWN:
            self.target_cursor = _clamp(self.target_cursor + 1, len(people))
        elif kind is EventKind.SELECT:
            if event.index is not None:
                self.target_cursor = event.index
            if not 0 <= self.target_cursor < len(people):
                self.target_cursor = _clamp(self.target_cursor, len(people))
                return
            target = people[self.target_cursor]
            if target.id == self.selected_person_id:
                self.notice = "A person cannot be connected to themselves."
                return
            self.relation_form = RelationBuffer(mode=FormMode.CREATING, target_id=target.id)
            self.view = View.RELATION_FORM

    def _handle_relation_form(self, event: Event) -> None:
        form = self.relation_form
        kind = event.kind
        if kind is EventKind.CANCEL:
            self.relation_form = RelationBuffer()
            self.view = View.DETAIL
        elif kind is EventKind.TOGGLE_FOCUS:
            form.toggle_focus()
        elif kind is EventKind.INPUT:
            form.set_focused(event.text)
        elif kind is EventKind.COMMIT:
            if form.focus is RelationField.STRENGTH:
                form.focus = RelationField.DESCRIPTION
                return
            self._commit_relation_form(form)

    def _handle_confirm_delete_person(self, event: Event) -> None:
        kind = event.kind
        if kind is EventKind.YES:
            if self.selected_person_id is not None:
                person_id = self.selected_person_id
                self._apply(lambda: self.repository.delete_person(person_id))
            self._back_to_list()
            self.people_cursor = _clamp(self.people_cursor, len(self.visible_people))
        elif kind in (EventKind.NO, EventKind.CANCEL):
            self.view = View.DETAIL

    def _handle_confirm_delete_relation(self, event: Event) -> None:
        kind = event.kind
        if kind is EventKind.YES:
            if self.selected_relation_id is not None:
                relation_id = self.selected_relation_id
                self._apply(lambda: self.repository.delete_relation(relation_id))
            self.selected_relation_id = None
            self.relation_cursor = 0
            self.view = View.DETAIL
        elif kind in (EventKind.NO, EventKind.CANCEL):
            self.view = View.DETAIL

    # --- Commits ---

    def _commit_person_form(self, form: PersonBuffer) -> None:
        if form.mode is FormMode.EDITING and self.selected_person_id is not None:
            person_id = self.selected_person_id
            self._apply(
                lambda: self.repository.update_person(person_id, form.name, form.notes, form.tags)
            )
        else:
            self._apply(lambda: self.repository.create_person(form.name, form.notes, form.tags))
        self.person_form = PersonBuffer()
        self.view = self._person_form_exit(form)

    def _commit_relation_form(self, form: RelationBuffer) -> None:
        strength = form.parsed_strength()
        if form.mode is FormMode.EDITING and form.relation_id is not None:
            relation_id = form.relation_id
            self._apply(
                lambda: self.repository.update_relation(relation_id, strength, form.description)
            )
        elif self.selected_person_id is not None and form.target_id is not None:
            from_id, to_id = self.selected_person_id, form.target_id
            self._apply(
                lambda: self.repository.create_relation(
                    from_id, to_id, strength, form.description
                )
            )
        self.relation_form = RelationBuffer()
        self.selected_relation_id = None
        self.relation_cursor = 0
        self.view = View.DETAIL

    def _apply(self, mutation: Callable[[], object]) -> None:
        """Run a repository mutation, turning a failed save into a visible error."""
        try:
            mutation()
        except PersistenceError as e:
            self.error = f"Could not save changes ({e}). Use retry to try again."
        else:
            self.error = ""

    def _retry_save(self) -> None:
        if not self.error:
            return
        try:
            self.repository.save()
        except PersistenceError as e:
            self.error = f"Could not save changes ({e}). Use retry to try again."
            return
        logger.info("Retried save succeeded")
        self.error = ""
        self.notice = "Saved."

    # --- Helpers ---

    def _back_to_list(self) -> None:
        self.selected_person_id = None
        self.selected_relation_id = None
        self.view = View.LIST_PEOPLE

    def _seed_person_form(self, person: Person) -> PersonBuffer:
        return PersonBuffer(
            mode=FormMode.EDITING,
            name=person.name,
            notes=person.notes,
            tags=list(person.tags),
        )

    def _open_tag_select(self) -> None:
        self.tag_search = ""
        self.tag_cursor = 0
        self.view = View.TAG_SELECT

    def _return_to_person_form(self) -> None:
        self.person_form.focus = PersonField.NAME
        self.view = View.PERSON_FORM

    def _person_form_exit(self, form: PersonBuffer) -> View:
        return View.DETAIL if form.mode is FormMode.EDITING else View.LIST_PEOPLE

    def _highlighted_relation(self, relations: list[RelationView]) -> RelationView | None:
        if not relations:
            return None
        return relations[_clamp(self.relation_cursor, len(relations))]

    # --- View model ---

    def screen(self) -> Screen:
        """Snapshot of the current view for a renderer."""
        person = self.selected_person
        screen = Screen(
            view=self.view,
            title=APP_TITLE,
            notice=self.notice,
            error=self.error,
            person=person,
        )

        view = self.view
        if view is View.LIST_PEOPLE:
            screen.people = self.visible_people
            screen.people_cursor = self.people_cursor
            screen.people_filter = self.people_filter
        elif view is View.DETAIL:
            screen.relations = self.relation_views
            screen.relation_cursor = self.relation_cursor
        elif view is View.PERSON_FORM:
            editing = self.person_form.mode is FormMode.EDITING
            screen.title = "Edit Person" if editing else "Create New Person"
            screen.person_form = self.person_form.model_copy(deep=True)
        elif view is View.TAG_SELECT:
            screen.title = "Manage Tags"
            screen.person_form = self.person_form.model_copy(deep=True)
            screen.tag_search = self.tag_search
            screen.tag_candidates = self.tag_candidates
            screen.tag_cursor = self.tag_cursor
        elif view is View.RELATION_TARGET_SELECT:
            name = person.name if person else ""
            screen.title = f"Select person to connect with {name}"
            screen.people = self.repository.people
            screen.people_cursor = self.target_cursor
        elif view is View.RELATION_FORM:
            screen.title = "Connection"
            screen.relation_form = self.relation_form.model_copy(deep=True)
            screen.relation_counterpart = self._relation_counterpart()
        elif view is View.CONFIRM_DELETE_PERSON:
            screen.title = "WARNING"
        elif view is View.CONFIRM_DELETE_RELATION:
            screen.title = "DELETE CONNECTION"
        return screen

    def _relation_counterpart(self) -> str:
        form = self.relation_form
        if form.mode is FormMode.CREATING:
            return self.repository.person_name(form.target_id or "")
        relation = self.repository.get_relation(form.relation_id or "")
        if relation is None:
            return self.repository.person_name("")
        other_id = relation.to_id
        if other_id == self.selected_person_id:
            other_id = relation.from_id
        return self.repository.person_name(other_id)
