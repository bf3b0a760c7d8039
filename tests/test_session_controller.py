"""Tests for the session state machine."""

from typing import Any, Callable

import pytest

from connect3.domain import Person
from connect3.migrations.migrator import MigrationError, Migrator
from connect3.repository import Repository
from connect3.session import (
    Event,
    EventKind,
    FormMode,
    PersonField,
    RelationField,
    SessionController,
    View,
)
from tests.fakes import DB_PATH, FakeStoreBackend


def send(
    controller: SessionController, kind: EventKind, text: str = "", index: int | None = None
) -> View:
    return controller.handle(Event(kind=kind, text=text, index=index))


def type_and_commit(controller: SessionController, text: str) -> View:
    send(controller, EventKind.INPUT, text)
    return send(controller, EventKind.COMMIT)


def open_person(controller: SessionController, person: Person) -> None:
    index = [p.id for p in controller.visible_people].index(person.id)
    assert send(controller, EventKind.SELECT, index=index) is View.DETAIL


# --- Booting ---


def test_boot_migrates_then_loads(
    store_backend: FakeStoreBackend, write_document: Callable[[dict[str, Any]], None]
) -> None:
    write_document(
        {
            "version": "0.0.1",
            "people": [{"id": "p1", "name": "Alice", "notes": ""}],
            "relations": [{"from_id": "p1", "to_id": "p1", "strength": 2, "description": ""}],
        }
    )
    repository = Repository(store_backend, DB_PATH)

    controller = SessionController.boot(repository, Migrator(store_backend))

    assert controller.view is View.LIST_PEOPLE
    assert repository.document.version == "1.0.0"
    assert [p.tags for p in repository.people] == [[]]
    assert all(r.id for r in repository.relations)


def test_boot_fails_on_broken_migration(
    store_backend: FakeStoreBackend, write_document: Callable[[dict[str, Any]], None]
) -> None:
    write_document({"version": "42", "people": [], "relations": []})

    with pytest.raises(MigrationError):
        SessionController.boot(Repository(store_backend, DB_PATH), Migrator(store_backend))


def test_boot_reports_corrupt_store(store_backend: FakeStoreBackend) -> None:
    store_backend.files[DB_PATH] = b"garbage"

    controller = SessionController.boot(
        Repository(store_backend, DB_PATH), Migrator(store_backend)
    )

    assert controller.screen().notice
    send(controller, EventKind.DOWN)
    assert controller.screen().notice == "", "The notice is shown once"


def test_boot_names_the_kept_copy(store_backend: FakeStoreBackend) -> None:
    store_backend.files[DB_PATH] = b"garbage"

    controller = SessionController.boot(
        Repository(store_backend, DB_PATH), Migrator(store_backend)
    )

    assert f"{DB_PATH}.corrupt" in controller.notice


def test_boot_notice_without_copy(store_backend: FakeStoreBackend) -> None:
    store_backend.files[DB_PATH] = b"garbage"
    store_backend.fail_writes = True

    controller = SessionController.boot(
        Repository(store_backend, DB_PATH), Migrator(store_backend)
    )

    assert controller.notice
    assert "copy" not in controller.notice


def test_boot_accepts_null_lists(
    store_backend: FakeStoreBackend, write_document: Callable[[dict[str, Any]], None]
) -> None:
    write_document({"version": "0.0.1", "people": None, "relations": None})
    repository = Repository(store_backend, DB_PATH)

    controller = SessionController.boot(repository, Migrator(store_backend))

    assert controller.notice == ""
    assert repository.document.version == "1.0.0"
    assert repository.people == []


# --- People list ---


def test_create_person_flow(controller: SessionController, repository: Repository) -> None:
    """Test that the two-stage commit advances focus before saving."""
    assert send(controller, EventKind.NEW) is View.PERSON_FORM
    assert controller.person_form.mode is FormMode.CREATING
    assert controller.person_form.focus is PersonField.NAME

    assert type_and_commit(controller, "Alice") is View.PERSON_FORM
    assert controller.person_form.focus is PersonField.NOTES
    assert repository.people == [], "Committing on the name field must not save"

    assert type_and_commit(controller, "Likes tea") is View.LIST_PEOPLE
    [person] = repository.people
    assert (person.name, person.notes, person.tags) == ("Alice", "Likes tea", [])


def test_cancel_create_discards_buffer(
    controller: SessionController, repository: Repository
) -> None:
    send(controller, EventKind.NEW)
    send(controller, EventKind.INPUT, "Alice")

    assert send(controller, EventKind.CANCEL) is View.LIST_PEOPLE
    assert repository.people == []
    assert controller.person_form.name == ""


def test_select_opens_detail(
    controller: SessionController, alice: Person, bob: Person
) -> None:
    send(controller, EventKind.DOWN)

    assert send(controller, EventKind.SELECT) is View.DETAIL
    assert controller.selected_person_id == bob.id


def test_select_on_empty_list_stays(controller: SessionController) -> None:
    assert send(controller, EventKind.SELECT) is View.LIST_PEOPLE


def test_select_out_of_range_stays(controller: SessionController, alice: Person) -> None:
    assert send(controller, EventKind.SELECT, index=5) is View.LIST_PEOPLE


def test_cursor_is_clamped(controller: SessionController, alice: Person, bob: Person) -> None:
    send(controller, EventKind.UP)
    assert controller.people_cursor == 0

    for _ in range(5):
        send(controller, EventKind.DOWN)
    assert controller.people_cursor == 1


def test_filter_people_by_name(
    controller: SessionController, alice: Person, bob: Person
) -> None:
    send(controller, EventKind.FILTER, "BO")

    assert [p.name for p in controller.visible_people] == ["Bob"]
    assert send(controller, EventKind.SELECT) is View.DETAIL
    assert controller.selected_person_id == bob.id

    send(controller, EventKind.BACK)
    send(controller, EventKind.FILTER, "")
    assert len(controller.visible_people) == 2


# --- Detail ---


def test_back_clears_selection(controller: SessionController, alice: Person) -> None:
    open_person(controller, alice)

    assert send(controller, EventKind.BACK) is View.LIST_PEOPLE
    assert controller.selected_person_id is None


def test_edit_person_flow(
    controller: SessionController, repository: Repository, alice: Person
) -> None:
    open_person(controller, alice)

    assert send(controller, EventKind.EDIT_PERSON) is View.PERSON_FORM
    assert controller.person_form.mode is FormMode.EDITING
    assert controller.person_form.name == "Alice"
    assert controller.person_form.tags == ["climbing", "work"]

    type_and_commit(controller, "Alice Smith")
    assert send(controller, EventKind.COMMIT) is View.DETAIL

    person = repository.get_person(alice.id)
    assert person is not None
    assert person.name == "Alice Smith"
    assert person.notes == "Met at the climbing gym"
    assert controller.screen().person == person


def test_cancel_edit_returns_to_detail(
    controller: SessionController, repository: Repository, alice: Person
) -> None:
    open_person(controller, alice)
    send(controller, EventKind.EDIT_PERSON)
    send(controller, EventKind.INPUT, "Someone else")

    assert send(controller, EventKind.CANCEL) is View.DETAIL
    assert repository.get_person(alice.id) == alice


def test_toggle_focus_cycles_fields(controller: SessionController) -> None:
    send(controller, EventKind.NEW)

    send(controller, EventKind.TOGGLE_FOCUS)
    assert controller.person_form.focus is PersonField.NOTES
    send(controller, EventKind.TOGGLE_FOCUS)
    assert controller.person_form.focus is PersonField.NAME


def test_commit_from_notes_after_toggle_saves(
    controller: SessionController, repository: Repository
) -> None:
    send(controller, EventKind.NEW)
    send(controller, EventKind.INPUT, "Alice")
    send(controller, EventKind.TOGGLE_FOCUS)

    assert send(controller, EventKind.COMMIT) is View.LIST_PEOPLE
    assert [p.name for p in repository.people] == ["Alice"]


# --- Tags ---


def test_manage_tags_from_detail_adds_highlighted_tag(
    controller: SessionController, repository: Repository, alice: Person, bob: Person
) -> None:
    """Test that the highlighted entry wins over the typed search text."""
    open_person(controller, alice)
    assert send(controller, EventKind.MANAGE_TAGS) is View.TAG_SELECT
    assert controller.tag_candidates == ["climbing", "family", "work"]

    send(controller, EventKind.INPUT, "fam")
    assert controller.tag_candidates == ["family"]
    assert send(controller, EventKind.COMMIT) is View.PERSON_FORM
    assert controller.person_form.tags == ["climbing", "work", "family"]
    assert controller.person_form.mode is FormMode.EDITING

    send(controller, EventKind.COMMIT)
    assert send(controller, EventKind.COMMIT) is View.DETAIL
    person = repository.get_person(alice.id)
    assert person is not None
    assert person.tags == ["climbing", "work", "family"]


def test_typed_tag_is_used_when_nothing_matches(controller: SessionController) -> None:
    send(controller, EventKind.NEW)
    send(controller, EventKind.MANAGE_TAGS)

    send(controller, EventKind.INPUT, "  neighbours ")
    assert controller.tag_candidates == []
    send(controller, EventKind.COMMIT)

    assert controller.person_form.tags == ["neighbours"]


def test_pending_tag_is_offered_again(controller: SessionController) -> None:
    send(controller, EventKind.NEW)
    send(controller, EventKind.MANAGE_TAGS)
    send(controller, EventKind.INPUT, "friend")
    send(controller, EventKind.COMMIT)

    send(controller, EventKind.MANAGE_TAGS)
    assert controller.tag_candidates == ["friend"]
    send(controller, EventKind.COMMIT)

    assert controller.person_form.tags == ["friend"], "Duplicates are not added twice"


def test_tag_cursor_picks_entry(
    controller: SessionController, alice: Person, bob: Person
) -> None:
    send(controller, EventKind.NEW)
    send(controller, EventKind.MANAGE_TAGS)
    send(controller, EventKind.DOWN)
    send(controller, EventKind.COMMIT)

    assert controller.person_form.tags == ["family"]

    send(controller, EventKind.MANAGE_TAGS)
    send(controller, EventKind.SELECT, index=2)
    assert controller.person_form.tags == ["family", "work"]


def test_cancel_tag_select_keeps_buffer(controller: SessionController) -> None:
    send(controller, EventKind.NEW)
    send(controller, EventKind.INPUT, "Alice")
    send(controller, EventKind.MANAGE_TAGS)

    assert send(controller, EventKind.CANCEL) is View.PERSON_FORM
    assert controller.person_form.name == "Alice"
    assert controller.person_form.focus is PersonField.NAME


def test_tag_search_is_limited(controller: SessionController) -> None:
    send(controller, EventKind.NEW)
    send(controller, EventKind.MANAGE_TAGS)
    send(controller, EventKind.INPUT, "x" * 50)

    assert len(controller.tag_search) == 30


def test_remove_tag_from_form(controller: SessionController, alice: Person) -> None:
    open_person(controller, alice)
    send(controller, EventKind.EDIT_PERSON)

    send(controller, EventKind.REMOVE_TAG, "work")

    assert controller.person_form.tags == ["climbing"]


def test_create_person_with_tags(
    controller: SessionController, repository: Repository
) -> None:
    send(controller, EventKind.NEW)
    send(controller, EventKind.INPUT, "Dana")
    send(controller, EventKind.MANAGE_TAGS)
    send(controller, EventKind.INPUT, "book club")
    send(controller, EventKind.COMMIT)
    send(controller, EventKind.COMMIT)

    assert send(controller, EventKind.COMMIT) is View.LIST_PEOPLE
    [person] = repository.people
    assert person.name == "Dana"
    assert person.tags == ["book club"]


# --- Relations ---


def test_create_relation_flow(
    controller: SessionController, repository: Repository, alice: Person, bob: Person
) -> None:
    open_person(controller, alice)
    assert send(controller, EventKind.NEW_RELATION) is View.RELATION_TARGET_SELECT

    assert send(controller, EventKind.SELECT, index=1) is View.RELATION_FORM
    assert controller.relation_form.focus is RelationField.STRENGTH
    assert controller.screen().relation_counterpart == "Bob"

    assert type_and_commit(controller, "9") is View.RELATION_FORM
    assert controller.relation_form.focus is RelationField.DESCRIPTION
    assert type_and_commit(controller, "friend") is View.DETAIL

    [relation] = repository.relations
    assert (relation.from_id, relation.to_id) == (alice.id, bob.id)
    assert relation.strength == 5
    assert relation.description == "friend"


def test_self_target_is_rejected(controller: SessionController, alice: Person, bob: Person) -> None:
    open_person(controller, alice)
    send(controller, EventKind.NEW_RELATION)

    assert send(controller, EventKind.SELECT, index=0) is View.RELATION_TARGET_SELECT
    assert controller.notice


def test_cancel_target_select(controller: SessionController, alice: Person) -> None:
    open_person(controller, alice)
    send(controller, EventKind.NEW_RELATION)

    assert send(controller, EventKind.CANCEL) is View.DETAIL


def test_unparseable_strength_becomes_minimum(
    controller: SessionController, repository: Repository, alice: Person, bob: Person
) -> None:
    open_person(controller, alice)
    send(controller, EventKind.NEW_RELATION)
    send(controller, EventKind.SELECT, index=1)

    type_and_commit(controller, "x")
    type_and_commit(controller, "")

    assert [r.strength for r in repository.relations] == [1]


def test_strength_input_is_one_character(
    controller: SessionController, alice: Person, bob: Person
) -> None:
    open_person(controller, alice)
    send(controller, EventKind.NEW_RELATION)
    send(controller, EventKind.SELECT, index=1)

    send(controller, EventKind.INPUT, "42")

    assert controller.relation_form.strength == "4"


def test_cancel_relation_form(
    controller: SessionController, repository: Repository, alice: Person, bob: Person
) -> None:
    open_person(controller, alice)
    send(controller, EventKind.NEW_RELATION)
    send(controller, EventKind.SELECT, index=1)
    send(controller, EventKind.INPUT, "3")

    assert send(controller, EventKind.CANCEL) is View.DETAIL
    assert repository.relations == []
    assert controller.relation_form.strength == ""


def test_edit_relation_from_the_other_side(
    controller: SessionController, repository: Repository, alice: Person, bob: Person
) -> None:
    """Test editing an incoming relation shows and keeps the right people."""
    relation = repository.create_relation(alice.id, bob.id, 2, "friend")
    assert relation is not None
    open_person(controller, bob)

    assert send(controller, EventKind.EDIT_RELATION) is View.RELATION_FORM
    assert controller.relation_form.strength == "2"
    assert controller.relation_form.description == "friend"
    assert controller.screen().relation_counterpart == "Alice"

    send(controller, EventKind.TOGGLE_FOCUS)
    assert type_and_commit(controller, "best friend") is View.DETAIL

    updated = repository.get_relation(relation.id)
    assert updated is not None
    assert (updated.from_id, updated.to_id) == (alice.id, bob.id)
    assert updated.strength == 2
    assert updated.description == "best friend"


def test_edit_relation_requires_a_relation(controller: SessionController, alice: Person) -> None:
    open_person(controller, alice)

    assert send(controller, EventKind.EDIT_RELATION) is View.DETAIL
    assert send(controller, EventKind.DELETE_RELATION) is View.DETAIL


def test_delete_highlighted_relation(
    controller: SessionController, repository: Repository, alice: Person, bob: Person
) -> None:
    first = repository.create_relation(alice.id, bob.id, 2, "friend")
    second = repository.create_relation(bob.id, alice.id, 4, "neighbour")
    open_person(controller, alice)
    send(controller, EventKind.DOWN)

    assert send(controller, EventKind.DELETE_RELATION) is View.CONFIRM_DELETE_RELATION
    assert send(controller, EventKind.NO) is View.DETAIL
    assert len(repository.relations) == 2

    send(controller, EventKind.DELETE_RELATION)
    assert send(controller, EventKind.YES) is View.DETAIL
    assert first is not None and second is not None
    assert repository.relations == [first]
    assert [view.relation.id for view in controller.screen().relations] == [first.id]
    assert controller.relation_cursor == 0


# --- Deleting people ---


def test_delete_person_flow(
    controller: SessionController, repository: Repository, alice: Person, bob: Person
) -> None:
    repository.create_relation(alice.id, bob.id, 3, "friend")
    open_person(controller, alice)

    assert send(controller, EventKind.DELETE_PERSON) is View.CONFIRM_DELETE_PERSON
    assert send(controller, EventKind.CANCEL) is View.DETAIL

    send(controller, EventKind.DELETE_PERSON)
    assert send(controller, EventKind.YES) is View.LIST_PEOPLE
    assert controller.selected_person_id is None
    assert [p.name for p in repository.people] == ["Bob"]
    assert repository.relations == []


# --- Persistence failures ---


def test_failed_save_is_reported_and_can_be_retried(
    controller: SessionController, repository: Repository, store_backend: FakeStoreBackend
) -> None:
    store_backend.fail_writes = True
    send(controller, EventKind.NEW)
    type_and_commit(controller, "Alice")

    assert type_and_commit(controller, "") is View.LIST_PEOPLE
    assert "disk full" in controller.screen().error
    assert [p.name for p in repository.people] == ["Alice"]

    send(controller, EventKind.RETRY_SAVE)
    assert controller.error, "Retrying while the disk still fails keeps the error"

    store_backend.fail_writes = False
    send(controller, EventKind.RETRY_SAVE)
    assert controller.error == ""
    assert controller.notice == "Saved."

    reloaded = Repository(store_backend, DB_PATH)
    reloaded.load()
    assert [p.name for p in reloaded.people] == ["Alice"]


# --- Screen ---


def test_screen_titles(controller: SessionController, alice: Person) -> None:
    assert controller.screen().title == "Connect3"

    open_person(controller, alice)
    send(controller, EventKind.NEW_RELATION)
    assert controller.screen().title == "Select person to connect with Alice"

    send(controller, EventKind.CANCEL)
    send(controller, EventKind.EDIT_PERSON)
    assert controller.screen().title == "Edit Person"


def test_screen_holds_a_copy_of_the_buffer(controller: SessionController) -> None:
    send(controller, EventKind.NEW)
    screen = controller.screen()

    send(controller, EventKind.INPUT, "Alice")

    assert screen.person_form is not None
    assert screen.person_form.name == ""


def test_selection_follows_repository_changes(
    controller: SessionController, repository: Repository, alice: Person
) -> None:
    """Test that the detail view always shows the stored person, not a stale copy."""
    open_person(controller, alice)

    repository.update_person(alice.id, "Alicia", "", [])

    screen = controller.screen()
    assert screen.person is not None
    assert screen.person.name == "Alicia"


def test_detail_without_person_falls_back_to_list(
    controller: SessionController, repository: Repository, alice: Person
) -> None:
    open_person(controller, alice)
    repository.delete_person(alice.id)

    assert send(controller, EventKind.DOWN) is View.LIST_PEOPLE
