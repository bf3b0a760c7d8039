"""In-memory owner of people and relations, persisted after every change."""

import json
import uuid
from pathlib import Path
from typing import Callable

from loguru import logger
from pydantic import ValidationError

from connect3.domain import (
    Direction,
    Document,
    Person,
    Relation,
    RelationView,
    clamp_strength,
    dump_document,
)
from connect3.store_backends.base import (
    StoreBackend,
    StoreNotFoundError,
    StoreReadError,
    StoreWriteError,
)

UNKNOWN_NAME = "Unknown"


class PersistenceError(Exception):
    """The document could not be written. The in-memory change is kept."""


def _new_id() -> str:
    return str(uuid.uuid4())


class Repository:
    """Owns the document and keeps the store file in sync with it.

    Every mutation rewrites the whole document through the store backend
    before returning, so the file never mixes two logical edits.
    """

    def __init__(
        self,
        backend: StoreBackend,
        path: str | Path,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        """Initialize Repository.

        Args:
            backend: Store backend used for every read and write
            path: Location of the store file
            id_factory: Generates identifiers for new people and relations
        """
        self.backend = backend
        self.path = Path(path)
        self._new_id = id_factory
        self._document = Document()
        self.recovered_from_corrupt = False
        self.corrupt_backup_path: Path | None = None

    @property
    def document(self) -> Document:
        return self._document

    @property
    def people(self) -> list[Person]:
        return list(self._document.people)

    @property
    def relations(self) -> list[Relation]:
        return list(self._document.relations)

    def load(self) -> Document:
        """Read the document from the store, recovering from anything unreadable.

        A missing or empty file gives an empty document. A file that cannot be
        decoded also gives an empty document and sets ``recovered_from_corrupt``.
        Its bytes are copied next to it first, and ``corrupt_backup_path`` points
        at the copy when that worked. JSON null stands for an empty value.
        Relations stored without an identifier get one, and the document is
        written back once if that happened.

        Returns:
            The loaded document
        """
        self.recovered_from_corrupt = False
        self.corrupt_backup_path = None
        try:
            content = self.backend.read(self.path)
        except StoreNotFoundError:
            logger.debug(f"No store at {self.path} yet, starting empty")
            self._document = Document()
            return self._document
        except StoreReadError as e:
            logger.warning(f"Could not read {self.path}, starting empty: {e}")
            self._document = Document()
            self.recovered_from_corrupt = True
            return self._document

        if not content.strip():
            self._document = Document()
            return self._document

        try:
            self._document = Document.model_validate(json.loads(content))
        except (ValueError, ValidationError) as e:
            logger.warning(f"Store at {self.path} is corrupt, starting empty: {e}")
            self._keep_corrupt_copy(content)
            self._document = Document()
            self.recovered_from_corrupt = True
            return self._document

        if self._backfill_relation_ids():
            try:
                self.save()
            except PersistenceError:
                logger.warning("Backfilled relation identifiers will be saved with the next change")
        return self._document

    def save(self) -> None:
        """Write the whole document to the store.

        Raises:
            PersistenceError: The store backend could not write the document
        """
        try:
            self.backend.write(self.path, dump_document(self._document.model_dump(mode="json")))
        except StoreWriteError as e:
            logger.error(f"Saving to {self.path} failed: {e}")
            raise PersistenceError(str(e)) from e

    def get_person(self, person_id: str) -> Person | None:
        return next((p for p in self._document.people if p.id == person_id), None)

    def get_relation(self, relation_id: str) -> Relation | None:
        return next((r for r in self._document.relations if r.id == relation_id), None)

    def person_name(self, person_id: str) -> str:
        person = self.get_person(person_id)
        return person.name if person else UNKNOWN_NAME

    def create_person(self, name: str, notes: str, tags: list[str]) -> Person:
        """Add a new person and persist."""
        person = Person(id=self._new_id(), name=name, notes=notes, tags=list(tags))
        self._document.people.append(person)
        logger.debug(f"Created person {person.id}")
        self.save()
        return person

    def update_person(self, person_id: str, name: str, notes: str, tags: list[str]) -> None:
        """Overwrite the mutable fields of a person. Unknown ids are ignored."""
        person = self.get_person(person_id)
        if person is None:
            return
        person.name = name
        person.notes = notes
        person.tags = list(tags)
        logger.debug(f"Updated person {person_id}")
        self.save()

    def delete_person(self, person_id: str) -> None:
        """Remove a person together with every relation that names them."""
        self._document.relations = [
            r
            for r in self._document.relations
            if r.from_id != person_id and r.to_id != person_id
        ]
        self._document.people = [p for p in self._document.people if p.id != person_id]
        logger.debug(f"Deleted person {person_id}")
        self.save()

    def create_relation(
        self, from_id: str, to_id: str, strength: int, description: str
    ) -> Relation | None:
        """Connect two different, existing people.

        Args:
            from_id: Person the relation starts at
            to_id: Person the relation points to
            strength: Requested strength, clamped into [1, 5]
            description: Free text description

        Returns:
            The new relation, or None when the endpoints are the same person or
            either of them does not exist
        """
        if from_id == to_id:
            return None
        if self.get_person(from_id) is None or self.get_person(to_id) is None:
            return None

        relation = Relation(
            id=self._new_id(),
            from_id=from_id,
            to_id=to_id,
            strength=clamp_strength(strength),
            description=description,
        )
        self._document.relations.append(relation)
        logger.debug(f"Created relation {relation.id} ({from_id} -> {to_id})")
        self.save()
        return relation

    def update_relation(self, relation_id: str, strength: int, description: str) -> None:
        """Overwrite strength and description of a relation. Unknown ids are ignored."""
        relation = self.get_relation(relation_id)
        if relation is None:
            return
        relation.strength = clamp_strength(strength)
        relation.description = description
        logger.debug(f"Updated relation {relation_id}")
        self.save()

    def delete_relation(self, relation_id: str) -> None:
        """Remove a single relation. Unknown ids are ignored."""
        remaining = [r for r in self._document.relations if r.id != relation_id]
        if len(remaining) == len(self._document.relations):
            return
        self._document.relations = remaining
        logger.debug(f"Deleted relation {relation_id}")
        self.save()

    def relations_for(self, person_id: str) -> list[RelationView]:
        """Every relation touching a person, seen from that person."""
        views = []
        for relation in self._document.relations:
            if relation.from_id == person_id:
                other_id, direction = relation.to_id, Direction.OUTGOING
            elif relation.to_id == person_id:
                other_id, direction = relation.from_id, Direction.INCOMING
            else:
                continue
            views.append(
                RelationView(
                    relation=relation,
                    other_name=self.person_name(other_id),
                    direction=direction,
                )
            )
        return views

    def _backfill_relation_ids(self) -> bool:
        """Give every relation without an identifier a fresh one."""
        backfilled = 0
        for relation in self._document.relations:
            if not relation.id:
                relation.id = self._new_id()
                backfilled += 1
        if backfilled:
            logger.info(f"Assigned identifiers to {backfilled} relations")
        return backfilled > 0

    def _keep_corrupt_copy(self, content: bytes) -> None:
        backup_path = self.path.with_name(self.path.name + ".corrupt")
        try:
            self.backend.write(backup_path, content)
        except StoreWriteError as e:
            logger.error(f"Could not keep a copy of the corrupt store: {e}")
            return
        self.corrupt_backup_path = backup_path
        logger.warning(f"Kept a copy of the corrupt store at {backup_path}")
