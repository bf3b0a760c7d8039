"""Forward-only upgrades of the store file between schema versions."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from loguru import logger
from pydantic import BaseModel, ValidationError

from connect3.config import DB_FORMAT_VERSION, OLDEST_DB_FORMAT_VERSION
from connect3.domain.document import dump_document
from connect3.migrations.schema import (
    DocumentV0_0_1,
    DocumentV1_0_0,
    PersonV1_0_0,
    versioned_document_adapter,
)
from connect3.store_backends.base import (
    StoreBackend,
    StoreNotFoundError,
    StoreReadError,
    StoreWriteError,
)


class MigrationError(Exception):
    """The store file could not be brought up to the current schema."""


@dataclass(frozen=True)
class Migration:
    from_version: str
    to_version: str
    apply: Callable[[Any], BaseModel]


def migrate_0_0_1_to_1_0_0(document: DocumentV0_0_1) -> DocumentV1_0_0:
    """Give every person a tag list."""
    people = []
    for person in document.people:
        data = person.model_dump()
        if data.get("tags") is None:
            data["tags"] = []
        people.append(PersonV1_0_0.model_validate(data))

    data = document.model_dump()
    data["version"] = "1.0.0"
    data["people"] = people
    return DocumentV1_0_0.model_validate(data)


MIGRATIONS: list[Migration] = [
    Migration(from_version="0.0.1", to_version="1.0.0", apply=migrate_0_0_1_to_1_0_0),
]


class Migrator:
    """Applies the chain of migrations to the document at a path."""

    def __init__(self, backend: StoreBackend, migrations: list[Migration] | None = None) -> None:
        self.backend = backend
        self.migrations = MIGRATIONS if migrations is None else migrations

    @property
    def known_versions(self) -> set[str]:
        versions = {OLDEST_DB_FORMAT_VERSION, DB_FORMAT_VERSION}
        for migration in self.migrations:
            versions.update((migration.from_version, migration.to_version))
        return versions

    def run(self, path: str | Path) -> list[str]:
        """Upgrade the stored document to the current version.

        Nothing is written unless at least one migration ran, and nothing is
        written if any migration fails.

        Args:
            path: Location of the store file

        Returns:
            The versions the document passed through, starting with the
            version it was stored in. Empty when nothing was rewritten.

        Raises:
            MigrationError: The file could not be read, carries an unknown
                version, or a migration failed
        """
        try:
            content = self.backend.read(path)
        except StoreNotFoundError:
            logger.debug(f"No store at {path}, skipping migrations")
            return []
        except StoreReadError as e:
            raise MigrationError(str(e)) from e

        if not content.strip():
            return []

        try:
            raw = json.loads(content)
        except ValueError as e:
            # Left for the repository to recover from
            logger.warning(f"Store at {path} is not valid JSON, skipping migrations: {e}")
            return []
        if not isinstance(raw, dict):
            logger.warning(f"Store at {path} does not hold a JSON object, skipping migrations")
            return []

        raw.setdefault("version", OLDEST_DB_FORMAT_VERSION)
        current_version = str(raw["version"])
        if current_version not in self.known_versions:
            raise MigrationError(f"Store at {path} has unknown schema version {current_version}")

        pending = self._pending_migrations(current_version)
        if not pending:
            return []

        try:
            document = versioned_document_adapter.validate_python(raw)
        except ValidationError as e:
            raise MigrationError(
                f"Store at {path} does not match schema version {current_version}: {e}"
            ) from e

        trail = [current_version]
        for migration in pending:
            logger.info(f"Migrating DB from {migration.from_version} to {migration.to_version}...")
            try:
                document = migration.apply(document)
            except Exception as e:
                raise MigrationError(
                    f"Migration from {migration.from_version} to {migration.to_version} failed: {e}"
                ) from e
            trail.append(migration.to_version)

        try:
            self.backend.write(path, dump_document(document.model_dump()))
        except StoreWriteError as e:
            raise MigrationError(f"Could not write migrated store: {e}") from e
        return trail

    def _pending_migrations(self, version: str) -> list[Migration]:
        """Collect the ordered migrations that start at version."""
        pending = []
        seen = set()
        while version not in seen:
            seen.add(version)
            migration = next((m for m in self.migrations if m.from_version == version), None)
            if migration is None:
                break
            pending.append(migration)
            version = migration.to_version
        return pending
