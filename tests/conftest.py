import json
from pathlib import Path
from typing import Any, Callable

import pytest

from connect3.domain import Person
from connect3.repository import Repository
from connect3.session.controller import SessionController
from tests.fakes import DB_PATH, FakeStoreBackend


@pytest.fixture
def store_backend() -> FakeStoreBackend:
    return FakeStoreBackend()


@pytest.fixture
def write_document(store_backend: FakeStoreBackend) -> Callable[[dict[str, Any]], None]:
    """Put a raw document into the fake store, as if an older version wrote it."""

    def _write(data: dict[str, Any]) -> None:
        store_backend.files[DB_PATH] = json.dumps(data).encode()

    return _write


@pytest.fixture
def stored_document(store_backend: FakeStoreBackend) -> Callable[[], dict[str, Any]]:
    """Read back whatever is currently in the fake store."""

    def _read() -> dict[str, Any]:
        return json.loads(store_backend.files[DB_PATH])

    return _read


@pytest.fixture
def repository(store_backend: FakeStoreBackend) -> Repository:
    repo = Repository(store_backend, DB_PATH)
    repo.load()
    return repo


@pytest.fixture
def alice(repository: Repository) -> Person:
    return repository.create_person("Alice", "Met at the climbing gym", ["climbing", "work"])


@pytest.fixture
def bob(repository: Repository) -> Person:
    return repository.create_person("Bob", "", ["family"])


@pytest.fixture
def controller(repository: Repository) -> SessionController:
    return SessionController(repository)


@pytest.fixture
def store_file(tmp_path: Path) -> Path:
    """Location for a real store file inside a not yet existing directory."""
    return tmp_path / "share" / "connect3" / "data.json"
