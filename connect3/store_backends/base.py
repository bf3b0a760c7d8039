from pathlib import Path
from typing import Protocol


class StoreNotFoundError(Exception):
    """The store file does not exist yet."""


class StoreReadError(Exception):
    """The store file exists but could not be read."""


class StoreWriteError(Exception):
    """The store file could not be written."""


class StoreBackend(Protocol):
    """Protocol for byte-level storage of the document."""

    def read(self, path: str | Path) -> bytes:
        """Return the raw bytes stored at path.

        Raises:
            StoreNotFoundError: Nothing has been stored at path yet
            StoreReadError: Anything else went wrong while reading
        """
        ...

    def write(self, path: str | Path, data: bytes) -> None:
        """Replace whatever is stored at path with data.

        Raises:
            StoreWriteError: The data could not be written
        """
        ...
