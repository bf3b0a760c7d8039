import os
import tempfile
from pathlib import Path

from loguru import logger

from connect3.store_backends.base import (
    StoreBackend,
    StoreNotFoundError,
    StoreReadError,
    StoreWriteError,
)


class LocalStoreBackend(StoreBackend):
    """Store backend that keeps the document in a file on the local disk."""

    def read(self, path: str | Path) -> bytes:
        """Read the whole file at path."""
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError as e:
            raise StoreNotFoundError(f"{path} does not exist") from e
        except OSError as e:
            raise StoreReadError(f"Could not read {path}: {e}") from e

    def write(self, path: str | Path, data: bytes) -> None:
        """Overwrite the file at path.

        The data goes to a temporary file in the same directory first and is
        then renamed over the target, so a failed write leaves the previous
        content in place.
        """
        target = Path(path)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.chmod(tmp_name, 0o644)
                os.replace(tmp_name, target)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreWriteError(f"Could not write {path}: {e}") from e

        logger.debug(f"Wrote {len(data)} bytes to {target}")


def ensure_parent_directory(path: str | Path) -> None:
    """Create the directory that will hold the store file.

    Raises:
        OSError: The directory could not be created
    """
    Path(path).parent.mkdir(parents=True, exist_ok=True)
