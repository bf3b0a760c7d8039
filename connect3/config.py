import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DB_FILE_NAME = "data.json"
DB_FORMAT_VERSION = "1.0.0"
OLDEST_DB_FORMAT_VERSION = "0.0.1"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CONNECT3_")

    # Storage settings
    db_path: Path | None = None

    # Logging settings
    log_level: str = "WARNING"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Path | None = None

    # Display settings
    color: bool = True


def default_db_path() -> Path:
    """Location of the store file when neither the CLI nor the environment sets one."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data) / "connect3" / DB_FILE_NAME

    try:
        home = Path.home()
    except RuntimeError:
        return Path(DB_FILE_NAME)
    return home / ".local" / "share" / "connect3" / DB_FILE_NAME


def resolve_db_path(cli_path: str | None = None) -> Path:
    """Pick the store path: CLI flag first, then settings, then the XDG default."""
    if cli_path:
        return Path(cli_path)
    if settings.db_path is not None:
        return settings.db_path
    return default_db_path()


settings = Settings()
