"""Interactive terminal session for keeping track of people and their connections."""

import argparse
import sys
from typing import Callable

from loguru import logger

from connect3.config import Settings, resolve_db_path, settings
from connect3.keymap import translate, wants_quit
from connect3.migrations.migrator import MigrationError, Migrator
from connect3.rendering.base import Renderer
from connect3.rendering.text import TextRenderer
from connect3.rendering.theme import Theme
from connect3.repository import Repository
from connect3.session.controller import SessionController
from connect3.store_backends.local import LocalStoreBackend, ensure_parent_directory

PROMPT = "> "


def configure_logging(app_settings: Settings) -> None:
    sink = app_settings.log_file if app_settings.log_file else sys.stderr
    logger.configure(handlers=[{"sink": sink, "level": app_settings.log_level}])


def run_session(
    controller: SessionController,
    renderer: Renderer,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """Render, read a line, dispatch its events, repeat until the user quits.

    Each line is handled completely, including persistence, before the next
    one is read.

    Args:
        controller: Session to drive
        renderer: Turns the controller's screen into text
        read_line: Reads one line of input, raising EOFError when input ends
        write: Shows text to the user
    """
    while True:
        write(renderer.render(controller.screen()))
        try:
            line = read_line(PROMPT)
        except (EOFError, KeyboardInterrupt):
            write("")
            return

        if wants_quit(controller.view, line):
            return
        for event in translate(controller.view, line):
            controller.handle(event)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="connect3", description=__doc__)
    parser.add_argument(
        "--db",
        type=str,
        required=False,
        help="Path to the database json file",
        default=None,
    )
    args = parser.parse_args(argv)

    configure_logging(settings)
    db_path = resolve_db_path(args.db)

    try:
        ensure_parent_directory(db_path)
    except OSError as e:
        print(f"Error creating directory {db_path.parent}: {e}", file=sys.stderr)
        return 1

    backend = LocalStoreBackend()
    repository = Repository(backend, db_path)
    try:
        controller = SessionController.boot(repository, Migrator(backend))
    except MigrationError as e:
        print(f"Error running migrations: {e}", file=sys.stderr)
        return 1

    print(f"Saving to: {db_path}")
    run_session(controller, TextRenderer(Theme(color=settings.color)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
