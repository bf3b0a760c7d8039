from typing import Protocol

from connect3.session.screen import Screen


class Renderer(Protocol):
    """Turns a screen snapshot into text for the terminal."""

    def render(self, screen: Screen) -> str: ...
