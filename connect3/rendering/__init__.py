from connect3.rendering.base import Renderer
from connect3.rendering.text import TextRenderer
from connect3.rendering.theme import Style, Theme

__all__ = ["Renderer", "Style", "TextRenderer", "Theme"]
