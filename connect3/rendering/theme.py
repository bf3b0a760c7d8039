"""Styling passed to the renderer."""

from pydantic import BaseModel


class Style(BaseModel):
    """ANSI styling for one kind of text.

    Attributes:
        color: 256-colour palette index, or None for the terminal default
        bold: Render in bold
        underline: Render underlined
    """

    color: int | None = None
    bold: bool = False
    underline: bool = False

    def render(self, text: str, enabled: bool = True) -> str:
        if not enabled or not text:
            return text
        codes = []
        if self.bold:
            codes.append("1")
        if self.underline:
            codes.append("4")
        if self.color is not None:
            codes.append(f"38;5;{self.color}")
        if not codes:
            return text
        return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


class Theme(BaseModel):
    color: bool = True
    title: Style = Style(color=205, bold=True)
    info: Style = Style(color=240)
    warn: Style = Style(color=196, bold=True)
    tag: Style = Style(color=39)
    heading: Style = Style(underline=True)
    cursor: str = "> "
    tag_prefix: str = "#"
    strength_icons: dict[int, str] = {
        1: "⚪",
        2: "🔵",
        3: "🟢",
        4: "🟡",
        5: "🔴",
    }
    default_strength_icon: str = "⚪"

    def strength_icon(self, strength: int) -> str:
        return self.strength_icons.get(strength, self.default_strength_icon)

    def title_text(self, text: str) -> str:
        return self.title.render(text, self.color)

    def info_text(self, text: str) -> str:
        return self.info.render(text, self.color)

    def warn_text(self, text: str) -> str:
        return self.warn.render(text, self.color)

    def heading_text(self, text: str) -> str:
        return self.heading.render(text, self.color)

    def tags_text(self, tags: list[str]) -> str:
        return " ".join(self.tag.render(f"{self.tag_prefix}{t}", self.color) for t in tags)
