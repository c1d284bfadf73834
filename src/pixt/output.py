import html
from collections.abc import Iterator
from enum import Enum
from itertools import groupby
from pathlib import Path

from pixt.engine import RGB, GlyphGrid

RESET = "\033[0m"
DEFAULT_FOREGROUND = "\033[39m"

HTML_EXTENSIONS = (".html", ".htm")


class OutputFormat(Enum):
    TERMINAL = "terminal"
    HTML = "html"
    TEXT = "text"

    @classmethod
    def from_path(cls, path: str | Path | None) -> "OutputFormat":
        """Terminal for stdout, HTML for .html/.htm files, plain text for any other file."""
        if path is None:
            return cls.TERMINAL
        if Path(path).suffix.lower() in HTML_EXTENSIONS:
            return cls.HTML
        return cls.TEXT


def _is_control(char: str) -> bool:
    code = ord(char)
    return code < 0x20 or 0x7F <= code <= 0x9F


def printable(glyphs: str) -> str:
    """Replace control characters, which would corrupt either output format, with spaces."""
    return "".join(" " if _is_control(char) else char for char in glyphs)


def colour_runs(glyphs: str, colours: list[RGB | None]) -> Iterator[tuple[RGB | None, str]]:
    """Group adjacent glyphs that share a colour."""
    for colour, pairs in groupby(zip(glyphs, colours), key=lambda pair: pair[1]):
        yield colour, "".join(char for char, _ in pairs)


def foreground_escape(colour: RGB) -> str:
    r, g, b = colour
    return f"\033[38;2;{r};{g};{b}m"


def css_colour(colour: RGB) -> str:
    return "#{:02X}{:02X}{:02X}".format(*colour)


def render_terminal(grid: GlyphGrid, colored: bool) -> str:
    """ANSI output, one truecolor escape per run of same-coloured glyphs."""
    lines = []
    for glyphs, colours in zip(grid.glyphs, grid.colours):
        glyphs = printable(glyphs)
        if not colored:
            lines.append(glyphs)
            continue
        parts = []
        for colour, run in colour_runs(glyphs, colours):
            parts.append(DEFAULT_FOREGROUND if colour is None else foreground_escape(colour))
            parts.append(run)
        parts.append(RESET)
        lines.append("".join(parts))
    return "\n".join(lines)


def render_text(grid: GlyphGrid, colored: bool = False) -> str:
    """Plain text for file sinks. Colour is always dropped; `colored` only keeps the renderer signature."""
    return render_terminal(grid, colored=False)


def render_html(grid: GlyphGrid, colored: bool) -> str:
    """An HTML <pre> fragment, one line per row, with inline-styled spans when colored."""
    lines = []
    for glyphs, colours in zip(grid.glyphs, grid.colours):
        glyphs = printable(glyphs)
        if not colored:
            lines.append(html.escape(glyphs, quote=False))
            continue
        parts = []
        for colour, run in colour_runs(glyphs, colours):
            text = html.escape(run, quote=False)
            if colour is None:
                parts.append(text)
            else:
                parts.append(f'<span style="color: {css_colour(colour)};">{text}</span>')
        lines.append("".join(parts))
    return '<pre class="pixt">' + "\n".join(lines) + "</pre>"


RENDERERS = {
    OutputFormat.TERMINAL: render_terminal,
    OutputFormat.HTML: render_html,
    OutputFormat.TEXT: render_text,
}


def render(grid: GlyphGrid, colored: bool, fmt: OutputFormat = OutputFormat.TERMINAL) -> str:
    return RENDERERS[OutputFormat(fmt)](grid, colored)


DOCUMENT_HEAD = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{title}</title>
    <style>
    * {{
        color: #fff;
        background-color: #191919;
        font-family: monospace;
    }}
    pre {{
        line-height: 1.2;
        margin: 0;
        padding: 0;
        font-size: 10px;
    }}
    </style>
  </head>
  <body>
"""

DOCUMENT_TAIL = """  </body>
</html>
"""


def wrap_document(fragments: list[str], title: str = "pixt") -> str:
    """Embed rendered HTML fragments in a standalone page."""
    body = "".join(f"    {fragment}\n" for fragment in fragments)
    return DOCUMENT_HEAD.format(title=html.escape(title)) + body + DOCUMENT_TAIL
