from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pixt.charsets import Style

RGB = tuple[int, int, int]


@dataclass
class RenderOptions:
    width: int | None = None
    height: int | None = None
    colored: bool = False
    style: Style = Style.PIXEL
    charset: str | None = None  # custom style
    charset_file: str | Path | None = None  # from-file style


@dataclass(frozen=True)
class Cell:
    luminance: float  # 0.0 - 1.0
    color: RGB | None  # None when every pixel in the block is transparent
    pattern: int | None = None  # braille dot bits, braille style only


@dataclass
class GlyphGrid:
    glyphs: list[str]  # one string per row
    colours: list[list[RGB | None]]  # (rows, cols)

    @property
    def width(self) -> int:
        return len(self.glyphs[0]) if self.glyphs else 0

    @property
    def height(self) -> int:
        return len(self.glyphs)
