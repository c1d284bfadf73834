import math
from collections.abc import Callable

from pixt.charsets import BRAILLE_BASE, FULL_BLOCK, PIXEL_FALLBACK, GlyphRamp, Style
from pixt.engine import Cell, GlyphGrid
from pixt.errors import EmptyRampError

# Absorbs float error so exact boundaries land on the denser glyph
_EPSILON = 1e-9

Mapper = Callable[[Cell], str]


def ramp_index(luminance: float, length: int) -> int:
    """Index into a ramp of `length` glyphs for a luminance in 0.0 - 1.0."""
    index = math.floor(luminance * (length - 1) + _EPSILON)
    return min(max(index, 0), length - 1)


def resolve_mapper(style: Style, ramp: GlyphRamp | None, colored: bool) -> Mapper:
    """Pick the per-cell glyph function for a style once, ahead of the cell loop."""
    style = Style(style)
    if style is Style.BRAILLE:
        return lambda cell: chr(BRAILLE_BASE + (cell.pattern or 0))
    if style is Style.PIXEL:
        if colored:
            return lambda cell: FULL_BLOCK
        ramp = GlyphRamp(PIXEL_FALLBACK)
    if ramp is None:
        raise EmptyRampError(f"{style.value} style needs a glyph ramp")
    chars = ramp.chars
    n = len(chars)
    return lambda cell: chars[ramp_index(cell.luminance, n)]


def map_glyph(cell: Cell, ramp: GlyphRamp | None, style: Style, colored: bool = True) -> str:
    return resolve_mapper(style, ramp, colored)(cell)


def map_grid(cells: list[list[Cell]], mapper: Mapper) -> GlyphGrid:
    return GlyphGrid(
        glyphs=["".join(mapper(cell) for cell in row) for row in cells],
        colours=[[cell.color for cell in row] for row in cells],
    )
