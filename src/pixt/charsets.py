import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pixt.errors import EmptyRampError, MissingRampSourceError

LOG = logging.getLogger(__name__)

# Built-in ramps, ordered from least to most visually dense
ASCII = " .-~+*%#@"
BLOCK = " ░▒▓█"
DOTS = " ⠂⠒⠕⠞⠟⠿"

# Solid cell used by the pixel style when colour carries the picture
FULL_BLOCK = "█"
# Pixel style without colour has to fall back on density
PIXEL_FALLBACK = " ▀▞▟█"

# Braille patterns: U+2800 to U+28FF (256 characters, 2x4 dot grid)
BRAILLE_BASE = 0x2800


class Style(Enum):
    PIXEL = "pixel"
    ASCII = "ascii"
    BLOCK = "block"
    BRAILLE = "braille"
    DOTS = "dots"
    CUSTOM = "custom"
    FROM_FILE = "from-file"


BUILTIN_RAMPS = {
    Style.ASCII: ASCII,
    Style.BLOCK: BLOCK,
    Style.DOTS: DOTS,
}


@dataclass(frozen=True)
class GlyphRamp:
    """Ordered glyphs from lowest to highest density.

    Characters are kept verbatim: duplicates are allowed and order is preserved.
    """

    chars: str

    def __post_init__(self):
        if not self.chars:
            raise EmptyRampError("glyph ramp is empty")

    def __len__(self) -> int:
        return len(self.chars)

    def __getitem__(self, index: int) -> str:
        return self.chars[index]


def read_ramp_file(path: str | Path) -> str:
    """Read a ramp resource and trim surrounding whitespace."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise MissingRampSourceError(f"cannot read glyph ramp from {path}: {err}") from err
    return text.strip()


def build_ramp(
    style: Style,
    charset: str | None = None,
    path: str | Path | None = None,
) -> GlyphRamp | None:
    """Resolve a style into its glyph ramp.

    Returns None for styles that do not pick glyphs from a ramp (pixel and braille).
    """
    style = Style(style)
    if style in (Style.PIXEL, Style.BRAILLE):
        return None
    if style in BUILTIN_RAMPS:
        return GlyphRamp(BUILTIN_RAMPS[style])
    if style is Style.CUSTOM:
        if not charset:
            raise EmptyRampError("custom style needs a non-empty charset")
        return GlyphRamp(charset)
    if path is None:
        raise MissingRampSourceError("from-file style needs a ramp path")
    chars = read_ramp_file(path)
    if not chars:
        raise EmptyRampError(f"glyph ramp file {path} is empty")
    LOG.debug("Loaded %d glyphs from %s", len(chars), path)
    return GlyphRamp(chars)
