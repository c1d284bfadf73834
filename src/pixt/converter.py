import logging

from PIL import Image

from pixt.charsets import Style, build_ramp
from pixt.engine import GlyphGrid, RenderOptions
from pixt.mapper import map_grid, resolve_mapper
from pixt.output import OutputFormat, render
from pixt.sampling import plan, reduce_grid

LOG = logging.getLogger(__name__)


def image_to_grid(image: Image.Image, options: RenderOptions) -> GlyphGrid:
    """Run sampling, reduction and glyph mapping for one decoded image."""
    style = Style(options.style)
    grid = plan(image.width, image.height, options.width, options.height)
    ramp = build_ramp(style, options.charset, options.charset_file)
    mapper = resolve_mapper(style, ramp, options.colored)
    cells = reduce_grid(image, grid, patterns=style is Style.BRAILLE)
    LOG.debug("Mapping %dx%d cells with %s style", grid.width, grid.height, style.value)
    return map_grid(cells, mapper)


def image_to_text(
    image: Image.Image,
    options: RenderOptions,
    fmt: OutputFormat = OutputFormat.TERMINAL,
) -> str:
    """Render a decoded image as terminal, HTML or plain text.

    Every failure is raised before any output is produced.
    """
    return render(image_to_grid(image, options), options.colored, fmt)
