import argparse
import logging
import sys
from concurrent.futures import ProcessPoolExecutor
from dataclasses import replace
from functools import partial
from pathlib import Path

from PIL import Image

from pixt.charsets import Style
from pixt.converter import image_to_text
from pixt.engine import RenderOptions
from pixt.errors import PixtError
from pixt.output import OutputFormat, wrap_document
from pixt.sampling import SUPPORTED_MODES, plan
from pixt.terminal import get_terminal_size

LOG = logging.getLogger("pixt")


def setup_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else logging.WARNING
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    LOG.setLevel(level)
    LOG.handlers[:] = [handler]
    LOG.propagate = False


def load_image(path: str | Path) -> Image.Image:
    """Decode an image and expand it to a mode the renderer can average."""
    image = Image.open(path)
    image.load()
    # colour keys become real alpha before the mode check lets RGB or L through
    if image.mode in ("P", "PA") or "transparency" in image.info:
        return image.convert("RGBA")
    if image.mode in SUPPORTED_MODES:
        return image
    if image.mode.startswith("I") or image.mode == "F":
        return image.convert("L")
    return image.convert("RGB")


def render_file(
    path: str | Path,
    options: RenderOptions,
    fmt: OutputFormat,
    max_width: int | None = None,
) -> str:
    """Render one file. A width derived from the height is capped at `max_width`."""
    LOG.debug("Rendering %s", path)
    image = load_image(path)
    if max_width is not None and options.width is None and options.height is not None:
        derived = plan(image.width, image.height, height=options.height)
        if derived.width > max_width:
            LOG.debug("Derived width %d exceeds %d, fitting to width", derived.width, max_width)
            options = replace(options, width=max_width, height=None)
    return image_to_text(image, options, fmt)


def render_all(
    paths: list[str],
    options: RenderOptions,
    fmt: OutputFormat,
    jobs: int = 1,
    max_width: int | None = None,
) -> list[str]:
    """Render each file independently, keeping input order."""
    work = partial(render_file, options=options, fmt=fmt, max_width=max_width)
    if jobs > 1 and len(paths) > 1:
        with ProcessPoolExecutor(max_workers=jobs) as executor:
            return list(executor.map(work, paths))
    return [work(path) for path in paths]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pixt", description="Render images as text for terminals or HTML")
    parser.add_argument("images", nargs="+", help="Paths to input images")
    parser.add_argument("-w", "--width", type=int, default=None, help="Output width in characters")
    parser.add_argument("-H", "--height", type=int, default=None, help="Output height in characters")
    parser.add_argument("-c", "--colored", action="store_true", default=False, help="Enable truecolor output")
    parser.add_argument(
        "-s",
        "--style",
        default=Style.PIXEL.value,
        choices=[style.value for style in Style],
        help="Glyph style (default: pixel)",
    )
    parser.add_argument("--charset", default=None, help="Glyphs for the custom style, lightest to densest")
    parser.add_argument("--charset-file", default=None, help="Text file holding glyphs for the from-file style")
    parser.add_argument(
        "-o", "--output", default=None, help="Write to a new file instead of stdout (.html/.htm writes HTML)"
    )
    parser.add_argument(
        "-f",
        "--format",
        default=None,
        choices=[fmt.value for fmt in OutputFormat],
        help="Output format (default: from the output file extension, terminal for stdout)",
    )
    parser.add_argument("-j", "--jobs", type=int, default=1, help="Render this many images in parallel")
    parser.add_argument("--debug", action="store_true", default=False, help="Log pipeline details to stderr")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)

    width, height = args.width, args.height
    max_width = None
    if width is None and height is None:
        width = get_terminal_size()[0]
    elif width is None:
        max_width = get_terminal_size()[0]

    options = RenderOptions(
        width=width,
        height=height,
        colored=args.colored,
        style=Style(args.style),
        charset=args.charset,
        charset_file=args.charset_file,
    )
    fmt = OutputFormat(args.format) if args.format else OutputFormat.from_path(args.output)

    for path in args.images:
        if not Path(path).exists():
            LOG.error("File not found: %s", path)
            return 1

    try:
        outputs = render_all(args.images, options, fmt, jobs=args.jobs, max_width=max_width)
    except (PixtError, OSError) as err:
        LOG.error("%s", err)
        return 1

    if fmt is OutputFormat.HTML:
        title = Path(args.output).name if args.output else "pixt"
        text = wrap_document(outputs, title=title)
    else:
        text = "\n".join(outputs) + "\n"

    if args.output is None:
        sys.stdout.write(text)
        return 0
    try:
        with open(args.output, "x", encoding="utf-8") as f:
            f.write(text)
    except OSError as err:
        LOG.error("Cannot write %s: %s", args.output, err)
        return 1
    return 0
