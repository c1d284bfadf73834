import logging
import math
from dataclasses import dataclass

import numpy as np
from PIL import Image

from pixt.engine import RGB, Cell
from pixt.errors import InvalidDimensionError, UnsupportedPixelFormatError

LOG = logging.getLogger(__name__)

# A terminal cell is about twice as tall as it is wide
CHAR_ASPECT = 0.5

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# Braille sub-cells brighter than this set their dot
BRAILLE_THRESHOLD = 0.5

# Braille dot bits for each (row, col) of the 2x4 sub-grid:
#   1 4
#   2 5
#   3 6
#   7 8
DOT_BITS = np.array(
    [
        [0x01, 0x08],
        [0x02, 0x10],
        [0x04, 0x20],
        [0x40, 0x80],
    ]
)
SUB_ROWS, SUB_COLS = DOT_BITS.shape

SUPPORTED_MODES = ("RGB", "RGBA", "L", "LA")

_LUMA = np.array(LUMA_WEIGHTS)


@dataclass(frozen=True)
class Plan:
    width: int
    height: int
    block_x: int
    block_y: int


def _check_dimension(name: str, value: int | None) -> None:
    if value is not None and value <= 0:
        raise InvalidDimensionError(f"{name} must be a positive number of characters, got {value}")


def plan(
    source_width: int,
    source_height: int,
    width: int | None = None,
    height: int | None = None,
) -> Plan:
    """Fit a source image onto a grid of character cells.

    With only one of width/height the other follows the source aspect ratio,
    corrected by CHAR_ASPECT. With both, the grid is used as given.
    """
    if source_width <= 0 or source_height <= 0:
        raise InvalidDimensionError(f"source image has zero area ({source_width}x{source_height})")
    _check_dimension("width", width)
    _check_dimension("height", height)
    if width is None and height is None:
        raise InvalidDimensionError("at least one of width or height is required")

    if height is None:
        height = max(1, round(source_height * width / source_width * CHAR_ASPECT))
    elif width is None:
        width = max(1, round(source_width * height / source_height / CHAR_ASPECT))

    result = Plan(
        width=width,
        height=height,
        block_x=max(1, math.ceil(source_width / width)),
        block_y=max(1, math.ceil(source_height / height)),
    )
    LOG.debug("Planned %dx%d cells of %dx%d px for %dx%d image", width, height,
              result.block_x, result.block_y, source_width, source_height)
    return result


def cell_spans(source: int, target: int) -> tuple[np.ndarray, np.ndarray]:
    """Half-open pixel ranges covered by each of `target` cells along one axis.

    Cells split the source proportionally, so ranges are in order, non-empty,
    in bounds and never wider than ceil(source / target). When the grid is
    larger than the source, cells fall back to nearest-pixel sampling.
    """
    index = np.arange(target)
    starts = index * source // target
    ends = np.maximum((index + 1) * source // target, starts + 1)
    return starts, ends


def _sub_spans(starts: np.ndarray, ends: np.ndarray, parts: int) -> tuple[np.ndarray, np.ndarray]:
    """Split each span into `parts` non-empty pieces. Returns arrays of shape (n, parts)."""
    size = (ends - starts)[:, None]
    k = np.arange(parts)[None, :]
    sub_starts = starts[:, None] + k * size // parts
    sub_ends = np.maximum(starts[:, None] + (k + 1) * size // parts, sub_starts + 1)
    return sub_starts, sub_ends


def pixel_arrays(image: Image.Image) -> tuple[np.ndarray, np.ndarray]:
    """Split an image into (H, W, 3) colour and (H, W) alpha float arrays."""
    if image.mode not in SUPPORTED_MODES:
        raise UnsupportedPixelFormatError(
            f"cannot average pixels in mode {image.mode!r}, expected one of {', '.join(SUPPORTED_MODES)}"
        )
    arr = np.asarray(image, dtype=np.float64)
    if arr.ndim == 2:
        arr = arr[:, :, None]
    if "A" in image.getbands():
        colour, alpha = arr[:, :, :-1], arr[:, :, -1]
    else:
        colour, alpha = arr, np.full(arr.shape[:2], 255.0)
    if colour.shape[2] == 1:
        colour = np.repeat(colour, 3, axis=2)
    return colour, alpha


def luminance(colour) -> float:
    """Perceptual brightness of an 8-bit RGB colour, 0.0 - 1.0."""
    return float(np.clip(np.dot(np.asarray(colour, dtype=np.float64), _LUMA) / 255.0, 0.0, 1.0))


def reduce_block(block: np.ndarray) -> tuple[float, RGB | None]:
    """Average one block of RGB or RGBA pixels into (luminance, colour).

    Pixels are weighted by alpha, so fully transparent pixels do not count.
    A block that is entirely transparent has no colour.
    """
    block = np.asarray(block, dtype=np.float64)
    if block.ndim != 3 or block.shape[2] not in (3, 4):
        raise UnsupportedPixelFormatError(f"expected an (h, w, 3|4) block, got shape {block.shape}")
    if block.shape[0] == 0 or block.shape[1] == 0:
        raise InvalidDimensionError("cannot reduce an empty block")
    colour = block[:, :, :3]
    alpha = block[:, :, 3] if block.shape[2] == 4 else np.full(block.shape[:2], 255.0)
    total = alpha.sum()
    if total == 0:
        return 0.0, None
    mean = (colour * alpha[:, :, None]).sum(axis=(0, 1)) / total
    rgb = tuple(int(v) for v in np.clip(np.rint(mean), 0, 255))
    return luminance(rgb), rgb


def pack_pattern(levels: np.ndarray, threshold: float = BRAILLE_THRESHOLD) -> int:
    """Pack a (4, 2) grid of sub-cell luminances into braille dot bits."""
    levels = np.asarray(levels)
    return int((DOT_BITS * (levels > threshold)).sum())


def _integral(values: np.ndarray) -> np.ndarray:
    """Summed-area table with a leading row and column of zeros."""
    table = np.zeros((values.shape[0] + 1, values.shape[1] + 1) + values.shape[2:])
    table[1:, 1:] = values.cumsum(axis=0).cumsum(axis=1)
    return table


def _box_sums(table: np.ndarray, y0, y1, x0, x1) -> np.ndarray:
    return table[y1, x1] - table[y0, x1] - table[y1, x0] + table[y0, x0]


def reduce_grid(image: Image.Image, grid: Plan, patterns: bool = False) -> list[list[Cell]]:
    """Reduce every cell of the planned grid to a Cell.

    Block sums come from summed-area tables, so each cell costs the same
    regardless of block size. With `patterns`, each cell's block is further
    split into a 2x4 sub-grid and binarised into braille dot bits.
    """
    colour, alpha = pixel_arrays(image)
    ys0, ys1 = cell_spans(image.height, grid.height)
    xs0, xs1 = cell_spans(image.width, grid.width)
    y0, y1 = ys0[:, None], ys1[:, None]
    x0, x1 = xs0[None, :], xs1[None, :]

    colour_sums = _box_sums(_integral(colour * alpha[:, :, None]), y0, y1, x0, x1)  # (rows, cols, 3)
    alpha_sums = _box_sums(_integral(alpha), y0, y1, x0, x1)  # (rows, cols)
    opaque = alpha_sums > 0
    means = colour_sums / np.where(opaque, alpha_sums, 1.0)[:, :, None]
    means = np.clip(np.rint(means), 0, 255).astype(np.uint8)
    levels = np.clip(means @ _LUMA / 255.0, 0.0, 1.0)
    levels[~opaque] = 0.0

    bits = None
    if patterns:
        # Per-pixel brightness, with transparency reading as dark
        brightness = (colour @ _LUMA) * alpha / (255.0 * 255.0)
        sy0, sy1 = _sub_spans(ys0, ys1, SUB_ROWS)
        sx0, sx1 = _sub_spans(xs0, xs1, SUB_COLS)
        sy0, sy1 = sy0[:, :, None, None], sy1[:, :, None, None]
        sx0, sx1 = sx0[None, None, :, :], sx1[None, None, :, :]
        sums = _box_sums(_integral(brightness), sy0, sy1, sx0, sx1)  # (rows, 4, cols, 2)
        sub_levels = sums / ((sy1 - sy0) * (sx1 - sx0))
        on = sub_levels > BRAILLE_THRESHOLD
        bits = (on * DOT_BITS[None, :, None, :]).sum(axis=(1, 3))

    cells = []
    for r in range(grid.height):
        row = []
        for c in range(grid.width):
            rgb = tuple(int(v) for v in means[r, c]) if opaque[r, c] else None
            pattern = int(bits[r, c]) if bits is not None else None
            row.append(Cell(luminance=float(levels[r, c]), color=rgb, pattern=pattern))
        cells.append(row)
    return cells
