import pytest

from pixt.charsets import ASCII, FULL_BLOCK, PIXEL_FALLBACK, GlyphRamp, Style
from pixt.engine import Cell
from pixt.errors import EmptyRampError
from pixt.mapper import map_glyph, map_grid, ramp_index, resolve_mapper


def test_ramp_index_stays_in_range():
    for length in range(1, 20):
        for step in range(101):
            index = ramp_index(step / 100, length)
            assert 0 <= index < length


def test_ramp_index_endpoints():
    for length in (1, 2, 9, 10, 70):
        assert ramp_index(0.0, length) == 0
        assert ramp_index(1.0, length) == length - 1


def test_ramp_index_clamps_out_of_range():
    assert ramp_index(-0.5, 5) == 0
    assert ramp_index(1.5, 5) == 4


def test_ramp_index_boundary_goes_to_denser_glyph():
    # 0.29 * 100 is 28.999999999999996 in floating point
    assert ramp_index(0.29, 101) == 29
    assert ramp_index(0.5, 9) == 4


def test_custom_ramp_scenario():
    ramp = GlyphRamp(" .:-=+*#%@")
    assert map_glyph(Cell(0.55, (0, 0, 0)), ramp, Style.CUSTOM) == "="


def test_ascii_red_is_low_mid():
    ramp = GlyphRamp(ASCII)
    assert map_glyph(Cell(0.299, (255, 0, 0)), ramp, Style.ASCII) == "-"


def test_braille_uses_pattern():
    mapper = resolve_mapper(Style.BRAILLE, None, colored=False)
    assert mapper(Cell(0.0, None, pattern=0)) == "\u2800"
    assert mapper(Cell(1.0, (255, 255, 255), pattern=0xFF)) == "\u28ff"
    assert mapper(Cell(0.5, (1, 1, 1), pattern=0x47)) == "\u2847"


def test_pixel_coloured_is_always_full_block():
    mapper = resolve_mapper(Style.PIXEL, None, colored=True)
    assert mapper(Cell(0.0, (0, 0, 0))) == FULL_BLOCK
    assert mapper(Cell(1.0, (255, 255, 255))) == FULL_BLOCK


def test_pixel_uncoloured_falls_back_to_density():
    mapper = resolve_mapper(Style.PIXEL, None, colored=False)
    assert mapper(Cell(0.0, (0, 0, 0))) == PIXEL_FALLBACK[0]
    assert mapper(Cell(1.0, (255, 255, 255))) == PIXEL_FALLBACK[-1]


def test_dots_ramp():
    ramp = GlyphRamp(" ⠂⠒⠕⠞⠟⠿")
    assert map_glyph(Cell(0.0, None), ramp, Style.DOTS) == " "
    assert map_glyph(Cell(1.0, (255, 255, 255)), ramp, Style.DOTS) == "⠿"


def test_ramp_style_without_ramp():
    with pytest.raises(EmptyRampError):
        resolve_mapper(Style.ASCII, None, colored=False)


def test_map_grid_keeps_colours():
    cells = [
        [Cell(0.0, (0, 0, 0)), Cell(1.0, (255, 255, 255))],
        [Cell(0.0, None), Cell(0.5, (10, 20, 30))],
    ]
    grid = map_grid(cells, resolve_mapper(Style.CUSTOM, GlyphRamp("ab"), colored=True))
    assert grid.glyphs == ["ab", "ab"]
    assert grid.colours == [[(0, 0, 0), (255, 255, 255)], [None, (10, 20, 30)]]
    assert (grid.width, grid.height) == (2, 2)
