import pytest

from pixt.charsets import ASCII, BLOCK, DOTS, GlyphRamp, Style, build_ramp
from pixt.errors import EmptyRampError, MissingRampSourceError


def test_builtin_ramps():
    assert build_ramp(Style.ASCII).chars == " .-~+*%#@"
    assert build_ramp(Style.BLOCK).chars == " ░▒▓█"
    assert build_ramp(Style.DOTS).chars == " ⠂⠒⠕⠞⠟⠿"


def test_builtin_ramps_start_empty():
    for chars in (ASCII, BLOCK, DOTS):
        assert chars[0] == " "


def test_pixel_and_braille_have_no_ramp():
    assert build_ramp(Style.PIXEL) is None
    assert build_ramp(Style.BRAILLE) is None


def test_style_from_name():
    assert build_ramp("ascii").chars == ASCII
    assert Style("from-file") is Style.FROM_FILE


def test_custom_ramp_is_verbatim():
    ramp = build_ramp(Style.CUSTOM, charset="aab a")
    assert ramp.chars == "aab a"
    assert len(ramp) == 5
    assert ramp[3] == " "


def test_custom_ramp_empty():
    with pytest.raises(EmptyRampError):
        build_ramp(Style.CUSTOM, charset="")
    with pytest.raises(EmptyRampError):
        build_ramp(Style.CUSTOM)


def test_glyph_ramp_rejects_empty():
    with pytest.raises(EmptyRampError):
        GlyphRamp("")


def test_from_file_is_trimmed(tmp_path):
    path = tmp_path / "ramp.txt"
    path.write_text("\n  .:oO@ \n\n", encoding="utf-8")
    ramp = build_ramp(Style.FROM_FILE, path=path)
    assert ramp.chars == ".:oO@"


def test_from_file_missing(tmp_path):
    with pytest.raises(MissingRampSourceError, match="cannot read glyph ramp"):
        build_ramp(Style.FROM_FILE, path=tmp_path / "nope.txt")


def test_from_file_without_path():
    with pytest.raises(MissingRampSourceError):
        build_ramp(Style.FROM_FILE)


def test_from_file_blank(tmp_path):
    path = tmp_path / "blank.txt"
    path.write_text("  \n\t\n", encoding="utf-8")
    with pytest.raises(EmptyRampError):
        build_ramp(Style.FROM_FILE, path=path)
