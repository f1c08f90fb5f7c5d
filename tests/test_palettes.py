import pytest

from nesppu.colour import RawColour, raw_colour
from nesppu.palettes import ColourPalettes

TEST_ROM_PALETTES = [
    0x0F, 0x06, 0x12, 0x33, 0x33, 0x06, 0x12, 0x33,
    0x38, 0x06, 0x12, 0x33, 0x3A, 0x06, 0x12, 0x33,
]


@pytest.fixture
def loaded():
    palettes = ColourPalettes()
    for offset, value in enumerate(TEST_ROM_PALETTES):
        palettes.write(0x3F00 + offset, value)
    return palettes


def test_cleared_by_default():
    palettes = ColourPalettes()
    assert palettes.size == 32
    assert all(palettes.read(palettes.start_address + i) == 0 for i in range(palettes.size))


def test_write_and_read(loaded):
    assert loaded.read(0x3F00) == 0x0F
    assert loaded.read(0x3F01) == 0x06
    assert loaded.read(0x3F03) == 0x33

    assert loaded.read(0x3F00) == 0x0F
    assert loaded.read(0x3F10) == 0x0F

    loaded.write(0x3F0C, 0x3A)
    loaded.write(0x3F0D, 0x06)
    loaded.write(0x3F0F, 0x33)
    assert loaded.read(0x3F0C) == 0x3A
    assert loaded.read(0x3F0D) == 0x06
    assert loaded.read(0x3F0F) == 0x33

    assert loaded.read(0x3F0C) == 0x3A
    assert loaded.read(0x3F1C) == 0x3A


def test_mirrored_write_lands_in_background_entry():
    palettes = ColourPalettes()
    palettes.write(0x3F14, 0x21)
    assert palettes.read(0x3F04) == 0x21
    assert palettes.seek(0x3F34) == 0x21


def test_pattern_value_to_colour(loaded):
    for palette in range(4):
        for colour_num in range(4):
            expected = raw_colour(TEST_ROM_PALETTES[palette * 4 + colour_num])
            assert loaded.pattern_value_to_colour(palette, colour_num) == expected
    assert loaded.read(0x3F00) == 0x0F


@pytest.mark.parametrize("palette_id, pattern_value", [(8, 0), (-1, 0), (0, 4), (0, -1)])
def test_pattern_value_to_colour_bounds(palette_id, pattern_value):
    with pytest.raises(ValueError):
        ColourPalettes().pattern_value_to_colour(palette_id, pattern_value)


def test_access_outside_range():
    with pytest.raises(IndexError):
        ColourPalettes().read(0x3EFF)


def test_generate_colour_palettes_layout(loaded):
    display = loaded.generate_colour_palettes(0)
    assert display.width == 42
    assert display.height == 16
    assert display.get(0, 0) == RawColour(0xBBBBBBFF)
    assert display.get(2, 2) == loaded.pattern_value_to_colour(0, 0)
    assert display.get(11, 4) == loaded.pattern_value_to_colour(0, 3)
    assert display.get(2, 7) == loaded.pattern_value_to_colour(1, 0)


def test_generate_colour_palettes_unselected_border(loaded):
    display = loaded.generate_colour_palettes(1)
    assert display.get(0, 0) == RawColour(0x000000FF)
    assert display.get(0, 5) == RawColour(0xBBBBBBFF)