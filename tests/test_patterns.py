import pytest

from nesppu.colour import raw_colour
from nesppu.palettes import ColourPalettes
from nesppu.patterns import BitTile, PatternTables

PATTERN = [
    1, 0, 0, 0, 0, 0, 0, 2,
    0, 1, 0, 0, 0, 0, 2, 0,
    0, 0, 1, 0, 0, 2, 0, 0,
    0, 0, 0, 3, 3, 0, 0, 0,
    0, 0, 0, 3, 3, 0, 0, 0,
    0, 0, 2, 0, 0, 1, 0, 0,
    0, 2, 0, 0, 0, 0, 1, 0,
    2, 0, 0, 0, 0, 0, 0, 3,
]
LOWER_PLANE = [0x80, 0x40, 0x20, 0x18, 0x18, 0x04, 0x02, 0x01]
UPPER_PLANE = [0x01, 0x02, 0x04, 0x18, 0x18, 0x20, 0x40, 0x81]


def _chr_rom():
    data = bytearray(0x2000)
    data[0:8] = bytes(LOWER_PLANE)
    data[8:16] = bytes(UPPER_PLANE)
    offset = 0x2000 - 16
    data[offset:offset + 8] = bytes(LOWER_PLANE)
    data[offset + 8:offset + 16] = bytes(UPPER_PLANE)
    return data


@pytest.fixture
def tables():
    return PatternTables(_chr_rom())


def test_get_tile(tables):
    assert tables.tile(0, 0, 0).dump() == PATTERN
    assert tables.tile(0, 0, 1).dump() == [0] * 64
    assert tables.tile(1, 15, 15).dump() == PATTERN
    assert tables.tile(1, 15, 14).dump() == [0] * 64


def test_bit_tile_planes(tables):
    first = tables.bit_tile(0, 0)
    assert first == BitTile(tuple(LOWER_PLANE), tuple(UPPER_PLANE))
    assert tables.bit_tile(1, 255) == first
    assert tables.bit_tile(0, 1) == BitTile((0,) * 8, (0,) * 8)


def test_bit_tile_decode_matches_table(tables):
    assert tables.bit_tile(1, 255).decode().dump() == PATTERN


def test_short_chr_rom_rejected():
    with pytest.raises(ValueError):
        PatternTables(bytes(100))


@pytest.mark.parametrize("args", [(2, 0, 0), (0, 16, 0), (0, 0, -1)])
def test_tile_out_of_range(tables, args):
    with pytest.raises(IndexError):
        tables.tile(*args)


def test_bit_tile_out_of_range(tables):
    with pytest.raises(IndexError):
        tables.bit_tile(0, 256)
    with pytest.raises(IndexError):
        tables.bit_tile(-1, 0)


def test_pattern_display(tables):
    palettes = ColourPalettes()
    for offset, colour in enumerate((0x0F, 0x06, 0x12, 0x33)):
        palettes.write(0x3F00 + offset, colour)

    display = tables.pattern_display(palettes, 0)
    assert display.width == 256
    assert display.height == 128

    assert display.get(0, 0) == raw_colour(0x06)
    assert display.get(0, 1) == raw_colour(0x0F)
    assert display.get(0, 7) == raw_colour(0x12)
    assert display.get(7, 7) == raw_colour(0x33)
    assert display.get(127, 255) == raw_colour(0x33)
    assert display.get(120, 248) == raw_colour(0x06)
    assert display.get(60, 60) == raw_colour(0x0F)


def test_pattern_display_invalid_palette(tables):
    with pytest.raises(ValueError):
        tables.pattern_display(ColourPalettes(), 8)