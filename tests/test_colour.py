import pytest

from nesppu.colour import RawColour, raw_colour


def test_first_system_colour():
    assert raw_colour(0) == RawColour(0x666666FF)


def test_white_channels():
    white = raw_colour(32)
    assert (white.red, white.green, white.blue, white.alpha) == (0xFF, 0xFE, 0xFF, 0xFF)


def test_black_entry():
    black = raw_colour(13)
    assert black.raw == 0x000000FF
    assert (black.red, black.green, black.blue) == (0, 0, 0)


def test_default_index_is_last_entry():
    assert raw_colour() == raw_colour(63)
    assert raw_colour().raw == 0x000000FF


@pytest.mark.parametrize("index", range(64))
def test_every_colour_is_opaque_and_round_trips(index):
    colour = raw_colour(index)
    assert colour.alpha == 0xFF
    assert RawColour.from_channels(colour.red, colour.green, colour.blue, colour.alpha) == colour


@pytest.mark.parametrize("index", [-1, 64, 255])
def test_out_of_range_index(index):
    with pytest.raises(IndexError):
        raw_colour(index)