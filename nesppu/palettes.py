"""PPU colour palette memory ($3F00-$3FFF)."""

from __future__ import annotations

from nesppu.colour import RawColour, raw_colour
from nesppu.memory import Matrix, MirroredMemory

_COLOUR_WIDTH = 3
_BORDER_WIDTH = 2
_BACKGROUND = RawColour(0x000000FF)
_SELECTED = RawColour(0xBBBBBBFF)


class ColourPalettes(MirroredMemory):
    """Eight four-colour palettes; sprite colour 0 entries mirror the background ones."""

    PALETTE_COUNT = 8
    COLOURS_PER_PALETTE = 4
    _MIRRORS = {0x10: 0x3F00, 0x14: 0x3F04, 0x18: 0x3F08, 0x1C: 0x3F0C}

    def __init__(self) -> None:
        super().__init__(0x3F00, 0x3FFF, 32)

    def _redirect(self, address: int) -> int:
        self._require(address)
        return self._MIRRORS.get(self.lower_offset(address), address)

    def read(self, address: int) -> int:
        return self.seek(address)

    def write(self, address: int, value: int) -> None:
        super().write(self._redirect(address), value)

    def seek(self, address: int) -> int:
        return super().seek(self._redirect(address))

    def pattern_value_to_colour(self, palette_id: int, pattern_value: int) -> RawColour:
        """Colour shown for a 2-bit pattern value drawn with the given palette."""
        if not 0 <= palette_id < self.PALETTE_COUNT:
            raise ValueError("palette id is outside the colour palettes")
        if not 0 <= pattern_value < self.COLOURS_PER_PALETTE:
            raise ValueError("pattern value is outside a colour palette")
        index = self.seek(self.start_address + self.COLOURS_PER_PALETTE * palette_id + pattern_value)
        return raw_colour(index & 0x3F)

    def generate_colour_palettes(self, selected_palette: int) -> Matrix[RawColour]:
        """Render all palettes side by side, highlighting ``selected_palette``."""
        width = _BORDER_WIDTH * (self.PALETTE_COUNT + 1) + _COLOUR_WIDTH * self.PALETTE_COUNT
        height = 2 * _BORDER_WIDTH + _COLOUR_WIDTH * self.COLOURS_PER_PALETTE
        output: Matrix[RawColour] = Matrix(width, height, _BACKGROUND)

        column = _BORDER_WIDTH
        for palette_id in range(self.PALETTE_COUNT):
            if palette_id == selected_palette:
                output.set_region(
                    0, column - _BORDER_WIDTH, _COLOUR_WIDTH + 2 * _BORDER_WIDTH, height, _SELECTED
                )
            for colour_num in range(self.COLOURS_PER_PALETTE):
                output.set_region(
                    _BORDER_WIDTH + _COLOUR_WIDTH * colour_num,
                    column,
                    _COLOUR_WIDTH,
                    _COLOUR_WIDTH,
                    self.pattern_value_to_colour(palette_id, colour_num),
                )
            column += _COLOUR_WIDTH + _BORDER_WIDTH
        return output