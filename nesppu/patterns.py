"""Pattern tables decoded from cartridge CHR data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from nesppu.colour import RawColour
from nesppu.memory import Matrix, get_bits
from nesppu.palettes import ColourPalettes


@dataclass(frozen=True)
class BitTile:
    """One 8x8 tile as stored in CHR memory: a low and a high bit plane."""

    lsb_plane: Tuple[int, ...]
    msb_plane: Tuple[int, ...]

    @classmethod
    def from_bytes(cls, data: Sequence[int]) -> "BitTile":
        """Build a tile from its 16 CHR bytes (8 low-plane, then 8 high-plane)."""
        if len(data) != 2 * PatternTables.TILE_HEIGHT:
            raise ValueError("a tile is made of exactly 16 bytes")
        height = PatternTables.TILE_HEIGHT
        return cls(tuple(data[:height]), tuple(data[height:]))

    def decode(self) -> Matrix[int]:
        """Pattern values (0-3) laid out left to right, top to bottom."""
        pixels: Matrix[int] = Matrix(PatternTables.TILE_WIDTH, PatternTables.TILE_HEIGHT, 0)
        for row, (low, high) in enumerate(zip(self.lsb_plane, self.msb_plane)):
            for bit in range(PatternTables.TILE_WIDTH):
                value = (get_bits(high, bit) << 1) | get_bits(low, bit)
                # bit 7 is the leftmost pixel
                pixels.set(row, PatternTables.TILE_WIDTH - 1 - bit, value)
        return pixels


class PatternTables:
    """The two 16x16-tile pattern tables held in CHR ROM."""

    NUM_OF_TABLES = 2
    TABLE_WIDTH = 16  # tiles
    TABLE_HEIGHT = 16  # tiles
    TILE_WIDTH = 8  # pixels
    TILE_HEIGHT = 8  # pixels
    _TILE_BYTES = 16
    _TILES_PER_TABLE = TABLE_WIDTH * TABLE_HEIGHT
    CHR_SIZE = NUM_OF_TABLES * _TILES_PER_TABLE * _TILE_BYTES

    def __init__(self, chr_rom: Sequence[int]) -> None:
        data = bytes(chr_rom)
        if len(data) < self.CHR_SIZE:
            raise ValueError(f"CHR data must hold at least {self.CHR_SIZE} bytes")
        self._bit_tiles: List[List[BitTile]] = [
            [
                BitTile.from_bytes(data[offset:offset + self._TILE_BYTES])
                for offset in range(
                    table * self._TILES_PER_TABLE * self._TILE_BYTES,
                    (table + 1) * self._TILES_PER_TABLE * self._TILE_BYTES,
                    self._TILE_BYTES,
                )
            ]
            for table in range(self.NUM_OF_TABLES)
        ]
        self._tiles: List[List[Matrix[int]]] = [
            [bit_tile.decode() for bit_tile in table] for table in self._bit_tiles
        ]

    def _check_table(self, table: int) -> None:
        if not 0 <= table < self.NUM_OF_TABLES:
            raise IndexError(f"pattern table {table} does not exist")

    def tile(self, table: int, y: int, x: int) -> Matrix[int]:
        """Decoded tile at tile row ``y`` and column ``x`` of ``table``."""
        self._check_table(table)
        if not (0 <= y < self.TABLE_HEIGHT and 0 <= x < self.TABLE_WIDTH):
            raise IndexError(f"tile ({y}, {x}) is outside a pattern table")
        return self._tiles[table][y * self.TABLE_WIDTH + x]

    def bit_tile(self, table: int, index: int) -> BitTile:
        """Raw bit planes of the tile with pattern ``index`` in ``table``."""
        self._check_table(table)
        if not 0 <= index < self._TILES_PER_TABLE:
            raise IndexError(f"pattern index {index} is outside a pattern table")
        return self._bit_tiles[table][index]

    def pattern_display(self, palettes: ColourPalettes, palette_id: int) -> Matrix[RawColour]:
        """Both tables drawn side by side using the colours of ``palette_id``."""
        colours = [palettes.pattern_value_to_colour(palette_id, value) for value in range(4)]
        table_pixels = self.TILE_WIDTH * self.TABLE_WIDTH
        output: Matrix[RawColour] = Matrix(
            self.NUM_OF_TABLES * table_pixels, self.TILE_HEIGHT * self.TABLE_HEIGHT, RawColour(0)
        )
        for table in range(self.NUM_OF_TABLES):
            for y in range(self.TABLE_HEIGHT):
                for x in range(self.TABLE_WIDTH):
                    pixels = self.tile(table, y, x)
                    for row in range(self.TILE_HEIGHT):
                        for col in range(self.TILE_WIDTH):
                            output.set(
                                y * self.TILE_HEIGHT + row,
                                table * table_pixels + x * self.TILE_WIDTH + col,
                                colours[pixels.get(row, col)],
                            )
        return output