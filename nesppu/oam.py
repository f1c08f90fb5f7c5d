"""Object attribute memory: the primary sprite table and the per-scanline secondary one."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from nesppu.memory import MirroredMemory, flip_byte, get_bits
from nesppu.patterns import BitTile, PatternTables

_SPRITE_BYTES = 4


def _with_bit(value: int, bit: int, flag: bool) -> int:
    return value | (1 << bit) if flag else value & ~(1 << bit)


@dataclass
class Sprite:
    """A four-byte OAM entry."""

    pos_y: int = 0
    index: int = 0
    attributes: int = 0
    pos_x: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> "Sprite":
        pos_y, index, attributes, pos_x = data
        return cls(pos_y, index, attributes, pos_x)

    def to_bytes(self) -> bytes:
        return bytes(
            value & 0xFF for value in (self.pos_y, self.index, self.attributes, self.pos_x)
        )

    @property
    def palette(self) -> int:
        """Sprite palette number (0-3)."""
        return get_bits(self.attributes, 0, 1)

    @palette.setter
    def palette(self, value: int) -> None:
        self.attributes = (self.attributes & ~0x03) | (value & 0x03)

    @property
    def background_priority(self) -> bool:
        """True when the sprite is drawn behind the background."""
        return bool(get_bits(self.attributes, 5))

    @background_priority.setter
    def background_priority(self, flag: bool) -> None:
        self.attributes = _with_bit(self.attributes, 5, bool(flag))

    @property
    def flip_horizontally(self) -> bool:
        return bool(get_bits(self.attributes, 6))

    @flip_horizontally.setter
    def flip_horizontally(self, flag: bool) -> None:
        self.attributes = _with_bit(self.attributes, 6, bool(flag))

    @property
    def flip_vertically(self) -> bool:
        return bool(get_bits(self.attributes, 7))

    @flip_vertically.setter
    def flip_vertically(self, flag: bool) -> None:
        self.attributes = _with_bit(self.attributes, 7, bool(flag))


class OamPrimary(MirroredMemory):
    """The 64 sprites; sprite 0 has the highest priority."""

    TOTAL_SPRITES = 64

    def __init__(self) -> None:
        super().__init__(0x0, 0x100, self.TOTAL_SPRITES * _SPRITE_BYTES)
        self.data[:] = b"\xff" * self.size

    def _check_number(self, number: int, limit: int) -> None:
        if not 0 <= number < limit:
            raise ValueError(f"invalid sprite number {number}")

    def sprite(self, number: int) -> Sprite:
        """Decode sprite ``number`` (0-63)."""
        self._check_number(number, self.TOTAL_SPRITES)
        start = number * _SPRITE_BYTES
        return Sprite.from_bytes(bytes(self.data[start:start + _SPRITE_BYTES]))

    def set_sprite(self, number: int, sprite: Sprite) -> None:
        """Store ``sprite`` as entry ``number``."""
        self._check_number(number, self.TOTAL_SPRITES)
        start = number * _SPRITE_BYTES
        self.data[start:start + _SPRITE_BYTES] = sprite.to_bytes()


@dataclass(frozen=True)
class ScanlineTile:
    """One row of a sprite's bit planes, ordered so bit 0 is the leftmost pixel."""

    lsb: int
    msb: int


@dataclass(frozen=True)
class IndexedSprite:
    primary_index: int
    sprite: Sprite


@dataclass(frozen=True)
class IndexPattern:
    """Foreground pattern value; ``primary_index`` is -1 when no sprite covers the pixel."""

    primary_index: int
    sprite: Optional[Sprite] = None
    pattern: int = 0


@dataclass(frozen=True)
class IndexSpriteBuffer:
    primary_index: int
    sprite: Sprite
    scanline_tile: ScanlineTile


@dataclass(frozen=True)
class SpritePatternTiles:
    """Tile data of an 8x8 sprite, or of an 8x16 sprite when ``second`` is given."""

    first: BitTile
    second: Optional[BitTile] = None

    @property
    def num_of_tiles(self) -> int:
        return 1 if self.second is None else 2


class OamSecondary(OamPrimary):
    """Sprites selected for the next scanline and those being drawn on the current one."""

    def __init__(self) -> None:
        super().__init__()
        self._fetched_indices: List[int] = []
        self._active: List[IndexSpriteBuffer] = []

    def append_fetched_sprite(self, sprite: Sprite, primary_index: int) -> None:
        """Queue a sprite that appears on the next scanline."""
        count = len(self._fetched_indices)
        if count >= self.TOTAL_SPRITES:
            raise IndexError("secondary OAM is full")
        self.set_sprite(count, sprite)
        self._fetched_indices.append(primary_index)

    def sprite_buffer(self, scanline: int, sprite: Sprite, tiles: SpritePatternTiles) -> ScanlineTile:
        """The row of ``sprite`` that falls on ``scanline``."""
        tile_line = scanline - sprite.pos_y
        if tiles.second is None:
            if sprite.flip_vertically:
                tile_line = 7 - tile_line
            active = tiles.first
        else:
            if sprite.flip_vertically:
                tile_line = 15 - tile_line
            if tile_line < 8:
                active = tiles.first
            else:
                active = tiles.second
                tile_line %= PatternTables.TILE_HEIGHT

        if not 0 <= tile_line < PatternTables.TILE_HEIGHT:
            raise ValueError("scanline does not contain the sprite")

        lsb = active.lsb_plane[tile_line]
        msb = active.msb_plane[tile_line]
        if not sprite.flip_horizontally:
            lsb, msb = flip_byte(lsb), flip_byte(msb)
        return ScanlineTile(lsb, msb)

    def foreground_pixel(self, pixel_x: int) -> IndexPattern:
        """First non-transparent sprite pixel at ``pixel_x`` on the current scanline."""
        for entry in self._active:
            offset = pixel_x - entry.sprite.pos_x
            if 0 <= offset < PatternTables.TILE_WIDTH:
                tile = entry.scanline_tile
                pattern = (get_bits(tile.msb, offset) << 1) | get_bits(tile.lsb, offset)
                if pattern:
                    return IndexPattern(entry.primary_index, entry.sprite, pattern)
        return IndexPattern(-1)

    def fetched_sprite(self, number: int) -> IndexedSprite:
        """Fetched sprite ``number`` with its primary OAM index."""
        self._check_number(number, len(self._fetched_indices))
        return IndexedSprite(self._fetched_indices[number], self.sprite(number))

    def fetch_count(self) -> int:
        return len(self._fetched_indices)

    def clear_fetch_data(self) -> None:
        self.data[:] = b"\xff" * self.size
        self._fetched_indices.clear()

    def clear_active_buffer(self) -> None:
        self._active.clear()

    def append_to_active_buffer(self, entry: IndexSpriteBuffer) -> None:
        if len(self._active) >= self.TOTAL_SPRITES:
            raise IndexError("active sprite buffer is full")
        self._active.append(entry)