"""PPU nametable memory ($2000-$3EFF) with cartridge mirroring."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Tuple

from nesppu.memory import Matrix, MirroredMemory, get_bits

logger = logging.getLogger(__name__)

_TABLE_BYTES = 1024
_TILES_WIDE = 32
_TILES_HIGH = 30
_ATTRIBUTE_OFFSET = _TILES_HIGH * _TILES_WIDE


class MirrorType(enum.Enum):
    NOT_SET = "not_set"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class Point:
    x: int
    y: int


class NameTables(MirroredMemory):
    """Four logical nametables, two of which mirror the others."""

    NAMETABLES_WIDTH = 512  # pixels
    NAMETABLES_HEIGHT = 480  # pixels

    def __init__(self, mirror_type: MirrorType = MirrorType.NOT_SET) -> None:
        super().__init__(0x2000, 0x3EFF, 4096)
        self.mirror_type = mirror_type

    def _warn_if_unset(self) -> None:
        if self.mirror_type is MirrorType.NOT_SET:
            logger.warning(
                "mirroring type for PPU name tables hasn't been set; expect corrupt graphics"
            )

    def _redirect(self, address: int) -> int:
        self._require(address)
        offset = self.lower_offset(address)
        if self.mirror_type is MirrorType.VERTICAL:
            if offset >= 0x0800:
                return address - 0x0800
        elif self.mirror_type is MirrorType.HORIZONTAL:
            if 0x0400 <= offset < 0x0800 or offset >= 0x0C00:
                return address - 0x0400
        else:
            logger.error("name table mirroring %s is not supported", self.mirror_type.value)
        return address

    @staticmethod
    def _local_position(y: int, x: int) -> Tuple[int, int, int]:
        """Split a global tile position into (table, local y, local x)."""
        if not (0 <= y < 2 * _TILES_HIGH and 0 <= x < 2 * _TILES_WIDE):
            raise ValueError("y and x are outside the nametables")
        table = (2 if y >= _TILES_HIGH else 0) + (1 if x >= _TILES_WIDE else 0)
        return table, y % _TILES_HIGH, x % _TILES_WIDE

    def read(self, address: int) -> int:
        return self.seek(address)

    def write(self, address: int, value: int) -> None:
        self._warn_if_unset()
        super().write(self._redirect(address), value)

    def seek(self, address: int) -> int:
        self._warn_if_unset()
        return super().seek(self._redirect(address))

    def pattern_index(self, y: int, x: int) -> int:
        """Pattern table index stored for the tile at global tile position (y, x)."""
        table, local_y, local_x = self._local_position(y, x)
        offset = table * _TABLE_BYTES + local_y * _TILES_WIDE + local_x
        return self.seek(self.start_address + offset)

    def palette_index(self, y: int, x: int) -> int:
        """Attribute palette number for the tile at global tile position (y, x)."""
        table, local_y, local_x = self._local_position(y, x)
        offset = _ATTRIBUTE_OFFSET + table * _TABLE_BYTES + (local_y >> 2) * 8 + (local_x >> 2)
        area = self.seek(self.start_address + offset)

        bit = 0
        if local_y % 4 >= 2:
            bit += 4
        if local_x % 4 >= 2:
            bit += 2
        return get_bits(area, bit, bit + 1)

    def bg_fetch_tile(self, pixel: Point) -> Point:
        """Tile holding the given pixel, or (-1, -1) for an invalid pixel."""
        if pixel.x < 0:
            return Point(-1, -1)
        return Point(pixel.x >> 3, pixel.y >> 3)

    def first_name_table(self) -> Matrix[int]:
        """A 32x32 grid of pattern indices starting at the top-left tile."""
        patterns: Matrix[int] = Matrix(_TILES_WIDE, _TILES_WIDE, 0)
        for y in range(patterns.height):
            for x in range(patterns.width):
                patterns.set(y, x, self.pattern_index(y, x))
        return patterns