"""Memory building blocks: grids, mirrored address ranges and bit helpers."""

from __future__ import annotations

from typing import Generic, List, TypeVar

T = TypeVar("T")


def _clone(value):
    return value.copy() if isinstance(value, Matrix) else value


class Matrix(Generic[T]):
    """Fixed-size two dimensional grid stored row by row."""

    def __init__(self, width: int, height: int, fill: T = 0) -> None:
        if width < 0 or height < 0:
            raise ValueError("matrix dimensions must not be negative")
        self.width = width
        self.height = height
        if isinstance(fill, Matrix):
            self._cells: List[T] = [fill.copy() for _ in range(width * height)]
        else:
            self._cells = [fill] * (width * height)

    def _index(self, y: int, x: int) -> int:
        if not (0 <= y < self.height and 0 <= x < self.width):
            raise IndexError(f"({y}, {x}) is outside a {self.width}x{self.height} matrix")
        return y * self.width + x

    def get(self, y: int, x: int) -> T:
        """Return the cell at row ``y`` and column ``x``."""
        return self._cells[self._index(y, x)]

    def set(self, y: int, x: int, value: T) -> None:
        """Store ``value`` at row ``y`` and column ``x``."""
        self._cells[self._index(y, x)] = value

    def set_region(self, y: int, x: int, width: int, height: int, value: T) -> None:
        """Fill a rectangle whose top-left corner is (``y``, ``x``)."""
        if width <= 0 or height <= 0:
            return
        self._index(y, x)
        self._index(y + height - 1, x + width - 1)
        for row in range(y, y + height):
            start = row * self.width + x
            self._cells[start:start + width] = [_clone(value) for _ in range(width)]

    def dump(self) -> List[T]:
        """Return all cells as a flat, row-major list."""
        return list(self._cells)

    def copy(self) -> "Matrix[T]":
        clone: Matrix[T] = Matrix(0, 0)
        clone.width = self.width
        clone.height = self.height
        clone._cells = [_clone(cell) for cell in self._cells]
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return (self.width, self.height, self._cells) == (other.width, other.height, other._cells)

    def __repr__(self) -> str:
        return f"Matrix(width={self.width}, height={self.height})"


class MirroredMemory:
    """A byte buffer repeated across the address range ``start``..``end`` inclusive."""

    def __init__(self, start: int, end: int, size: int) -> None:
        if size <= 0:
            raise ValueError("memory size must be positive")
        if end < start:
            raise ValueError("end address lies before start address")
        self.start_address = start
        self.end_address = end
        self.size = size
        self.data = bytearray(size)

    def lower_offset(self, address: int) -> int:
        """Offset into the underlying buffer for ``address``."""
        return (address - self.start_address) % self.size

    def contains(self, address: int) -> bool:
        return self.start_address <= address <= self.end_address

    def _require(self, address: int) -> None:
        if not self.contains(address):
            raise IndexError(
                f"address {address:#06x} outside {self.start_address:#06x}-{self.end_address:#06x}"
            )

    def read(self, address: int) -> int:
        return self.seek(address)

    def write(self, address: int, value: int) -> None:
        self._require(address)
        self.data[self.lower_offset(address)] = value & 0xFF

    def seek(self, address: int) -> int:
        """Read without side effects."""
        self._require(address)
        return self.data[self.lower_offset(address)]


def get_bits(value: int, start: int, end: int | None = None) -> int:
    """Bits ``start`` to ``end`` (inclusive) of ``value``; a single bit if ``end`` is omitted."""
    if end is None:
        end = start
    if start < 0 or end < start:
        raise ValueError("invalid bit range")
    return (value >> start) & ((1 << (end - start + 1)) - 1)


def flip_byte(value: int) -> int:
    """Reverse the bit order of a byte."""
    return int(f"{value & 0xFF:08b}"[::-1], 2)