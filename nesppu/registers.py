"""The eight memory-mapped PPU registers and the PPU's internal scroll/address state."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field

from nesppu.memory import MirroredMemory, get_bits


class PpuAddress(enum.IntEnum):
    PPUCTRL = 0x2000
    PPUMASK = 0x2001
    PPUSTATUS = 0x2002
    OAMADDR = 0x2003
    OAMDATA = 0x2004
    PPUSCROLL = 0x2005
    PPUADDR = 0x2006
    PPUDATA = 0x2007


class _ByteBits:
    """Bits ``start``..``end`` of register byte ``offset``, as a bool when ``flag``."""

    def __init__(self, offset: int, start: int, end: int | None = None, flag: bool = False) -> None:
        self.offset = offset
        self.start = start
        self.end = start if end is None else end
        self.flag = flag

    def __get__(self, obj, owner=None):
        if obj is None:
            return self
        value = get_bits(obj.data[self.offset], self.start, self.end)
        return bool(value) if self.flag else value

    def __set__(self, obj, value) -> None:
        mask = ((1 << (self.end - self.start + 1)) - 1) << self.start
        current = obj.data[self.offset]
        obj.data[self.offset] = ((current & ~mask) | ((int(value) << self.start) & mask)) & 0xFF


class _WordBits:
    """Bits ``start``..``end`` of a 16-bit ``value`` attribute."""

    def __init__(self, start: int, end: int | None = None, flag: bool = False) -> None:
        self.start = start
        self.end = start if end is None else end
        self.flag = flag

    def __get__(self, obj, owner=None):
        if obj is None:
            return self
        value = get_bits(obj.value, self.start, self.end)
        return bool(value) if self.flag else value

    def __set__(self, obj, value) -> None:
        mask = ((1 << (self.end - self.start + 1)) - 1) << self.start
        obj.value = ((obj.value & ~mask) | ((int(value) << self.start) & mask)) & 0xFFFF


@dataclass
class LoopyRegister:
    """Internal register shared by scrolling (PPUSCROLL) and VRAM addressing (PPUADDR)."""

    value: int = 0

    scroll_x_coarse = _WordBits(0, 4)
    scroll_y_coarse = _WordBits(5, 9)
    scroll_x_msb = _WordBits(10)
    scroll_y_msb = _WordBits(11)
    scroll_y_fine = _WordBits(12, 14)
    upper = _WordBits(8, 15)
    lower = _WordBits(0, 7)

    def copy(self) -> "LoopyRegister":
        return dataclasses.replace(self)


@dataclass
class BackgroundDrawRegisters:
    """Scroll state and the 16-bit background shift registers."""

    active_loopy: LoopyRegister = field(default_factory=LoopyRegister)
    next_loopy: LoopyRegister = field(default_factory=LoopyRegister)
    scroll_x_fine: int = 0
    # PPUADDR: False writes the high byte; PPUSCROLL: False writes the X scroll.
    loopy_latch: bool = False
    lsb_pattern_plane: int = 0
    msb_pattern_plane: int = 0
    lsb_palette_plane: int = 0
    msb_palette_plane: int = 0


@dataclass
class VirtualRegisters:
    """State kept inside the PPU that is not visible on the bus."""

    ppu_data_read_buffer: int = 0
    background: BackgroundDrawRegisters = field(default_factory=BackgroundDrawRegisters)
    next_nametable_index: int = 0
    next_attribute_index: int = 0
    background_fetch_tile_lsb: int = 0
    background_fetch_tile_msb: int = 0


class PpuRegisters(MirroredMemory):
    """PPUCTRL..PPUDATA, mirrored every eight bytes across $2000-$3FFF."""

    RAW_LEN = 8

    ppuctrl = _ByteBits(0, 0, 7)
    scroll_x_msb = _ByteBits(0, 0, flag=True)
    scroll_y_msb = _ByteBits(0, 1, flag=True)
    vram_direction = _ByteBits(0, 2, flag=True)
    sprite_8x8_pattern_table = _ByteBits(0, 3)
    background_pattern_table = _ByteBits(0, 4)
    sprite_size = _ByteBits(0, 5, flag=True)
    ppu_master = _ByteBits(0, 6, flag=True)
    generate_nmi = _ByteBits(0, 7, flag=True)

    ppumask = _ByteBits(1, 0, 7)
    greyscale = _ByteBits(1, 0, flag=True)
    show_background_leftmost = _ByteBits(1, 1, flag=True)
    show_sprites_leftmost = _ByteBits(1, 2, flag=True)
    show_background = _ByteBits(1, 3, flag=True)
    show_sprites = _ByteBits(1, 4, flag=True)
    emphasize_red = _ByteBits(1, 5, flag=True)
    emphasize_green = _ByteBits(1, 6, flag=True)
    emphasize_blue = _ByteBits(1, 7, flag=True)

    ppustatus = _ByteBits(2, 0, 7)
    lsb_reg_written = _ByteBits(2, 0, 4)
    sprite_overflow = _ByteBits(2, 5, flag=True)
    sprite_zero_hit = _ByteBits(2, 6, flag=True)
    vertical_blank = _ByteBits(2, 7, flag=True)

    oamaddr = _ByteBits(3, 0, 7)
    oamdata = _ByteBits(4, 0, 7)
    ppuscroll = _ByteBits(5, 0, 7)
    ppuaddr = _ByteBits(6, 0, 7)
    ppudata = _ByteBits(7, 0, 7)

    def __init__(self) -> None:
        super().__init__(0x2000, 0x3FFF, self.RAW_LEN)
        self.vregs = VirtualRegisters()
        self.power_cycle()

    def power_cycle(self) -> None:
        """Clear every register, visible and internal."""
        self.data[:] = bytes(self.size)
        self.vregs = VirtualRegisters()

    def read(self, address: int) -> int:
        if address == PpuAddress.PPUSTATUS:
            value = (self.ppustatus & 0xE0) | (self.vregs.ppu_data_read_buffer & 0x1F)
            self.vertical_blank = False
            self.vregs.background.loopy_latch = False
            return value
        return self.seek(address)

    def write(self, address: int, value: int) -> None:
        bg = self.vregs.background
        if address == PpuAddress.PPUCTRL:
            bg.next_loopy.scroll_x_msb = get_bits(value, 0)
            bg.next_loopy.scroll_y_msb = get_bits(value, 1)
        elif address == PpuAddress.PPUSCROLL:
            if not bg.loopy_latch:
                bg.next_loopy.scroll_x_coarse = get_bits(value, 3, 7)
                bg.scroll_x_fine = get_bits(value, 0, 2)
                bg.loopy_latch = True
            else:
                bg.next_loopy.scroll_y_coarse = get_bits(value, 3, 7)
                bg.next_loopy.scroll_y_fine = get_bits(value, 0, 2)
                bg.loopy_latch = False
        elif address == PpuAddress.PPUADDR:
            if not bg.loopy_latch:
                bg.next_loopy.upper = get_bits(value, 0, 5)
                bg.loopy_latch = True
            else:
                bg.next_loopy.lower = value
                bg.active_loopy = bg.next_loopy.copy()
                bg.loopy_latch = False
        super().write(address, value)

    def seek(self, address: int) -> int:
        return super().seek(address)

    def transfer_scroll_x(self) -> None:
        """Copy the horizontal scroll bits from the pending to the active register."""
        bg = self.vregs.background
        bg.active_loopy.scroll_x_msb = bg.next_loopy.scroll_x_msb
        bg.active_loopy.scroll_x_coarse = bg.next_loopy.scroll_x_coarse

    def transfer_scroll_y(self) -> None:
        """Copy the vertical scroll bits from the pending to the active register."""
        bg = self.vregs.background
        bg.active_loopy.scroll_y_msb = bg.next_loopy.scroll_y_msb
        bg.active_loopy.scroll_y_coarse = bg.next_loopy.scroll_y_coarse
        bg.active_loopy.scroll_y_fine = bg.next_loopy.scroll_y_fine

    def active_scroll_x(self) -> int:
        bg = self.vregs.background
        active = bg.active_loopy
        return (int(active.scroll_x_msb) << 8) + (active.scroll_x_coarse << 3) + bg.scroll_x_fine

    def active_scroll_y(self) -> int:
        active = self.vregs.background.active_loopy
        return (int(active.scroll_y_msb) << 8) + (active.scroll_y_coarse << 3) + active.scroll_y_fine

    def vram_address(self) -> int:
        return self.vregs.background.active_loopy.value

    def increment_vram_address(self) -> None:
        """Advance the VRAM address by 1 (across) or 32 (down)."""
        active = self.vregs.background.active_loopy
        active.value = (active.value + (32 if self.vram_direction else 1)) & 0xFFFF