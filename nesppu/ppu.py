"""Cycle-by-cycle picture processing unit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from nesppu.colour import RawColour
from nesppu.memory import Matrix, flip_byte, get_bits
from nesppu.memory_map import PpuMemoryMap
from nesppu.nametables import NameTables, Point
from nesppu.oam import IndexSpriteBuffer, OamPrimary, SpritePatternTiles
from nesppu.patterns import BitTile, PatternTables
from nesppu.registers import BackgroundDrawRegisters, PpuRegisters

# scanlines
PRE_SCANLINE = -1
START_VISIBLE_SCANLINE = 0
LAST_VISIBLE_SCANLINE = 239
VBLANK_SCANLINE = 241
LAST_SCANLINE = 260

# cycles
START_CYCLE = 0
START_VISIBLE_CYCLE = 1
END_OF_LEFT_MOST_TILE_CYCLE = 8
START_SPRITE_EVALUATION_CYCLE = 65
LAST_VISIBLE_FETCH_CYCLE = 249
LAST_VISIBLE_CYCLE = 256
TRANSFER_SCROLL_X_CYCLE = 257
START_SPRITE_TILE_FETCH_CYCLE = 261
TRANSFER_SCROLL_Y_START_CYCLE = 304
TRANSFER_SCROLL_Y_END_CYCLE = 304
START_NEXT_SCANLINE_FETCHING_CYCLE = 321
LAST_NEXT_SCANLINE_FETCHING_CYCLE = 336
LAST_CYCLE = 340

SCREEN_WIDTH = 256
SCREEN_HEIGHT = 240
_BLACK = RawColour(0x000000FF)


def _c_mod(value: int, modulus: int) -> int:
    """Remainder that keeps the sign of ``value`` (truncating division)."""
    remainder = abs(value) % modulus
    return -remainder if value < 0 else remainder


@dataclass(frozen=True)
class _BackgroundFetch:
    lsb_pattern: int
    msb_pattern: int
    palette: int


@dataclass(frozen=True)
class _BackgroundPixel:
    transparent: bool
    colour: RawColour


@dataclass(frozen=True)
class _ForegroundPixel:
    transparent: bool
    colour: Optional[RawColour] = None
    front_of_background: bool = False
    primary_index: int = -1


class Ppu:
    """Renders one pixel per step into a 256x240 frame buffer."""

    def __init__(
        self,
        memory: Optional[PpuMemoryMap] = None,
        patterns: Optional[PatternTables] = None,
        on_nmi: Optional[Callable[[], None]] = None,
    ) -> None:
        self.memory = memory if memory is not None else PpuMemoryMap()
        self.patterns = patterns
        self.on_nmi = on_nmi
        self.framebuffer: Matrix[RawColour] = Matrix(SCREEN_WIDTH, SCREEN_HEIGHT, _BLACK)
        self._frame_count = 0
        self.disassemble_palette = 0

    @property
    def registers(self) -> PpuRegisters:
        return self.memory.registers

    def _require_patterns(self) -> PatternTables:
        if self.patterns is None:
            raise RuntimeError("no pattern tables loaded")
        return self.patterns

    def _bit_tile(self, table: int, index: int) -> BitTile:
        return self._require_patterns().bit_tile(table, index)

    def _rendering_enabled(self) -> bool:
        regs = self.registers
        return regs.show_sprites or regs.show_background

    @staticmethod
    def _next_position(cycle: int, line: int) -> Point:
        cycle += 1
        if cycle > LAST_CYCLE:
            cycle = 0
            line += 1
            if line > LAST_SCANLINE:
                line = PRE_SCANLINE
        return Point(cycle, line)

    def _next_fetch_pixel(self, cycle: int, line: int) -> Point:
        x, y = -1, -1
        if (PRE_SCANLINE <= line < LAST_VISIBLE_SCANLINE
                and START_NEXT_SCANLINE_FETCHING_CYCLE <= cycle <= LAST_NEXT_SCANLINE_FETCHING_CYCLE):
            x = cycle - START_NEXT_SCANLINE_FETCHING_CYCLE
            y = (line - START_VISIBLE_SCANLINE) + 1
        elif (START_VISIBLE_SCANLINE <= line <= LAST_VISIBLE_SCANLINE
                and START_VISIBLE_CYCLE <= cycle <= LAST_VISIBLE_FETCH_CYCLE):
            x = (cycle - START_VISIBLE_CYCLE) + 2 * PatternTables.TILE_HEIGHT
            y = line - START_VISIBLE_SCANLINE

        x += self.registers.active_scroll_x()
        y += self.registers.active_scroll_y()
        return Point(
            _c_mod(x, NameTables.NAMETABLES_WIDTH), _c_mod(y, NameTables.NAMETABLES_HEIGHT)
        )

    def _background_fetch(self, cycle: int, line: int) -> Optional[_BackgroundFetch]:
        regs = self.registers
        vregs = regs.vregs
        nametables = self.memory.nametables

        if PRE_SCANLINE <= line <= LAST_VISIBLE_SCANLINE and cycle == TRANSFER_SCROLL_X_CYCLE:
            if self._rendering_enabled():
                regs.transfer_scroll_x()
        if (line == PRE_SCANLINE
                and TRANSFER_SCROLL_Y_START_CYCLE <= cycle <= TRANSFER_SCROLL_Y_END_CYCLE):
            if self._rendering_enabled():
                regs.transfer_scroll_y()

        pixel = self._next_fetch_pixel(cycle, line)
        if pixel.x < 0 or pixel.y < 0:
            return None

        phase = cycle % 8
        if phase == 1:
            tile = nametables.bg_fetch_tile(pixel)
            vregs.next_nametable_index = nametables.pattern_index(tile.y, tile.x)
            return _BackgroundFetch(
                vregs.background_fetch_tile_lsb,
                vregs.background_fetch_tile_msb,
                vregs.next_attribute_index,
            )
        if phase == 3:
            tile = nametables.bg_fetch_tile(self._next_fetch_pixel(cycle - 2, line))
            vregs.next_attribute_index = nametables.palette_index(tile.y, tile.x)
        elif phase in (5, 7):
            bit_tile = self._bit_tile(regs.background_pattern_table, vregs.next_nametable_index)
            fetched = self._next_fetch_pixel(cycle - (phase - 1), line)
            if fetched.y < 0:
                raise ValueError("invalid background fetch")
            row = fetched.y % PatternTables.TILE_HEIGHT
            if phase == 5:
                vregs.background_fetch_tile_lsb = flip_byte(bit_tile.lsb_plane[row])
            else:
                vregs.background_fetch_tile_msb = flip_byte(bit_tile.msb_plane[row])
        return None

    def _sprite_fetch(self, cycle: int, line: int) -> None:
        next_line = line + 1
        if next_line > LAST_VISIBLE_SCANLINE:
            return
        regs = self.registers
        primary = self.memory.primary_oam
        secondary = self.memory.secondary_oam

        if cycle == START_VISIBLE_CYCLE:
            secondary.clear_fetch_data()
        elif cycle == START_SPRITE_EVALUATION_CYCLE:
            height = PatternTables.TILE_HEIGHT * (2 if regs.sprite_size else 1)
            for number in range(OamPrimary.TOTAL_SPRITES):
                sprite = primary.sprite(number)
                if sprite.pos_y <= next_line < sprite.pos_y + height:
                    secondary.append_fetched_sprite(sprite, number)
            regs.sprite_overflow = secondary.fetch_count() > 8
        elif cycle == START_SPRITE_TILE_FETCH_CYCLE:
            secondary.clear_active_buffer()
            for number in range(secondary.fetch_count()):
                fetched = secondary.fetched_sprite(number)
                index = fetched.sprite.index
                if not regs.sprite_size:
                    tiles = SpritePatternTiles(self._bit_tile(regs.sprite_8x8_pattern_table, index))
                else:
                    table = get_bits(index, 0)
                    pattern = get_bits(index, 1, 7)
                    tiles = SpritePatternTiles(
                        self._bit_tile(table, pattern), self._bit_tile(table, pattern + 1)
                    )
                secondary.append_to_active_buffer(
                    IndexSpriteBuffer(
                        fetched.primary_index,
                        fetched.sprite,
                        secondary.sprite_buffer(next_line, fetched.sprite, tiles),
                    )
                )

    def _background_pixel(self, cycle: int, bg: BackgroundDrawRegisters) -> _BackgroundPixel:
        regs = self.registers
        palettes = self.memory.palettes
        if cycle < END_OF_LEFT_MOST_TILE_CYCLE and not regs.show_background_leftmost:
            return _BackgroundPixel(True, palettes.pattern_value_to_colour(0, 0))

        offset = (cycle - START_VISIBLE_CYCLE) % 8 + regs.active_scroll_x() % 8
        pattern = (get_bits(bg.msb_pattern_plane, offset) << 1) | get_bits(bg.lsb_pattern_plane, offset)
        attribute = (get_bits(bg.msb_palette_plane, offset) << 1) | get_bits(bg.lsb_palette_plane, offset)
        colour = palettes.pattern_value_to_colour(attribute, pattern)
        return _BackgroundPixel(pattern == 0, colour)

    def _foreground_pixel(self, cycle: int) -> _ForegroundPixel:
        if cycle < END_OF_LEFT_MOST_TILE_CYCLE and not self.registers.show_sprites_leftmost:
            return _ForegroundPixel(True)
        found = self.memory.secondary_oam.foreground_pixel(cycle - START_VISIBLE_CYCLE)
        if found.primary_index < 0 or found.sprite is None:
            return _ForegroundPixel(True)
        sprite = found.sprite
        colour = self.memory.palettes.pattern_value_to_colour(4 + sprite.palette, found.pattern)
        return _ForegroundPixel(
            transparent=found.pattern == 0,
            colour=colour,
            front_of_background=not sprite.background_priority,
            primary_index=found.primary_index,
        )

    def _final_pixel(self, bg: _BackgroundPixel, fg: _ForegroundPixel, cycle: int) -> RawColour:
        regs = self.registers
        if not regs.show_sprites or fg.transparent or fg.colour is None:
            return bg.colour
        if not regs.show_background or bg.transparent:
            return fg.colour

        if fg.primary_index == 0:
            if cycle > END_OF_LEFT_MOST_TILE_CYCLE or (
                regs.show_background_leftmost and regs.show_sprites_leftmost
            ):
                if cycle != 255:
                    regs.sprite_zero_hit = True
        return fg.colour if fg.front_of_background else bg.colour

    def power_cycle(self) -> None:
        """Reset registers, position and counters to their power-up state."""
        self.registers.power_cycle()
        self.memory.scanline = PRE_SCANLINE
        self.memory.cycle = START_CYCLE
        self.memory.total_cycles = 0
        self._frame_count = 0

    def step(self) -> None:
        """Simulate one PPU cycle."""
        line = self.memory.scanline
        cycle = self.memory.cycle
        regs = self.registers

        if line == PRE_SCANLINE and cycle == START_VISIBLE_CYCLE:
            regs.vertical_blank = False
            regs.sprite_overflow = False
            regs.sprite_zero_hit = False
            self._frame_count += 1
        elif line == VBLANK_SCANLINE and cycle == START_VISIBLE_CYCLE:
            regs.vertical_blank = True
            if regs.generate_nmi and self.on_nmi is not None:
                self.on_nmi()

        bg = regs.vregs.background
        fetched = self._background_fetch(cycle, line)
        if fetched is not None:
            bg.lsb_pattern_plane = (fetched.lsb_pattern << 8) | (bg.lsb_pattern_plane >> 8)
            bg.msb_pattern_plane = (fetched.msb_pattern << 8) | (bg.msb_pattern_plane >> 8)
            lsb_palette = 0xFF if get_bits(fetched.palette, 0) else 0x00
            msb_palette = 0xFF if get_bits(fetched.palette, 1) else 0x00
            bg.lsb_palette_plane = (lsb_palette << 8) | (bg.lsb_palette_plane >> 8)
            bg.msb_palette_plane = (msb_palette << 8) | (bg.msb_palette_plane >> 8)

        self._sprite_fetch(cycle, line)

        if (START_VISIBLE_SCANLINE <= line <= LAST_VISIBLE_SCANLINE
                and START_VISIBLE_CYCLE <= cycle <= LAST_VISIBLE_CYCLE):
            colour = self._final_pixel(
                self._background_pixel(cycle, bg), self._foreground_pixel(cycle), cycle
            )
            self.framebuffer.set(line - START_VISIBLE_SCANLINE, cycle - START_VISIBLE_CYCLE, colour)

        following = self._next_position(cycle, line)
        self.memory.scanline = following.y
        self.memory.cycle = following.x
        self.memory.total_cycles += 1

    def frame(self) -> Matrix[RawColour]:
        """The 256x240 output picture."""
        return self.framebuffer

    def frame_count(self) -> int:
        """Number of frames started since power-up."""
        return self._frame_count

    def pattern_table_display(self) -> Matrix[RawColour]:
        """Both pattern tables drawn with the selected palette."""
        return self._require_patterns().pattern_display(
            self.memory.palettes, self.disassemble_palette
        )

    def colour_palette_display(self) -> Matrix[RawColour]:
        """All palettes drawn side by side with the selected one highlighted."""
        return self.memory.palettes.generate_colour_palettes(self.disassemble_palette)