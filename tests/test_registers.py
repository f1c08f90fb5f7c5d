import pytest

from nesppu.registers import LoopyRegister, PpuAddress, PpuRegisters


def test_raw_length():
    registers = PpuRegisters()
    assert registers.RAW_LEN == 8
    assert len(registers.data) == 8


def test_registers_cleared_by_default():
    registers = PpuRegisters()
    vregs = registers.vregs
    bg = vregs.background
    assert vregs.ppu_data_read_buffer == 0
    assert bg.active_loopy.value == 0
    assert bg.next_loopy.value == 0
    assert bg.scroll_x_fine == 0
    assert bg.loopy_latch is False
    assert bg.lsb_pattern_plane == 0
    assert bg.msb_pattern_plane == 0
    assert bg.lsb_palette_plane == 0
    assert bg.msb_palette_plane == 0
    assert vregs.next_nametable_index == 0
    assert vregs.next_attribute_index == 0
    assert vregs.background_fetch_tile_lsb == 0
    assert vregs.background_fetch_tile_msb == 0
    assert [registers.seek(0x2000 + i) for i in range(8)] == [0] * 8


def test_write_to_and_read_from_raw():
    registers = PpuRegisters()
    registers.ppuctrl = 24
    assert registers.read(0x2000) == 24
    assert registers.read(0x2001) == 0
    registers.oamaddr = 203
    assert registers.read(0x2003) == 203
    assert registers.read(0x2004) == 0
    registers.ppudata = 138
    assert registers.read(0x2006) == 0
    assert registers.read(0x2007) == 138


def test_ppuctrl_bits():
    registers = PpuRegisters()
    registers.ppuctrl = 167
    assert registers.scroll_x_msb == 1
    assert registers.scroll_y_msb == 1
    assert registers.vram_direction == 1
    assert registers.sprite_8x8_pattern_table == 0
    assert registers.background_pattern_table == 0
    assert registers.sprite_size == 1
    assert registers.ppu_master == 0
    assert registers.generate_nmi == 1

    registers.scroll_x_msb = 1
    registers.scroll_y_msb = 0
    registers.sprite_8x8_pattern_table = 1
    assert registers.ppuctrl == 173


def test_ppumask_bits():
    registers = PpuRegisters()
    registers.ppumask = 89
    assert registers.greyscale == 1
    assert registers.show_background_leftmost == 0
    assert registers.show_sprites_leftmost == 0
    assert registers.show_background == 1
    assert registers.show_sprites == 1
    assert registers.emphasize_red == 0
    assert registers.emphasize_green == 1
    assert registers.emphasize_blue == 0

    registers.show_sprites = 0
    registers.emphasize_red = 1
    assert registers.ppumask == 105


def test_ppustatus_bits():
    registers = PpuRegisters()
    registers.ppustatus = 178
    assert registers.lsb_reg_written == 18
    assert registers.sprite_overflow == 1
    assert registers.sprite_zero_hit == 0
    assert registers.vertical_blank == 1

    registers.lsb_reg_written = 7
    registers.vertical_blank = 0
    assert registers.ppustatus == 39


def test_status_read_merges_buffer_and_clears_flags():
    registers = PpuRegisters()
    registers.ppustatus = 0xFF
    registers.vregs.ppu_data_read_buffer = 0x0A
    registers.vregs.background.loopy_latch = True
    assert registers.read(PpuAddress.PPUSTATUS) == 0xEA
    assert registers.vertical_blank is False
    assert registers.vregs.background.loopy_latch is False


def test_scroll_writes_and_transfer():
    registers = PpuRegisters()
    registers.write(PpuAddress.PPUSCROLL, 0xAB)
    registers.write(PpuAddress.PPUSCROLL, 0x5D)
    bg = registers.vregs.background
    assert bg.next_loopy.scroll_x_coarse == 21
    assert bg.scroll_x_fine == 3
    assert bg.next_loopy.scroll_y_coarse == 11
    assert bg.next_loopy.scroll_y_fine == 5
    assert bg.loopy_latch is False

    assert registers.active_scroll_x() == 3
    registers.transfer_scroll_x()
    assert registers.active_scroll_x() == 171
    assert registers.active_scroll_y() == 0
    registers.transfer_scroll_y()
    assert registers.active_scroll_y() == 93


def test_ppuctrl_sets_scroll_msbs():
    registers = PpuRegisters()
    registers.write(PpuAddress.PPUCTRL, 0x03)
    registers.transfer_scroll_x()
    registers.transfer_scroll_y()
    assert registers.active_scroll_x() == 256
    assert registers.active_scroll_y() == 256
    assert registers.ppuctrl == 0x03


def test_ppuaddr_two_writes_set_vram_address():
    registers = PpuRegisters()
    registers.write(PpuAddress.PPUADDR, 0xFF)
    assert registers.vram_address() == 0
    registers.write(PpuAddress.PPUADDR, 0x10)
    assert registers.vram_address() == 0x3F10


@pytest.mark.parametrize("direction, expected", [(0, 0x2001), (1, 0x2020)])
def test_increment_vram_address(direction, expected):
    registers = PpuRegisters()
    registers.write(PpuAddress.PPUADDR, 0x20)
    registers.write(PpuAddress.PPUADDR, 0x00)
    registers.vram_direction = direction
    registers.increment_vram_address()
    assert registers.vram_address() == expected


def test_power_cycle_resets_state():
    registers = PpuRegisters()
    registers.ppumask = 0x1E
    registers.write(PpuAddress.PPUSCROLL, 0xFF)
    registers.power_cycle()
    assert registers.ppumask == 0
    assert registers.vregs.background.scroll_x_fine == 0
    assert registers.vregs.background.loopy_latch is False


def test_registers_mirror_every_eight_bytes():
    registers = PpuRegisters()
    registers.write(0x2000, 122)
    assert registers.read(0x2008) == 122
    assert registers.read(0x3FF8) == 122


def test_loopy_register_fields():
    loopy = LoopyRegister()
    loopy.scroll_x_coarse = 31
    loopy.scroll_y_fine = 7
    assert loopy.value == 0x701F
    assert loopy.upper == 0x70
    assert loopy.lower == 0x1F
    clone = loopy.copy()
    clone.lower = 0
    assert loopy.lower == 0x1F