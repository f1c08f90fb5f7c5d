"""The PPU's view of its own address space ($2000-$3FFF)."""

from __future__ import annotations

import logging

from nesppu.nametables import NameTables
from nesppu.oam import OamPrimary, OamSecondary
from nesppu.palettes import ColourPalettes
from nesppu.registers import PpuAddress, PpuRegisters

logger = logging.getLogger(__name__)


class PpuMemoryMap:
    """Routes PPU bus accesses to nametables and palettes and holds the PPU's memories."""

    def __init__(self) -> None:
        self.start_address = 0x2000
        self.end_address = 0x3FFF
        self.registers = PpuRegisters()
        self.nametables = NameTables()
        self.palettes = ColourPalettes()
        self.primary_oam = OamPrimary()
        self.secondary_oam = OamSecondary()
        # kept here so a saved PPU state can be restored
        self.scanline = -1  # -1 to 260
        self.cycle = 0  # 0 to 340
        self.total_cycles = 0

    def contains(self, address: int) -> bool:
        return self.start_address <= address <= self.end_address

    def _region(self, address: int, action: str):
        if self.nametables.contains(address):
            return self.nametables
        if self.palettes.contains(address):
            return self.palettes
        raise IndexError(f"PPU memory map: cannot {action} address {address:#06x}")

    def read(self, address: int) -> int:
        if address == PpuAddress.OAMDATA:
            oam_address = self.registers.oamaddr
            # the first 32 bytes expose the internal secondary OAM
            if oam_address < 32:
                return self.secondary_oam.read(oam_address)
            return self.primary_oam.read(oam_address)
        return self._region(address, "read").read(address)

    def write(self, address: int, value: int) -> None:
        self._region(address, "write").write(address, value)

    def seek(self, address: int) -> int:
        return self._region(address, "seek").seek(address)

    def vram_address(self, for_writing: bool) -> int:
        """Current VRAM address; reading it mid-render is not supported and is logged."""
        if not for_writing and -1 <= self.scanline <= 239 and 1 <= self.cycle <= 256:
            logger.warning("using the VRAM address during rendering is not supported")
        return self.registers.vram_address()