# nesppu

A pure-Python model of the NES picture processing unit (PPU). It steps the
PPU one cycle at a time and builds a 256 × 240 frame of RGBA colours from
nametables, attribute tables, pattern tables, colour palettes and sprites.
The package has no dependencies outside the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## What is inside

- `nesppu.memory` — `Matrix`, a fixed-size 2-D grid addressed as `(y, x)`
  with `get`, `set`, `set_region` and `dump`; `MirroredMemory`, a byte buffer
  repeated across an address range, with `read`, `write`, `seek`, `contains`
  and `lower_offset`; and the bit helpers `get_bits(value, start, end)` and
  `flip_byte(value)`.
- `nesppu.colour` — `RawColour`, a packed `0xRRGGBBAA` value with `red`,
  `green`, `blue` and `alpha` properties, and `raw_colour(index)`, which looks
  up one of the 64 system colours.
- `nesppu.palettes` — `ColourPalettes`, the 32-byte palette RAM mirrored over
  `0x3F00`–`0x3FFF`, with entries `0x3F10`, `0x3F14`, `0x3F18` and `0x3F1C`
  mirroring the background entries.
  `pattern_value_to_colour(palette_id, pattern_value)` turns a 2-bit pixel
  into a colour; `generate_colour_palettes(selected_palette)` draws all eight
  palettes as swatches.
- `nesppu.nametables` — `NameTables` (4 KiB over `0x2000`–`0x3EFF`) with
  `MirrorType` (`HORIZONTAL`, `VERTICAL`, or `NOT_SET`, the default, which
  logs a warning on every access), `pattern_index(y, x)`,
  `palette_index(y, x)`, `bg_fetch_tile(pixel)`, `first_name_table()` and
  the `Point` dataclass.
- `nesppu.patterns` — `PatternTables`, which decodes 8 KiB of CHR data into
  tiles (`tile(table, y, x)`, a `Matrix` of values 0–3) and raw bit planes
  (`bit_tile(table, index)`, a `BitTile`); `pattern_display(palettes,
  palette_id)` draws both tables side by side.
- `nesppu.oam` — `Sprite`, `OamPrimary` (64 sprites, cleared to `0xFF`) and
  `OamSecondary` (the sprites picked for the next scanline and the rows being
  drawn on the current one).
- `nesppu.registers` — `PpuRegisters`, the eight registers at
  `0x2000`–`0x2007` mirrored up to `0x3FFF`, with named bit fields such as
  `show_background` or `generate_nmi`, plus the internal scroll and address
  state in `vregs` (`LoopyRegister`, `BackgroundDrawRegisters`,
  `VirtualRegisters`). `PpuAddress` names the register addresses.
- `nesppu.memory_map` — `PpuMemoryMap`, which holds the registers,
  nametables, palettes and both OAMs, routes `read`, `write` and `seek` to
  the nametables or palettes, serves `OAMDATA` reads from OAM, and keeps the
  current scanline, cycle and total cycle count.
- `nesppu.ppu` — `Ppu`, the renderer: `power_cycle()`, `step()`, `frame()`,
  `frame_count()`, `pattern_table_display()` and `colour_palette_display()`.

## Example

```python
from nesppu.memory_map import PpuMemoryMap
from nesppu.nametables import MirrorType
from nesppu.patterns import PatternTables
from nesppu.ppu import Ppu

with open("game.chr", "rb") as handle:
    chr_rom = handle.read()  # 8 KiB of CHR data

memory = PpuMemoryMap()
memory.nametables.mirror_type = MirrorType.HORIZONTAL

nmi_requests = []
ppu = Ppu(memory, PatternTables(chr_rom), on_nmi=lambda: nmi_requests.append(True))
ppu.power_cycle()

# Set the backdrop colour, enable the background and sprites (PPUMASK),
# then step until one whole frame has been drawn.
memory.write(0x3F00, 0x20)
memory.registers.write(0x2001, 0x1E)
while ppu.frame_count() <= 1:
    ppu.step()

frame = ppu.frame()          # Matrix of RawColour, 256 wide, 240 high
top_left = frame.get(0, 0)
print(hex(top_left.red), hex(top_left.green), hex(top_left.blue))
```

`on_nmi` is called at the start of vertical blank when the `generate_nmi`
bit of PPUCTRL is set. `ppu.disassemble_palette` selects the palette used by
`pattern_table_display()` and highlighted by `colour_palette_display()`.

## Errors

Lookups outside the hardware's limits raise `ValueError`: a palette id outside
0–7, a pattern value outside 0–3, a tile position outside the four
nametables, a sprite number outside 0–63 (or beyond the fetched sprites), or
a scanline that a sprite does not cover.

Addresses outside a memory's range, cells outside a `Matrix`, and tables or
tiles outside the pattern tables raise `IndexError`; so does `PpuMemoryMap`
for an address that is neither nametable nor palette memory. A `Ppu` built
without pattern tables raises `RuntimeError` when it needs tile data.

## What it does not do

This package is the PPU alone. It has no CPU, no cartridge or ROM file
loading (pass CHR bytes to `PatternTables` yourself), no sprite DMA, no
window or screen output, and no input handling. Register traffic goes
through `PpuMemoryMap.registers` directly; PPUDATA (`0x2007`) accesses are
not turned into nametable or palette reads and writes.