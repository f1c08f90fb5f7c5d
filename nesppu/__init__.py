"""Cycle-stepped NES picture processing unit: memory, palettes, sprites and rendering."""

__version__ = "0.1.0"