"""Palette generation and propagation."""

from .palette import PaletteGenerator
from .reload import ProgramReloader

__all__ = ["PaletteGenerator", "ProgramReloader"]
