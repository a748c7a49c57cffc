"""
Fluere - procedural color-cycling imagery

A drawing is an 8-bit index image computed from randomly placed knots; a
color table blended from a palette gives those indices colors, and the
animation rotates the table instead of recomputing the image.

Usage:
    from fluere import RandomSource, DrawingEngine, load_palettes, build_color_table

    rng = RandomSource(42)
    with DrawingEngine(640, 480, 4, "spin", "leaf", rng) as drawing:
        pixels = drawing.fill()
    table = build_color_table(load_palettes()[0], randomize=True, rng=rng)
"""

__version__ = "0.1.0"

from .errors import FluereError, ConfigurationError, PaletteParseError
from .random_source import RandomSource
from .knots import Knot, KnotSet
from .fields import Style, evaluate, evaluate_points
from .drawing import DrawingEngine, DrawingRequest
from .palettes import Color, Palette, PaletteList, parse_palettes, load_palettes
from .colortable import ColorTable, build_color_table
from .animation import Animator, ViewState
from .export import save_png

__all__ = [
    "__version__",
    # Errors
    "FluereError",
    "ConfigurationError",
    "PaletteParseError",
    # Drawing
    "RandomSource",
    "Knot",
    "KnotSet",
    "Style",
    "evaluate",
    "evaluate_points",
    "DrawingEngine",
    "DrawingRequest",
    # Color
    "Color",
    "Palette",
    "PaletteList",
    "parse_palettes",
    "load_palettes",
    "ColorTable",
    "build_color_table",
    # Animation
    "Animator",
    "ViewState",
    "save_png",
]
