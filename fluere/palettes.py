"""
Palette files - named, ordered lists of colors.

A palette file is whitespace-delimited text:

    Number_of_palettes 3
    Cold        4 0x33ccff 0x0099ff 0x0033cc 0x0033ff
    Grayscale   6 0xffffff 0x333333 0xcccccc 0x999999 0x666666 0x000000
    Hot         5 0xffff33 0xffcc00 0xff6600 0xbb0033 0xff3300

The first token is a label and is ignored; the second is the number of
palettes. Each palette is a one-word name, a color count, and that many
24-bit hex colors (red in the high byte, "0x" prefix optional). Line
breaks carry no meaning.
"""

import logging
import re
from importlib import resources
from typing import NamedTuple

from .errors import PaletteParseError

logger = logging.getLogger(__name__)

# Names were stored in a 20-byte C string, terminator included
MAX_NAME_LENGTH = 19
DEFAULT_PALETTE_RESOURCE = "palettes.txt"

_INT_RE = re.compile(r"^[+-]?\d+$")
_HEX_RE = re.compile(r"^[+-]?(0[xX])?[0-9a-fA-F]+$")


class Color(NamedTuple):
    r: int
    g: int
    b: int

    @classmethod
    def from_packed(cls, value):
        value &= 0xFFFFFF
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    def packed(self):
        return (self.r << 16) | (self.g << 8) | self.b

    def __str__(self):
        return f"0x{self.packed():06x}"


BLACK = Color(0, 0, 0)


class Palette:
    """A named, ordered, immutable list of colors"""

    def __init__(self, name, colors):
        self.name = name
        self.colors = tuple(Color(*c) for c in colors)

    def __len__(self):
        return len(self.colors)

    def __iter__(self):
        return iter(self.colors)

    def __getitem__(self, idx):
        return self.colors[idx]

    def __eq__(self, other):
        if not isinstance(other, Palette):
            return NotImplemented
        return self.name == other.name and self.colors == other.colors

    def __hash__(self):
        return hash((self.name, self.colors))

    def __repr__(self):
        return f"Palette({self.name!r}, {len(self.colors)} colors)"


class PaletteList:
    """The palettes read from one palette description, in file order"""

    def __init__(self, palettes):
        self._palettes = tuple(palettes)

    def __len__(self):
        return len(self._palettes)

    def __iter__(self):
        return iter(self._palettes)

    def __getitem__(self, idx):
        return self._palettes[idx]

    def names(self):
        return [p.name for p in self._palettes]

    def by_name(self, name):
        for p in self._palettes:
            if p.name == name:
                return p
        raise KeyError(name)

    def usable(self):
        """Palettes with at least one color (the only ones a color table can use)"""
        return [p for p in self._palettes if len(p) > 0]


class _Tokens:
    """Sequential reader over whitespace-delimited tokens"""

    def __init__(self, text):
        self._tokens = text.split()
        self.pos = 0

    def next(self, what):
        if self.pos >= len(self._tokens):
            raise PaletteParseError(f"Unexpected end of palette data, expected {what}",
                                    self.pos)
        tok = self._tokens[self.pos]
        self.pos += 1
        return tok

    def count(self, what):
        tok = self.next(what)
        if not _INT_RE.match(tok):
            raise PaletteParseError(f"Expected {what}, got {tok!r}", self.pos - 1)
        value = int(tok)
        if value < 0:
            raise PaletteParseError(f"Negative {what}: {value}", self.pos - 1)
        return value

    def color(self):
        tok = self.next("a hex color")
        if not _HEX_RE.match(tok):
            raise PaletteParseError(f"Not a hex color: {tok!r}", self.pos - 1)
        return Color.from_packed(int(tok, 16))

    def remaining(self):
        return len(self._tokens) - self.pos


def parse_palettes(text, strict=False):
    """Parse a palette description into a PaletteList.

    Structural problems (truncated data, a count that is not a
    non-negative integer, a color that is not hex) always raise
    PaletteParseError. With strict=True, names longer than
    MAX_NAME_LENGTH and palettes with no colors are rejected too;
    otherwise they are kept and a warning is logged.
    """
    tokens = _Tokens(text)
    tokens.next("a label")
    num_palettes = tokens.count("palette count")

    palettes = []
    for _ in range(num_palettes):
        name_pos = tokens.pos
        name = tokens.next("a palette name")
        if len(name) > MAX_NAME_LENGTH:
            if strict:
                raise PaletteParseError(
                    f"Palette name {name!r} is longer than {MAX_NAME_LENGTH} characters",
                    name_pos)
            logger.warning("Palette name %r is longer than %d characters",
                           name, MAX_NAME_LENGTH)

        num_colors = tokens.count("color count")
        if num_colors == 0:
            if strict:
                raise PaletteParseError(f"Palette {name!r} has no colors", name_pos)
            logger.warning("Palette %r has no colors", name)

        colors = [tokens.color() for _ in range(num_colors)]
        palettes.append(Palette(name, colors))

    if tokens.remaining():
        logger.warning("Ignoring %d tokens after the last palette", tokens.remaining())

    logger.debug("Parsed %d palettes", len(palettes))
    return PaletteList(palettes)


def load_palettes(path=None, strict=False):
    """Read a palette file; with no path, the palettes bundled with fluere"""
    if path is None:
        text = resources.files(__package__).joinpath(DEFAULT_PALETTE_RESOURCE).read_text(
            encoding="utf-8")
    else:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    return parse_palettes(text, strict=strict)
