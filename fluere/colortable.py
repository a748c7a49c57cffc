"""
Color tables - 256 palette indices mapped to smoothly blended colors.

The table is stored twice over (512 entries) so an animation can read any
256 consecutive entries starting at an offset 0..255 without wrapping.
"""

import logging

import numpy as np

from .errors import ConfigurationError
from .palettes import BLACK, Color

logger = logging.getLogger(__name__)

TABLE_SIZE = 256


class ColorTable:
    """512 RGB entries; entry i equals entry i + 256"""

    def __init__(self, data, stops=()):
        data = np.array(data, dtype=np.uint8).reshape(2 * TABLE_SIZE, 3)
        data.flags.writeable = False
        self.data = data
        self.stops = tuple(stops)

    @property
    def nsteps(self):
        return len(self.stops)

    def __len__(self):
        return len(self.data)

    def __getitem__(self, idx):
        return Color(*(int(c) for c in self.data[idx]))

    def window(self, offset):
        """The 256 colors starting at offset, as 768 packed RGB bytes"""
        offset %= TABLE_SIZE
        return self.data[offset:offset + TABLE_SIZE].tobytes()

    def to_bytes(self):
        return self.data.tobytes()


def _channel(start, end, t):
    # round half up, then clamp to a byte
    v = start * (1.0 - t) + end * t + 0.5
    if v > 255:
        v = 255
    if v < 0:
        v = 0
    return int(v)


def blend(start, end, t):
    """Mix two colors: t=0 gives start, t=1 gives end"""
    return Color(
        _channel(start.r, end.r, t),
        _channel(start.g, end.g, t),
        _channel(start.b, end.b, t),
    )


def choose_band_count(palette, randomize, stripes, rng=None):
    if randomize:
        if stripes:
            # 3 to 5 colors, 6 to 10 bands once the black stripes go in
            nsteps = rng.integer(3) + 3
        else:
            nsteps = rng.integer(6) + 5
    else:
        nsteps = len(palette)

    if stripes:
        nsteps *= 2
    return nsteps


def choose_stops(palette, nsteps, randomize, stripes, rng=None):
    stops = []
    ii = 0
    for cindx in range(nsteps):
        if stripes and cindx % 2:
            stops.append(BLACK)
        elif randomize:
            stops.append(palette[rng.integer(len(palette))])
        else:
            stops.append(palette[ii % len(palette)])
            ii += 1
    return stops


def build_color_table(palette, randomize=False, stripes=False, rng=None):
    """Blend a palette into a cyclic ColorTable.

    randomize: use 5..10 colors picked at random (with replacement) from
        the palette instead of the palette colors in order. Needs rng.
    stripes: alternate the chosen colors with black bands.
    """
    if len(palette) == 0:
        raise ConfigurationError(f"Palette {palette.name!r} has no colors")
    if randomize and rng is None:
        raise ConfigurationError("A randomized color table needs a random source")

    nsteps = choose_band_count(palette, randomize, stripes, rng)
    stops = choose_stops(palette, nsteps, randomize, stripes, rng)

    data = np.zeros((2 * TABLE_SIZE, 3), dtype=np.uint8)
    for ii in range(nsteps):
        start = stops[ii]
        end = stops[(ii + 1) % nsteps]
        first = ii * TABLE_SIZE // nsteps
        last = (ii + 1) * TABLE_SIZE // nsteps
        for idx in range(first, last):
            t = nsteps / 256.0 * (idx - first)
            mix = blend(start, end, t)
            data[idx] = mix
            data[idx + TABLE_SIZE] = mix

    logger.debug("Color table from %r: %d bands, randomize=%s stripes=%s",
                 palette.name, nsteps, randomize, stripes)
    return ColorTable(data, stops)
