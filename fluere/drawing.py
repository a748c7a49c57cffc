"""
Fluere drawing engine - fills an 8-bit index image from a set of knots.

Every pixel holds a number 0..255 that is an index into a color table,
never a color. The image is computed once per drawing; animation is done
by shifting which colors those indices stand for.
"""

import logging
from dataclasses import dataclass

import numpy as np

from .errors import ConfigurationError
from .fields import Style, evaluate, evaluate_points
from .knots import KnotSet

logger = logging.getLogger(__name__)

DISCRETE_CHOICES = 3   # discreteness factor is 1 + 3*k, k in 0..2 -> 1, 4, 7


@dataclass(frozen=True)
class DrawingRequest:
    width: int
    height: int
    num_knots: int
    style_a: Style
    style_b: Style
    leaf_discrete: int = 1
    rays_discrete: int = 1

    @property
    def size(self):
        return self.width * self.height


def _check_positive(name, value):
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return int(value)


def _discrete_factor(rng):
    return 1 + 3 * rng.integer(DISCRETE_CHOICES)


def _buffer_view(buffer, size):
    """Flat writable uint8 view of a caller buffer of exactly size bytes"""
    if isinstance(buffer, np.ndarray):
        view = buffer
    else:
        try:
            view = np.frombuffer(buffer, dtype=np.uint8)
        except TypeError as e:
            raise ConfigurationError(f"Not a byte buffer: {type(buffer).__name__}") from e
    if view.dtype != np.uint8:
        raise ConfigurationError(f"Buffer must hold uint8 values, not {view.dtype}")
    if not view.flags.writeable:
        raise ConfigurationError("Buffer is read-only")
    if not view.flags.c_contiguous:
        raise ConfigurationError("Buffer must be contiguous")
    if view.size != size:
        raise ConfigurationError(f"Buffer holds {view.size} bytes, drawing needs {size}")
    return view.reshape(-1)


class DrawingEngine:
    """One fluere drawing: its request, its knots, and the fill routine.

    Usage:
        with DrawingEngine(640, 480, 4, "spin", "leaf", RandomSource(7)) as d:
            pixels = d.fill()
    """

    def __init__(self, width, height, num_knots, style_a, style_b, rng):
        width = _check_positive("width", width)
        height = _check_positive("height", height)
        num_knots = _check_positive("num_knots", num_knots)
        style_a = Style.parse(style_a)
        style_b = Style.parse(style_b)

        # Discreteness is drawn before the knots; the order matters for
        # reproducing a seeded drawing.
        leaf_discrete = _discrete_factor(rng)
        rays_discrete = _discrete_factor(rng)

        self.request = DrawingRequest(
            width=width,
            height=height,
            num_knots=num_knots,
            style_a=style_a,
            style_b=style_b,
            leaf_discrete=leaf_discrete,
            rays_discrete=rays_discrete,
        )
        self._knots = KnotSet.generate(rng, width, height, num_knots)

        logger.debug(
            "New drawing %dx%d, %d knots, styles %s/%s, discrete leaf=%d rays=%d",
            width, height, num_knots, style_a.name, style_b.name,
            leaf_discrete, rays_discrete,
        )

    @property
    def knots(self):
        if self._knots is None:
            raise ConfigurationError("Drawing has been closed")
        return self._knots

    @property
    def width(self):
        return self.request.width

    @property
    def height(self):
        return self.request.height

    def value_at(self, col, row):
        """Palette index of a single pixel, computed on its own.

        A lookup helper for spot checks; fill() never calls it.
        """
        req = self.request
        style = req.style_a if (col + row) % 2 == 0 else req.style_b
        return evaluate(self.knots, style, col, row,
                        req.leaf_discrete, req.rays_discrete)

    def fill(self, buffer=None):
        """Compute the index image.

        If buffer is given it must be a writable byte buffer of exactly
        width*height bytes; it is filled in place. Returns the image as a
        read-only flat uint8 array, row-major.
        """
        req = self.request
        knots = self.knots
        view = _buffer_view(buffer, req.size) if buffer is not None else None

        rows, cols = np.indices((req.height, req.width), dtype=np.float64)
        cols = cols.ravel()
        rows = rows.ravel()
        out = np.empty(req.size, dtype=np.uint8)

        # Checkerboard: style_a where col+row is even, style_b where odd
        even = (cols + rows) % 2 == 0
        for style, mask in ((req.style_a, even), (req.style_b, ~even)):
            if not mask.any():
                continue
            out[mask] = evaluate_points(knots, style, cols[mask], rows[mask],
                                        req.leaf_discrete, req.rays_discrete)

        if view is not None:
            view[:] = out

        out.flags.writeable = False
        logger.debug("Filled %d pixels", req.size)
        return out

    def close(self):
        """Release the knot set"""
        self._knots = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
