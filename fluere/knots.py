"""
Knots - the randomly placed control points that anchor every field.

The value of each pixel in a drawing is a function of its distance or
angle to each knot; the per-knot signs decide whether colors cycle in or
out (flow, wave), clockwise or counterclockwise (spin), and which way the
leaf/rays gradients run.
"""

import math
from dataclasses import dataclass

# Knots are scattered over a region this much larger than the canvas,
# centered on it, so some land just off screen.
ZOOM = 1.1

MAX_SPOKES = 7


@dataclass(frozen=True)
class Knot:
    x: float
    y: float
    flow_sign: float
    spin_sign: float
    wave_sign: float
    leaf_sign: int
    rays_sign: int
    sectors: float      # spokes / (2 pi)
    amplitude: float    # 0 means no twist
    frequency: float
    decay: float


def _sign(rng):
    return 1 if rng.coin() else -1


def make_knot(rng, width, height, zoom=ZOOM):
    """Draw one knot from rng.

    Draw order is fixed (position, the five signs, spokes, frequency,
    twist, decay); reproducibility depends on it.
    """
    origin_x = 0.5 * (zoom - 1.0) * width
    origin_y = 0.5 * (zoom - 1.0) * height

    x = zoom * width * rng.uniform() - origin_x
    y = zoom * height * rng.uniform() - origin_y

    flow_sign = _sign(rng)
    spin_sign = _sign(rng)
    leaf_sign = _sign(rng)
    rays_sign = _sign(rng)
    wave_sign = _sign(rng)

    spokes = 1 + rng.integer(MAX_SPOKES)
    sectors = spokes / (2 * math.pi)

    # Half the knots get no spiral twist at all; the rest get one that
    # shrinks with the number of spokes.
    frequency = 6 * rng.uniform() + 3
    if rng.coin():
        amplitude = 0.0
    else:
        amplitude = 8 * frequency / (spokes * spokes)
    decay = 20 + rng.uniform() * 30

    return Knot(
        x=x,
        y=y,
        flow_sign=float(flow_sign),
        spin_sign=float(spin_sign),
        wave_sign=float(wave_sign),
        leaf_sign=leaf_sign,
        rays_sign=rays_sign,
        sectors=sectors,
        amplitude=amplitude,
        frequency=frequency,
        decay=decay,
    )


class KnotSet:
    """Fixed, ordered, immutable collection of knots for one drawing"""

    def __init__(self, knots):
        self._knots = tuple(knots)

    @classmethod
    def generate(cls, rng, width, height, num_knots, zoom=ZOOM):
        return cls(make_knot(rng, width, height, zoom) for _ in range(num_knots))

    def __len__(self):
        return len(self._knots)

    def __iter__(self):
        return iter(self._knots)

    def __getitem__(self, idx):
        return self._knots[idx]

    def __repr__(self):
        return f"KnotSet({len(self._knots)} knots)"
