"""
Field evaluation for the five fluere styles.

Each style sums a per-knot contribution at a pixel and folds the total into
a palette index 0..255. The integer folding deliberately copies C semantics:
values are truncated toward zero, reduced with a truncating remainder, and
the (possibly negative) remainder is stored in an unsigned byte. Negative
totals therefore wrap the same way they always have.

Two entry points share the formulas:

    evaluate(knots, style, x, y)          one pixel, plain floats
    evaluate_points(knots, style, xs, ys) numpy arrays of pixel coordinates

A knot that sits exactly on the pixel contributes 0 to every style (the
log of a zero distance is never taken).
"""

import math
from enum import IntEnum

import numpy as np

from .errors import ConfigurationError

LEAF_SCALE = 75
FLOW_SCALE = 100
WAVE_FREQ = 1.5


class Style(IntEnum):
    FLOW = 0
    SPIN = 1
    WAVE = 2
    LEAF = 3
    RAYS = 4

    @classmethod
    def parse(cls, value):
        """Accept a Style, its integer code, or its (case-insensitive) name"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ConfigurationError(f"Unknown style: {value!r}") from None
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"Unknown style: {value!r}") from None


# -----------------------------------------------------------------------------
# C integer helpers
# -----------------------------------------------------------------------------

def c_div(a, b):
    """Integer division truncating toward zero"""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def c_rem(a, b):
    """Remainder with the sign of the dividend"""
    r = abs(a) % abs(b)
    return -r if a < 0 else r


def to_byte(value):
    """(unsigned char) ((int) value % 256)"""
    return c_rem(math.trunc(value), 256) & 0xFF


def _require_knots(knots):
    if len(knots) < 1:
        raise ConfigurationError("A drawing needs at least one knot")


def flow_scale(num_knots):
    # Integer quotient: 3 knots scale by 33, more than 100 knots by 0.
    return FLOW_SCALE // num_knots


# -----------------------------------------------------------------------------
# Scalar evaluation
# -----------------------------------------------------------------------------

def flow_value(knots, x, y):
    _require_knots(knots)
    val = 0.0
    for k in knots:
        dx = x - k.x
        dy = y - k.y
        d2 = dx * dx + dy * dy
        if d2 > 0:
            val += k.flow_sign * math.log(d2)
    val *= flow_scale(len(knots))
    return to_byte(val)


def wave_value(knots, x, y):
    _require_knots(knots)
    val = 0.0
    for k in knots:
        dx = x - k.x
        dy = y - k.y
        d2 = dx * dx + dy * dy
        if d2 > 0:
            val += k.wave_sign * math.sin(WAVE_FREQ * math.log(d2))
    val *= flow_scale(len(knots))
    return to_byte(val)


def spin_value(knots, x, y):
    _require_knots(knots)
    val = 0.0
    for k in knots:
        dx = x - k.x
        dy = y - k.y
        r = math.sqrt(dx * dx + dy * dy)

        if dx == 0 and dy == 0:
            a = 0.0
        else:
            a = math.atan2(dy, dx)

        # twist, fading out with distance
        a += k.amplitude * k.sectors * math.sin(r / k.frequency) * math.exp(-r / k.decay)

        a = k.sectors * math.fmod(a, 1.0 / k.sectors)
        val += k.spin_sign * a
    return to_byte(256 * val)


def _angle_value(knots, x, y, sign_attr, discrete):
    _require_knots(knots)
    val = 0
    for k in knots:
        dx = abs(x - k.x)
        dy = abs(y - k.y)
        big = max(dx, dy)
        small = min(dx, dy)

        if big == 0:
            a = 0.0
        else:
            ratio = small / big
            a = getattr(k, sign_attr) * LEAF_SCALE * ratio * ratio

        # discrete == 1 leaves the gradient smooth; larger values band it
        val += c_div(math.trunc(a), discrete) * discrete
    return to_byte(val)


def leaf_value(knots, x, y, discrete=1):
    return _angle_value(knots, x, y, "leaf_sign", discrete)


def rays_value(knots, x, y, discrete=1):
    return _angle_value(knots, x, y, "rays_sign", discrete)


def evaluate(knots, style, x, y, leaf_discrete=1, rays_discrete=1):
    """Palette index for one pixel"""
    style = Style.parse(style)
    if style is Style.FLOW:
        return flow_value(knots, x, y)
    if style is Style.SPIN:
        return spin_value(knots, x, y)
    if style is Style.WAVE:
        return wave_value(knots, x, y)
    if style is Style.LEAF:
        return leaf_value(knots, x, y, leaf_discrete)
    return rays_value(knots, x, y, rays_discrete)


# -----------------------------------------------------------------------------
# Vectorized evaluation
# -----------------------------------------------------------------------------

def to_bytes(values):
    """Array version of to_byte"""
    ints = np.trunc(values).astype(np.int64)
    return (np.fmod(ints, 256) & 0xFF).astype(np.uint8)


def _log_d2(dx, dy):
    # 0 where the knot coincides with the pixel; sin(0) keeps wave at 0 too
    d2 = dx * dx + dy * dy
    with np.errstate(divide="ignore"):
        log_d2 = np.log(d2)
    return np.where(d2 == 0, 0.0, log_d2)


def _flow_points(knots, xs, ys):
    total = np.zeros(xs.shape, dtype=np.float64)
    for k in knots:
        total += k.flow_sign * _log_d2(xs - k.x, ys - k.y)
    return to_bytes(total * flow_scale(len(knots)))


def _wave_points(knots, xs, ys):
    total = np.zeros(xs.shape, dtype=np.float64)
    for k in knots:
        total += k.wave_sign * np.sin(WAVE_FREQ * _log_d2(xs - k.x, ys - k.y))
    return to_bytes(total * flow_scale(len(knots)))


def _spin_points(knots, xs, ys):
    total = np.zeros(xs.shape, dtype=np.float64)
    for k in knots:
        dx = xs - k.x
        dy = ys - k.y
        r = np.sqrt(dx * dx + dy * dy)
        a = np.where((dx == 0) & (dy == 0), 0.0, np.arctan2(dy, dx))
        a = a + k.amplitude * k.sectors * np.sin(r / k.frequency) * np.exp(-r / k.decay)
        a = k.sectors * np.fmod(a, 1.0 / k.sectors)
        total += k.spin_sign * a
    return to_bytes(256 * total)


def _angle_points(knots, xs, ys, sign_attr, discrete):
    total = np.zeros(xs.shape, dtype=np.int64)
    for k in knots:
        dx = np.abs(xs - k.x)
        dy = np.abs(ys - k.y)
        big = np.maximum(dx, dy)
        small = np.minimum(dx, dy)
        with np.errstate(divide="ignore", invalid="ignore"):
            ratio = np.where(big == 0, 0.0, small / big)
        a = np.trunc(getattr(k, sign_attr) * LEAF_SCALE * ratio * ratio).astype(np.int64)
        # C division: quotient truncated toward zero
        q = np.abs(a) // discrete
        total += np.where(a < 0, -q, q) * discrete
    return (np.fmod(total, 256) & 0xFF).astype(np.uint8)


def evaluate_points(knots, style, xs, ys, leaf_discrete=1, rays_discrete=1):
    """Palette indices for arrays of pixel coordinates (any matching shape)"""
    _require_knots(knots)
    style = Style.parse(style)
    xs = np.asarray(xs, dtype=np.float64)
    ys = np.asarray(ys, dtype=np.float64)
    if style is Style.FLOW:
        return _flow_points(knots, xs, ys)
    if style is Style.SPIN:
        return _spin_points(knots, xs, ys)
    if style is Style.WAVE:
        return _wave_points(knots, xs, ys)
    if style is Style.LEAF:
        return _angle_points(knots, xs, ys, "leaf_sign", leaf_discrete)
    return _angle_points(knots, xs, ys, "rays_sign", rays_discrete)
