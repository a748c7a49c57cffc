"""
Tests for the five field styles.

Hand-placed knots make the expected bytes easy to work out; the C-style
integer folding (truncate, truncating remainder, unsigned byte) is checked
explicitly for negative totals.
"""

import dataclasses
import math

import numpy as np
import pytest

from fluere import ConfigurationError, Knot, KnotSet, RandomSource, Style
from fluere.fields import (
    c_div,
    c_rem,
    evaluate,
    evaluate_points,
    flow_scale,
    to_byte,
    to_bytes,
)


def _knot(x=0.0, y=0.0, sign=1, sectors=0.25, amplitude=0.0):
    return Knot(
        x=x, y=y,
        flow_sign=float(sign), spin_sign=float(sign), wave_sign=float(sign),
        leaf_sign=sign, rays_sign=sign,
        sectors=sectors, amplitude=amplitude, frequency=6.0, decay=30.0,
    )


def _one(sign=1, **kw):
    return KnotSet([_knot(sign=sign, **kw)])


class TestIntegerHelpers:
    """C integer semantics."""

    def test_c_div_truncates_toward_zero(self):
        assert c_div(7, 4) == 1
        assert c_div(-7, 4) == -1
        assert c_div(-8, 4) == -2

    def test_c_rem_keeps_dividend_sign(self):
        assert c_rem(300, 256) == 44
        assert c_rem(-300, 256) == -44
        assert c_rem(-256, 256) == 0

    def test_to_byte_wraps_negative_remainder(self):
        """-5.7 truncates to -5, remainder -5, stored as 251."""
        assert to_byte(-5.7) == 251
        assert to_byte(300.9) == 44
        assert to_byte(0.99) == 0

    def test_to_bytes_matches_scalar(self):
        values = np.array([-5.7, 300.9, -511.2, 255.5, -0.4])
        assert list(to_bytes(values)) == [to_byte(v) for v in values]

    def test_flow_scale_is_integer_quotient(self):
        assert flow_scale(1) == 100
        assert flow_scale(3) == 33
        assert flow_scale(101) == 0


class TestStyle:
    """Style parsing."""

    def test_parse_names_and_codes(self):
        assert Style.parse("flow") is Style.FLOW
        assert Style.parse(" Rays ") is Style.RAYS
        assert Style.parse(1) is Style.SPIN
        assert Style.parse(Style.LEAF) is Style.LEAF

    @pytest.mark.parametrize("bad", ["swirl", 5, -1])
    def test_unknown_style(self, bad):
        with pytest.raises(ConfigurationError):
            Style.parse(bad)


class TestFlow:
    """ln of squared distance, scaled by 100 // knots."""

    def test_positive_sign(self):
        # ln(25) * 100 = 321.88 -> 321 -> 65
        assert evaluate(_one(), Style.FLOW, 3, 4) == 65

    def test_negative_sign_uses_truncating_remainder(self):
        # -321.88 -> -321 -> -65 -> 191
        assert evaluate(_one(sign=-1), Style.FLOW, 3, 4) == 191

    def test_coincident_knot_contributes_zero(self):
        """A knot exactly on the pixel gives 0 instead of ln(0)."""
        assert evaluate(_one(), Style.FLOW, 0, 0) == 0
        assert evaluate(_one(sign=-1), Style.WAVE, 0, 0) == 0

    def test_coincident_knot_in_arrays(self):
        out = evaluate_points(_one(), Style.FLOW, [0.0, 3.0], [0.0, 4.0])
        assert list(out) == [0, 65]


class TestWave:
    """sin(1.5 ln d^2), scaled like flow."""

    def test_unit_distance_is_zero(self):
        assert evaluate(_one(), Style.WAVE, 1, 0) == 0

    def test_negative_total(self):
        # sin(1.5 * ln 25) = -0.9933 -> -99.33 -> -99 -> 157
        assert evaluate(_one(), Style.WAVE, 3, 4) == 157


class TestSpin:
    """Angle to each knot, wrapped into sectors."""

    def test_angle_zero_on_positive_axis(self):
        assert evaluate(_one(), Style.SPIN, 1, 0) == 0

    def test_quarter_turn(self):
        # 0.25 * pi/2 * 256 = 100.5 -> 100
        assert evaluate(_one(), Style.SPIN, 0, 1) == 100

    def test_negative_angle_wraps(self):
        # -100.5 -> -100 -> 156
        assert evaluate(_one(), Style.SPIN, 0, -1) == 156

    def test_coincident_knot_has_angle_zero(self):
        assert evaluate(_one(amplitude=3.0), Style.SPIN, 0, 0) == 0

    def test_twist_changes_value(self):
        plain = evaluate(_one(), Style.SPIN, 5, 3)
        twisted = evaluate(_one(amplitude=2.0), Style.SPIN, 5, 3)
        assert plain != twisted


class TestLeafAndRays:
    """Squared ratio of the smaller to the larger offset."""

    def test_leaf_value(self):
        # 75 * (1/2)^2 = 18.75 -> 18
        assert evaluate(_one(), Style.LEAF, 1, 2) == 18

    def test_discrete_quantization_truncates(self):
        """-18 // 4 in C is -4, so -16 -> 240 (floor division would give 236)."""
        assert evaluate(_one(sign=-1), Style.LEAF, 1, 2, leaf_discrete=4) == 240
        assert evaluate(_one(sign=-1), Style.RAYS, 1, 2, rays_discrete=4) == 240

    def test_discreteness_is_per_style(self):
        knots = _one()
        assert evaluate(knots, Style.LEAF, 1, 2, leaf_discrete=7, rays_discrete=1) == 14
        assert evaluate(knots, Style.RAYS, 1, 2, leaf_discrete=7, rays_discrete=1) == 18

    def test_coincident_knot(self):
        assert evaluate(_one(), Style.LEAF, 0, 0) == 0

    def test_leaf_and_rays_are_structurally_equal(self):
        """Same signs and discreteness give the same image."""
        base = KnotSet.generate(RandomSource(17), 40, 30, 5)
        knots = KnotSet(dataclasses.replace(k, rays_sign=k.leaf_sign) for k in base)
        rows, cols = np.indices((30, 40), dtype=np.float64)
        leaf = evaluate_points(knots, Style.LEAF, cols, rows, leaf_discrete=4, rays_discrete=4)
        rays = evaluate_points(knots, Style.RAYS, cols, rows, leaf_discrete=4, rays_discrete=4)
        np.testing.assert_array_equal(leaf, rays)


class TestVectorized:
    """evaluate_points agrees with the scalar evaluator."""

    @pytest.mark.parametrize("style", list(Style))
    def test_matches_scalar(self, style):
        knots = KnotSet.generate(RandomSource(3), 24, 16, 4)
        rows, cols = np.indices((16, 24))
        grid = evaluate_points(knots, style, cols, rows, 4, 7)
        assert grid.dtype == np.uint8
        assert grid.shape == (16, 24)
        for row in range(16):
            for col in range(24):
                expected = evaluate(knots, style, col, row, 4, 7)
                # log/sin may differ in the last bit between libm and numpy
                assert (int(grid[row, col]) - expected) % 256 in (0, 1, 255)

    def test_empty_knot_set_rejected(self):
        with pytest.raises(ConfigurationError):
            evaluate_points(KnotSet([]), Style.FLOW, [0.0], [0.0])
        with pytest.raises(ConfigurationError):
            evaluate(KnotSet([]), Style.LEAF, 0, 0)
