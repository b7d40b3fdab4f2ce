"""Closed numeric interval used for hit parameters and color clamping.

``Interval(lower, upper)`` is a plain value type. ``interval_contains`` is
inclusive at both ends while ``interval_surrounds`` is exclusive; intersection
code uses the exclusive form so that a hit at exactly the lower bound (the
surface a ray just left) is rejected.

An interval with ``lower = +inf`` and ``upper = -inf`` is empty: it contains
nothing and has negative size.
"""

import taichi as ti
import taichi.math as tm


@ti.dataclass
class Interval:
    """A closed range [lower, upper] of floats.

    Attributes:
        lower: Smallest value in the range.
        upper: Largest value in the range.
    """

    lower: ti.f32
    upper: ti.f32


@ti.func
def make_interval(lower: ti.f32, upper: ti.f32) -> Interval:
    return Interval(lower=lower, upper=upper)


@ti.func
def empty_interval() -> Interval:
    return Interval(lower=tm.inf, upper=-tm.inf)


@ti.func
def universe_interval() -> Interval:
    return Interval(lower=-tm.inf, upper=tm.inf)


@ti.func
def interval_size(interval: Interval) -> ti.f32:
    return interval.upper - interval.lower


@ti.func
def interval_contains(interval: Interval, x: ti.f32) -> ti.i32:
    """1 if lower <= x <= upper."""
    return interval.lower <= x and x <= interval.upper


@ti.func
def interval_surrounds(interval: Interval, x: ti.f32) -> ti.i32:
    """1 if lower < x < upper."""
    return interval.lower < x and x < interval.upper


@ti.func
def interval_clamp(interval: Interval, x: ti.f32) -> ti.f32:
    """Saturate x into [lower, upper]."""
    result = x
    if x < interval.lower:
        result = interval.lower
    if x > interval.upper:
        result = interval.upper
    return result
