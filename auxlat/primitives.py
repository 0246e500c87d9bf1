"""
Elementary Divided Differences.

Stateless building blocks for the composite formulas in `auxlat.divided`.
Each ``d_*`` function returns the divided difference

    (g(y) - g(x)) / (y - x)

of an elementary function g, and its derivative g'(x) when x == y, without
forming g(y) - g(x) when that subtraction would cancel.

Arguments are tangents (unbounded, possibly infinite) or radians, already
converted to the width of ``num``.
"""

from common.precision import Arithmetic, DOUBLE


def sn(x, num: Arithmetic = DOUBLE):
    """Sine of the angle whose tangent is x: x / sqrt(1 + x^2)."""
    if num.isinf(x):
        return num.copysign(num.real(1), x)
    return x / num.hypot(1, x)


def sc(x, num: Arithmetic = DOUBLE):
    """Secant of the angle whose tangent is x: sqrt(1 + x^2)."""
    return num.hypot(1, x)


def d_atan(x, y, num: Arithmetic = DOUBLE):
    """Divided difference of atan.

    Uses atan((y - x) / (1 + x y)) when 2 x y > -1, where the subtraction
    of arctangents would cancel, and the direct difference otherwise.
    """
    d = y - x
    xy = x * y
    if x == y:
        return 1 / (1 + xy)
    if num.isinf(xy) and xy > 0:
        return num.real(0)
    if 2 * xy > -1:
        return num.atan(d / (1 + xy)) / d
    return (num.atan(y) - num.atan(x)) / d


def d_sn(x, y, num: Arithmetic = DOUBLE):
    """Divided difference of sn(t) = t / sqrt(1 + t^2)."""
    sc1 = sc(x, num)
    if x == y:
        return 1 / (sc1 * (1 + x * x))
    sc2 = sc(y, num)
    sn1, sn2 = sn(x, num), sn(y, num)
    if x * y > 0:
        return (sn1 / sc2 + sn2 / sc1) / ((sn1 + sn2) * sc1 * sc2)
    return (sn2 - sn1) / (y - x)


def d_asinh(x, y, num: Arithmetic = DOUBLE):
    """Divided difference of asinh.

    For x y > 0, asinh(y) - asinh(x) = asinh(y hx - x hy) with hx = sc(x),
    rewritten so that neither the product nor the difference overflows.
    """
    d = y - x
    xy = x * y
    hx, hy = sc(x, num), sc(y, num)
    if x == y:
        return 1 / hx
    if num.isinf(d):
        return num.real(0)
    if xy > 0:
        if xy < 1:
            t = (x + y) / (x * hy + y * hx)
        else:
            t = (1 / x + 1 / y) / (hy / y + hx / x)
        return num.asinh(d * t) / d
    return (num.asinh(y) - num.asinh(x)) / d


def d_sin(x, y, num: Arithmetic = DOUBLE):
    """Divided difference of sin for x, y in radians."""
    d = (x - y) / 2
    ratio = num.sin(d) / d if d != 0 else num.real(1)
    return num.cos((x + y) / 2) * ratio
