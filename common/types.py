"""
Type Definitions for Auxiliary-Latitude Computations.

This module defines the identifiers of the auxiliary latitudes and the
angle value type shared by every module.

Design Rationale
----------------
Latitudes are carried as unnormalized (sine, cosine) pairs rather than as
radians because:
1. The tangent, which most conversions act on, is available without
   evaluating trigonometric functions.
2. The pole is represented exactly (cosine component 0, tangent infinite).
3. No precision is lost near +-90 degrees where radians -> tangent is
   ill-conditioned.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from common.precision import Arithmetic, DOUBLE


class AuxKind(IntEnum):
    """Auxiliary latitudes connected by Fourier series.

    The integer values index the coefficient cache; the Greek-letter
    aliases follow the usual geodetic notation.
    """
    GEOGRAPHIC = 0
    PARAMETRIC = 1
    GEOCENTRIC = 2
    RECTIFYING = 3
    CONFORMAL = 4
    AUTHALIC = 5

    PHI = 0
    BETA = 1
    THETA = 2
    MU = 3
    CHI = 4
    XI = 5


@dataclass(frozen=True)
class AuxAngle:
    """A latitude-like angle held as an unnormalized (y, x) pair.

    The angle is ``atan2(y, x)``; the pair need not lie on the unit circle.

    Attributes
    ----------
    y : Real
        Sine-like component.
    x : Real
        Cosine-like component.
    num : Arithmetic
        Floating-point width the components are expressed in.

    Notes
    -----
    - The sign of x is not normalized. Latitudes are expected to have
      x >= 0, but callers that need a definite sign must enforce it.
    - `tan` may be +-inf (pole) or NaN (the undefined (0, 0) angle).

    Examples
    --------
    >>> phi = AuxAngle.from_degrees(90)
    >>> float(phi.tan())
    inf
    >>> float(AuxAngle(3.0, 4.0).normalized().y)
    0.6
    """
    y: Any
    x: Any
    num: Arithmetic = field(default=DOUBLE, compare=False, repr=False)

    def __post_init__(self):
        # Frozen dataclass: coerce components through object.__setattr__
        object.__setattr__(self, "y", self.num.real(self.y))
        object.__setattr__(self, "x", self.num.real(self.x))

    @classmethod
    def from_degrees(cls, degrees: Any, num: Arithmetic = DOUBLE) -> "AuxAngle":
        """Construct from degrees with exact values at multiples of 90."""
        s, c = num.sincosd(degrees)
        return cls(s, c, num)

    @classmethod
    def from_radians(cls, radians: Any, num: Arithmetic = DOUBLE) -> "AuxAngle":
        r = num.real(radians)
        return cls(num.sin(r), num.cos(r), num)

    @classmethod
    def nan_angle(cls, num: Arithmetic = DOUBLE) -> "AuxAngle":
        return cls(num.nan, num.nan, num)

    def tan(self):
        """Tangent y/x, with +-inf at x == 0 and NaN for (0, 0)."""
        num = self.num
        if self.x == 0:
            if self.y == 0 or num.isnan(self.y):
                return num.nan
            return num.copysign(num.inf, self.y) * num.copysign(1, self.x)
        return self.y / self.x

    def radians(self):
        return self.num.atan2(self.y, self.x)

    def degrees(self):
        return self.num.degrees(self.radians())

    def normalized(self) -> "AuxAngle":
        """Copy scaled onto the unit circle.

        Returns the NaN angle for (0, 0), (inf, inf), NaN components, and
        pairs too large for hypot. A single infinite component becomes +-1.
        """
        num = self.num
        if num.isnan(self.tan()) or (
            num.fabs(self.y) > num.huge and num.fabs(self.x) > num.huge
        ):
            return AuxAngle.nan_angle(num)
        with num.errstate():
            r = num.hypot(self.y, self.x)
            y, x = self.y / r, self.x / r
        # r = inf makes one of y, x inf/inf
        if num.isnan(y):
            y = num.copysign(1, self.y)
        if num.isnan(x):
            x = num.copysign(1, self.x)
        return AuxAngle(y, x, num)

    def with_arithmetic(self, num: Arithmetic) -> "AuxAngle":
        """The same components expressed in another width."""
        return AuxAngle(self.y, self.x, num)

    def __neg__(self) -> "AuxAngle":
        return AuxAngle(0 - self.y, self.x, self.num)
