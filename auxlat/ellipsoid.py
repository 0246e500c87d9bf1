"""
Reference Ellipsoids and Their Derived Constants.

This module defines the ellipsoid of revolution on which the auxiliary
latitudes live, and the eccentricity constants every conversion is built
from.

Scientific Context
------------------
Domain: Geodesy, Earth geometry
Model: Ellipsoid of revolution, oblate (f > 0), spherical (f = 0) or
prolate (f < 0)

Derived Constants
-----------------
All conversions depend on the flattening only (the semi-major axis scales
lengths, not latitudes):

    e2   = f (2 - f)            first eccentricity squared
    e2m1 = 1 - e2               = (1 - f)^2
    e12  = e2 / (1 - e2)        second eccentricity squared
    e    = sqrt(|e2|), e1 = sqrt(|e12|)
    fm1  = 1 - f
    n    = f / (2 - f)          third flattening

For a prolate ellipsoid e2 and e12 are negative and e, e1 are the moduli
of the (imaginary) eccentricities.

References
----------
- NIMA TR8350.2: WGS84 parameters
- Karney, C.F.F. (2022). On auxiliary latitudes. arXiv:2212.05818.
"""

from dataclasses import dataclass

from pyproj import get_ellps_map

from common.constants import GeodeticConstants
from common.precision import Arithmetic, DOUBLE


@dataclass(frozen=True)
class EllipsoidParameters:
    """Parameters defining a reference ellipsoid.

    Attributes
    ----------
    a : float
        Semi-major axis (equatorial radius) in meters.
    inverse_flattening : float
        1/f; ``inf`` for a sphere, negative for a prolate ellipsoid.
    name : str
        Identifier for the ellipsoid.
    """
    a: float
    inverse_flattening: float
    name: str = ""

    def __post_init__(self):
        if not self.a > 0:
            raise ValueError(f"Semi-major axis must be positive, got {self.a}")
        if self.inverse_flattening == 0 or (0 < self.inverse_flattening <= 1):
            raise ValueError(
                f"Inverse flattening {self.inverse_flattening} gives f >= 1 "
                f"or an undefined f"
            )

    @property
    def f(self) -> float:
        """Flattening in double precision."""
        return 1.0 / self.inverse_flattening

    @property
    def b(self) -> float:
        """Semi-minor axis in meters."""
        return self.a * (1 - self.f)

    @classmethod
    def from_flattening(
        cls,
        f: float,
        a: float = 1.0,
        name: str = ""
    ) -> 'EllipsoidParameters':
        """Build an ellipsoid from its flattening.

        Parameters
        ----------
        f : float
            Flattening; 0 gives a sphere, negative values a prolate body.
        a : float
            Semi-major axis.
        name : str
            Identifier.
        """
        rf = float('inf') if f == 0 else 1.0 / f
        return cls(a=a, inverse_flattening=rf, name=name or f"f={f:g}")

    @classmethod
    def from_name(cls, name: str) -> 'EllipsoidParameters':
        """Look up a named ellipsoid in the PROJ ellipsoid table.

        Parameters
        ----------
        name : str
            PROJ ellipsoid identifier, e.g. 'WGS84', 'GRS80', 'clrk66'.

        Raises
        ------
        KeyError
            If PROJ does not know the ellipsoid.
        """
        ellps = get_ellps_map()
        if name not in ellps:
            raise KeyError(f"Unknown ellipsoid {name!r}")
        entry = ellps[name]
        a = float(entry['a'])
        if 'rf' in entry:
            rf = float(entry['rf'])
        else:
            b = float(entry['b'])
            rf = float('inf') if a == b else a / (a - b)
        return cls(a=a, inverse_flattening=rf, name=name)


# WGS84 ellipsoid - the default reference
WGS84Ellipsoid = EllipsoidParameters(
    a=GeodeticConstants.WGS84_SEMI_MAJOR_AXIS.value,
    inverse_flattening=GeodeticConstants.WGS84_INVERSE_FLATTENING.value,
    name="WGS84"
)

GRS80Ellipsoid = EllipsoidParameters(
    a=GeodeticConstants.GRS80_SEMI_MAJOR_AXIS.value,
    inverse_flattening=GeodeticConstants.GRS80_INVERSE_FLATTENING.value,
    name="GRS80"
)


class EllipsoidConstants:
    """Eccentricity constants of an ellipsoid in a given precision.

    Computed once at construction and never mutated.

    Parameters
    ----------
    ellipsoid : EllipsoidParameters
        The ellipsoid.
    num : Arithmetic
        Floating-point width to evaluate the constants in.
    """

    __slots__ = ("ellipsoid", "num", "f", "e2", "e2m1", "e12", "e", "e1",
                 "fm1", "n")

    def __init__(self, ellipsoid: EllipsoidParameters, num: Arithmetic = DOUBLE):
        self.ellipsoid = ellipsoid
        self.num = num
        rf = num.real(ellipsoid.inverse_flattening)
        self.f = num.real(0) if num.isinf(rf) else 1 / rf
        self.fm1 = 1 - self.f
        self.e2 = self.f * (2 - self.f)
        self.e2m1 = self.fm1 * self.fm1
        self.e12 = self.e2 / self.e2m1
        self.e = num.sqrt(num.fabs(self.e2))
        self.e1 = num.sqrt(num.fabs(self.e12))
        self.n = self.f / (2 - self.f)

    @property
    def oblate(self) -> bool:
        return self.f >= 0

    def as_dict(self) -> dict:
        """Constants as plain floats, for logging and audit records."""
        return {
            "name": self.ellipsoid.name,
            "precision": self.num.name,
            "f": float(self.f),
            "e2": float(self.e2),
            "e12": float(self.e12),
            "n": float(self.n),
        }

    def __repr__(self) -> str:
        return (
            f"EllipsoidConstants({self.ellipsoid.name!r}, "
            f"f={float(self.f):.12g}, precision={self.num.name!r})"
        )

