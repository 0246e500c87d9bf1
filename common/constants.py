"""
Geodetic Constants for Auxiliary-Latitude Computations.

This module provides the defining parameters of the reference ellipsoids
and the numerical defaults used by the divided-difference engine. All
constants carry their provenance.

References
----------
- WGS84 parameters: NIMA TR8350.2, Third Edition, 2000
- GRS80 parameters: Moritz, H. (2000). Geodetic Reference System 1980.
- Karney, C.F.F. (2022). On auxiliary latitudes. arXiv:2212.05818.
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class Constant:
    """A defining constant with provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    unit : str
        The unit of the constant.
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    unit: str
    source: str
    description: str


class GeodeticConstants:
    """Registry of constants used throughout the system.

    Reference Ellipsoids
    --------------------
    Ellipsoids are specified by semi-major axis and inverse flattening,
    the pair used by the defining documents. The flattening itself is
    derived in the working precision so that extended-precision engines
    are not limited by a double-rounded f.

    Series Evaluation
    -----------------
    Defaults for the length of the Fourier series used in generic
    conversions and the number of quadrature nodes used to compute
    their coefficients.
    """

    # =========================================================================
    # WGS84 Ellipsoid Parameters
    # Reference: NIMA TR8350.2, Third Edition, 2000
    # =========================================================================

    WGS84_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_137.0,
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-major axis (equatorial radius) of WGS84 ellipsoid"
    )

    WGS84_INVERSE_FLATTENING: Final[Constant] = Constant(
        value=298.257223563,
        unit="dimensionless",
        source="WGS84, NIMA TR8350.2",
        description="Inverse flattening of WGS84 ellipsoid: 1/f = a / (a - b)"
    )

    # =========================================================================
    # GRS80 Ellipsoid Parameters
    # =========================================================================

    GRS80_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_137.0,
        unit="m",
        source="GRS80, Moritz (2000)",
        description="Semi-major axis of GRS80 ellipsoid"
    )

    GRS80_INVERSE_FLATTENING: Final[Constant] = Constant(
        value=298.257222101,
        unit="dimensionless",
        source="GRS80, Moritz (2000) (derived from J2)",
        description="Inverse flattening of GRS80 ellipsoid"
    )

    # =========================================================================
    # Series and Quadrature Defaults
    # =========================================================================

    # Number of auxiliary latitudes connected by Fourier series:
    # geographic, parametric, geocentric, rectifying, conformal, authalic.
    AUX_NUMBER: Final[int] = 6

    SERIES_ORDER: Final[dict] = {
        "double": 6,
        "extended": 12,
    }

    QUADRATURE_POINTS: Final[dict] = {
        "double": 64,
        "extended": 160,
    }

    EXTENDED_DIGITS: Final[int] = 34  # IEEE binary128 has ~34 significant digits

    QUARTER_TURN_DEG: Final[float] = 90.0
