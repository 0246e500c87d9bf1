"""
Divided Differences of Auxiliary Latitudes.

This package provides the auxiliary-latitude conversions of an ellipsoid of
revolution and their two-point divided differences:
- Reference ellipsoids and eccentricity constants
- Elementary divided differences (atan, asinh, sn, sin)
- Clenshaw summation of the conversion series and its divided difference
- The divided-difference engine for rectifying, parametric, isometric and
  series conversions
"""

from auxlat.ellipsoid import (
    EllipsoidParameters,
    EllipsoidConstants,
    WGS84Ellipsoid,
    GRS80Ellipsoid,
)
from auxlat.latitudes import AuxLatitude, EngineConfig
from auxlat.coefficients import CoefficientTable, fourier_coefficients
from auxlat.divided import DAuxLatitude, make_engine

__all__ = [
    "EllipsoidParameters",
    "EllipsoidConstants",
    "WGS84Ellipsoid",
    "GRS80Ellipsoid",
    "AuxLatitude",
    "EngineConfig",
    "CoefficientTable",
    "fourier_coefficients",
    "DAuxLatitude",
    "make_engine",
]
