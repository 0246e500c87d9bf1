"""
Common utilities and infrastructure for the auxiliary-latitude engine.

This package provides foundational components used across all modules:
- Geodetic constants with their sources
- Floating-point width abstraction (double and extended precision)
- Latitude kinds and the angle value type
- Logging and audit trail infrastructure
"""

from common.constants import GeodeticConstants
from common.precision import (
    Arithmetic,
    DoubleArithmetic,
    ExtendedArithmetic,
    DOUBLE,
    get_arithmetic,
)
from common.types import AuxKind, AuxAngle
from common.logging_config import get_logger, AuditLogger

__all__ = [
    "GeodeticConstants",
    "Arithmetic",
    "DoubleArithmetic",
    "ExtendedArithmetic",
    "DOUBLE",
    "get_arithmetic",
    "AuxKind",
    "AuxAngle",
    "get_logger",
    "AuditLogger",
]
