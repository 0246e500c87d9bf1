"""
Validation Framework for the Divided-Difference Engine.

This module provides numerical consistency checks whose residuals are
recorded in the audit trail.
"""

from validation.consistency_tests import (
    DividedDifferenceChecker,
    ValidationResult,
    default_limit_tolerance,
    relative_error,
)

__all__ = [
    "DividedDifferenceChecker",
    "ValidationResult",
    "default_limit_tolerance",
    "relative_error",
]
