"""
Validation Framework for the Flat Projection.

This module compares the fast planar path against exact ellipsoidal
distances.
"""

from validation.accuracy import (
    AccuracyConfig,
    AccuracyReport,
    PairError,
    ProjectionAccuracyChecker,
    ValidationResult,
)

__all__ = [
    "AccuracyConfig",
    "AccuracyReport",
    "PairError",
    "ProjectionAccuracyChecker",
    "ValidationResult",
]
