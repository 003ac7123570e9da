"""
Common utilities shared by the geodesy packages.

This package provides foundational components:
- Ellipsoid constants and flat projection calibration coefficients
- Unit registry for explicit kilometre/metre conversions
- Geographic coordinate type
- Logging infrastructure
"""

from common.constants import Constant, PhysicalConstants, FlatProjectionCoefficients
from common.units import ureg, Q_, to_kilometers
from common.types import GeoCoordinate
from common.logging_config import get_logger

__all__ = [
    "Constant",
    "PhysicalConstants",
    "FlatProjectionCoefficients",
    "ureg",
    "Q_",
    "to_kilometers",
    "GeoCoordinate",
    "get_logger",
]
