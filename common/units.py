"""
Unit Registry for Geodesic Distances.

The flat projection reports kilometres and the Vincenty oracle reports the
unit of its ellipsoid axes (metres for WGS84). Nothing in the numeric core
converts between the two; this module gives callers an explicit, `pint`-based
way to do it when they compare results.

Example Usage
-------------
>>> from common.units import Q_, to_kilometers
>>> to_kilometers(Q_(1500, 'm'))
1.5
"""

from typing import Union

import pint
from pint import UnitRegistry as PintUnitRegistry

# Create the global unit registry
ureg = PintUnitRegistry()

# Convenience alias for creating quantities
Q_ = ureg.Quantity


def to_kilometers(value: Union[float, pint.Quantity], default_unit: str = "m") -> float:
    """Convert a length to a bare number of kilometres.

    Parameters
    ----------
    value : float or pint.Quantity
        A length quantity, or a bare number in `default_unit`.
    default_unit : str
        Unit assumed for bare numbers (default: metres, the oracle's unit).

    Returns
    -------
    float
        The magnitude in kilometres.

    Raises
    ------
    ValueError
        If the quantity is not a length.
    """
    if not isinstance(value, pint.Quantity):
        value = ureg.Quantity(value, default_unit)
    try:
        return value.to("kilometer").magnitude
    except pint.DimensionalityError as e:
        raise ValueError(
            f"Expected a length, got {value.units}"
        ) from e
