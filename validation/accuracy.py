"""
Accuracy Checks for the Flat Projection.

This module measures how far the flat projection's planar distances drift
from exact ellipsoidal distances, so callers can calibrate where the fast
path is good enough.

Check Categories
----------------
1. Distance agreement (flat distance vs Vincenty distance per point pair)
2. Scale factors (kx/ky vs exact lengths of one degree from the radii of
   curvature)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import numpy as np

from common.logging_config import get_logger
from common.types import GeoCoordinate
from common.units import to_kilometers
from geospatial.coordinate_models import EllipsoidParameters, WGS84Ellipsoid, degree_lengths
from geospatial.distance_calculations import (
    VincentyConfig,
    VincentyConvergenceError,
    vincenty_distance,
)
from geospatial.flat_projection import FlatProjection

logger = get_logger(__name__)

PointPair = Tuple[GeoCoordinate, GeoCoordinate]


@dataclass
class AccuracyConfig:
    """Tolerances for accuracy checks.

    Attributes
    ----------
    max_error_km : float
        Largest acceptable |flat - exact| distance per pair, in km.
    max_scale_factor_relative_error : float
        Largest acceptable relative error of kx/ky against the exact
        degree lengths.
    ellipsoid : EllipsoidParameters
        Ellipsoid for the exact distances (default: WGS84).
    ellipsoid_unit : str
        Unit of the ellipsoid axes, used to convert exact distances to km.
    vincenty : VincentyConfig
        Iteration settings for the oracle.
    """
    max_error_km: float = 0.02
    max_scale_factor_relative_error: float = 1e-4
    ellipsoid: EllipsoidParameters = WGS84Ellipsoid
    ellipsoid_unit: str = "m"
    vincenty: VincentyConfig = field(default_factory=VincentyConfig)


@dataclass
class ValidationResult:
    """Result of a validation check.

    Attributes
    ----------
    test_name : str
        Name of the check.
    passed : bool
        Whether the check passed.
    message : str
        Description of result.
    details : dict
        Additional details.
    """
    test_name: str
    passed: bool
    message: str
    details: Dict[str, Any]


@dataclass
class PairError:
    """Flat vs exact distance for one point pair.

    Attributes
    ----------
    start, end : GeoCoordinate
        The point pair.
    flat_km : float
        Distance from the flat projection in km.
    exact_km : float
        Vincenty distance in km, NaN if the oracle did not converge.
    """
    start: GeoCoordinate
    end: GeoCoordinate
    flat_km: float
    exact_km: float

    @property
    def converged(self) -> bool:
        """Whether the Vincenty oracle produced a distance for this pair."""
        return not np.isnan(self.exact_km)

    @property
    def error_km(self) -> float:
        """Absolute error in km (NaN when the oracle did not converge)."""
        return abs(self.flat_km - self.exact_km)


@dataclass
class AccuracyReport:
    """Distance agreement over a set of point pairs."""
    pair_errors: List[PairError]
    max_error_km: float
    mean_error_km: float
    non_converged: int
    passed: bool


class ProjectionAccuracyChecker:
    """Checker comparing the flat projection against exact distances.

    Examples
    --------
    >>> aachen = GeoCoordinate(6.186389, 50.823194)
    >>> meiersberg = GeoCoordinate(6.953333, 51.301389)
    >>> checker = ProjectionAccuracyChecker()
    >>> report = checker.compare([(aachen, meiersberg)], FlatProjection(51.05, 6.0))
    >>> report.passed
    True
    """

    def __init__(
        self,
        config: Optional[AccuracyConfig] = None,
        log_violations: bool = True
    ):
        """Initialize accuracy checker.

        Parameters
        ----------
        config : AccuracyConfig, optional
            Tolerances and oracle settings.
        log_violations : bool
            Whether to log failed checks.
        """
        self.config = config or AccuracyConfig()
        self.log_violations = log_violations
        self._logger = get_logger("ProjectionAccuracyChecker")

    def compare(
        self,
        pairs: Iterable[PointPair],
        projection: Optional[FlatProjection] = None
    ) -> AccuracyReport:
        """Compare flat and exact distances for each pair.

        Parameters
        ----------
        pairs : iterable of (GeoCoordinate, GeoCoordinate)
            Point pairs to measure.
        projection : FlatProjection, optional
            Projection shared by all pairs. If omitted, each pair gets a
            projection centred on its own midpoint.

        Returns
        -------
        AccuracyReport
            Per-pair errors and summary statistics. Pairs where the oracle
            did not converge are counted but excluded from the statistics.
        """
        pair_errors = []
        for start, end in pairs:
            proj = projection or FlatProjection.from_points([start, end])
            flat_km = float(
                proj.project(*start.as_tuple()).distance(proj.project(*end.as_tuple()))
            )
            try:
                exact = vincenty_distance(
                    *start.as_tuple(), *end.as_tuple(),
                    ellipsoid=self.config.ellipsoid,
                    config=self.config.vincenty
                )
                exact_km = to_kilometers(exact, self.config.ellipsoid_unit)
            except VincentyConvergenceError:
                exact_km = np.nan
            pair_errors.append(PairError(start, end, flat_km, exact_km))

        errors = np.array([p.error_km for p in pair_errors if p.converged])
        non_converged = len(pair_errors) - len(errors)
        max_error = float(np.max(errors)) if errors.size else np.nan
        mean_error = float(np.mean(errors)) if errors.size else np.nan
        passed = bool(errors.size) and max_error <= self.config.max_error_km

        if not passed and self.log_violations:
            self._logger.warning(
                f"Flat projection error {max_error:.4f} km exceeds "
                f"{self.config.max_error_km} km ({non_converged} pairs without exact distance)"
            )

        return AccuracyReport(
            pair_errors=pair_errors,
            max_error_km=max_error,
            mean_error_km=mean_error,
            non_converged=non_converged,
            passed=passed
        )

    def check_distance_agreement(
        self,
        pairs: Sequence[PointPair],
        projection: Optional[FlatProjection] = None
    ) -> ValidationResult:
        """Check that flat distances stay within tolerance of Vincenty."""
        report = self.compare(pairs, projection)

        return ValidationResult(
            test_name="distance_agreement",
            passed=report.passed,
            message=f"Distance agreement check: max error {report.max_error_km:.4f} km",
            details={
                'max_error_km': report.max_error_km,
                'mean_error_km': report.mean_error_km,
                'num_pairs': len(report.pair_errors),
                'non_converged': report.non_converged,
                'limit_km': self.config.max_error_km,
            }
        )

    def check_scale_factors(
        self,
        latitudes: Iterable[float]
    ) -> ValidationResult:
        """Check kx/ky against the exact lengths of one degree."""
        lat = np.asarray(list(latitudes), dtype=np.float64)
        proj_kx = np.array([float(FlatProjection(phi).kx) for phi in lat])
        proj_ky = np.array([float(FlatProjection(phi).ky) for phi in lat])

        exact_x, exact_y = degree_lengths(lat, self.config.ellipsoid)
        exact_kx = to_kilometers(exact_x, self.config.ellipsoid_unit)
        exact_ky = to_kilometers(exact_y, self.config.ellipsoid_unit)

        rel_x = np.abs(proj_kx - exact_kx) / exact_kx
        rel_y = np.abs(proj_ky - exact_ky) / exact_ky
        worst = float(max(np.max(rel_x), np.max(rel_y)))
        passed = worst <= self.config.max_scale_factor_relative_error

        if not passed and self.log_violations:
            self._logger.warning(f"Scale factor relative error {worst:.2e} exceeds tolerance")

        return ValidationResult(
            test_name="scale_factors",
            passed=passed,
            message=f"Scale factor check: worst relative error {worst:.2e}",
            details={
                'max_relative_error_kx': float(np.max(rel_x)),
                'max_relative_error_ky': float(np.max(rel_y)),
                'latitudes': lat.tolist(),
                'limit': self.config.max_scale_factor_relative_error,
            }
        )

    def check_all(
        self,
        pairs: Sequence[PointPair],
        projection: Optional[FlatProjection] = None
    ) -> List[ValidationResult]:
        """Run all accuracy checks for a set of point pairs."""
        latitudes = [p.latitude for pair in pairs for p in pair]
        if projection is not None:
            latitudes.append(float(projection.latitude))

        return [
            self.check_distance_agreement(pairs, projection),
            self.check_scale_factors(latitudes),
        ]
