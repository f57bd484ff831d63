# raider_route/domain/calibration/calibration_solver.py
import math
from collections.abc import Sequence

import numpy as np

from raider_route.app.hooks import NoopHooks, RoutingHooks
from raider_route.app.protocols import Calibrator
from raider_route.domain.entities.calibration import CalibrationAnchor, ImagePoint, Transform

MIN_ANCHORS = 3
DET_EPSILON = 1e-9

# singular axis: value = 1*lat + 0*lng + 0
_FALLBACK = (1.0, 0.0, 0.0)


def _normal_equations(lat: np.ndarray, lng: np.ndarray, v: np.ndarray):
    # rows [lat, lng, 1]
    M = np.column_stack([lat, lng, np.ones_like(lat)])
    return M.T @ M, M.T @ v


def fit_plane(
    lat: np.ndarray, lng: np.ndarray, v: np.ndarray, *, det_epsilon: float = DET_EPSILON
) -> tuple[tuple[float, float, float], float]:
    """
    Least-squares fit of v = A*lat + B*lng + C via Cramer's rule on the 3x3 normal equations.
    Returns ((A, B, C), det); a near-singular system returns the fallback (1, 0, 0).

    lat/lng are centered on their means first. det(M^T M) is unchanged in exact arithmetic,
    and stays near zero for collinear anchors at game-scale coordinates (~1e3).
    """
    lat0, lng0 = float(lat.mean()), float(lng.mean())
    mtm, rhs = _normal_equations(lat - lat0, lng - lng0, v)
    det = float(np.linalg.det(mtm))
    if not math.isfinite(det) or abs(det) < det_epsilon:
        return _FALLBACK, det
    coeffs = []
    for i in range(3):
        mi = mtm.copy()
        mi[:, i] = rhs
        coeffs.append(float(np.linalg.det(mi)) / det)
    a, b, c0 = coeffs
    return (a, b, c0 - a * lat0 - b * lng0), det


def solve(
    anchors: Sequence[CalibrationAnchor],
    *,
    min_anchors: int = MIN_ANCHORS,
    det_epsilon: float = DET_EPSILON,
    hooks: RoutingHooks | None = None,
) -> Transform | None:
    """
    Affine lat/lng -> pixel transform from >= min_anchors correspondences.
    None when there are too few anchors. Collinear anchors do not raise; the
    degenerate axis gets the identity-like fallback, so treat such a result with suspicion.
    """
    if len(anchors) < min_anchors:
        return None
    hooks = hooks or NoopHooks()
    lat = np.array([p.lat for p in anchors], dtype=float)
    lng = np.array([p.lng for p in anchors], dtype=float)

    fits = {}
    for axis, vals in (("x", [p.x for p in anchors]), ("y", [p.y for p in anchors])):
        fits[axis], det = fit_plane(lat, lng, np.array(vals, dtype=float), det_epsilon=det_epsilon)
        if not math.isfinite(det) or abs(det) < det_epsilon:
            hooks.calibration_degenerate(axis=axis, det=det)

    (a, b, tx), (c, d, ty) = fits["x"], fits["y"]
    transform = Transform(a=a, b=b, c=c, d=d, tx=tx, ty=ty)
    hooks.calibration_solved(
        anchors=len(anchors), transform=transform.as_list(), rms=fit_rms(anchors, transform)
    )
    return transform


def project(lat: float, lng: float, transform: Transform | Sequence[float]) -> ImagePoint:
    """Geo -> image pixels. A malformed transform projects everything to the origin."""
    if not isinstance(transform, Transform):
        transform = Transform.from_sequence(transform)
        if transform is None:
            return ImagePoint(0.0, 0.0)
    return transform.apply(lat, lng)


def fit_rms(anchors: Sequence[CalibrationAnchor], transform: Transform) -> float:
    """Root-mean-square pixel residual of the anchors under the transform."""
    if not anchors:
        return 0.0
    sq = 0.0
    for p in anchors:
        q = transform.apply(p.lat, p.lng)
        sq += (q.x - p.x) ** 2 + (q.y - p.y) ** 2
    return math.sqrt(sq / len(anchors))


class LeastSquaresCalibrator(Calibrator):
    def __init__(
        self,
        min_anchors: int = MIN_ANCHORS,
        det_epsilon: float = DET_EPSILON,
        hooks: RoutingHooks | None = None,
    ):
        self.min_anchors, self.det_epsilon = min_anchors, det_epsilon
        self.hooks = hooks or NoopHooks()

    def solve(self, anchors):
        return solve(
            anchors, min_anchors=self.min_anchors, det_epsilon=self.det_epsilon, hooks=self.hooks
        )
