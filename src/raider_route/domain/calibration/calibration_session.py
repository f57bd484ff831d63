# raider_route/domain/calibration/calibration_session.py
from collections.abc import Sequence

from raider_route.app.protocols import Calibrator
from raider_route.domain.calibration.calibration_solver import LeastSquaresCalibrator
from raider_route.domain.calibration.calibration_viewport import AspectFit
from raider_route.domain.entities.calibration import (
    Calibration,
    CalibrationAnchor,
    ImagePoint,
)
from raider_route.domain.entities.graph import Node


class CalibrationSession:
    """
    Transient anchor collection for one map image.
    At most one anchor per node: placing again moves it.
    """

    def __init__(
        self,
        map_id: str,
        nodes: Sequence[Node],
        *,
        calibrator: Calibrator | None = None,
        min_anchors: int = 3,
        image_filename: str = "",
    ):
        self.map_id = map_id
        self.nodes = {n.id: n for n in nodes}
        self.calibrator = calibrator or LeastSquaresCalibrator(min_anchors=min_anchors)
        self.min_anchors = min_anchors
        self.image_filename = image_filename
        self._anchors: dict[str, CalibrationAnchor] = {}

    @property
    def anchors(self) -> list[CalibrationAnchor]:
        return list(self._anchors.values())

    @property
    def ready(self) -> bool:
        return len(self._anchors) >= self.min_anchors

    def suggested_nodes(self, limit: int = 10) -> list[Node]:
        return list(self.nodes.values())[:limit]

    def place(self, node_id: str, at: ImagePoint) -> CalibrationAnchor | None:
        node = self.nodes.get(node_id)
        if node is None:
            return None
        # re-insert so the moved anchor goes to the end, like remove + append
        self._anchors.pop(node_id, None)
        anchor = CalibrationAnchor(node_id=node_id, lat=node.lat, lng=node.lng, x=at.x, y=at.y)
        self._anchors[node_id] = anchor
        return anchor

    def tap(self, node_id: str, view_point: ImagePoint, fit: AspectFit) -> CalibrationAnchor | None:
        """Place from a view-space tap; taps outside the drawn image are ignored."""
        p = fit.view_to_image(view_point)
        if p is None:
            return None
        return self.place(node_id, p)

    def remove(self, node_id: str) -> bool:
        return self._anchors.pop(node_id, None) is not None

    def save(self) -> Calibration | None:
        anchors = self.anchors
        transform = self.calibrator.solve(anchors)
        if transform is None:
            return None
        return Calibration(
            map_id=self.map_id,
            transform=transform,
            anchors=tuple(anchors),
            image_filename=self.image_filename,
        )
