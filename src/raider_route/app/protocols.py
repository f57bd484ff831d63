from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from raider_route.domain.entities.calibration import CalibrationAnchor, Transform
from raider_route.domain.entities.graph import Graph
from raider_route.domain.entities.profile import CostProfile
from raider_route.domain.entities.route import PathResult, RouteRequest, RouteResult


# ------------- Routing --------------------
@runtime_checkable
class ShortestPathEngine(Protocol):
    """
    Responsibilities:
      • Cheapest directed path between two nodes under a cost profile.
      • Full single-source cost/parent tables (used by exact sequencing).
    Returns None when the goal cannot be reached; never raises for that.
    """

    def path(
        self, graph: Graph, start: str, goal: str, profile: CostProfile | None = None
    ) -> PathResult | None: ...
    def costs_from(
        self, graph: Graph, start: str, profile: CostProfile | None = None
    ) -> tuple[Mapping[str, float], Mapping[str, str]]: ...


@runtime_checkable
class RoutePlanner(Protocol):
    """
    Responsibilities:
      • Order the requested targets and stitch the sub-paths together.
      • Report dropped/unreachable targets on the result instead of failing.
    """

    def plan(self, request: RouteRequest, graph: Graph) -> RouteResult | None: ...


# ------------- Calibration --------------------
@runtime_checkable
class Calibrator(Protocol):
    def solve(self, anchors: list[CalibrationAnchor]) -> Transform | None: ...
