# raider_route/domain/routing/routing_core.py
import time
from dataclasses import dataclass, field

from raider_route.app.hooks import NoopHooks, RoutingHooks
from raider_route.app.protocols import RoutePlanner, ShortestPathEngine
from raider_route.domain.entities.graph import Graph
from raider_route.domain.entities.profile import CostProfile
from raider_route.domain.entities.route import PathResult, RouteRequest, RouteResult
from raider_route.domain.routing.routing_dijkstra import DijkstraEngine
from raider_route.domain.routing.routing_planners import GreedyNearestPlanner


@dataclass
class Router:
    """Engine + sequencing strategy + hooks behind one blocking call."""

    engine: ShortestPathEngine
    planner: RoutePlanner
    hooks: RoutingHooks = field(default_factory=NoopHooks)

    def shortest_path(
        self, graph: Graph, start: str, goal: str, profile: CostProfile | None = None
    ) -> PathResult | None:
        return self.engine.path(graph, start, goal, profile)

    def plan_route(self, request: RouteRequest, graph: Graph) -> RouteResult | None:
        t0 = time.perf_counter()
        # hooks are shared across calls; per-call data only travels in the arguments
        ctx = {
            "map_id": request.map_id,
            "start_id": request.start_id,
            "targets": list(request.target_ids),
            "strategy": getattr(self.planner, "kind", type(self.planner).__name__),
        }
        self.hooks.route_start(**ctx)
        result = self.planner.plan(request, graph)
        self.hooks.route_end(
            **ctx,
            ok=result is not None,
            total_cost=None if result is None else result.total_cost,
            path_len=0 if result is None else len(result.path_ids),
            unreached=[] if result is None else list(result.unreached),
            wall_ms=(time.perf_counter() - t0) * 1000,
        )
        return result


def plan_route(
    request: RouteRequest, graph: Graph, *, cost_floor: float = 0.0
) -> RouteResult | None:
    """Greedy nearest-next plan with default settings; use build() for configured routers."""
    return GreedyNearestPlanner(DijkstraEngine(cost_floor)).plan(request, graph)
