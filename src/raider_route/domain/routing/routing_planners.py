# raider_route/domain/routing/routing_planners.py
import math

from raider_route.app.hooks import NoopHooks, RoutingHooks
from raider_route.app.protocols import RoutePlanner, ShortestPathEngine
from raider_route.domain.entities.graph import Graph
from raider_route.domain.entities.route import RouteRequest, RouteResult
from raider_route.domain.routing.routing_dijkstra import path_from_tables


class _PlannerBase(RoutePlanner):
    def __init__(self, engine: ShortestPathEngine, hooks: RoutingHooks | None = None):
        self.engine = engine
        self.hooks = hooks or NoopHooks()

    def _split_targets(self, request: RouteRequest, graph: Graph) -> tuple[list[str], list[str]]:
        """(routable, dropped): ids absent from the graph can never be visited."""
        known, dropped = [], []
        for t in request.target_ids:
            (known if t in graph else dropped).append(t)
        for t in dropped:
            self.hooks.target_unreachable(map_id=request.map_id, target_id=t, reason="unknown_node")
        return known, dropped

    def _result(self, graph: Graph, path: list[str], cost: float, unreached) -> RouteResult:
        return RouteResult(
            path_ids=tuple(path),
            total_cost=cost,
            steps=graph.hydrate(path),
            unreached=tuple(unreached),
        )

    def _append(self, path: list[str], sub: tuple[str, ...], cost: float) -> None:
        # sub starts at path[-1]; skip the junction node
        path.extend(sub[1:])
        self.hooks.segment(from_id=sub[0], to_id=sub[-1], cost=cost, hops=len(sub) - 1)


class GreedyNearestPlanner(_PlannerBase):
    """
    Nearest-next sequencing: from the current node, go to the cheapest remaining target.
    Not globally optimal across target orders; fine for the usual handful of targets.
    """

    kind = "greedy"

    def plan(self, request: RouteRequest, graph: Graph) -> RouteResult | None:
        start = request.start_id
        if start not in graph:
            return None
        known, dropped = self._split_targets(request, graph)

        current, path, total = start, [start], 0.0
        remaining = set(known)
        while remaining:
            best_t, best = None, None
            for t in sorted(remaining):  # strict < below: lowest id wins ties
                res = self.engine.path(graph, current, t, request.profile)
                if res is not None and (best is None or res.cost < best.cost):
                    best_t, best = t, res
            if best is None:
                break
            self._append(path, best.node_ids, best.cost)
            total += best.cost
            remaining.discard(best_t)
            current = best_t

        for t in sorted(remaining):
            self.hooks.target_unreachable(map_id=request.map_id, target_id=t, reason="unreachable")
        if remaining and len(remaining) == len(known):
            return None  # nothing reachable at all from start
        unreached = [t for t in request.target_ids if t in remaining or t in dropped]
        return self._result(graph, path, total, unreached)


class ExactSubsetPlanner(_PlannerBase):
    """
    Held-Karp over target subsets (open path from start, no return leg).
    Above `max_targets` the subset table gets too large; falls back to greedy.
    When not every target is reachable, keeps the largest reachable subset, then the cheapest.
    """

    kind = "exact"

    def __init__(
        self,
        engine: ShortestPathEngine,
        hooks: RoutingHooks | None = None,
        max_targets: int = 8,
    ):
        super().__init__(engine, hooks)
        self.max_targets = max_targets
        self._fallback = GreedyNearestPlanner(engine, hooks)

    def plan(self, request: RouteRequest, graph: Graph) -> RouteResult | None:
        start = request.start_id
        if start not in graph:
            return None
        # only ids present in the graph take part in the subset table
        if sum(t in graph for t in request.target_ids) > self.max_targets:
            return self._fallback.plan(request, graph)
        known, dropped = self._split_targets(request, graph)
        if not known:
            return self._result(graph, [start], 0.0, dropped)

        T = sorted(known)
        n = len(T)
        tables = {
            src: self.engine.costs_from(graph, src, request.profile) for src in [start, *T]
        }

        def cost(a: str, b: str) -> float:
            return tables[a][0].get(b, math.inf)

        # dp[(mask, j)] = (cost, prev index or -1)
        dp: dict[tuple[int, int], tuple[float, int]] = {}
        for j in range(n):
            c = cost(start, T[j])
            if c < math.inf:
                dp[(1 << j, j)] = (c, -1)
        for mask in range(1, 1 << n):
            for j in range(n):
                cur = dp.get((mask, j))
                if cur is None:
                    continue
                for k in range(n):
                    if mask & (1 << k):
                        continue
                    step = cost(T[j], T[k])
                    if step == math.inf:
                        continue
                    key = (mask | (1 << k), k)
                    c2 = cur[0] + step
                    if key not in dp or c2 < dp[key][0]:
                        dp[key] = (c2, j)

        if not dp:
            for t in T:
                self.hooks.target_unreachable(
                    map_id=request.map_id, target_id=t, reason="unreachable"
                )
            return None

        (mask, j), (total, _) = min(
            dp.items(), key=lambda kv: (-bin(kv[0][0]).count("1"), kv[1][0], kv[0])
        )
        order: list[str] = []
        m = mask
        while j != -1:
            order.append(T[j])
            prev = dp[(m, j)][1]
            m &= ~(1 << j)
            j = prev
        order.reverse()

        path, current = [start], start
        for t in order:
            sub = path_from_tables(tables[current][1], current, t)
            self._append(path, sub, cost(current, t))
            current = t

        visited = set(order)
        for t in T:
            if t not in visited:
                self.hooks.target_unreachable(
                    map_id=request.map_id, target_id=t, reason="unreachable"
                )
        unreached = [t for t in request.target_ids if t not in visited]
        return self._result(graph, path, total, unreached)
