# raider_route/domain/routing/routing_dijkstra.py
import heapq
import math
from collections.abc import Mapping

from raider_route.app.protocols import ShortestPathEngine
from raider_route.domain.entities.graph import Edge, Graph
from raider_route.domain.entities.profile import CostProfile
from raider_route.domain.entities.route import PathResult


def effective_cost(edge: Edge, profile: CostProfile | None, floor: float = 0.0) -> float:
    """Base weight plus profile adjustments, clamped to `floor` so Dijkstra stays valid."""
    mod = profile.modifier(edge.from_id, edge.to_id) if profile is not None else 0.0
    return max(floor, edge.weight + mod)


def _run(
    graph: Graph,
    start: str,
    profile: CostProfile | None,
    floor: float,
    goal: str | None = None,
) -> tuple[dict[str, float], dict[str, str]]:
    # heap key (cost, node_id): equal costs settle lowest id first
    dist: dict[str, float] = {start: 0.0}
    parent: dict[str, str] = {}
    settled: dict[str, float] = {}
    q: list[tuple[float, str]] = [(0.0, start)]
    adj = graph.adjacency

    while q:
        d, u = heapq.heappop(q)
        if u in settled:
            continue
        settled[u] = d
        if u == goal:
            break
        for e in adj.get(u, ()):
            v = e.to_id
            if v in settled:
                continue
            nd = d + effective_cost(e, profile, floor)
            if nd < dist.get(v, math.inf):
                dist[v] = nd
                parent[v] = u
                heapq.heappush(q, (nd, v))
    return settled, parent


def _backtrack(parent: Mapping[str, str], start: str, goal: str) -> tuple[str, ...]:
    out = [goal]
    cur = goal
    while cur != start:
        cur = parent[cur]
        out.append(cur)
    out.reverse()
    return tuple(out)


def shortest_path(
    graph: Graph,
    start: str,
    goal: str,
    profile: CostProfile | None = None,
    *,
    cost_floor: float = 0.0,
) -> PathResult | None:
    """Cheapest start->goal path (inclusive) or None if the goal is unreachable."""
    if start not in graph or goal not in graph:
        return None
    settled, parent = _run(graph, start, profile, cost_floor, goal=goal)
    if goal not in settled:
        return None
    return PathResult(_backtrack(parent, start, goal), settled[goal])


def shortest_paths_from(
    graph: Graph,
    start: str,
    profile: CostProfile | None = None,
    *,
    cost_floor: float = 0.0,
) -> tuple[dict[str, float], dict[str, str]]:
    """Settled costs and parent pointers for every node reachable from start."""
    if start not in graph:
        return {}, {}
    return _run(graph, start, profile, cost_floor)


def path_from_tables(parent: Mapping[str, str], start: str, goal: str) -> tuple[str, ...]:
    return _backtrack(parent, start, goal)


class DijkstraEngine(ShortestPathEngine):
    def __init__(self, cost_floor: float = 0.0):
        if cost_floor < 0:
            raise ValueError("cost_floor must be >= 0")
        self.cost_floor = cost_floor

    def path(self, graph, start, goal, profile=None):
        return shortest_path(graph, start, goal, profile, cost_floor=self.cost_floor)

    def costs_from(self, graph, start, profile=None):
        return shortest_paths_from(graph, start, profile, cost_floor=self.cost_floor)
