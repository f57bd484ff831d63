# runtime/registries.py
from collections.abc import Callable
from typing import Any

from raider_route.app.protocols import RoutePlanner, ShortestPathEngine
from raider_route.config.models import (
    PlannerExactModel,
    PlannerGreedyModel,
    PlannerUnion,
    ShortestPathModel,
)
from raider_route.domain.routing.routing_dijkstra import DijkstraEngine
from raider_route.domain.routing.routing_planners import ExactSubsetPlanner, GreedyNearestPlanner

EngineFactory = Callable[[ShortestPathModel, dict], ShortestPathEngine]
PlannerFactory = Callable[[PlannerUnion, dict], RoutePlanner]

_engine_registry: dict[str, EngineFactory] = {}
_planner_registry: dict[str, PlannerFactory] = {}


# ------------------- Shortest-path engines ---------------------------


def register_engine(kind: str):
    def deco(fn: EngineFactory):
        _engine_registry[kind] = fn
        return fn

    return deco


def make_engine(cfg: ShortestPathModel, *, deps: dict | None = None) -> ShortestPathEngine:
    try:
        factory = _engine_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown shortest-path kind {cfg.kind!r}")
    return factory(cfg, deps or {})


@register_engine("dijkstra")
def _make_dijkstra(cfg: ShortestPathModel, deps):
    return DijkstraEngine(cost_floor=cfg.cost_floor)


# --------------------- Route Planners  ---------------------


def register_planner(kind: str):
    def deco(fn: PlannerFactory):
        _planner_registry[kind] = fn
        return fn

    return deco


def make_planner(cfg: PlannerUnion, *, deps: dict[str, Any]) -> RoutePlanner:
    """
    deps:
      - 'engine': ShortestPathEngine (required)
      - 'hooks' : RoutingHooks (optional)
    """
    try:
        factory = _planner_registry[cfg.kind]
    except KeyError:
        raise ValueError(f"Unknown planner kind {cfg.kind!r}")
    return factory(cfg, deps)


@register_planner("greedy")
def _make_greedy(cfg: PlannerGreedyModel, deps):
    return GreedyNearestPlanner(deps["engine"], deps.get("hooks"))


@register_planner("exact")
def _make_exact(cfg: PlannerExactModel, deps):
    return ExactSubsetPlanner(deps["engine"], deps.get("hooks"), max_targets=cfg.max_targets)
