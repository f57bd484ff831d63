# raider_route/domain/entities/route.py
from dataclasses import dataclass, field

from raider_route.domain.entities.graph import Node
from raider_route.domain.entities.profile import CostProfile


@dataclass(frozen=True)
class PathResult:
    """Single start->goal shortest path, endpoints inclusive."""

    node_ids: tuple[str, ...]
    cost: float


@dataclass(frozen=True)
class RouteRequest:
    map_id: str
    start_id: str
    target_ids: tuple[str, ...] = ()
    profile: CostProfile | None = None

    def __post_init__(self):
        # one visit per target; first-seen order kept for logging only
        object.__setattr__(self, "target_ids", tuple(dict.fromkeys(self.target_ids)))


@dataclass(frozen=True)
class RouteResult:
    path_ids: tuple[str, ...]
    total_cost: float
    steps: tuple[Node, ...] = ()
    unreached: tuple[str, ...] = field(default_factory=tuple)

    @property
    def partial(self) -> bool:
        """True when some requested targets are missing from the path."""
        return bool(self.unreached)
