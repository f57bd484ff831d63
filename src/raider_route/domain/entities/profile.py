# raider_route/domain/entities/profile.py
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

EDGE_KEY_SEP = "|"

EdgeKey = tuple[str, str]


def edge_key(from_id: str, to_id: str) -> str:
    """Persisted form of a directed edge key: 'from|to'."""
    return f"{from_id}{EDGE_KEY_SEP}{to_id}"


def parse_edge_key(key: str) -> EdgeKey:
    from_id, sep, to_id = key.partition(EDGE_KEY_SEP)
    if not sep or not from_id or not to_id:
        raise ValueError(f"edge key must look like 'from|to', got {key!r}")
    return from_id, to_id


def _frozen(m: Mapping | None) -> Mapping:
    return MappingProxyType(dict(m or {}))


@dataclass(frozen=True)
class CostProfile:
    """
    Learned per-map cost adjustments. Read-only during routing.

    node_bonuses   : node id -> amount subtracted when arriving at the node
    node_penalties : node id -> amount added when arriving at the node
    edge_penalties : (from, to) -> amount added when traversing exactly that edge
    """

    map_id: str | None = None
    node_bonuses: Mapping[str, float] = field(default_factory=dict)
    node_penalties: Mapping[str, float] = field(default_factory=dict)
    edge_penalties: Mapping[EdgeKey, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "node_bonuses", _frozen(self.node_bonuses))
        object.__setattr__(self, "node_penalties", _frozen(self.node_penalties))
        object.__setattr__(self, "edge_penalties", _frozen(self.edge_penalties))

    @classmethod
    def from_payload(cls, payload: Mapping, *, map_id: str | None = None) -> "CostProfile":
        from raider_route.io.payloads import ProfilePayload

        return ProfilePayload.model_validate(payload).to_profile(map_id=map_id)

    def to_payload(self) -> dict:
        """Persisted (camelCase, "from|to" edge keys) form; from_payload reads it back."""
        return {
            "mapID": self.map_id,
            "nodeBonuses": dict(self.node_bonuses),
            "nodePenalties": dict(self.node_penalties),
            "edgePenalties": {edge_key(u, v): w for (u, v), w in self.edge_penalties.items()},
        }

    def modifier(self, from_id: str, to_id: str) -> float:
        """Net adjustment for traversing from_id -> to_id (penalties minus bonus)."""
        return (
            self.node_penalties.get(to_id, 0.0)
            - self.node_bonuses.get(to_id, 0.0)
            + self.edge_penalties.get((from_id, to_id), 0.0)
        )

    def is_empty(self) -> bool:
        return not (self.node_bonuses or self.node_penalties or self.edge_penalties)
