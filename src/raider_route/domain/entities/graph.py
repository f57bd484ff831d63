# raider_route/domain/entities/graph.py
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import cached_property

SPAWN_SUBCATEGORY = "player_spawn"


@dataclass(frozen=True)
class Node:
    id: str
    lat: float
    lng: float
    map_id: str | None = None
    category: str | None = None
    subcategory: str | None = None
    instance_name: str | None = None

    @property
    def display_text(self) -> str:
        return self.instance_name or self.subcategory or self.category or "Unknown"

    @property
    def is_spawn(self) -> bool:
        return self.subcategory == SPAWN_SUBCATEGORY


@dataclass(frozen=True)
class Edge:
    from_id: str
    to_id: str
    weight: float  # base cost, >= 0


@dataclass(frozen=True)
class Graph:
    """
    Nodes + directed edges of a single map.
    Edges pointing at unknown node ids are kept but never traversed.
    """

    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]
    map_id: str | None = None
    _index: dict[str, Node] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # accept lists from callers, store tuples
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))
        object.__setattr__(self, "_index", {n.id: n for n in self.nodes})

    @classmethod
    def from_payload(cls, payload: Mapping, *, map_id: str | None = None) -> "Graph":
        # local import: io depends on entities, not the other way round
        from raider_route.io.payloads import GraphPayload

        return GraphPayload.model_validate(payload).to_graph(map_id=map_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def node(self, node_id: str) -> Node | None:
        return self._index.get(node_id)

    def hydrate(self, node_ids: Iterable[str]) -> tuple[Node, ...]:
        return tuple(self._index[i] for i in node_ids if i in self._index)

    def spawns(self) -> tuple[Node, ...]:
        return tuple(n for n in self.nodes if n.is_spawn)

    @cached_property
    def adjacency(self) -> Mapping[str, tuple[Edge, ...]]:
        adj: dict[str, list[Edge]] = {}
        for e in self.edges:
            if e.from_id not in self._index or e.to_id not in self._index:
                continue
            adj.setdefault(e.from_id, []).append(e)
        return {k: tuple(v) for k, v in adj.items()}
