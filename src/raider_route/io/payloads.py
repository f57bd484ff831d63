# raider_route/io/payloads.py
# Decoded data-pack payloads (already-parsed JSON mappings) -> domain entities.
from collections.abc import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from raider_route.domain.entities.calibration import CalibrationAnchor
from raider_route.domain.entities.graph import Edge, Graph, Node
from raider_route.domain.entities.profile import CostProfile, parse_edge_key

_PACK = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class NodePayload(BaseModel):
    model_config = _PACK
    id: str
    lat: float
    lng: float
    map_id: str | None = Field(default=None, alias="mapID")
    category: str | None = None
    subcategory: str | None = None
    instance_name: str | None = Field(default=None, alias="instanceName")

    def to_node(self) -> Node:
        return Node(**self.model_dump())


class EdgePayload(BaseModel):
    model_config = _PACK
    from_id: str = Field(alias="fromId")
    to_id: str = Field(alias="toId")
    weight: float = Field(ge=0)


class GraphPayload(BaseModel):
    model_config = _PACK
    nodes: list[NodePayload] = Field(default_factory=list)
    edges: list[EdgePayload] = Field(default_factory=list)

    def to_graph(self, *, map_id: str | None = None) -> Graph:
        return Graph(
            nodes=tuple(n.to_node() for n in self.nodes),
            edges=tuple(Edge(e.from_id, e.to_id, e.weight) for e in self.edges),
            map_id=map_id,
        )


class ProfilePayload(BaseModel):
    model_config = _PACK
    map_id: str | None = Field(default=None, alias="mapID")
    node_bonuses: dict[str, float] = Field(default_factory=dict, alias="nodeBonuses")
    node_penalties: dict[str, float] = Field(default_factory=dict, alias="nodePenalties")
    edge_penalties: dict[str, float] = Field(default_factory=dict, alias="edgePenalties")

    @field_validator("edge_penalties")
    @classmethod
    def _edge_keys(cls, v: dict[str, float]) -> dict[str, float]:
        for k in v:
            parse_edge_key(k)  # ValueError -> ValidationError
        return v

    def to_profile(self, *, map_id: str | None = None) -> CostProfile:
        return CostProfile(
            map_id=map_id or self.map_id,
            node_bonuses=self.node_bonuses,
            node_penalties=self.node_penalties,
            edge_penalties={parse_edge_key(k): w for k, w in self.edge_penalties.items()},
        )


class AnchorPayload(BaseModel):
    model_config = _PACK
    node_id: str = Field(alias="nodeId")
    lat: float
    lng: float
    x: float
    y: float


def anchors_from_payload(items: Iterable[Mapping]) -> list[CalibrationAnchor]:
    return [
        CalibrationAnchor(**AnchorPayload.model_validate(it).model_dump()) for it in items
    ]
