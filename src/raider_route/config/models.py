from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


# ----------------- ROUTING ---------------------


class ShortestPathModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["dijkstra"] = "dijkstra"
    # effective edge costs are clamped to this floor; negative costs break Dijkstra
    cost_floor: float = Field(default=0.0, ge=0.0)


class PlannerGreedyModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["greedy"] = "greedy"


class PlannerExactModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["exact"] = "exact"
    max_targets: int = Field(default=8, ge=1, le=16)  # beyond this, greedy fallback


PlannerUnion = Annotated[
    PlannerGreedyModel | PlannerExactModel,
    Field(discriminator="kind"),
]


# ----------------- CALIBRATION ---------------------


class CalibrationModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    min_anchors: int = 3
    det_epsilon: float = 1e-9

    @field_validator("min_anchors")
    @classmethod
    def _at_least_three(cls, v: int) -> int:
        # an affine fit has three unknowns per axis
        if v < 3:
            raise ValueError("min_anchors must be >= 3")
        return v

    @field_validator("det_epsilon")
    @classmethod
    def _positive(cls, v: float) -> float:
        if not v > 0:
            raise ValueError("det_epsilon must be > 0")
        return v


# ------------------------------------------------------------------


class RouterConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "raider_route"
    run_id: str = "local"
    log: LogModel = LogModel()
    shortest_path: ShortestPathModel = Field(default_factory=ShortestPathModel)
    planner: PlannerUnion = Field(default_factory=PlannerGreedyModel)
    calibration: CalibrationModel = Field(default_factory=CalibrationModel)
