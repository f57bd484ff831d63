# raider_route/io/business_events.py

from dataclasses import dataclass, field


# Base type for analytics events
@dataclass
class BizEvent:
    run_id: str
    seq: int  # emission order within a run
    name: str  # stable event name


@dataclass
class RoutePlannedBiz(BizEvent):
    map_id: str
    start_id: str
    strategy: str
    targets: list[str] = field(default_factory=list)
    ok: bool = True
    total_cost: float | None = None
    path_len: int = 0
    unreached: list[str] = field(default_factory=list)


@dataclass
class CalibrationSolvedBiz(BizEvent):
    anchors: int
    transform: list[float] = field(default_factory=list)  # a, b, c, d, tx, ty
    rms: float | None = None
