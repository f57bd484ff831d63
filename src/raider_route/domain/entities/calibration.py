# raider_route/domain/entities/calibration.py
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class ImagePoint:
    x: float  # pixels, image space unless noted
    y: float


@dataclass(frozen=True)
class CalibrationAnchor:
    node_id: str  # provenance only
    lat: float
    lng: float
    x: float
    y: float


@dataclass(frozen=True)
class Transform:
    # x = a*lat + b*lng + tx
    # y = c*lat + d*lng + ty
    a: float
    b: float
    c: float
    d: float
    tx: float
    ty: float

    @classmethod
    def from_sequence(cls, coeffs: Sequence[float]) -> "Transform | None":
        """Build from the persisted [a, b, c, d, tx, ty] list; None if malformed."""
        try:
            if len(coeffs) != 6:
                return None
            return cls(*(float(v) for v in coeffs))
        except (TypeError, ValueError):
            return None

    def as_list(self) -> list[float]:
        return [self.a, self.b, self.c, self.d, self.tx, self.ty]

    def apply(self, lat: float, lng: float) -> ImagePoint:
        return ImagePoint(
            self.a * lat + self.b * lng + self.tx,
            self.c * lat + self.d * lng + self.ty,
        )


@dataclass(frozen=True)
class Calibration:
    """Saved per map; a new calibration replaces the previous one wholesale."""

    map_id: str
    transform: Transform
    anchors: tuple[CalibrationAnchor, ...]
    image_filename: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        object.__setattr__(self, "anchors", tuple(self.anchors))
        if not self.image_filename:
            object.__setattr__(self, "image_filename", f"{self.map_id}.png")
