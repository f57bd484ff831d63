# raider_route/domain/calibration/calibration_viewport.py
from dataclasses import dataclass

from raider_route.domain.entities.calibration import ImagePoint


@dataclass(frozen=True)
class AspectFit:
    """Image drawn aspect-fit and centered inside a view; converts between the two spaces."""

    view_w: float
    view_h: float
    image_w: float
    image_h: float

    def __post_init__(self):
        if min(self.view_w, self.view_h, self.image_w, self.image_h) <= 0:
            raise ValueError("view and image sizes must be positive")

    @property
    def scale(self) -> float:
        return min(self.view_w / self.image_w, self.view_h / self.image_h)

    @property
    def x_offset(self) -> float:
        return (self.view_w - self.image_w * self.scale) / 2

    @property
    def y_offset(self) -> float:
        return (self.view_h - self.image_h * self.scale) / 2

    def image_to_view(self, p: ImagePoint) -> ImagePoint:
        s = self.scale
        return ImagePoint(p.x * s + self.x_offset, p.y * s + self.y_offset)

    def view_to_image(self, p: ImagePoint) -> ImagePoint | None:
        """None when the view point falls in the letterbox outside the image."""
        s = self.scale
        x = (p.x - self.x_offset) / s
        y = (p.y - self.y_offset) / s
        if 0 <= x <= self.image_w and 0 <= y <= self.image_h:
            return ImagePoint(x, y)
        return None
