# app/hooks.py
from typing import Protocol


class RoutingHooks(Protocol):
    def route_start(self, *, map_id, start_id, targets, strategy): ...
    def segment(self, *, from_id, to_id, cost, hops): ...
    def target_unreachable(self, *, map_id, target_id, reason): ...
    def route_end(
        self, *, map_id, start_id, targets, strategy, ok, total_cost, path_len, unreached, wall_ms
    ): ...
    def calibration_solved(self, *, anchors, transform, rms): ...
    def calibration_degenerate(self, *, axis, det): ...


class NoopHooks:
    def route_start(self, **_):
        pass

    def segment(self, **_):
        pass

    def target_unreachable(self, **_):
        pass

    def route_end(self, **_):
        pass

    def calibration_solved(self, **_):
        pass

    def calibration_degenerate(self, **_):
        pass
