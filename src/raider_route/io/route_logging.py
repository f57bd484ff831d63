# io/route_logging.py
import itertools
import json
import logging
import sys

from raider_route.app.hooks import NoopHooks
from raider_route.io.business_events import CalibrationSolvedBiz, RoutePlannedBiz
from raider_route.io.recorder import Recorder


def _default_json_logger(name="raider_route", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class RouteLogging(NoopHooks):
    """
    Structured logs for route planning and calibration, plus analytics events to the recorder.
    Per-segment records only go out in debug mode.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug = run_id, debug
        self.recorder = recorder
        self.log = logger or _default_json_logger(level=level)
        # one instance serves every call; next() on a count is atomic
        self._seq = itertools.count(1)

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    def _next_seq(self) -> int:
        return next(self._seq)

    # ------------------ routing --------------------------

    def route_start(self, *, map_id, start_id, targets, strategy):
        self._emit(
            "INFO",
            "route_start",
            map_id=map_id,
            start_id=start_id,
            targets=targets,
            strategy=strategy,
        )

    def segment(self, *, from_id, to_id, cost, hops):
        if self.debug:
            self._emit("DEBUG", "segment", from_id=from_id, to_id=to_id, cost=cost, hops=hops)

    def target_unreachable(self, *, map_id, target_id, reason):
        self._emit(
            "WARNING", "target_unreachable", map_id=map_id, target_id=target_id, reason=reason
        )

    def route_end(
        self, *, map_id, start_id, targets, strategy, ok, total_cost, path_len, unreached, wall_ms
    ):
        self._emit(
            "INFO" if ok else "WARNING",
            "route_end" if ok else "no_route",
            map_id=map_id,
            start_id=start_id,
            strategy=strategy,
            ok=ok,
            total_cost=total_cost,
            path_len=path_len,
            unreached=unreached,
            partial=bool(unreached),
            wall_ms=round(wall_ms, 3),
        )
        if self.recorder:
            self.recorder.emit(
                RoutePlannedBiz(
                    run_id=self.run_id,
                    seq=self._next_seq(),
                    name="RoutePlanned",
                    map_id=map_id,
                    start_id=start_id,
                    strategy=strategy,
                    targets=list(targets),
                    ok=ok,
                    total_cost=total_cost,
                    path_len=path_len,
                    unreached=list(unreached),
                )
            )

    # ------------------ calibration ----------------------

    def calibration_solved(self, *, anchors, transform, rms):
        self._emit("INFO", "calibration_solved", anchors=anchors, transform=transform, rms=rms)
        if self.recorder:
            self.recorder.emit(
                CalibrationSolvedBiz(
                    run_id=self.run_id,
                    seq=self._next_seq(),
                    name="CalibrationSolved",
                    anchors=anchors,
                    transform=list(transform),
                    rms=rms,
                )
            )

    def calibration_degenerate(self, *, axis, det):
        self._emit("WARNING", "calibration_degenerate", axis=axis, det=det)
