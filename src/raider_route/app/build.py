# raider_route/app/build.py
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from raider_route.app.hooks import NoopHooks, RoutingHooks
from raider_route.config.models import RouterConfigModel
from raider_route.domain.calibration.calibration_session import CalibrationSession
from raider_route.domain.calibration.calibration_solver import LeastSquaresCalibrator
from raider_route.domain.entities.graph import Node
from raider_route.domain.routing.routing_core import Router
from raider_route.io.recorder import JsonlSink, Recorder
from raider_route.io.route_logging import RouteLogging  # JSON logs
from raider_route.runtime.registries import make_engine, make_planner


@dataclass
class App:
    config: RouterConfigModel
    router: Router
    calibrator: LeastSquaresCalibrator
    hooks: RoutingHooks

    def calibration_session(
        self, map_id: str, nodes: Sequence[Node], *, image_filename: str = ""
    ) -> CalibrationSession:
        return CalibrationSession(
            map_id,
            nodes,
            calibrator=self.calibrator,
            min_anchors=self.config.calibration.min_anchors,
            image_filename=image_filename,
        )


def build(
    cfg: RouterConfigModel | Mapping | None = None,
    *,
    use_logging: bool = True,
    recorder: Recorder | None = None,
) -> App:
    # 0) Validate config
    if cfg is None:
        cfg = {}
    model = cfg if isinstance(cfg, RouterConfigModel) else RouterConfigModel.model_validate(cfg)

    # 1) Hooks (logging + analytics)
    hooks: RoutingHooks = (
        RouteLogging(
            run_id=model.run_id,
            level=model.log.level,
            debug=model.log.debug,
            recorder=recorder or Recorder(JsonlSink()),
        )
        if use_logging
        else NoopHooks()
    )

    # 2) Routing
    engine = make_engine(model.shortest_path)
    planner = make_planner(model.planner, deps={"engine": engine, "hooks": hooks})
    router = Router(engine=engine, planner=planner, hooks=hooks)

    # 3) Calibration
    calibrator = LeastSquaresCalibrator(
        min_anchors=model.calibration.min_anchors,
        det_epsilon=model.calibration.det_epsilon,
        hooks=hooks,
    )

    return App(model, router, calibrator, hooks)
