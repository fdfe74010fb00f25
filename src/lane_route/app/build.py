# lane_route/app/build.py
from collections.abc import Mapping

from lane_route.app.hooks import NoopHooks
from lane_route.config.models import RouteConfigModel
from lane_route.domain.route import Route
from lane_route.io.route_logging import RouteLogging  # JSON logs


def build_route(cfg: RouteConfigModel | Mapping, *, use_logging: bool = True) -> Route:
    # 0) Validate config
    model = cfg if isinstance(cfg, RouteConfigModel) else RouteConfigModel.model_validate(cfg)

    # 1) Hooks
    hooks = RouteLogging(level=model.log.level, debug=model.log.debug) if use_logging else NoopHooks()

    # 2) Route; lane layout errors surface here as ValueError
    r = model.route
    return Route(
        [wp.to_waypoint() for wp in r.waypoints],
        r.route_id,
        r.name,
        max_join_distance=r.max_join_distance,
        hooks=hooks,
    )
