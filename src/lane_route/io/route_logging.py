# io/route_logging.py
import json
import logging
import sys
from dataclasses import asdict, is_dataclass

from lane_route.app.hooks import NoopHooks


def _default_json_logger(name="lane_route", level="INFO"):
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
    Structured JSON logs for route construction and mutation.
    Relocations are only reported when debug is on.
    """

    def __init__(
        self,
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
    ):
        self.debug = debug
        self.log = logger or _default_json_logger(level=level)

    def _emit(self, level: str, msg: str, **extra):
        for k, v in extra.items():
            if is_dataclass(v):
                extra[k] = asdict(v)
        self.log.log(getattr(logging, level), msg, extra={"extra": extra})

    def waypoints_set(self, *, route_id, waypoints: int, segments: int, length: float):
        self._emit(
            "INFO",
            "waypoints_set",
            route_id=route_id,
            waypoints=waypoints,
            segments=segments,
            length=length,
        )

    def waypoint_relocated(self, *, route_id, index: int, old, new):
        if self.debug:
            self._emit("DEBUG", "waypoint_relocated", route_id=route_id, index=index, old=old, new=new)

    def waypoint_inserted(self, *, route_id, index: int, lane_index: int, length: float):
        self._emit(
            "INFO",
            "waypoint_inserted",
            route_id=route_id,
            index=index,
            lane_index=lane_index,
            length=length,
        )

    def insert_rejected(self, *, route_id, index: int, lane_index: int, reason: str):
        self._emit(
            "WARNING",
            "insert_rejected",
            route_id=route_id,
            index=index,
            lane_index=lane_index,
            reason=reason,
        )
