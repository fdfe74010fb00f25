# app/hooks.py
from typing import Protocol

from lane_route.domain.entities.geography import Point3D


class RouteHooks(Protocol):
    def waypoints_set(self, *, route_id, waypoints: int, segments: int, length: float): ...
    def waypoint_relocated(self, *, route_id, index: int, old: Point3D, new: Point3D): ...
    def waypoint_inserted(self, *, route_id, index: int, lane_index: int, length: float): ...
    def insert_rejected(self, *, route_id, index: int, lane_index: int, reason: str): ...


class NoopHooks:
    def waypoints_set(self, **_):
        pass

    def waypoint_relocated(self, **_):
        pass

    def waypoint_inserted(self, **_):
        pass

    def insert_rejected(self, **_):
        pass
