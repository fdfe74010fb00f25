# domain/entities/waypoint.py
from dataclasses import dataclass

from lane_route.domain.entities.geography import Point3D


@dataclass
class RouteWaypoint:
    location: Point3D  # rewritten when a lane change is aligned
    lane_index: int = 0
    min_cross_track: float = -2.5  # meters, either bound may be negative
    max_cross_track: float = 2.5
    waypoint_id: int | None = None
    speed_limit: float | None = None  # m/s

    def max_cross_track_allowed(self) -> float:
        return max(abs(self.min_cross_track), abs(self.max_cross_track))

    def set_location(self, location: Point3D) -> None:
        self.location = location
