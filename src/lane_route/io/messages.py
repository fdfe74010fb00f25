# io/messages.py
from pydantic import BaseModel, ConfigDict, Field

from lane_route.domain.entities.geography import Point3D
from lane_route.domain.entities.waypoint import RouteWaypoint


class WaypointMessage(BaseModel):
    model_config = ConfigDict(extra="forbid")
    x: float
    y: float
    z: float = 0.0
    lane_index: int
    min_cross_track: float
    max_cross_track: float
    waypoint_id: int | None = None
    speed_limit: float | None = None

    @classmethod
    def from_waypoint(cls, wp: RouteWaypoint) -> "WaypointMessage":
        return cls(
            x=wp.location.x,
            y=wp.location.y,
            z=wp.location.z,
            lane_index=wp.lane_index,
            min_cross_track=wp.min_cross_track,
            max_cross_track=wp.max_cross_track,
            waypoint_id=wp.waypoint_id,
            speed_limit=wp.speed_limit,
        )

    def to_waypoint(self) -> RouteWaypoint:
        return RouteWaypoint(
            location=Point3D(self.x, self.y, self.z),
            lane_index=self.lane_index,
            min_cross_track=self.min_cross_track,
            max_cross_track=self.max_cross_track,
            waypoint_id=self.waypoint_id,
            speed_limit=self.speed_limit,
        )


class RouteSegmentMessage(BaseModel):
    model_config = ConfigDict(extra="forbid")
    prev_waypoint: WaypointMessage  # uptrack end
    waypoint: WaypointMessage  # downtrack end
    length: float
    index: int = Field(ge=1)  # 1-based ordinal within the route


class RouteMessage(BaseModel):
    """Transport representation of a route. Header fields are left to the transport."""

    model_config = ConfigDict(extra="forbid")
    route_id: str | None = None
    route_name: str | None = None
    valid: bool = False
    segments: list[RouteSegmentMessage] = Field(default_factory=list)

    def waypoint_messages(self) -> list[WaypointMessage]:
        """
        Ordered waypoints carried by the segments: the first segment's prev_waypoint,
        then each segment's waypoint. A prev_waypoint that does not continue the
        previous segment marks a lane change and is kept as well.
        """
        out: list[WaypointMessage] = []
        for seg in self.segments:
            if not out or out[-1] != seg.prev_waypoint:
                out.append(seg.prev_waypoint)
            out.append(seg.waypoint)
        return out
