# domain/entities/segment.py
from collections.abc import Sequence
from dataclasses import replace

from lane_route.domain.entities.geography import LineSegment3D, Point3D
from lane_route.domain.entities.waypoint import RouteWaypoint
from lane_route.io.messages import RouteSegmentMessage, WaypointMessage


class RouteSegment:
    """
    Span between two same-lane waypoints of a route.

    The segment keeps arena ids, not waypoints: `arena` is the route's append-only
    waypoint store, so ids stay valid when waypoints are inserted ahead of it.
    Waypoint accessors return copies; the arena is only changed by the route.
    """

    __slots__ = ("_arena", "uptrack_id", "downtrack_id", "length")

    def __init__(self, arena: Sequence[RouteWaypoint], uptrack_id: int, downtrack_id: int):
        up, down = arena[uptrack_id], arena[downtrack_id]
        if up.lane_index != down.lane_index:
            raise ValueError(
                f"Segment cannot span lanes {up.lane_index} -> {down.lane_index}"
            )
        self._arena = arena
        self.uptrack_id = uptrack_id
        self.downtrack_id = downtrack_id
        self.length = self.line().length()

    @property
    def uptrack_waypoint(self) -> RouteWaypoint:
        return replace(self._arena[self.uptrack_id])

    @property
    def downtrack_waypoint(self) -> RouteWaypoint:
        return replace(self._arena[self.downtrack_id])

    @property
    def lane_index(self) -> int:
        return self._arena[self.uptrack_id].lane_index

    def line(self) -> LineSegment3D:
        return LineSegment3D(self._arena[self.uptrack_id].location, self._arena[self.downtrack_id].location)

    def cross_track_distance(self, p: Point3D) -> float:
        return self.line().cross_track_distance(p)

    def down_track_distance(self, p: Point3D) -> float:
        return self.line().down_track_distance(p)

    def project_onto_segment(self, p: Point3D) -> Point3D:
        return self.line().project_onto_segment(p)

    def to_message(self, index: int) -> RouteSegmentMessage:
        return RouteSegmentMessage(
            prev_waypoint=WaypointMessage.from_waypoint(self.uptrack_waypoint),
            waypoint=WaypointMessage.from_waypoint(self.downtrack_waypoint),
            length=self.length,
            index=index,
        )

    def __repr__(self) -> str:
        return (
            f"RouteSegment(uptrack={self.uptrack_id}, downtrack={self.downtrack_id}, "
            f"length={self.length:.3f})"
        )
