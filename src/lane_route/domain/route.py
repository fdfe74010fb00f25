# domain/route.py
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace

from lane_route.app.hooks import NoopHooks, RouteHooks
from lane_route.domain.entities.geography import LineSegment3D, Point3D
from lane_route.domain.entities.segment import RouteSegment
from lane_route.domain.entities.waypoint import RouteWaypoint
from lane_route.io.messages import RouteMessage

DEFAULT_MAX_JOIN_DISTANCE = 20.0


def check_lane_layout(waypoints: Sequence[RouteWaypoint]) -> None:
    """
    Raise ValueError for lane layouts whose segments cannot be derived:
      • the first two waypoints are in different lanes
      • a lane is entered by only one waypoint (two lane changes in a row, or a
        lane change onto the final waypoint)
    """
    lanes = [wp.lane_index for wp in waypoints]
    if len(lanes) >= 2 and lanes[0] != lanes[1]:
        raise ValueError(f"First two waypoints must share a lane, got {lanes[0]} and {lanes[1]}")
    for i in range(1, len(lanes)):
        if lanes[i] != lanes[i - 1] and (i + 1 == len(lanes) or lanes[i + 1] != lanes[i]):
            raise ValueError(f"Lane {lanes[i]} entered at waypoint {i} has only one waypoint")


class Route:
    """
    A travel route: ordered waypoints and the segments derived from them.

    Waypoints live in an append-only arena; `_order` lists arena ids from start
    to end and segments refer to waypoints by arena id. Consecutive waypoints in
    different lanes (a lane change) are not joined by a segment; the first
    waypoint in the new lane is moved back to line up with the end of the
    previous segment.
    """

    def __init__(
        self,
        waypoints: Iterable[RouteWaypoint] | None = None,
        route_id: str | None = None,
        route_name: str | None = None,
        *,
        max_join_distance: float = DEFAULT_MAX_JOIN_DISTANCE,
        hooks: RouteHooks | None = None,
    ):
        self.route_id = route_id if route_id is not None else route_name
        self._route_name = route_name
        self.max_join_distance = max_join_distance  # meters a vehicle may be off-route and still join
        self.valid = False  # set by the caller once external validation passes
        self.hooks = hooks or NoopHooks()
        self._route_length = 0.0
        self._arena: list[RouteWaypoint] = []
        self._order: list[int] = []
        self._segments: list[RouteSegment] = []
        if waypoints is not None:
            self.set_waypoints(waypoints)

    # ---------------- Accessors -------------------------

    @property
    def route_name(self) -> str | None:
        return self._route_name

    @route_name.setter
    def route_name(self, name: str | None) -> None:
        if self.route_id is None:
            self.route_id = name
        self._route_name = name

    @property
    def waypoints(self) -> tuple[RouteWaypoint, ...]:
        return tuple(replace(self._arena[i]) for i in self._order)

    @property
    def route_length(self) -> float:
        return self._route_length

    @property
    def segments(self) -> tuple[RouteSegment, ...]:
        return tuple(self._segments)

    def first_segment(self) -> RouteSegment:
        return self._segments[0]

    def last_segment(self) -> RouteSegment:
        return self._segments[-1]

    def is_valid(self) -> bool:
        return self.valid

    # ---------------- Construction ----------------------

    def set_waypoints(self, waypoint_list: Iterable[RouteWaypoint]) -> None:
        """
        Replace all waypoints and rebuild the segments.
        The first two waypoints must share a lane and every lane needs at least
        two waypoints; see check_lane_layout.
        """
        # the route owns copies; relocation must not reach the caller's waypoints
        arena = [replace(wp) for wp in waypoint_list]
        check_lane_layout(arena)

        segments: list[RouteSegment] = []
        relocate_prev = False
        for i in range(1, len(arena)):
            prev, wp = arena[i - 1], arena[i]
            if prev.lane_index != wp.lane_index:
                relocate_prev = True
                continue
            if relocate_prev:
                # pull the lane entry point back in line with the end of the last segment
                old = prev.location
                prev.set_location(
                    LineSegment3D(old, wp.location).project_onto_segment(arena[i - 2].location)
                )
                self.hooks.waypoint_relocated(
                    route_id=self.route_id, index=i - 1, old=old, new=prev.location
                )
                relocate_prev = False
            segments.append(RouteSegment(arena, i - 1, i))

        self._arena, self._order, self._segments = arena, list(range(len(arena))), segments
        self.calculate_length()
        self.hooks.waypoints_set(
            route_id=self.route_id,
            waypoints=len(arena),
            segments=len(segments),
            length=self.route_length,
        )

    # ---------------- Length ----------------------------

    def calculate_length(self) -> float:
        self._route_length = sum(seg.length for seg in self._segments)
        return self._route_length

    def length_of_segments(self, start_index: int, final_index: int) -> float:
        """Length from the start of segment `start_index` to the end of `final_index` (inclusive)."""
        if start_index < 0 or final_index >= len(self._segments):
            raise IndexError(f"Segment range [{start_index}, {final_index}] outside route")
        return sum(self._segments[i].length for i in range(start_index, final_index + 1))

    # ---------------- Mutation --------------------------

    def _segment_starting_at(self, waypoint_id: int) -> int:
        for pos, seg in enumerate(self._segments):
            if seg.uptrack_id == waypoint_id:
                return pos
        raise ValueError(f"No segment starts at waypoint id {waypoint_id}")

    def insert_waypoint(self, waypoint: RouteWaypoint, index: int) -> None:
        """
        Insert `waypoint` so it becomes waypoint `index`; the waypoint previously
        there moves to index + 1. Use index 0 to prepend and len(waypoints) to append.
        Exactly one segment is added. Raises ValueError when the waypoint cannot be
        joined to its neighbours; inserting at a lane change is not supported.
        """
        n = len(self._order)
        waypoint = replace(waypoint)
        lane = waypoint.lane_index
        new_id = len(self._arena)
        arena = self._arena

        def lane_at(i: int) -> int:
            return arena[self._order[i]].lane_index

        segments = list(self._segments)
        if 0 < index < n and lane == lane_at(index - 1) and lane == lane_at(index):
            up_id, down_id = self._order[index - 1], self._order[index]
            pos = self._segment_starting_at(up_id)
            arena.append(waypoint)
            segments[pos : pos + 1] = [
                RouteSegment(arena, up_id, new_id),
                RouteSegment(arena, new_id, down_id),
            ]
        elif 0 < index == n and lane == lane_at(index - 1):
            arena.append(waypoint)
            segments.append(RouteSegment(arena, self._order[index - 1], new_id))
        elif index == 0 and n > 0 and lane == lane_at(0):
            arena.append(waypoint)
            segments.insert(0, RouteSegment(arena, new_id, self._order[0]))
        else:
            self.hooks.insert_rejected(
                route_id=self.route_id, index=index, lane_index=lane, reason="lane mismatch"
            )
            raise ValueError(f"Failed to add {waypoint} at index: {index}")

        order = list(self._order)
        order.insert(index, new_id)
        self._order, self._segments = order, segments
        self.calculate_length()
        self.hooks.waypoint_inserted(
            route_id=self.route_id, index=index, lane_index=lane, length=self.route_length
        )

    # ---------------- Queries ---------------------------

    def find_route_subsection(
        self,
        starting_index: int,
        segment_downtrack: float,
        dist_backward: float,
        dist_forward: float,
    ) -> list[RouteSegment]:
        """
        Segments spanning `dist_backward` uptrack and `dist_forward` downtrack of a
        position `segment_downtrack` meters along segment `starting_index`.
        The starting segment is always included; result runs uptrack to downtrack.
        An out-of-range starting index yields [].
        """
        segs = self._segments
        if starting_index < 0 or starting_index >= len(segs):
            return []

        sub = [segs[starting_index]]

        distance = segment_downtrack
        for i in range(starting_index - 1, -1, -1):
            if distance > dist_backward:
                break
            distance += segs[i].length
            sub.append(segs[i])
        sub.reverse()

        distance = segs[starting_index].length - segment_downtrack
        for i in range(starting_index + 1, len(segs)):
            if distance > dist_forward:
                break
            distance += segs[i].length
            sub.append(segs[i])
        return sub

    def route_segment_of_point(
        self, point: Point3D, segments: Sequence[RouteSegment] | None = None
    ) -> RouteSegment:
        """
        Segment of `segments` (default: the whole route) that `point` should be
        considered in.

        Two adjacent segments meeting at a turn leave a wedge on the outside of
        the turn that neither segment's bounding box (down-track span x allowed
        cross-track) covers. Each box is therefore extended uptrack by the
        previous segment's allowed cross-track. Where boxes overlap the uptrack
        segment wins, since segments are checked in order.
        """
        if segments is None:
            segments = self._segments
        if not segments:
            raise ValueError("No segments to match the point against")

        # nothing matched at all: assume the point is before the subsection
        best = segments[0]
        prev_max_cross_track = 0.0
        for seg in segments:
            max_cross_track = seg.downtrack_waypoint.max_cross_track_allowed()
            cross_track = seg.cross_track_distance(point)
            down_track = seg.down_track_distance(point)

            if -prev_max_cross_track < down_track <= seg.length:
                if abs(cross_track) <= max_cross_track:
                    return seg
                best = seg  # in the extended box but too far off the centerline

            prev_max_cross_track = max_cross_track
        return best

    # ---------------- Messages --------------------------

    def to_message(self) -> RouteMessage:
        """
        Export as a route message. Waypoints travel only inside segments, so a
        route with a single waypoint exports no segments and imports back empty.
        """
        return RouteMessage(
            route_id=self.route_id,
            route_name=self.route_name,
            valid=self.valid,
            segments=[seg.to_message(i + 1) for i, seg in enumerate(self._segments)],
        )

    @classmethod
    def from_message(cls, msg: RouteMessage, *, hooks: RouteHooks | None = None) -> Route:
        waypoints = [wm.to_waypoint() for wm in msg.waypoint_messages()]
        route = cls(waypoints, msg.route_id, msg.route_name, hooks=hooks)
        route.valid = msg.valid
        return route

    def __str__(self) -> str:
        return f"Route{{ name: {self.route_name} id: {self.route_id} }}"
