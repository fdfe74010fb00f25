from math import isfinite
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from lane_route.domain.entities.geography import Point3D
from lane_route.domain.entities.waypoint import RouteWaypoint


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


# ----------------- ROUTE DEFINITION ---------------------


class LocationModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    x: float
    y: float
    z: float = 0.0

    @field_validator("x", "y", "z")
    @classmethod
    def _finite(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v):
            raise ValueError(f"{info.field_name} must be finite")
        return v


class WaypointModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    location: LocationModel
    lane_index: int = 0
    min_cross_track: float = -2.5
    max_cross_track: float = 2.5
    waypoint_id: int | None = None
    speed_limit: float | None = Field(default=None, ge=0.0)

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.min_cross_track > self.max_cross_track:
            raise ValueError(
                f"min_cross_track ({self.min_cross_track}) exceeds max_cross_track ({self.max_cross_track})"
            )
        return self

    def to_waypoint(self) -> RouteWaypoint:
        loc = self.location
        return RouteWaypoint(
            location=Point3D(loc.x, loc.y, loc.z),
            lane_index=self.lane_index,
            min_cross_track=self.min_cross_track,
            max_cross_track=self.max_cross_track,
            waypoint_id=self.waypoint_id,
            speed_limit=self.speed_limit,
        )


class RouteModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    route_id: str | None = None  # defaults to name
    max_join_distance: float = Field(default=20.0, gt=0.0)
    waypoints: list[WaypointModel] = Field(default_factory=list)


# ------------------------------------------------------------------


class RouteConfigModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    route: RouteModel
    log: LogModel = LogModel()
