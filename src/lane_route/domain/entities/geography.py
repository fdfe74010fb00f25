from __future__ import annotations

from dataclasses import dataclass

import numpy as np

_EPS = 1e-12


# Core geometry types used by the route model
@dataclass(frozen=True)
class Point3D:
    x: float  # meters in a local cartesian frame
    y: float
    z: float = 0.0

    @classmethod
    def from_array(cls, arr) -> Point3D:
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def distance(self, other: Point3D) -> float:
        return float(np.linalg.norm(other.as_array() - self.as_array()))


@dataclass(frozen=True)
class LineSegment3D:
    """
    Straight span from `start` to `end`.
    Sign conventions:
      • down-track is zero at `start` and grows toward `end` (negative uptrack of start).
      • cross-track is positive to the right of the direction of travel (x/y plane).
    """

    start: Point3D
    end: Point3D

    def _vec(self) -> np.ndarray:
        return self.end.as_array() - self.start.as_array()

    def length(self) -> float:
        return float(np.linalg.norm(self._vec()))

    def direction(self) -> np.ndarray:
        v = self._vec()
        n = np.linalg.norm(v)
        return v / n if n > _EPS else np.zeros(3)

    def down_track_distance(self, p: Point3D) -> float:
        return float(np.dot(p.as_array() - self.start.as_array(), self.direction()))

    def cross_track_distance(self, p: Point3D) -> float:
        u = self.direction()
        w = p.as_array() - self.start.as_array()
        if not u.any():
            return float(np.linalg.norm(w))
        perp = w - np.dot(w, u) * u
        dist = float(np.linalg.norm(perp))
        # z of (u x w) > 0 means p is left of travel
        side = u[0] * w[1] - u[1] * w[0]
        return -dist if side > 0 else dist

    def project_onto_segment(self, p: Point3D) -> Point3D:
        u = self.direction()
        s = self.start.as_array()
        if not u.any():
            return self.start
        return Point3D.from_array(s + np.dot(p.as_array() - s, u) * u)
