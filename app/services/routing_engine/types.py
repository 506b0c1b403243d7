"""
Domain types for route planning.

All of these are created for a single planning request and never mutated.
Coordinates are carried latitude-first; longitude-first pairs only exist in
the remote clients' request and response handling.
"""

import enum
import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class GeoPoint:
    """A validated latitude/longitude pair in degrees."""

    lat: float
    lng: float

    def __post_init__(self):
        lat = float(self.lat)
        lng = float(self.lng)
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise ValueError(f"Coordinates must be finite, got lat={self.lat}, lng={self.lng}")
        if not -90 <= lat <= 90:
            raise ValueError(f"Latitude must be between -90 and 90 degrees, got {lat}")
        if not -180 <= lng <= 180:
            raise ValueError(f"Longitude must be between -180 and 180 degrees, got {lng}")
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lng", lng)

    @classmethod
    def from_lnglat(cls, pair: Sequence[float]) -> "GeoPoint":
        return cls(lat=pair[1], lng=pair[0])

    @classmethod
    def from_latlng(cls, pair: Sequence[float]) -> "GeoPoint":
        return cls(lat=pair[0], lng=pair[1])

    def to_lnglat(self) -> list:
        return [self.lng, self.lat]

    def to_latlng(self) -> list:
        return [self.lat, self.lng]


WaypointId = Union[int, str]


@dataclass(frozen=True)
class Waypoint:
    """
    A candidate destination.

    Identity is `id` only; two waypoints may share coordinates.
    """

    id: WaypointId
    point: GeoPoint = field(compare=False)
    name: Optional[str] = field(default=None, compare=False)
    code: Optional[str] = field(default=None, compare=False)
    address: Optional[str] = field(default=None, compare=False)

    @property
    def lat(self) -> float:
        return self.point.lat

    @property
    def lng(self) -> float:
        return self.point.lng


OrderedRoute = Tuple[Waypoint, ...]
PathGeometry = Tuple[GeoPoint, ...]


@dataclass(frozen=True)
class RouteStatistics:
    """Traversal totals in miles and minutes. Either may be unknown."""

    distance_miles: Optional[float] = None
    duration_minutes: Optional[float] = None

    def __post_init__(self):
        for name in ("distance_miles", "duration_minutes"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    def merged_with(self, other: "RouteStatistics") -> "RouteStatistics":
        """Prefer values from `other`, keeping ours where it has none."""
        return RouteStatistics(
            distance_miles=(
                other.distance_miles if other.distance_miles is not None else self.distance_miles
            ),
            duration_minutes=(
                other.duration_minutes if other.duration_minutes is not None else self.duration_minutes
            ),
        )


@dataclass(frozen=True)
class OptimizedStop:
    """Per-stop figures reported by the optimizer (cumulative from the start)."""

    waypoint_id: WaypointId
    arrival_minutes: Optional[float] = None
    travel_minutes: Optional[float] = None
    distance_miles: Optional[float] = None


class NoteCode(str, enum.Enum):
    OPTIMIZATION_UNAVAILABLE = "optimization_unavailable"
    GEOMETRY_DISCARDED = "geometry_discarded"
    PATH_UNAVAILABLE = "path_unavailable"
    STRAIGHT_LINE_FALLBACK = "straight_line_fallback"
    UNKNOWN_WAYPOINT_DROPPED = "unknown_waypoint_dropped"
    MISSING_WAYPOINT_APPENDED = "missing_waypoint_appended"
    DISTANCE_IMPLAUSIBLE = "distance_implausible"


@dataclass(frozen=True)
class DiagnosticNote:
    code: NoteCode
    message: str


class OrderSource(str, enum.Enum):
    OPTIMIZER = "optimizer"
    NEAREST_NEIGHBOR = "nearest_neighbor"


class GeometrySource(str, enum.Enum):
    OPTIMIZER = "optimizer"
    DIRECTIONS = "directions"
    NONE = "none"


@dataclass(frozen=True)
class RouteArtifact:
    """Result of one planning request."""

    start: GeoPoint
    route: OrderedRoute = ()
    geometry: PathGeometry = ()
    statistics: Optional[RouteStatistics] = None
    notes: Tuple[DiagnosticNote, ...] = ()
    order_source: Optional[OrderSource] = None
    geometry_source: GeometrySource = GeometrySource.NONE
    stops: Tuple[OptimizedStop, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.route

    def needs_straight_line(self) -> bool:
        return not self.geometry and bool(self.route)

    def display_geometry(self) -> PathGeometry:
        """Path geometry, or straight segments through start and each stop when there is none."""
        if self.geometry:
            return self.geometry
        if not self.route:
            return ()
        return (self.start,) + tuple(waypoint.point for waypoint in self.route)

    def has_note(self, code: NoteCode) -> bool:
        return any(note.code == code for note in self.notes)
