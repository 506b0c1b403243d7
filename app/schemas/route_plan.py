from pydantic import BaseModel, Field
from typing import Optional, List, Union
from app.core.config import settings
from app.schemas.common import Location


class WaypointIn(BaseModel):
    """A caller-supplied destination."""
    id: Union[int, str] = Field(..., description="Opaque identifier, unique within the request")
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    name: Optional[str] = None
    code: Optional[str] = None
    address: Optional[str] = None


class RoutePlanRequest(BaseModel):
    """Schema for a route planning request."""
    start: Location = Field(..., description="Where the trip starts")
    radius: int = Field(
        default=settings.DEFAULT_SEARCH_RADIUS_MILES,
        ge=settings.MIN_SEARCH_RADIUS_MILES,
        le=settings.MAX_SEARCH_RADIUS_MILES,
        description="Search radius in miles, used when waypoints are not supplied"
    )
    waypoints: Optional[List[WaypointIn]] = Field(
        None,
        description="Destinations to visit; looked up around start when omitted"
    )


class RouteStopResponse(BaseModel):
    sequence: int
    id: Union[int, str]
    name: Optional[str] = None
    code: Optional[str] = None
    address: Optional[str] = None
    lat: float
    lng: float
    arrival_minutes: Optional[float] = None
    distance_from_start_miles: Optional[float] = None


class RouteStatisticsResponse(BaseModel):
    distance_miles: Optional[float] = None
    duration_minutes: Optional[float] = None
    distance_label: Optional[str] = None
    duration_label: Optional[str] = None


class DiagnosticNoteResponse(BaseModel):
    code: str
    message: str


class RoutePlanResponse(BaseModel):
    """Schema for a planned route."""
    start: Location
    candidate_count: int
    stops: List[RouteStopResponse]
    geometry: List[List[float]] = Field(
        default_factory=list,
        description="Path as [lat, lng] pairs; empty when no path is available"
    )
    display_geometry: List[List[float]] = Field(
        default_factory=list,
        description="Path to draw: the geometry, or straight lines through the stops"
    )
    route_polyline: Optional[str] = Field(None, description="Encoded polyline of display_geometry")
    straight_line: bool = False
    statistics: Optional[RouteStatisticsResponse] = None
    order_source: Optional[str] = None
    geometry_source: str
    notes: List[DiagnosticNoteResponse] = []
