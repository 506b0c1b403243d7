from typing import Callable, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from app.core.logging_config import logger
from app.schemas.common import Location
from app.schemas.route_plan import (
    DiagnosticNoteResponse,
    RoutePlanRequest,
    RoutePlanResponse,
    RouteStatisticsResponse,
    RouteStopResponse,
)
from app.services.place import place_service
from app.services.routing_engine import (
    GeoPoint,
    ORSDirectionsClient,
    ORSOptimizationClient,
    RouteArtifact,
    RoutePlanner,
    RoutingConfigurationError,
    Waypoint,
)
from app.utils.polyline import encode_polyline
from app.utils.units import format_distance, format_duration, miles_to_meters


def build_default_planner() -> RoutePlanner:
    """Planner wired to OpenRouteService using the configured settings."""
    return RoutePlanner(
        optimizer=ORSOptimizationClient(),
        directions=ORSDirectionsClient()
    )


class RoutePlanningService:
    """
    Service layer for route planning.

    Resolves candidates (supplied or looked up), runs the planner and formats
    the RouteArtifact for the API. A fresh planner is built per request.
    """

    def __init__(self, planner_factory: Optional[Callable[[], RoutePlanner]] = None):
        self.planner_factory = planner_factory or build_default_planner
        self.places = place_service

    def plan_route(
        self,
        db: Optional[Session],
        request: RoutePlanRequest
    ) -> RoutePlanResponse:
        """
        Plan a route for the request.

        Args:
            db: Database session, or None when no database is configured
            request: Route planning request

        Returns:
            RoutePlanResponse (possibly degraded, see notes)

        Raises:
            HTTPException 503: If routing is not configured, or waypoints must be
                looked up and no database is configured
            HTTPException 422: If waypoint ids repeat
        """
        # Fail fast on configuration before any lookup or network call
        try:
            planner = self.planner_factory()
        except RoutingConfigurationError as e:
            logger.error(f"Route planning not configured: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Route planning is not configured"
            )

        start = GeoPoint(lat=request.start.lat, lng=request.start.lng)
        candidates = self.resolve_candidates(db, request, start)

        logger.info(
            f"Planning route: start=({start.lat}, {start.lng}), candidates={len(candidates)}"
        )
        artifact = planner.plan(start, candidates)
        return self.format(artifact, candidate_count=len(candidates))

    def resolve_candidates(
        self,
        db: Optional[Session],
        request: RoutePlanRequest,
        start: GeoPoint
    ) -> List[Waypoint]:
        if request.waypoints is not None:
            ids = [waypoint.id for waypoint in request.waypoints]
            if len(set(ids)) != len(ids):
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="Waypoint ids must be unique"
                )
            return [
                Waypoint(
                    id=waypoint.id,
                    point=GeoPoint(lat=waypoint.lat, lng=waypoint.lng),
                    name=waypoint.name,
                    code=waypoint.code,
                    address=waypoint.address
                )
                for waypoint in request.waypoints
            ]

        if db is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Place lookup is not configured; supply waypoints explicitly"
            )

        places = self.places.get_nearby_places(db, start.lat, start.lng, request.radius)
        return [self.places.to_waypoint(place) for place in places]

    def format(self, artifact: RouteArtifact, candidate_count: int) -> RoutePlanResponse:
        """Format a RouteArtifact into the API response."""
        stops_by_id = {stop.waypoint_id: stop for stop in artifact.stops}

        stops = []
        for sequence, waypoint in enumerate(artifact.route, start=1):
            optimized = stops_by_id.get(waypoint.id)
            stops.append(RouteStopResponse(
                sequence=sequence,
                id=waypoint.id,
                name=waypoint.name,
                code=waypoint.code,
                address=waypoint.address,
                lat=waypoint.lat,
                lng=waypoint.lng,
                arrival_minutes=optimized.arrival_minutes if optimized else None,
                distance_from_start_miles=optimized.distance_miles if optimized else None
            ))

        display = [point.to_latlng() for point in artifact.display_geometry()]

        statistics = None
        if artifact.statistics is not None:
            distance = artifact.statistics.distance_miles
            duration = artifact.statistics.duration_minutes
            statistics = RouteStatisticsResponse(
                distance_miles=distance,
                duration_minutes=duration,
                distance_label=format_distance(miles_to_meters(distance)) if distance is not None else None,
                duration_label=format_duration(duration) if duration is not None else None
            )

        return RoutePlanResponse(
            start=Location(lat=artifact.start.lat, lng=artifact.start.lng),
            candidate_count=candidate_count,
            stops=stops,
            geometry=[point.to_latlng() for point in artifact.geometry],
            display_geometry=display,
            route_polyline=encode_polyline(display) if display else None,
            straight_line=artifact.needs_straight_line(),
            statistics=statistics,
            order_source=artifact.order_source.value if artifact.order_source else None,
            geometry_source=artifact.geometry_source.value,
            notes=[
                DiagnosticNoteResponse(code=note.code.value, message=note.message)
                for note in artifact.notes
            ]
        )


route_planning_service = RoutePlanningService()
