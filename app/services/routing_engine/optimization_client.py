"""
OpenRouteService optimization client.

Delegates visit ordering to the ORS /optimization endpoint (a VROOM
job/vehicle optimizer) and validates the response into domain types.
"""

import httpx
from typing import Any, Dict, Optional, Sequence, Tuple
from app.core.config import settings
from app.core.logging_config import logger
from app.services.routing_engine.exceptions import (
    OptimizationUnavailable,
    RoutingConfigurationError,
)
from app.services.routing_engine.types import (
    GeoPoint,
    OptimizedStop,
    OrderedRoute,
    PathGeometry,
    RouteStatistics,
    Waypoint,
)
from app.utils.geo import haversine_miles
from app.utils.polyline import PolylineDecodeError, decode_polyline, swap_axes
from app.utils.units import meters_to_miles, seconds_to_minutes


class OptimizationResult:
    """Validated optimizer output."""

    def __init__(
        self,
        route: OrderedRoute,
        geometry: PathGeometry,
        statistics: RouteStatistics,
        stops: Tuple[OptimizedStop, ...] = (),
        unknown_job_ids: Tuple[Any, ...] = (),
        geometry_discarded: bool = False
    ):
        self.route = route
        self.geometry = geometry
        self.statistics = statistics
        self.stops = stops
        self.unknown_job_ids = unknown_job_ids
        self.geometry_discarded = geometry_discarded


class ORSOptimizationClient:
    """Client for the OpenRouteService optimization API."""

    VEHICLE_ID = 1
    # Step types that never carry a job
    PSEUDO_STEP_TYPES = ("start", "end", "break")
    # Embedded geometry must begin this close to the vehicle start
    MAX_START_OFFSET_MILES = 5.0

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        profile: Optional[str] = None,
        timeout: Optional[float] = None,
        precision: Optional[float] = None,
        axis_order: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize the optimization client.

        Args:
            api_key: ORS API key (defaults to env var)
            base_url: ORS base URL (defaults to env var)
            profile: ORS routing profile for the vehicle
            timeout: Request timeout in seconds
            precision: Polyline precision factor for embedded geometry
            axis_order: "latlng" or "lnglat", axis order of the encoded geometry
            transport: Optional httpx transport (used by tests)

        Raises:
            RoutingConfigurationError: If no API key is configured
        """
        self.api_key = api_key or settings.ORS_API_KEY
        if not self.api_key:
            raise RoutingConfigurationError("ORS_API_KEY is not set. Route optimization is unavailable.")

        self.base_url = (base_url or settings.ORS_BASE_URL).rstrip("/")
        self.profile = profile or settings.ORS_PROFILE
        self.timeout = timeout or settings.ORS_OPTIMIZATION_TIMEOUT_SECONDS
        self.precision = precision or settings.POLYLINE_PRECISION
        self.axis_order = axis_order or settings.OPTIMIZER_GEOMETRY_AXIS_ORDER
        self.transport = transport

    def build_payload(self, start: GeoPoint, candidates: Sequence[Waypoint]) -> Dict[str, Any]:
        """
        Build the optimization request.

        One vehicle starts at `start` with no end (no return to start). Jobs are
        numbered by their 1-based position in `candidates`.
        """
        return {
            "jobs": [
                {"id": job_id, "location": waypoint.point.to_lnglat()}
                for job_id, waypoint in enumerate(candidates, start=1)
            ],
            "vehicles": [
                {
                    "id": self.VEHICLE_ID,
                    "profile": self.profile,
                    "start": start.to_lnglat(),
                }
            ],
            "options": {"g": True},
        }

    def optimize(self, start: GeoPoint, candidates: Sequence[Waypoint]) -> OptimizationResult:
        """
        Ask the optimizer for a visit order.

        Args:
            start: Vehicle start position
            candidates: Waypoints to visit

        Returns:
            OptimizationResult with the order, statistics in miles/minutes and
            geometry (empty if absent or discarded)

        Raises:
            OptimizationUnavailable: On transport errors, timeouts, non-success
                responses or a response without a usable route
        """
        payload = self.build_payload(start, candidates)

        logger.info(
            f"Requesting optimization from ORS: {len(candidates)} jobs, profile={self.profile}"
        )

        try:
            with httpx.Client(transport=self.transport, timeout=self.timeout) as client:
                response = client.post(
                    f"{self.base_url}/optimization",
                    json=payload,
                    headers={"Authorization": self.api_key},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"ORS optimization API error {e.response.status_code}: {e.response.text}")
            raise OptimizationUnavailable(f"Optimizer returned HTTP {e.response.status_code}") from e
        except httpx.TimeoutException as e:
            logger.error(f"ORS optimization timed out after {self.timeout}s")
            raise OptimizationUnavailable("Optimizer request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach ORS optimization API: {str(e)}")
            raise OptimizationUnavailable(f"Optimizer request failed: {str(e)}") from e
        except ValueError as e:
            logger.error(f"ORS optimization returned invalid JSON: {str(e)}")
            raise OptimizationUnavailable("Optimizer returned invalid JSON") from e

        return self.parse_response(data, candidates, start=start)

    def parse_response(
        self,
        data: Any,
        candidates: Sequence[Waypoint],
        start: Optional[GeoPoint] = None
    ) -> OptimizationResult:
        """Validate an optimizer response and map it back onto `candidates`."""
        if not isinstance(data, dict):
            raise OptimizationUnavailable("Optimizer response is not a JSON object")
        if data.get("code", 0) != 0:
            raise OptimizationUnavailable(
                f"Optimizer reported code {data.get('code')}: {data.get('error', 'unknown error')}"
            )

        routes = data.get("routes")
        if not routes or not isinstance(routes, list) or not isinstance(routes[0], dict):
            raise OptimizationUnavailable("Optimizer response contains no routes")

        route_data = routes[0]
        steps = route_data.get("steps") or []
        if not isinstance(steps, list):
            raise OptimizationUnavailable("Optimizer route steps are not a list")

        ordered = []
        stops = []
        unknown = []
        seen = set()

        for step in steps:
            if not isinstance(step, dict) or step.get("type") in self.PSEUDO_STEP_TYPES:
                continue
            job_id = step.get("job", step.get("id"))
            if job_id is None:
                continue

            waypoint = self._resolve(job_id, candidates)
            if waypoint is None:
                logger.warning(f"Optimizer returned unknown job id {job_id!r}")
                unknown.append(job_id)
                continue
            if waypoint.id in seen:
                logger.warning(f"Optimizer visited job id {job_id!r} more than once")
                continue

            seen.add(waypoint.id)
            ordered.append(waypoint)
            stops.append(OptimizedStop(
                waypoint_id=waypoint.id,
                arrival_minutes=self._minutes(step.get("arrival")),
                travel_minutes=self._minutes(step.get("duration")),
                distance_miles=self._miles(step.get("distance")),
            ))

        if not ordered:
            raise OptimizationUnavailable("Optimizer route has no resolvable job steps")

        summary = data.get("summary")
        if not isinstance(summary, dict):
            summary = {}
        statistics = RouteStatistics(
            distance_miles=self._miles(route_data.get("distance", summary.get("distance"))),
            duration_minutes=self._minutes(route_data.get("duration", summary.get("duration"))),
        )

        geometry = ()
        geometry_discarded = False
        encoded = route_data.get("geometry")
        if encoded:
            geometry = self._decode_geometry(encoded, start)
            geometry_discarded = not geometry

        logger.info(
            f"Optimization parsed: {len(ordered)} stops, {len(unknown)} unknown ids, "
            f"geometry_points={len(geometry)}"
        )

        return OptimizationResult(
            route=tuple(ordered),
            geometry=geometry,
            statistics=statistics,
            stops=tuple(stops),
            unknown_job_ids=tuple(unknown),
            geometry_discarded=geometry_discarded,
        )

    def _resolve(self, job_id: Any, candidates: Sequence[Waypoint]) -> Optional[Waypoint]:
        """Map a 1-based job id back to its waypoint."""
        if isinstance(job_id, bool):
            return None
        try:
            index = int(job_id)
        except (TypeError, ValueError, OverflowError):
            return None
        if index != job_id or not 1 <= index <= len(candidates):
            return None
        return candidates[index - 1]

    def _decode_geometry(self, encoded: Any, start: Optional[GeoPoint] = None) -> PathGeometry:
        """
        Decode embedded geometry, returning () if it is unusable.

        A precision mismatch shows up as coordinates out of range, an axis
        collapsed towards zero, or a path that does not begin at `start`.
        """
        if not isinstance(encoded, str):
            logger.warning(f"Ignoring non-string optimizer geometry of type {type(encoded).__name__}")
            return ()

        try:
            pairs = decode_polyline(encoded, precision=self.precision)
        except PolylineDecodeError as e:
            logger.warning(f"Discarding optimizer geometry: {str(e)}")
            return ()

        if self.axis_order == "lnglat":
            pairs = swap_axes(pairs)

        if len(pairs) < 2:
            logger.warning(f"Discarding optimizer geometry with {len(pairs)} point(s)")
            return ()

        try:
            points = tuple(GeoPoint.from_latlng(pair) for pair in pairs)
        except ValueError as e:
            logger.warning(f"Discarding optimizer geometry, coordinates out of range: {str(e)}")
            return ()

        first = points[0]
        if abs(first.lat) < 1 or abs(first.lng) < 1:
            logger.warning(
                f"Discarding optimizer geometry, first point ({first.lat}, {first.lng}) "
                f"looks like a precision mismatch"
            )
            return ()

        if start is not None:
            offset = haversine_miles(first, start)
            if offset > self.MAX_START_OFFSET_MILES:
                logger.warning(
                    f"Discarding optimizer geometry, first point ({first.lat}, {first.lng}) "
                    f"is {offset:.1f}mi from the start"
                )
                return ()

        return points

    @staticmethod
    def _miles(meters: Any) -> Optional[float]:
        if not isinstance(meters, (int, float)) or isinstance(meters, bool) or meters < 0:
            return None
        return meters_to_miles(meters)

    @staticmethod
    def _minutes(seconds: Any) -> Optional[float]:
        if not isinstance(seconds, (int, float)) or isinstance(seconds, bool) or seconds < 0:
            return None
        return seconds_to_minutes(seconds)
