"""
OpenRouteService directions client.

Fetches drivable path geometry and totals for an already-ordered list of points.
"""

import httpx
from typing import Any, Dict, Optional, Sequence
from app.core.config import settings
from app.core.logging_config import logger
from app.services.routing_engine.exceptions import PathUnavailable, RoutingConfigurationError
from app.services.routing_engine.types import GeoPoint, PathGeometry, RouteStatistics
from app.utils.units import meters_to_miles, seconds_to_minutes


class PathResult:
    """Validated directions output."""

    def __init__(self, geometry: PathGeometry, statistics: RouteStatistics):
        self.geometry = geometry
        self.statistics = statistics


class ORSDirectionsClient:
    """Client for the OpenRouteService directions API (GeoJSON output)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        profile: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize the directions client.

        Args:
            api_key: ORS API key (defaults to env var)
            base_url: ORS base URL (defaults to env var)
            profile: ORS routing profile
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)

        Raises:
            RoutingConfigurationError: If no API key is configured
        """
        self.api_key = api_key or settings.ORS_API_KEY
        if not self.api_key:
            raise RoutingConfigurationError("ORS_API_KEY is not set. Directions are unavailable.")

        self.base_url = (base_url or settings.ORS_BASE_URL).rstrip("/")
        self.profile = profile or settings.ORS_PROFILE
        self.timeout = timeout or settings.ORS_DIRECTIONS_TIMEOUT_SECONDS
        self.transport = transport

    def path(self, points: Sequence[GeoPoint]) -> PathResult:
        """
        Get the drivable path through `points` in order.

        Args:
            points: Start point followed by each stop

        Returns:
            PathResult with geometry and statistics in miles/minutes

        Raises:
            PathUnavailable: On fewer than two points, transport errors,
                timeouts, auth failures or malformed responses
        """
        if len(points) < 2:
            raise PathUnavailable(f"Not enough points for a path: {len(points)}")

        payload = {"coordinates": [point.to_lnglat() for point in points]}

        logger.info(f"Requesting directions from ORS: {len(points)} points, profile={self.profile}")
        logger.debug(f"Directions coordinates: {payload['coordinates']}")

        try:
            with httpx.Client(transport=self.transport, timeout=self.timeout) as client:
                response = client.post(
                    f"{self.base_url}/v2/directions/{self.profile}/geojson",
                    json=payload,
                    headers={"Authorization": self.api_key},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"ORS directions API error {e.response.status_code}: {e.response.text}")
            raise PathUnavailable(f"Directions returned HTTP {e.response.status_code}") from e
        except httpx.TimeoutException as e:
            logger.error(f"ORS directions timed out after {self.timeout}s")
            raise PathUnavailable("Directions request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to reach ORS directions API: {str(e)}")
            raise PathUnavailable(f"Directions request failed: {str(e)}") from e
        except ValueError as e:
            logger.error(f"ORS directions returned invalid JSON: {str(e)}")
            raise PathUnavailable("Directions returned invalid JSON") from e

        return self.parse_response(data)

    def parse_response(self, data: Any) -> PathResult:
        """Convert a GeoJSON FeatureCollection into a PathResult."""
        features = data.get("features") if isinstance(data, dict) else None
        if not features or not isinstance(features, list) or not isinstance(features[0], dict):
            raise PathUnavailable("No features in directions response")

        feature = features[0]
        geometry = feature.get("geometry")
        if not isinstance(geometry, dict):
            raise PathUnavailable("No geometry in directions response")
        geo_type = geometry.get("type")
        coordinates = geometry.get("coordinates")

        if not coordinates:
            raise PathUnavailable("No coordinates in directions response")

        if geo_type not in ("LineString", "MultiLineString"):
            raise PathUnavailable(f"Unsupported directions geometry type: {geo_type}")

        # GeoJSON coordinates are [lon, lat]
        try:
            if geo_type == "MultiLineString":
                coordinates = [coord for segment in coordinates for coord in segment]
            if not all(isinstance(coord, (list, tuple)) for coord in coordinates):
                raise ValueError("coordinates must be [lng, lat] arrays")
            points = tuple(GeoPoint.from_lnglat(coord) for coord in coordinates)
        except (TypeError, IndexError, ValueError) as e:
            raise PathUnavailable(f"Invalid coordinates in directions response: {str(e)}") from e

        if len(points) < 2:
            raise PathUnavailable(f"Directions geometry has {len(points)} point(s)")

        summary = self._summary(feature)
        statistics = RouteStatistics(
            distance_miles=self._convert(summary.get("distance"), meters_to_miles),
            duration_minutes=self._convert(summary.get("duration"), seconds_to_minutes),
        )

        logger.info(
            f"Directions parsed: {len(points)} points, "
            f"distance={statistics.distance_miles}mi, duration={statistics.duration_minutes}min"
        )
        return PathResult(geometry=points, statistics=statistics)

    @staticmethod
    def _summary(feature: Dict[str, Any]) -> Dict[str, Any]:
        properties = feature.get("properties")
        if not isinstance(properties, dict):
            return {}
        summary = properties.get("summary")
        return summary if isinstance(summary, dict) else {}

    @staticmethod
    def _convert(value: Any, convert) -> Optional[float]:
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0:
            return None
        return convert(value)
