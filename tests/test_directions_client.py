import httpx
import pytest

from app.core.config import settings
from app.services.routing_engine.directions_client import ORSDirectionsClient
from app.services.routing_engine.exceptions import PathUnavailable, RoutingConfigurationError
from app.services.routing_engine.types import GeoPoint
from tests.conftest import RecordingTransport


def directions_response(coordinates, geo_type="LineString", summary=None):
    properties = {}
    if summary is not None:
        properties["summary"] = summary
    return {
        "type": "FeatureCollection",
        "features": [{
            "type": "Feature",
            "geometry": {"type": geo_type, "coordinates": coordinates},
            "properties": properties,
        }],
    }


def client_for(handler):
    transport = RecordingTransport(handler)
    client = ORSDirectionsClient(api_key="test-key", base_url="https://ors.test", transport=transport)
    return client, transport


POINTS = [GeoPoint(30.0, -88.0), GeoPoint(30.1, -88.0), GeoPoint(30.2, -88.0)]


def test_request_sends_longitude_first_coordinates_in_order():
    data = directions_response([[-88.0, 30.0], [-88.0, 30.2]], summary={"distance": 1609.34, "duration": 60})
    client, transport = client_for(lambda request: httpx.Response(200, json=data))

    client.path(POINTS)

    request = transport.requests[0]
    assert request.url == f"https://ors.test/v2/directions/{settings.ORS_PROFILE}/geojson"
    assert request.headers["Authorization"] == "test-key"
    assert transport.json_body() == {"coordinates": [[-88.0, 30.0], [-88.0, 30.1], [-88.0, 30.2]]}


def test_line_string_geometry_and_summary_are_converted():
    coordinates = [[-88.0, 30.0], [-88.01, 30.05], [-88.0, 30.1], [-88.0, 30.2]]
    data = directions_response(coordinates, summary={"distance": 24140.1, "duration": 1500})
    client, _ = client_for(lambda request: httpx.Response(200, json=data))

    result = client.path(POINTS)

    assert result.geometry[1] == GeoPoint(lat=30.05, lng=-88.01)
    assert len(result.geometry) == 4
    assert result.statistics.distance_miles == pytest.approx(15.0)
    assert result.statistics.duration_minutes == pytest.approx(25.0)


def test_multi_line_string_is_flattened():
    coordinates = [[[-88.0, 30.0], [-88.0, 30.1]], [[-88.0, 30.1], [-88.0, 30.2]]]
    data = directions_response(coordinates, geo_type="MultiLineString", summary={"distance": 1000})
    client, _ = client_for(lambda request: httpx.Response(200, json=data))

    result = client.path(POINTS)

    assert [p.lat for p in result.geometry] == [30.0, 30.1, 30.1, 30.2]
    assert result.statistics.duration_minutes is None


def test_missing_summary_leaves_statistics_unknown():
    data = directions_response([[-88.0, 30.0], [-88.0, 30.2]])
    client, _ = client_for(lambda request: httpx.Response(200, json=data))

    result = client.path(POINTS)

    assert result.statistics.distance_miles is None
    assert result.statistics.duration_minutes is None


@pytest.mark.parametrize("data", [
    {"type": "FeatureCollection", "features": []},
    {"error": {"code": 2010, "message": "Could not find routable point"}},
    directions_response([]),
    directions_response([[-88.0, 30.0]]),
    directions_response([[-88.0, 30.0], [-88.0]]),
    directions_response([[-88.0, 30.0], [-88.0, 130.0]]),
    directions_response([[-88.0, 30.0], [-88.0, 30.2]], geo_type="Point"),
    directions_response([{"lng": -88.0, "lat": 30.0}, {"lng": -88.0, "lat": 30.2}]),
    directions_response([[{"lng": -88.0, "lat": 30.0}], [[-88.0, 30.2]]], geo_type="MultiLineString"),
    directions_response([[-88.0, 30.0], "-88.0,30.2"]),
])
def test_malformed_responses_are_unavailable(data):
    client, _ = client_for(lambda request: httpx.Response(200, json=data))

    with pytest.raises(PathUnavailable):
        client.path(POINTS)


@pytest.mark.parametrize("status_code", [401, 403, 404, 500])
def test_http_errors_are_unavailable(status_code):
    client, _ = client_for(lambda request: httpx.Response(status_code, json={"error": "denied"}))

    with pytest.raises(PathUnavailable):
        client.path(POINTS)


def test_timeout_is_unavailable():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    client, _ = client_for(handler)

    with pytest.raises(PathUnavailable):
        client.path(POINTS)


def test_fewer_than_two_points_makes_no_request():
    client, transport = client_for(lambda request: httpx.Response(500))

    with pytest.raises(PathUnavailable):
        client.path(POINTS[:1])
    assert transport.requests == []


def test_missing_api_key_fails_before_any_request(monkeypatch):
    monkeypatch.setattr(settings, "ORS_API_KEY", "")

    with pytest.raises(RoutingConfigurationError):
        ORSDirectionsClient()
