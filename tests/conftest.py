import json

import httpx
import pytest

from app.services.routing_engine.types import GeoPoint, Waypoint


START = GeoPoint(lat=30.0, lng=-88.0)


def make_waypoint(id, lat, lng, name=None):
    return Waypoint(id=id, point=GeoPoint(lat=lat, lng=lng), name=name or f"Store {id}")


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests = []

        def record(request):
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    def json_body(self, index=0):
        return json.loads(self.requests[index].content)


@pytest.fixture
def start():
    return START


@pytest.fixture
def two_candidates():
    return [make_waypoint("A", 30.1, -88.0), make_waypoint("B", 30.2, -88.0)]
