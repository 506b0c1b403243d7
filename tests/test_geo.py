import pytest

from app.services.routing_engine.types import GeoPoint
from app.utils.geo import haversine_miles, path_length_miles
from app.utils.units import (
    format_distance,
    format_duration,
    meters_to_miles,
    miles_to_meters,
    seconds_to_minutes,
)


@pytest.mark.parametrize("point", [
    GeoPoint(0, 0),
    GeoPoint(30.3944, -88.8853),
    GeoPoint(-90, 180),
])
def test_distance_to_self_is_zero(point):
    assert haversine_miles(point, point) == 0


def test_distance_is_symmetric():
    a = GeoPoint(30.3944, -88.8853)
    b = GeoPoint(33.749, -84.388)
    assert haversine_miles(a, b) == pytest.approx(haversine_miles(b, a))


def test_one_degree_of_longitude_at_equator_is_about_69_miles():
    assert haversine_miles(GeoPoint(0, 0), GeoPoint(0, 1)) == pytest.approx(69.0, abs=1.0)


def test_antipodal_points_do_not_fail():
    assert haversine_miles(GeoPoint(0, 0), GeoPoint(0, 180)) == pytest.approx(3958.8 * 3.14159265, rel=1e-6)


def test_path_length_sums_legs():
    a, b, c = GeoPoint(30.0, -88.0), GeoPoint(30.1, -88.0), GeoPoint(30.2, -88.0)
    assert path_length_miles([a, b, c]) == pytest.approx(haversine_miles(a, b) + haversine_miles(b, c))
    assert path_length_miles([a]) == 0
    assert path_length_miles([]) == 0


def test_unit_conversions():
    assert meters_to_miles(1609.34) == pytest.approx(1.0)
    assert miles_to_meters(2) == pytest.approx(3218.68)
    assert seconds_to_minutes(90) == pytest.approx(1.5)


@pytest.mark.parametrize("meters,expected", [
    (1609.34, "1.0 mile"),
    (16093.4, "10.0 miles"),
    (100, "328 feet"),
])
def test_format_distance(meters, expected):
    assert format_distance(meters) == expected


@pytest.mark.parametrize("minutes,expected", [
    (45, "45 min"),
    (90, "1 h 30 min"),
    (120, "2 h"),
])
def test_format_duration(minutes, expected):
    assert format_duration(minutes) == expected


@pytest.mark.parametrize("lat,lng", [(91, 0), (-91, 0), (0, 181), (0, -180.5), (float("nan"), 0)])
def test_geopoint_rejects_out_of_range(lat, lng):
    with pytest.raises(ValueError):
        GeoPoint(lat, lng)


def test_geopoint_axis_helpers():
    point = GeoPoint.from_lnglat([-88.0, 30.0])
    assert point == GeoPoint(lat=30.0, lng=-88.0)
    assert point.to_lnglat() == [-88.0, 30.0]
    assert point.to_latlng() == [30.0, -88.0]
