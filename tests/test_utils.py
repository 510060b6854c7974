import gpxpy
import pytest

from models import Coordinate, RouteResult
from utils import (
    closure_distance_m,
    create_gpx,
    cumulative_distances_km,
    destination_point,
    distance_km,
    normalize_bearing,
    path_distance_km,
    validate_coordinates,
)
from conftest import line_path

STOCKHOLM = Coordinate(18.0686, 59.3293)
UPPSALA = Coordinate(17.6389, 59.8586)


def test_distance_to_self_is_zero():
    for point in [STOCKHOLM, UPPSALA, Coordinate(0.0, 0.0), Coordinate(-179.9, -89.0)]:
        assert distance_km(point, point) == 0


def test_distance_is_symmetric():
    assert distance_km(STOCKHOLM, UPPSALA) == pytest.approx(distance_km(UPPSALA, STOCKHOLM))


def test_distance_known_value():
    # Stockholm - Uppsala är ca 64 km fågelvägen
    assert distance_km(STOCKHOLM, UPPSALA) == pytest.approx(64, abs=2)


def test_distance_uses_lon_lat_order():
    one_degree_lon = distance_km(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0))
    one_degree_lat_far_north = distance_km(Coordinate(0.0, 80.0), Coordinate(1.0, 80.0))
    assert one_degree_lon == pytest.approx(111.19, abs=0.01)
    assert one_degree_lat_far_north < 20


@pytest.mark.parametrize("distance", [0.5, 10, 60, 110, 140])
@pytest.mark.parametrize("bearing", [0, 45, 90, 180, 270, 359])
def test_destination_point_distance(distance, bearing):
    target = destination_point(STOCKHOLM, distance, bearing)
    assert distance_km(STOCKHOLM, target) == pytest.approx(distance, rel=0.005)


def test_destination_point_direction():
    north = destination_point(STOCKHOLM, 10, 0)
    east = destination_point(STOCKHOLM, 10, 90)
    assert north.lat > STOCKHOLM.lat
    assert north.lon == pytest.approx(STOCKHOLM.lon)
    assert east.lon > STOCKHOLM.lon


def test_destination_point_wraps_longitude():
    target = destination_point(Coordinate(179.9, 0.0), 50, 90)
    assert -180 <= target.lon < -179


def test_path_distance():
    assert path_distance_km([]) == 0
    assert path_distance_km([STOCKHOLM]) == 0
    assert path_distance_km(line_path(12.0)) == pytest.approx(12.0)
    assert path_distance_km([STOCKHOLM, UPPSALA, STOCKHOLM]) == pytest.approx(2 * distance_km(STOCKHOLM, UPPSALA))


def test_cumulative_distances():
    cum = cumulative_distances_km(line_path(10.0, points=6))
    assert cum[0] == 0
    assert cum == pytest.approx([0, 2, 4, 6, 8, 10])
    assert cumulative_distances_km([]) == []


def test_normalize_bearing():
    assert normalize_bearing(-30) == 330
    assert normalize_bearing(360) == 0
    assert normalize_bearing(410) == 50


def test_closure_distance():
    path = line_path(1.0, points=3)
    assert closure_distance_m(path) == pytest.approx(1000)
    assert closure_distance_m(path + [path[0]]) == 0
    assert closure_distance_m([STOCKHOLM]) == 0


def test_validate_coordinates():
    assert validate_coordinates(59.3, 18.0)
    assert not validate_coordinates(91, 0)
    assert not validate_coordinates(0, 181)


def test_create_gpx_splits_days():
    path = line_path(100.0, points=101)
    route = RouteResult(
        activity="cycling",
        path=path,
        day_distances=[50.0, 50.0],
        start=path[0],
        end=path[-1],
        total_km=100.0,
    )

    gpx = gpxpy.parse(create_gpx(route, "Två dagar"))

    track = gpx.tracks[0]
    assert track.name == "Två dagar"
    assert len(track.segments) == 2
    assert len(track.segments[0].points) == 51
    assert len(track.segments[1].points) == 51
    first = track.segments[0].points[0]
    assert (first.latitude, first.longitude) == pytest.approx((path[0].lat, path[0].lon))


def test_create_gpx_single_day():
    path = line_path(9.0)
    route = RouteResult(
        activity="hiking",
        path=path + [path[0]],
        day_distances=[9.0],
        start=path[0],
        end=path[0],
        total_km=9.0,
    )

    gpx = gpxpy.parse(create_gpx(route))

    assert len(gpx.tracks[0].segments) == 1
    assert len(gpx.tracks[0].segments[0].points) == len(path) + 1
