import math
import os
import sys
from pathlib import Path

import pytest

os.environ.setdefault("ORS_API_KEY", "test-ors-key")

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from models import Coordinate, DirectionsResult, RoundTripResult  # noqa: E402
from routing_providers import RoutingProvider  # noqa: E402

KM_PER_DEGREE_AT_EQUATOR = 6371.0 * math.pi / 180


class FakeProvider(RoutingProvider):
    """Provider som styrs av callbacks och loggar alla anrop"""

    def __init__(self, snap=None, directions=None, round_trip=None):
        self._snap = snap
        self._directions = directions
        self._round_trip = round_trip
        self.snap_calls = []
        self.directions_calls = []
        self.round_trip_calls = []

    def nearest_point(self, profile, coordinate, radius_m):
        self.snap_calls.append((profile, coordinate, radius_m))
        if self._snap is None:
            return None
        return self._snap(profile, coordinate, radius_m)

    def directions(self, profile, waypoints):
        self.directions_calls.append((profile, list(waypoints)))
        if self._directions is None:
            return DirectionsResult(path_found=False, failure_code="2010")
        return self._directions(profile, list(waypoints))

    def round_trip(self, profile, origin, length_m, seed):
        self.round_trip_calls.append((profile, origin, length_m, seed))
        if self._round_trip is None:
            return RoundTripResult(path_found=False)
        return self._round_trip(profile, origin, length_m, seed)


def line_path(total_km, points=11, lat=0.0):
    """Rak väg österut längs latitud 0, jämnt fördelade punkter"""
    step = total_km / (points - 1)
    return [
        Coordinate(i * step / KM_PER_DEGREE_AT_EQUATOR, lat)
        for i in range(points)
    ]


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def start():
    return Coordinate(18.0686, 59.3293)
