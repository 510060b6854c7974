"""
Hjälpfunktioner för ruttplaneraren: geometri och GPX-export
"""

import math
import gpxpy
import gpxpy.gpx
from typing import List, Sequence

from config import EARTH_RADIUS_KM
from models import Coordinate, RouteResult


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """
    Storcirkelavstånd mellan två punkter (Haversine formula)

    Args:
        a: Punkt (lon, lat)
        b: Punkt (lon, lat)

    Returns:
        Avstånd i km
    """
    lon1, lat1 = a
    lon2, lat2 = b
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    x = math.sin(dlat / 2) ** 2 + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    # Avrundningsfel kan ge x strax över 1 för antipodala punkter
    x = min(1.0, x)
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(x))


def path_distance_km(path: Sequence[Coordinate]) -> float:
    """
    Total distans längs en lista av punkter

    Args:
        path: Punkter (lon, lat) i färdordning

    Returns:
        Distans i km, 0 om färre än två punkter
    """
    if len(path) < 2:
        return 0.0

    total = 0.0
    for i in range(1, len(path)):
        total += distance_km(path[i - 1], path[i])
    return total


def cumulative_distances_km(path: Sequence[Coordinate]) -> List[float]:
    """Ackumulerad distans fram till varje punkt, första värdet är 0"""
    if not path:
        return []

    cum = [0.0]
    for i in range(1, len(path)):
        cum.append(cum[-1] + distance_km(path[i - 1], path[i]))
    return cum


def normalize_bearing(bearing: float) -> float:
    """Bäring i intervallet [0, 360)"""
    return bearing % 360


def destination_point(origin: Coordinate, distance: float, bearing: float) -> Coordinate:
    """
    Beräkna punkten man når från origin efter en given sträcka och bäring

    Args:
        origin: Startpunkt (lon, lat)
        distance: Sträcka i km
        bearing: Bäring i grader medurs från norr

    Returns:
        Destinationspunkt (lon, lat)
    """
    delta = distance / EARTH_RADIUS_KM
    theta = math.radians(bearing)
    phi1 = math.radians(origin.lat)
    lambda1 = math.radians(origin.lon)

    sin_phi2 = math.sin(phi1) * math.cos(delta) + math.cos(phi1) * math.sin(delta) * math.cos(theta)
    phi2 = math.asin(sin_phi2)
    y = math.sin(theta) * math.sin(delta) * math.cos(phi1)
    x = math.cos(delta) - math.sin(phi1) * sin_phi2
    lambda2 = lambda1 + math.atan2(y, x)

    lon = (math.degrees(lambda2) + 540) % 360 - 180
    return Coordinate(lon, math.degrees(phi2))


def closure_distance_m(path: Sequence[Coordinate]) -> float:
    """Avstånd i meter mellan rutts första och sista punkt"""
    if len(path) < 2:
        return 0.0
    return distance_km(path[0], path[-1]) * 1000


def validate_coordinates(lat: float, lon: float) -> bool:
    """
    Validera att koordinater är giltiga

    Args:
        lat: Latitud
        lon: Longitud

    Returns:
        True om koordinaterna är giltiga
    """
    return -90 <= lat <= 90 and -180 <= lon <= 180


def _split_index(path: Sequence[Coordinate], km: float) -> int:
    cum = cumulative_distances_km(path)
    idx = 1
    for i in range(1, len(cum)):
        if abs(cum[i] - km) < abs(cum[idx] - km):
            idx = i
    return idx


def create_gpx(route: RouteResult, name: str = "Rutt") -> str:
    """
    Skapa GPX-fil från en rutt

    Varje dag blir ett eget segment i samma track. Flerdagarsrutter delas
    vid punkten närmast dag 1:s distans.

    Args:
        route: RouteResult
        name: Namn på rutten

    Returns:
        GPX som sträng
    """
    gpx = gpxpy.gpx.GPX()

    gpx.creator = "Ruttplanerare"
    gpx.description = f"{route.activity} {sum(route.day_distances):.1f} km"

    gpx_track = gpxpy.gpx.GPXTrack()
    gpx_track.name = name
    gpx_track.type = route.activity
    gpx.tracks.append(gpx_track)

    if len(route.day_distances) > 1 and len(route.path) > 2:
        idx = _split_index(route.path, route.day_distances[0])
        # Delningspunkten ingår i båda dagarna
        days = [route.path[:idx + 1], route.path[idx:]]
    else:
        days = [route.path]

    for day_points in days:
        gpx_segment = gpxpy.gpx.GPXTrackSegment()
        gpx_track.segments.append(gpx_segment)
        for point in day_points:
            lat, lon = point.to_lat_lon()
            gpx_segment.points.append(gpxpy.gpx.GPXTrackPoint(lat, lon))

    return gpx.to_xml()
