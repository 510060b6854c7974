"""
Routing-providers: gränssnittet mot extern vägvisning och ORS-implementationen
"""

import logging
import os
import streamlit as st
from streamlit.errors import StreamlitAPIException
import requests
from typing import Iterable, List, Optional, Sequence, Tuple

from config import (
    DEFAULT_SNAP_RADII,
    ORS_BASE_URL,
    ORS_TIMEOUT,
    ROUND_TRIP_MIN_POINTS,
)
from exceptions import ConfigurationError, ProviderError
from models import Coordinate, DirectionsResult, RoundTripResult
from utils import path_distance_km

logger = logging.getLogger(__name__)

# Felkoder som inte kommer från providern själv
FAILURE_UNREACHABLE = "unreachable"
FAILURE_MALFORMED = "malformed"


class RoutingProvider:
    """
    Basklass för routing-providers

    En provider gör exakt ett anrop per metod och försöker aldrig igen;
    all omförsökslogik ligger i sökstrategin. Transportfel rapporteras som
    resultat med failure_code, eller som ProviderError.
    """

    def nearest_point(
        self,
        profile: str,
        coordinate: Coordinate,
        radius_m: int
    ) -> Optional[Coordinate]:
        raise NotImplementedError

    def directions(
        self,
        profile: str,
        waypoints: Sequence[Coordinate]
    ) -> DirectionsResult:
        raise NotImplementedError

    def round_trip(
        self,
        profile: str,
        origin: Coordinate,
        length_m: int,
        seed: int
    ) -> RoundTripResult:
        raise NotImplementedError

    def nearest_routable_point(
        self,
        profile: str,
        coordinate: Coordinate,
        radii: Iterable[int] = DEFAULT_SNAP_RADII
    ) -> Optional[Coordinate]:
        """
        Snappa en punkt till vägnätet med växande sökradie

        Args:
            profile: ORS-profil
            coordinate: Punkt (lon, lat)
            radii: Sökradier i meter

        Returns:
            Första träffen, eller None om alla radier misslyckas
        """
        for radius in sorted(radii):
            try:
                snapped = self.nearest_point(profile, coordinate, radius)
            except (requests.RequestException, ProviderError) as e:
                logger.debug("Snappning misslyckades (radie %s m): %s", radius, e)
                continue
            if snapped is not None:
                return snapped
        return None


def get_ors_api_key() -> Optional[str]:
    """Hämta ORS-nyckeln från miljön eller Streamlit secrets"""
    key = os.environ.get("ORS_API_KEY")
    if key:
        return key
    try:
        if "ORS_API_KEY" in st.secrets:
            return st.secrets["ORS_API_KEY"]
    except (FileNotFoundError, StreamlitAPIException):
        # Ingen secrets.toml
        pass
    return None


def _parse_coordinates(raw: object) -> List[Coordinate]:
    points = []
    if not isinstance(raw, list):
        return points
    for coord in raw:
        if isinstance(coord, (list, tuple)) and len(coord) >= 2:
            points.append(Coordinate(float(coord[0]), float(coord[1])))
    return points


def _failure_code(data: object, status_code: int) -> str:
    """Plocka ut ORS felkod ur ett felsvar"""
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("code") is not None:
            return str(error["code"])
    return f"http_{status_code}"


class OpenRouteServiceProvider(RoutingProvider):
    """OpenRouteService routing provider"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = ORS_BASE_URL,
        timeout: float = ORS_TIMEOUT
    ):
        self.name = "ORS"
        self.api_key = api_key or get_ors_api_key()
        if not self.api_key:
            raise ConfigurationError("ORS_API_KEY is not configured")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def headers(self) -> dict:
        return {
            "Authorization": self.api_key,
            "Content-Type": "application/json"
        }

    def _post(self, url: str, body: dict) -> Tuple[int, object]:
        """
        POST mot ORS

        Returns:
            (statuskod, json-data). Data är None om svaret inte är JSON.

        Raises:
            requests.RequestException vid nätverksfel
        """
        response = requests.post(url, json=body, headers=self.headers, timeout=self.timeout)
        try:
            data = response.json()
        except ValueError:
            data = None
        return response.status_code, data

    def nearest_point(
        self,
        profile: str,
        coordinate: Coordinate,
        radius_m: int
    ) -> Optional[Coordinate]:
        """Snappa en punkt med ORS snap-endpoint"""

        url = f"{self.base_url}/snap/{profile}"
        body = {
            "locations": [[coordinate.lon, coordinate.lat]],
            "radius": radius_m
        }

        status, data = self._post(url, body)
        if status != 200 or not isinstance(data, dict):
            return None

        locations = data.get("locations")
        if not isinstance(locations, list) or not locations:
            return None
        first = locations[0]
        if not isinstance(first, dict):
            return None

        try:
            points = _parse_coordinates([first.get("location")])
        except (ValueError, TypeError):
            return None
        return points[0] if points else None

    def _route(self, profile: str, body: dict) -> Tuple[List[Coordinate], Optional[str]]:
        url = f"{self.base_url}/directions/{profile}/geojson"
        try:
            status, data = self._post(url, body)
        except requests.RequestException as e:
            logger.debug("ORS kunde inte nås: %s", e)
            return [], FAILURE_UNREACHABLE

        if status != 200:
            code = _failure_code(data, status)
            logger.debug("ORS svarade %s (kod %s)", status, code)
            return [], code

        if not isinstance(data, dict):
            return [], FAILURE_MALFORMED

        try:
            geometry = data["features"][0]["geometry"]
        except (KeyError, IndexError, TypeError):
            return [], FAILURE_MALFORMED
        if not isinstance(geometry, dict):
            return [], FAILURE_MALFORMED

        try:
            return _parse_coordinates(geometry.get("coordinates")), None
        except (ValueError, TypeError):
            logger.debug("ORS gav ogiltiga koordinater")
            return [], FAILURE_MALFORMED

    def directions(
        self,
        profile: str,
        waypoints: Sequence[Coordinate]
    ) -> DirectionsResult:
        """Hämta point-to-point rutt genom waypoints i ordning"""

        if len(waypoints) < 2:
            raise ValueError("directions needs at least two waypoints")

        body = {
            "coordinates": [[p.lon, p.lat] for p in waypoints],
            "instructions": False
        }

        path, failure = self._route(profile, body)
        if failure:
            return DirectionsResult(path_found=False, failure_code=failure)

        return DirectionsResult(
            path_found=len(path) > 1,
            path=path,
            total_km=path_distance_km(path)
        )

    def round_trip(
        self,
        profile: str,
        origin: Coordinate,
        length_m: int,
        seed: int
    ) -> RoundTripResult:
        """Hämta en slinga av ungefär given längd från origin"""

        body = {
            "coordinates": [[origin.lon, origin.lat]],
            "options": {
                "round_trip": {
                    "length": length_m,
                    "seed": seed
                }
            },
            "instructions": False
        }

        path, failure = self._route(profile, body)
        if failure:
            return RoundTripResult(path_found=False, failure_code=failure)

        # För korta slingor räknas inte
        return RoundTripResult(
            path_found=len(path) >= ROUND_TRIP_MIN_POINTS,
            path=path,
            total_km=path_distance_km(path)
        )
