"""
Datamodeller för ruttplaneraren

Alla koordinater inne i motorn är (lon, lat). Konvertering till (lat, lon)
sker bara vid gränsen mot omvärlden.
"""

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Tuple

from config import (
    ACTIVITY_ALIASES,
    CYCLING_DAYS,
    CYCLING_MAX_DAY_KM,
    CYCLING_MAX_TOTAL_KM,
    CYCLING_MIN_TOTAL_KM,
    HIKING_MAX_DAY_KM,
    HIKING_MAX_TOTAL_KM,
    HIKING_MIN_TOTAL_KM,
    ORS_PROFILES,
)
from exceptions import UnknownTripTypeError

CYCLING = "cycling"
HIKING = "hiking"


class Coordinate(NamedTuple):
    """En punkt, alltid i ordningen (longitud, latitud)"""
    lon: float
    lat: float

    @classmethod
    def from_lat_lon(cls, lat: float, lon: float) -> "Coordinate":
        return cls(float(lon), float(lat))

    def to_lat_lon(self) -> Tuple[float, float]:
        return self.lat, self.lon

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


RoutePath = List[Coordinate]


@dataclass(frozen=True)
class ActivityProfile:
    """Gränser och ORS-profil för en aktivitet"""
    activity: str
    ors_profile: str
    max_day_km: float
    min_total_km: float
    max_total_km: float
    days: int

    def in_range(self, total_km: float) -> bool:
        return self.min_total_km <= total_km <= self.max_total_km


ACTIVITY_PROFILES: Dict[str, ActivityProfile] = {
    CYCLING: ActivityProfile(
        activity=CYCLING,
        ors_profile=ORS_PROFILES[CYCLING],
        max_day_km=CYCLING_MAX_DAY_KM,
        min_total_km=CYCLING_MIN_TOTAL_KM,
        max_total_km=CYCLING_MAX_TOTAL_KM,
        days=CYCLING_DAYS,
    ),
    HIKING: ActivityProfile(
        activity=HIKING,
        ors_profile=ORS_PROFILES[HIKING],
        max_day_km=HIKING_MAX_DAY_KM,
        min_total_km=HIKING_MIN_TOTAL_KM,
        max_total_km=HIKING_MAX_TOTAL_KM,
        days=1,
    ),
}


def resolve_activity(value: object) -> str:
    """
    Normalisera en aktivitetstyp

    Args:
        value: "cycling", "hiking" eller de gamla namnen "bike"/"trek"

    Returns:
        "cycling" eller "hiking"
    """
    if isinstance(value, str):
        key = value.strip().lower()
        key = ACTIVITY_ALIASES.get(key, key)
        if key in ACTIVITY_PROFILES:
            return key
    raise UnknownTripTypeError(value)


@dataclass(frozen=True)
class CandidateAttempt:
    """En geometrisk hypotes som sökningen provar"""
    phase: str
    distance_km: Optional[float] = None
    bearing: Optional[float] = None
    loop_length_m: Optional[int] = None
    target_km: Optional[float] = None
    seed: Optional[int] = None


@dataclass
class DirectionsResult:
    """Svar på en point-to-point förfrågan"""
    path_found: bool
    path: List[Coordinate] = field(default_factory=list)
    total_km: float = 0.0
    failure_code: Optional[str] = None


@dataclass
class RoundTripResult:
    """Svar på en round trip förfrågan"""
    path_found: bool
    path: List[Coordinate] = field(default_factory=list)
    total_km: float = 0.0
    failure_code: Optional[str] = None


@dataclass
class RouteResult:
    """En färdig rutt"""
    activity: str
    path: List[Coordinate]
    day_distances: List[float]
    start: Coordinate
    end: Coordinate
    total_km: float  # från geometrin, före dagsuppdelning
    attempts: int = 0
    closure_meters: Optional[int] = None

    def to_dict(self) -> dict:
        """Ruttens format mot klienten"""
        data = {
            "type": self.activity,
            "coords": [[p.lon, p.lat] for p in self.path],
            "dayDistances": list(self.day_distances),
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
        }
        if self.closure_meters is not None:
            data["meta"] = {"closureMeters": self.closure_meters}
        return data


@dataclass(frozen=True)
class Place:
    """Resultat från geokodning"""
    name: str
    display_name: str
    coordinate: Coordinate
