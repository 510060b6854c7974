"""
Planering av en resa: ort -> startpunkt -> rutt -> sammanfattning
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from exceptions import GeocodingError
from geocoding import geocode_city
from models import CYCLING, RouteResult, resolve_activity
from routing import plan_route
from routing_providers import RoutingProvider
from utils import create_gpx

logger = logging.getLogger(__name__)

MIN_CITY_LENGTH = 2


def build_narrative(city: str, activity: str, day_distances: List[float]) -> str:
    """Kort beskrivning av resan baserat på ort, aktivitet och dagsdistanser"""
    if resolve_activity(activity) == CYCLING:
        d1 = round(day_distances[0]) if len(day_distances) > 0 else 0
        d2 = round(day_distances[1]) if len(day_distances) > 1 else 0
        return (
            f"Two-day bike route from {city}: about {d1} km on day 1 and {d2} km on day 2. "
            "Uses real cycling roads/tracks (OpenRouteService)."
        )
    d = round(day_distances[0]) if day_distances else 0
    return f"One-day hiking loop near {city}, about {d} km, following real trails/roads (OpenRouteService)."


@dataclass
class TripPlan:
    """En planerad resa"""
    city: str
    activity: str
    label: str
    route: RouteResult
    narrative: str

    def to_dict(self) -> dict:
        data = {"city": self.city, "type": self.activity}
        data.update(self.route.to_dict())
        data["label"] = self.label
        data["narrative"] = self.narrative
        return data

    def to_gpx(self, name: Optional[str] = None) -> str:
        return create_gpx(self.route, name or self.label)


def plan_trip(
    city: str,
    activity: str,
    provider: Optional[RoutingProvider] = None,
    seed: Optional[int] = None
) -> TripPlan:
    """
    Planera en resa från en ort

    Args:
        city: Ortnamn
        activity: "cycling"/"hiking" (eller "bike"/"trek")
        provider: Routing-provider
        seed: Seed för variation

    Returns:
        TripPlan

    Raises:
        ValueError vid ogiltigt ortnamn
        UnknownTripTypeError vid okänd aktivitet
        GeocodingError om orten inte hittas
        RoutingError om ingen rutt hittas
    """
    city = (city or "").strip()
    if len(city) < MIN_CITY_LENGTH:
        raise ValueError("city must be at least 2 characters")
    activity = resolve_activity(activity)

    place = geocode_city(city)
    if place is None:
        raise GeocodingError("City not found")

    route = plan_route(place.coordinate, activity, provider=provider, seed=seed)
    logger.info("Resa från %s: %s km per dag", place.name, [round(d, 1) for d in route.day_distances])

    return TripPlan(
        city=city,
        activity=activity,
        label=place.display_name or city,
        route=route,
        narrative=build_narrative(city, activity, route.day_distances)
    )
