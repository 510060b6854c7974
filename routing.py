"""
Huvudsaklig routing-modul: kandidatsökning per aktivitet och fasaden plan_route

Sökningen är first-fit: kandidaterna provas i fast preferensordning och den
första som uppfyller alla villkor returneras.
"""

import dataclasses
import logging
import random
import time
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from config import (
    CYCLING_BEARING_OFFSETS,
    CYCLING_DISTANCES_KM,
    CYCLING_LOOP_LENGTHS_M,
    CYCLING_LOOP_TARGETS_KM,
    HIKING_LOOP_LENGTHS_M,
    HIKING_SEEDS_PER_LENGTH,
    LOOP_CLOSURE_TOLERANCE_M,
    MAX_RANDOM_SEED,
    ROUTE_SEARCH_BUDGET,
    START_SNAP_RADII,
)
from day_split import split_cycling_days
from exceptions import ProviderError, RoutingError
from models import (
    ACTIVITY_PROFILES,
    CYCLING,
    HIKING,
    ActivityProfile,
    CandidateAttempt,
    Coordinate,
    RoundTripResult,
    RouteResult,
    resolve_activity,
)
from routing_providers import FAILURE_UNREACHABLE, OpenRouteServiceProvider, RoutingProvider
from utils import (
    closure_distance_m,
    cumulative_distances_km,
    destination_point,
    normalize_bearing,
    validate_coordinates,
)

logger = logging.getLogger(__name__)

BIKE_ROUTING_FAILED = "Routing error (bike city-to-city)"
TREK_ROUTE_TOO_SHORT = "Trek route too short"

PHASE_DIRECT = "direct"
PHASE_LOOP = "loop"
PHASE_HIKING = "hiking"

Attempt = Callable[[CandidateAttempt], Optional[RouteResult]]


class SearchBudget:
    """Tidsbudget för en hel sökning"""

    def __init__(self, seconds: Optional[float]):
        self.deadline = None if seconds is None else time.monotonic() + seconds

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline


# ---------- kandidater ----------

def bearing_candidates(seed: int) -> List[float]:
    """Bäringar runt en slumpad basriktning"""
    base = seed % 360
    return [normalize_bearing(base + offset) for offset in CYCLING_BEARING_OFFSETS]


def cycling_direct_candidates(seed: int) -> Iterator[CandidateAttempt]:
    bearings = bearing_candidates(seed)
    for distance in CYCLING_DISTANCES_KM:
        for bearing in bearings:
            yield CandidateAttempt(phase=PHASE_DIRECT, distance_km=distance, bearing=bearing, seed=seed)


def cycling_loop_candidates(seed: int) -> Iterator[CandidateAttempt]:
    for length in CYCLING_LOOP_LENGTHS_M:
        for target in CYCLING_LOOP_TARGETS_KM:
            yield CandidateAttempt(phase=PHASE_LOOP, loop_length_m=length, target_km=target, seed=seed)


def hiking_candidates(seed: int) -> Iterator[CandidateAttempt]:
    for length in HIKING_LOOP_LENGTHS_M:
        for offset in range(HIKING_SEEDS_PER_LENGTH):
            yield CandidateAttempt(phase=PHASE_HIKING, loop_length_m=length, seed=seed + offset)


# ---------- villkor ----------

def cycling_day_split(
    total_km: float,
    profile: ActivityProfile = ACTIVITY_PROFILES[CYCLING]
) -> Optional[List[float]]:
    """
    Godkänn en cykelrutt

    Returns:
        Dagsdistanser om rutten är giltig, annars None
    """
    if not profile.in_range(total_km):
        return None
    return split_cycling_days(total_km, profile.max_day_km)


def is_valid_hiking_distance(
    total_km: float,
    profile: ActivityProfile = ACTIVITY_PROFILES[HIKING]
) -> bool:
    return profile.in_range(total_km)


def closest_index(cumulative: Sequence[float], target_km: float) -> int:
    """Index (minst 1) vars ackumulerade distans ligger närmast target_km"""
    idx = 1
    for i in range(1, len(cumulative)):
        if abs(cumulative[i] - target_km) < abs(cumulative[idx] - target_km):
            idx = i
    return idx


def close_loop(path: Sequence[Coordinate]) -> Tuple[List[Coordinate], float]:
    """
    Stäng en slinga visuellt

    Returns:
        (path, glapp i meter). Startpunkten läggs till sist om glappet
        är större än toleransen.
    """
    closure_m = closure_distance_m(path)
    if closure_m <= LOOP_CLOSURE_TOLERANCE_M:
        return list(path), closure_m
    return list(path) + [path[0]], closure_m


# ---------- sökning ----------

def run_search(
    candidates: Iterable[CandidateAttempt],
    attempt: Attempt,
    budget: Optional[SearchBudget] = None
) -> Tuple[Optional[RouteResult], int]:
    """
    Prova kandidater i ordning tills en godkänns

    Args:
        candidates: Kandidater i preferensordning
        attempt: Returnerar en rutt eller None om kandidaten underkänns
        budget: Tidsbudget, kontrolleras före varje kandidat

    Returns:
        (första godkända rutten eller None, antal provade kandidater)
    """
    tried = 0
    for candidate in candidates:
        if budget is not None and budget.expired():
            logger.warning("Sökbudgeten tog slut efter %s kandidater", tried)
            break
        tried += 1
        try:
            result = attempt(candidate)
        except ProviderError as e:
            logger.debug("Kandidat %s: providerfel %s", candidate, e)
            continue
        if result is not None:
            logger.info("Kandidat %s godkänd", candidate)
            return result, tried
    return None, tried


def _snap(
    provider: RoutingProvider,
    profile: str,
    point: Coordinate,
    radii: Optional[Sequence[int]] = None
) -> Coordinate:
    if radii is None:
        snapped = provider.nearest_routable_point(profile, point)
    else:
        snapped = provider.nearest_routable_point(profile, point, radii)
    return snapped if snapped is not None else point


def plan_cycling_route(
    provider: RoutingProvider,
    start: Coordinate,
    seed: int,
    budget_seconds: Optional[float] = ROUTE_SEARCH_BUDGET
) -> RouteResult:
    """
    Planera en tvådagars cykeltur från start till en annan ort

    Fas 1 projicerar mål på olika avstånd och bäringar och ber om en rutt
    dit. Fas 2 ber om en stor slinga och väljer ett mål längs den.

    Args:
        provider: Routing-provider
        start: Startpunkt (lon, lat)
        seed: Styr basbäringen och slingornas form
        budget_seconds: Tidsbudget för hela sökningen, None = obegränsad

    Returns:
        RouteResult med två dagsdistanser

    Raises:
        RoutingError om ingen kandidat godkänns
    """
    profile = ACTIVITY_PROFILES[CYCLING]
    ors_profile = profile.ors_profile
    budget = SearchBudget(budget_seconds)

    origin = _snap(provider, ors_profile, start, START_SNAP_RADII)
    logger.info("Cykelsökning från %s (seed %s)", origin, seed)

    def route_to(target: Coordinate) -> Optional[RouteResult]:
        end = _snap(provider, ors_profile, target)
        result = provider.directions(ors_profile, [origin, end])
        if not result.path_found:
            logger.debug("Ingen rutt till %s (kod %s)", end, result.failure_code)
            return None

        days = cycling_day_split(result.total_km, profile)
        if days is None:
            logger.debug("Rutt på %.1f km underkänd", result.total_km)
            return None

        return RouteResult(
            activity=CYCLING,
            path=result.path,
            day_distances=days,
            start=origin,
            end=end,
            total_km=result.total_km
        )

    def try_direct(candidate: CandidateAttempt) -> Optional[RouteResult]:
        target = destination_point(origin, candidate.distance_km, candidate.bearing)
        return route_to(target)

    loops: Dict[int, RoundTripResult] = {}

    def try_loop(candidate: CandidateAttempt) -> Optional[RouteResult]:
        length = candidate.loop_length_m
        if length not in loops:
            try:
                loops[length] = provider.round_trip(ors_profile, origin, length, seed)
            except ProviderError as e:
                logger.debug("Slinga på %s m: providerfel %s", length, e)
                loops[length] = RoundTripResult(path_found=False, failure_code=FAILURE_UNREACHABLE)

        loop = loops[length]
        if not loop.path_found:
            return None

        cumulative = cumulative_distances_km(loop.path)
        loop_total = cumulative[-1]
        target_km = min(max(candidate.target_km, profile.min_total_km), min(loop_total, profile.max_total_km))
        return route_to(loop.path[closest_index(cumulative, target_km)])

    result, tried = run_search(cycling_direct_candidates(seed), try_direct, budget)
    if result is None:
        logger.info("Direkta kandidater slut efter %s försök, provar slingor", tried)
        result, tried_loops = run_search(cycling_loop_candidates(seed), try_loop, budget)
        tried += tried_loops

    if result is None:
        logger.warning("Ingen cykelrutt hittades efter %s kandidater", tried)
        raise RoutingError(BIKE_ROUTING_FAILED, activity=CYCLING, attempts=tried)

    return dataclasses.replace(result, attempts=tried)


def plan_hiking_route(
    provider: RoutingProvider,
    start: Coordinate,
    seed: int,
    budget_seconds: Optional[float] = ROUTE_SEARCH_BUDGET
) -> RouteResult:
    """
    Planera en vandringsslinga över en dag, start = mål

    Raises:
        RoutingError om ingen slinga hamnar inom distansintervallet
    """
    profile = ACTIVITY_PROFILES[HIKING]
    ors_profile = profile.ors_profile
    budget = SearchBudget(budget_seconds)

    origin = _snap(provider, ors_profile, start, START_SNAP_RADII)
    logger.info("Vandringssökning från %s (seed %s)", origin, seed)

    def try_loop(candidate: CandidateAttempt) -> Optional[RouteResult]:
        loop = provider.round_trip(ors_profile, origin, candidate.loop_length_m, candidate.seed)
        if not loop.path_found:
            return None
        if not is_valid_hiking_distance(loop.total_km, profile):
            logger.debug("Slinga på %.2f km underkänd", loop.total_km)
            return None

        path, closure_m = close_loop(loop.path)
        return RouteResult(
            activity=HIKING,
            path=path,
            day_distances=[loop.total_km],
            start=origin,
            end=origin,
            total_km=loop.total_km,
            closure_meters=round(closure_m)
        )

    result, tried = run_search(hiking_candidates(seed), try_loop, budget)
    if result is None:
        logger.warning("Ingen vandringsslinga hittades efter %s kandidater", tried)
        raise RoutingError(TREK_ROUTE_TOO_SHORT, activity=HIKING, attempts=tried)

    return dataclasses.replace(result, attempts=tried)


_STRATEGIES = {
    CYCLING: plan_cycling_route,
    HIKING: plan_hiking_route,
}


def plan_route(
    start: Sequence[float],
    activity: str,
    provider: Optional[RoutingProvider] = None,
    seed: Optional[int] = None,
    budget_seconds: Optional[float] = ROUTE_SEARCH_BUDGET
) -> RouteResult:
    """
    Planera en rutt för given aktivitet

    Args:
        start: Startpunkt (lon, lat)
        activity: "cycling"/"hiking" (eller "bike"/"trek")
        provider: Routing-provider, standard är OpenRouteService
        seed: Seed för variation, slumpas om den saknas
        budget_seconds: Tidsbudget för sökningen

    Returns:
        RouteResult

    Raises:
        UnknownTripTypeError vid okänd aktivitet
        ValueError om startpunkten ligger utanför giltiga koordinater
        RoutingError om ingen rutt hittas
    """
    activity = resolve_activity(activity)
    start = Coordinate(*start)
    if not validate_coordinates(start.lat, start.lon):
        raise ValueError(f"start is not a valid (lon, lat) coordinate: {tuple(start)}")

    if provider is None:
        provider = OpenRouteServiceProvider()
    if seed is None:
        seed = random.randint(0, MAX_RANDOM_SEED - 1)

    return _STRATEGIES[activity](provider, start, seed, budget_seconds)
