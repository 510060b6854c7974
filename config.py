"""
Konfiguration och konstanter för ruttplaneraren
"""

import os

# API URLs
ORS_BASE_URL = os.environ.get("ORS_BASE_URL", "https://api.openrouteservice.org/v2")
NOMINATIM_BASE_URL = "https://nominatim.openstreetmap.org"
NOMINATIM_USER_AGENT = "TravelPlannerMVP/1.0 (edu)"

# Nätverk
ORS_TIMEOUT = float(os.environ.get("ORS_TIMEOUT", "30"))  # sekunder per anrop
GEOCODING_TIMEOUT = 10
NOMINATIM_DELAY = 1.0  # Rate limiting för Nominatim

# ORS-profiler per aktivitet
ORS_PROFILES = {
    "cycling": "cycling-regular",
    "hiking": "foot-hiking",
}

# Gamla namn på trip-typer
ACTIVITY_ALIASES = {
    "bike": "cycling",
    "trek": "hiking",
}

# Cykel: två dagar, stad till stad
CYCLING_MAX_DAY_KM = 60.0
CYCLING_DAYS = 2
CYCLING_MIN_TOTAL_KM = 30.0
CYCLING_MAX_TOTAL_KM = 140.0
CYCLING_BEARING_OFFSETS = [0, 30, -30, 60, -60, 90, -90, 120, -120]
CYCLING_DISTANCES_KM = [110, 100, 90, 80, 70, 60, 120, 95, 85]  # fågelvägen
CYCLING_LOOP_LENGTHS_M = [120_000, 100_000, 80_000, 60_000]
CYCLING_LOOP_TARGETS_KM = [100, 90, 110, 80, 70]

# Vandring: en dag, slinga
HIKING_MAX_DAY_KM = 15.0
HIKING_MIN_TOTAL_KM = 5.0
HIKING_MAX_TOTAL_KM = 15.5  # liten marginal över 15 km
HIKING_LOOP_LENGTHS_M = [9_000, 11_000, 13_000, 7_000, 15_000]
HIKING_SEEDS_PER_LENGTH = 5
LOOP_CLOSURE_TOLERANCE_M = 50.0

# Snappning till vägnätet
START_SNAP_RADII = [500, 1000, 2000, 5000]
DEFAULT_SNAP_RADII = [500, 1000, 2000, 5000, 10000]

# ORS felkod: ingen routbar punkt inom radien
ORS_NO_ROUTABLE_POINT = 2010
ROUND_TRIP_MIN_POINTS = 4

# Sökning
MAX_RANDOM_SEED = 10_000
ROUTE_SEARCH_BUDGET = float(os.environ.get("ROUTE_SEARCH_BUDGET", "180"))  # sekunder

EARTH_RADIUS_KM = 6371.0

# Cache-inställningar
CACHE_TTL = 3600  # 1 timme
