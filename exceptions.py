"""
Fel som ruttplaneraren kan kasta
"""

from typing import Optional


class RoutePlannerError(Exception):
    """Basklass för alla fel i ruttplaneraren"""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RoutingError(RoutePlannerError):
    """Ingen kandidat gav en giltig rutt"""

    def __init__(self, message: str, activity: Optional[str] = None, attempts: int = 0) -> None:
        super().__init__(message)
        self.activity = activity
        self.attempts = attempts


class UnknownTripTypeError(RoutingError, ValueError):
    def __init__(self, trip_type: object) -> None:
        super().__init__(f"Unknown trip type: {trip_type}")
        self.trip_type = trip_type


class ProviderError(RoutePlannerError):
    """Transportfel från en routing-provider (behandlas som misslyckad kandidat)"""


class ConfigurationError(RoutePlannerError):
    pass


class GeocodingError(RoutePlannerError):
    pass
