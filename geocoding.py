"""
Geokodningsfunktioner för att konvertera ortnamn till koordinater
"""

import logging
import streamlit as st
import requests
import time
from typing import Optional

from config import (
    CACHE_TTL,
    GEOCODING_TIMEOUT,
    NOMINATIM_BASE_URL,
    NOMINATIM_DELAY,
    NOMINATIM_USER_AGENT,
)
from models import Coordinate, Place

logger = logging.getLogger(__name__)


def short_city_name(display_name: Optional[str]) -> str:
    """'Paris, Île-de-France, France' -> 'Paris'"""
    return (display_name or "").split(",")[0].strip()


@st.cache_data(ttl=CACHE_TTL)
def geocode_city(query: str) -> Optional[Place]:
    """
    Geokoda ett ortnamn med Nominatim

    Args:
        query: Ort att söka efter

    Returns:
        Place eller None om orten inte hittas eller vid fel
    """
    url = f"{NOMINATIM_BASE_URL}/search"
    params = {
        "q": query,
        "format": "json",
        "limit": 1
    }
    headers = {"User-Agent": NOMINATIM_USER_AGENT}

    try:
        response = requests.get(url, params=params, headers=headers, timeout=GEOCODING_TIMEOUT)
        time.sleep(NOMINATIM_DELAY)  # Rate limiting för Nominatim
    except requests.RequestException as e:
        logger.warning("Geokodningsfel för %r: %s", query, e)
        return None

    if response.status_code != 200:
        logger.warning("Nominatim svarade %s för %r", response.status_code, query)
        return None

    try:
        data = response.json()
        first = data[0] if data else None
        if not first:
            return None
        display_name = first.get("display_name") or query
        return Place(
            name=short_city_name(display_name),
            display_name=display_name,
            coordinate=Coordinate.from_lat_lon(float(first["lat"]), float(first["lon"]))
        )
    except (ValueError, KeyError, TypeError, IndexError) as e:
        logger.warning("Oväntat svar från Nominatim för %r: %s", query, e)
        return None
