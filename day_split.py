"""
Fördelning av total distans på dagar
"""

import logging
from typing import List, Optional

from config import CYCLING_MAX_DAY_KM

logger = logging.getLogger(__name__)


def split_cycling_days(total_km: float, max_day_km: float = CYCLING_MAX_DAY_KM) -> Optional[List[float]]:
    """
    Dela en cykelrutt på två dagar, jämnt men aldrig över dagstaket

    Distans över 2 x dagstaket rapporteras inte; dagarna summerar då till
    taket och inte till ruttens faktiska längd.

    Args:
        total_km: Ruttens totala distans
        max_day_km: Max km per dag

    Returns:
        [dag1, dag2] eller None om uppdelningen inte går
    """
    capped_total = min(total_km, max_day_km * 2)
    if capped_total < total_km:
        logger.debug("Kapar %.1f km till %.1f km vid dagsuppdelning", total_km, capped_total)

    day1 = min(capped_total / 2, max_day_km)
    day2 = min(capped_total - day1, max_day_km)
    if day1 <= 0 or day2 <= 0:
        return None
    return [day1, day2]
