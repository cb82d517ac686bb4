# omwx/reports/units.py
"""
Unit conversions shared by the extractors and the crosswind calculation.
"""

import math
from typing import Optional

METERS_PER_STATUTE_MILE = 1609.34
METERS_PER_FOOT = 0.3048

# "10 km or more" sentinel in ICAO visibility groups
VISIBILITY_SENTINEL = 9999
VISIBILITY_UNLIMITED_M = 10000


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def statute_miles_to_meters(whole: int, numerator: int = 0, denominator: int = 1) -> Optional[int]:
    """
    Convert a (possibly fractional) statute-mile value to metres.

    Returns None for a zero denominator.
    """
    if denominator == 0:
        return None
    miles = whole + numerator / denominator
    return round_half_up(miles * METERS_PER_STATUTE_MILE)


def feet_to_meters(feet: int) -> int:
    return round_half_up(feet * METERS_PER_FOOT)
