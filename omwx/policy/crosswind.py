# omwx/policy/crosswind.py
"""
Crosswind geometry (OM-B 1.3.1 company limits, gusts included).

The runway end giving the smallest crosswind component is selected; on a
tie the first end in table order wins. Runways narrower than 45 m use the
narrow-runway column.
"""

import math
from typing import Optional, Dict, Tuple, Sequence

from ..reports.models import Wind
from ..reports.units import round_half_up
from ..runways.geometry import RunwayEnd
from .models import RunwayCondition, CrosswindAssessment

NARROW_RUNWAY_WIDTH_M = 45

# RWYCC -> (standard, narrow) limit in kt. No row below RWYCC 2.
CROSSWIND_LIMITS_KT: Dict[int, Tuple[int, int]] = {
    6: (38, 20),
    5: (35, 20),
    4: (20, 10),
    3: (15, 10),
    2: (10, 5),
}

RWYCC_BY_CONDITION: Dict[RunwayCondition, int] = {
    RunwayCondition.SEVERE: 2,
    RunwayCondition.CONTAM: 3,
    RunwayCondition.WET: 5,
    RunwayCondition.DRY: 6,
}


def angle_difference(a: int, b: int) -> int:
    """Absolute angle between two bearings, wrapped to 0..180."""
    diff = abs(a % 360 - b % 360)
    return 360 - diff if diff > 180 else diff


def crosswind_component(speed_kt: int, wind_dir: int, runway_heading: int) -> int:
    angle = math.radians(angle_difference(wind_dir, runway_heading))
    return round_half_up(speed_kt * abs(math.sin(angle)))


def crosswind_limit_kt(rwycc: int, narrow: bool) -> Optional[int]:
    limits = CROSSWIND_LIMITS_KT.get(rwycc)
    if limits is None:
        return None
    standard, narrow_limit = limits
    return narrow_limit if narrow else standard


def best_runway(wind: Wind, runways: Sequence[RunwayEnd]) -> Optional[Tuple[RunwayEnd, int]]:
    """Runway end with the minimum crosswind, or None without geometry or direction."""
    if wind is None or wind.direction_deg is None or not runways:
        return None

    speed = wind.effective_speed_kt
    best: Optional[Tuple[RunwayEnd, int]] = None
    for runway in runways:
        component = crosswind_component(speed, wind.direction_deg, runway.heading_deg)
        if best is None or component < best[1]:
            best = (runway, component)
    return best


def assess_crosswind(
    wind: Optional[Wind],
    runways: Sequence[RunwayEnd],
    rwycc: int,
) -> Optional[CrosswindAssessment]:
    """
    Crosswind against the company limit for the estimated RWYCC.

    Args:
        wind: Prevailing wind (VRB or missing yields None)
        runways: Candidate runway ends for the station
        rwycc: Estimated runway condition code

    Returns:
        CrosswindAssessment, or None when no crosswind can be computed
    """
    selected = best_runway(wind, runways)
    if selected is None:
        return None

    runway, component = selected
    narrow = runway.width_m < NARROW_RUNWAY_WIDTH_M if runway.width_m is not None else None
    limit = crosswind_limit_kt(rwycc, narrow is True)

    return CrosswindAssessment(
        crosswind_kt=component,
        runway=runway,
        wind_direction_deg=wind.direction_deg,
        wind_speed_used_kt=wind.effective_speed_kt,
        narrow=narrow,
        limit_kt=limit,
        exceed=limit is not None and component > limit,
    )
