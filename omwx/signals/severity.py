# omwx/signals/severity.py
"""
Severity scoring for a single METAR or TAF.

Additive, capped at 100. Visibility, RVR and ceiling contribute from
ordered band tables (first matching band wins); hazards and gusts add on
top.
"""

from typing import Optional, List, Tuple

from ..reports.models import ParsedObservation

MAX_SCORE = 100

# (upper bound inclusive, points), tightest first
VISIBILITY_POINTS: List[Tuple[int, int]] = [
    (150, 35),
    (175, 30),
    (250, 26),
    (300, 24),
    (500, 18),
    (550, 16),
    (800, 12),
]

RVR_POINTS: List[Tuple[int, int]] = [
    (75, 28),
    (200, 22),
    (300, 18),
    (500, 12),
]

# (upper bound exclusive, points)
CEILING_POINTS: List[Tuple[int, int]] = [
    (500, 22),
    (800, 12),
]

# (lower bound inclusive, points), strongest first
GUST_POINTS: List[Tuple[int, int]] = [
    (40, 10),
    (30, 6),
    (25, 4),
]

# Hazard bonuses are additive, not hierarchical
HAZARD_POINTS: List[Tuple[Tuple[str, ...], int]] = [
    (("TS",), 22),
    (("CB",), 12),
    (("FZFG",), 18),
    (("FG",), 14),
    (("SN",), 10),
    (("RA", "DZ"), 8),
    (("BR",), 6),
]

ENGINE_ICE_OPS_VISIBILITY_M = 150


def _band_points_at_most(value: Optional[int], table: List[Tuple[int, int]]) -> int:
    if value is None:
        return 0
    for bound, points in table:
        if value <= bound:
            return points
    return 0


def _band_points_below(value: Optional[int], table: List[Tuple[int, int]]) -> int:
    if value is None:
        return 0
    for bound, points in table:
        if value < bound:
            return points
    return 0


def _band_points_at_least(value: Optional[int], table: List[Tuple[int, int]]) -> int:
    if value is None:
        return 0
    for bound, points in table:
        if value >= bound:
            return points
    return 0


def hazard_points(obs: ParsedObservation) -> int:
    return sum(
        points for codes, points in HAZARD_POINTS
        if any(obs.has(code) for code in codes)
    )


def score_observation(obs: ParsedObservation) -> int:
    """
    Compute the additive severity score of one report.

    Args:
        obs: Parsed METAR or TAF (an empty observation scores 0)

    Returns:
        Score in 0..100
    """
    score = (
        _band_points_at_most(obs.visibility_m, VISIBILITY_POINTS)
        + _band_points_at_most(obs.rvr_m, RVR_POINTS)
        + _band_points_below(obs.ceiling_ft, CEILING_POINTS)
        + hazard_points(obs)
        + _band_points_at_least(obs.gust_kt, GUST_POINTS)
    )
    return min(MAX_SCORE, score)


def engine_ice_ops(metar: ParsedObservation) -> bool:
    """
    Engine ice operations: METAR visibility <= 150 m with freezing fog.

    Uses the METAR only (operationally "now").
    """
    return (
        metar.visibility_m is not None
        and metar.visibility_m <= ENGINE_ICE_OPS_VISIBILITY_M
        and metar.has("FZFG")
    )
