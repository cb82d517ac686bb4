# omwx/signals/alert.py
"""
Alert classification.

The station alert is the maximum of three pillars:
- base: derived from the combined severity score
- wind: maximum gust across METAR and TAF
- snow: blowing snow, or snow combined with low visibility/RVR/ceiling

After escalation the score is raised to the minimum of the final alert's
band so that score and alert never disagree.
"""

import math
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple
from dataclasses import dataclass

from ..reports.models import ParsedObservation
from .severity import MAX_SCORE, score_observation, engine_ice_ops

TAF_WEIGHT = 0.85
ENGINE_ICE_OPS_PRIORITY = 1000


class AlertLevel(Enum):
    """Ordinal alert levels, OK < MED < HIGH < CRIT."""
    OK = "OK"
    MED = "MED"
    HIGH = "HIGH"
    CRIT = "CRIT"

    @property
    def rank(self) -> int:
        return _ALERT_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, AlertLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, AlertLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, AlertLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, AlertLevel):
            return NotImplemented
        return self.rank >= other.rank


_ALERT_RANK = {
    AlertLevel.OK: 0,
    AlertLevel.MED: 1,
    AlertLevel.HIGH: 2,
    AlertLevel.CRIT: 3,
}

# (minimum score, alert), highest first
SCORE_ALERTS: List[Tuple[int, AlertLevel]] = [
    (70, AlertLevel.CRIT),
    (45, AlertLevel.HIGH),
    (20, AlertLevel.MED),
]

# (minimum gust kt, alert), highest first
GUST_ALERTS: List[Tuple[int, AlertLevel]] = [
    (40, AlertLevel.CRIT),
    (30, AlertLevel.HIGH),
    (25, AlertLevel.MED),
]

# Snow pillar thresholds: (vis <= m, rvr <= m, ceiling < ft)
SNOW_CRIT_LIMITS = (500, 300, 500)
SNOW_HIGH_LIMITS = (800, 500, 1000)


@dataclass(frozen=True)
class SeverityAssessment:
    """Score and alert for one report, or combined for a station."""
    score: int
    alert_level: AlertLevel
    base_alert: AlertLevel = AlertLevel.OK
    wind_alert: AlertLevel = AlertLevel.OK
    snow_alert: AlertLevel = AlertLevel.OK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "alert": self.alert_level.value,
            "baseAlert": self.base_alert.value,
            "windAlert": self.wind_alert.value,
            "snowAlert": self.snow_alert.value,
        }


def alert_from_score(score: int) -> AlertLevel:
    for threshold, level in SCORE_ALERTS:
        if score >= threshold:
            return level
    return AlertLevel.OK


def min_score_for_alert(alert: AlertLevel) -> int:
    for threshold, level in SCORE_ALERTS:
        if level is alert:
            return threshold
    return 0


def max_alert(*alerts: Optional[AlertLevel]) -> AlertLevel:
    """Highest of the given alerts; None entries are ignored."""
    best = AlertLevel.OK
    for alert in alerts:
        if alert is not None and alert > best:
            best = alert
    return best


def _min_present(*values: Optional[int]) -> Optional[int]:
    present = [v for v in values if v is not None]
    return min(present) if present else None


def wind_pillar_alert(metar: ParsedObservation, taf: ParsedObservation) -> AlertLevel:
    gust = max(metar.gust_kt or 0, taf.gust_kt or 0)
    for threshold, level in GUST_ALERTS:
        if gust >= threshold:
            return level
    return AlertLevel.OK


def _below_snow_limits(
    limits: Tuple[int, int, int],
    visibility_m: Optional[int],
    rvr_m: Optional[int],
    ceiling_ft: Optional[int],
) -> bool:
    vis_limit, rvr_limit, ceiling_limit = limits
    return (
        (visibility_m is not None and visibility_m <= vis_limit)
        or (rvr_m is not None and rvr_m <= rvr_limit)
        or (ceiling_ft is not None and ceiling_ft < ceiling_limit)
    )


def snow_pillar_alert(metar: ParsedObservation, taf: ParsedObservation) -> AlertLevel:
    """
    Snow escalation over both reports.

    Blowing snow anywhere is CRIT. Otherwise snow is graded by the worst
    visibility, RVR and ceiling across METAR and TAF.
    """
    if metar.has("BLSN") or taf.has("BLSN"):
        return AlertLevel.CRIT
    if not (metar.has("SN") or taf.has("SN")):
        return AlertLevel.OK

    visibility_m = _min_present(metar.visibility_m, taf.visibility_m)
    rvr_m = _min_present(metar.rvr_m, taf.rvr_m)
    ceiling_ft = _min_present(metar.ceiling_ft, taf.ceiling_ft)

    if _below_snow_limits(SNOW_CRIT_LIMITS, visibility_m, rvr_m, ceiling_ft):
        return AlertLevel.CRIT
    if _below_snow_limits(SNOW_HIGH_LIMITS, visibility_m, rvr_m, ceiling_ft):
        return AlertLevel.HIGH
    return AlertLevel.MED


def assess_observation(obs: ParsedObservation) -> SeverityAssessment:
    """Score and base alert for a single report."""
    score = score_observation(obs)
    alert = alert_from_score(score)
    return SeverityAssessment(score=score, alert_level=alert, base_alert=alert)


def combined_score(metar_score: int, taf_score: int, ice_ops: bool = False) -> int:
    """METAR outweighs TAF: max(metar, floor(taf * 0.85)), 100 under engine ice ops."""
    if ice_ops:
        return MAX_SCORE
    return max(metar_score, int(math.floor(taf_score * TAF_WEIGHT)))


def classify_station(
    metar: ParsedObservation,
    taf: ParsedObservation,
    metar_score: Optional[int] = None,
    taf_score: Optional[int] = None,
) -> SeverityAssessment:
    """
    Combined station severity.

    Args:
        metar: Parsed METAR (may be empty)
        taf: Parsed TAF (may be empty)
        metar_score: Precomputed METAR score (computed when omitted)
        taf_score: Precomputed TAF score (computed when omitted)

    Returns:
        SeverityAssessment with the escalated alert and clamped score
    """
    if metar_score is None:
        metar_score = score_observation(metar)
    if taf_score is None:
        taf_score = score_observation(taf)

    score = combined_score(metar_score, taf_score, engine_ice_ops(metar))

    base = alert_from_score(score)
    wind = wind_pillar_alert(metar, taf)
    snow = snow_pillar_alert(metar, taf)
    alert = max_alert(base, wind, snow)

    return SeverityAssessment(
        score=max(score, min_score_for_alert(alert)),
        alert_level=alert,
        base_alert=base,
        wind_alert=wind,
        snow_alert=snow,
    )


def station_priorities(metar_score: int, taf_score: int, ice_ops: bool) -> Tuple[int, int]:
    """(metar_priority, taf_priority) sort keys; engine ice ops pins the station."""
    metar_priority = ENGINE_ICE_OPS_PRIORITY if ice_ops else metar_score
    return metar_priority, taf_score
