# omwx/packets/triggers.py
"""
Dashboard trigger tags.

Each trigger carries its source: M (METAR), T (TAF) or MT (both).
Hierarchical groups (LVO, CAT, visibility, RVR, gust) surface only the
tightest band per source, using the ladders in policy.bands.
"""

from typing import Optional, List

from ..reports.models import ParsedObservation
from ..policy.models import PolicyAdvisory
from ..policy.bands import (
    LVO_BANDS,
    CAT_BANDS,
    RVR_REPORTING_BAND,
    VISIBILITY_BUCKETS,
    RVR_BUCKETS,
    GUST_BUCKETS,
    CEILING_TRIGGER_FT,
    first_match,
)
from .models import Trigger

# (label, category, hazard codes)
WEATHER_TRIGGERS = [
    ("TS/CB", "wx", ("TS", "CB")),
    ("FZFG", "wx", ("FZFG",)),
    ("FG", "wx", ("FG",)),
    ("BR", "wx", ("BR",)),
    ("SN", "wx", ("SN",)),
    ("RA", "wx", ("RA", "DZ")),
]

LVO_CATEGORIES = {"rvr125": "stop", "lvto150": "warn", "lvp": "warn", "lvto": "lvto"}
CAT_CATEGORIES = {"cat3min": "stop", "cat3only": "warn", "cat2plus": "warn"}


def trigger_source(in_metar: bool, in_taf: bool) -> Optional[str]:
    if in_metar and in_taf:
        return "MT"
    if in_metar:
        return "M"
    if in_taf:
        return "T"
    return None


def _at_most(value: Optional[int], threshold: int) -> bool:
    return value is not None and value <= threshold


def _gust_band(gust_kt: Optional[int]) -> Optional[int]:
    if gust_kt is None:
        return None
    return first_match(GUST_BUCKETS, lambda g: gust_kt >= g)


class _TriggerList:
    def __init__(self):
        self.items: List[Trigger] = []

    def push(self, label: str, category: str, source: str):
        self.items.append(Trigger(label=label, category=category, source=source))

    def add_by(self, label: str, category: str, in_metar: bool, in_taf: bool):
        source = trigger_source(bool(in_metar), bool(in_taf))
        if source:
            self.push(label, category, source)


def _tightest_bucket(
    triggers: _TriggerList,
    prefix: str,
    category: str,
    buckets: List[int],
    metar_value: Optional[int],
    taf_value: Optional[int],
):
    """Tag only the tightest bucket reached by either report."""
    threshold = first_match(buckets, lambda th: _at_most(metar_value, th) or _at_most(taf_value, th))
    if threshold is not None:
        triggers.add_by(f"{prefix}{threshold}", category,
                        _at_most(metar_value, threshold), _at_most(taf_value, threshold))


def build_triggers(
    metar: ParsedObservation,
    taf: ParsedObservation,
    policy_metar: PolicyAdvisory,
    policy_taf: PolicyAdvisory,
    engine_ice_ops: bool = False,
) -> List[Trigger]:
    """
    Build the ordered trigger list for one station.

    Args:
        metar: Parsed METAR (may be empty)
        taf: Parsed TAF (may be empty)
        policy_metar: Advisory evaluated over the METAR alone
        policy_taf: Advisory evaluated over the TAF alone
        engine_ice_ops: Engine ice operations in force (METAR)

    Returns:
        Triggers in dashboard order
    """
    triggers = _TriggerList()
    pm, pt = policy_metar, policy_taf

    if engine_ice_ops:
        triggers.push("ENG ICE OPS", "eng", "M")

    triggers.add_by("TO PROHIB", "stop", pm.to_prohibited, pt.to_prohibited)

    for band in LVO_BANDS:
        triggers.add_by(band.label, LVO_CATEGORIES[band.key],
                        pm.lvo_band == band.key, pt.lvo_band == band.key)

    triggers.add_by(RVR_REPORTING_BAND.label, "warn",
                    pm.rvr_reporting_required, pt.rvr_reporting_required)

    for band in CAT_BANDS:
        triggers.add_by(band.label, CAT_CATEGORIES[band.key],
                        pm.cat_band == band.key, pt.cat_band == band.key)

    # Crosswind label carries the limit, which can differ between reports
    metar_limit = pm.crosswind_limit_kt if pm.crosswind_exceed else None
    taf_limit = pt.crosswind_limit_kt if pt.crosswind_exceed else None
    if metar_limit is not None and metar_limit == taf_limit:
        triggers.push(f"XWIND>{metar_limit}KT", "warn", "MT")
    else:
        if metar_limit is not None:
            triggers.push(f"XWIND>{metar_limit}KT", "warn", "M")
        if taf_limit is not None:
            triggers.push(f"XWIND>{taf_limit}KT", "warn", "T")

    triggers.add_by("RWYCC<3 likely", "warn", pm.no_ops_likely, pt.no_ops_likely)
    triggers.add_by("VA", "stop", pm.volcanic_ash, pt.volcanic_ash)

    if pm.cold_correction:
        triggers.push("COLD CORR", "warn", "M")

    _tightest_bucket(triggers, "VIS≤", "vis", VISIBILITY_BUCKETS, metar.visibility_m, taf.visibility_m)
    _tightest_bucket(triggers, "RVR≤", "rvr", RVR_BUCKETS, metar.rvr_m, taf.rvr_m)

    triggers.add_by(f"CIG<{CEILING_TRIGGER_FT}", "cig",
                    metar.ceiling_ft is not None and metar.ceiling_ft < CEILING_TRIGGER_FT,
                    taf.ceiling_ft is not None and taf.ceiling_ft < CEILING_TRIGGER_FT)

    metar_gust, taf_gust = _gust_band(metar.gust_kt), _gust_band(taf.gust_kt)
    for threshold in GUST_BUCKETS:
        triggers.add_by(f"GUST≥{threshold}KT", "gust", metar_gust == threshold, taf_gust == threshold)

    for label, category, codes in WEATHER_TRIGGERS:
        triggers.add_by(label, category,
                        any(metar.has(c) for c in codes), any(taf.has(c) for c in codes))

    return triggers.items
