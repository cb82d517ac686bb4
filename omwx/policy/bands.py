# omwx/policy/bands.py
"""
Ordered band ladders.

============================================================
SINGLE SOURCE OF TRUTH for every hierarchical threshold.

Each ladder is listed tightest first and evaluated top-down; the first
band whose predicate holds is the only one reported. Both the policy
evaluator and the trigger builder read these lists.
============================================================
"""

from typing import Optional, List, Callable, TypeVar
from dataclasses import dataclass

T = TypeVar("T")


@dataclass(frozen=True)
class Band:
    """One rung of a hierarchical ladder."""
    key: str  # stable machine key, e.g. "lvp"
    label: str  # dashboard trigger label, e.g. "LVP (<400)"
    threshold: int
    description: str  # evidence threshold description


# --- Low-visibility operations (OM-A 8.1.4.4) ---
# rvr125 and lvto150 compare against RVR only; lvp and lvto compare
# against the reference value (RVR when reported, else visibility).
LVO_BANDS: List[Band] = [
    Band("rvr125", "RVR<125", 125, "RVR min < 125 m (below absolute takeoff minimum)"),
    Band("lvto150", "LVTO<150 QUAL", 150, "RVR min < 150 m (LVTO crew qualification)"),
    Band("lvp", "LVP (<400)", 400, "< 400 m (low visibility procedures)"),
    Band("lvto", "LVTO (<550)", 550, "< 550 m (low visibility takeoff)"),
]
RVR_ONLY_LVO_KEYS = frozenset({"rvr125", "lvto150"})

# --- Approach category (OM-A 8.1.4) ---
CAT_BANDS: List[Band] = [
    Band("cat3min", "CAT3<75", 75, "RVR min < 75 m (below CAT III minimum)"),
    Band("cat3only", "CAT3 ONLY <200", 200, "RVR min < 200 m (CAT III only)"),
    Band("cat2plus", "CAT2+ <450", 450, "RVR min < 450 m (CAT II or better)"),
]

RVR_REPORTING_BAND = Band("rvrreq", "RVR REQ (<800)", 800, "visibility < 800 m with no RVR reported")

# --- Dashboard buckets (inclusive, tightest first) ---
VISIBILITY_BUCKETS: List[int] = [150, 175, 250, 300, 500, 550, 800]
RVR_BUCKETS: List[int] = [75, 200, 300, 500]
GUST_BUCKETS: List[int] = [40, 30, 25]  # strongest first, inclusive lower bound
CEILING_TRIGGER_FT = 500


def first_band(bands: List[Band], predicate: Callable[[Band], bool]) -> Optional[Band]:
    """First band (tightest) for which predicate holds."""
    for band in bands:
        if predicate(band):
            return band
    return None


def first_match(values: List[T], predicate: Callable[[T], bool]) -> Optional[T]:
    for value in values:
        if predicate(value):
            return value
    return None


def band_by_key(bands: List[Band], key: Optional[str]) -> Optional[Band]:
    return first_band(bands, lambda b: b.key == key) if key else None


def lvo_band_key(
    reference_m: Optional[int],
    rvr_min_m: Optional[int],
) -> Optional[str]:
    """
    Tightest low-visibility band.

    Args:
        reference_m: RVR minimum when any RVR is reported, else worst visibility
        rvr_min_m: RVR minimum (None when no RVR group)

    Returns:
        Band key or None
    """
    def qualifies(band: Band) -> bool:
        value = rvr_min_m if band.key in RVR_ONLY_LVO_KEYS else reference_m
        return value is not None and value < band.threshold

    band = first_band(LVO_BANDS, qualifies)
    return band.key if band else None


def cat_band_key(rvr_min_m: Optional[int]) -> Optional[str]:
    if rvr_min_m is None:
        return None
    band = first_band(CAT_BANDS, lambda b: rvr_min_m < b.threshold)
    return band.key if band else None
