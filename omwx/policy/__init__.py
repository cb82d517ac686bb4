# Policy module - OM-A/OM-B advisory evaluation
from .models import PolicyAdvisory, RunwayCondition, CrosswindAssessment
from .bands import Band, LVO_BANDS, CAT_BANDS, lvo_band_key, cat_band_key
from .crosswind import (
    CROSSWIND_LIMITS_KT,
    angle_difference,
    crosswind_component,
    crosswind_limit_kt,
    assess_crosswind,
)
from .engine import evaluate_policy, evaluate_policy_sets, estimate_runway_condition
from .minima import (
    Minima,
    MinimaBand,
    MinimaEntry,
    MinimaTable,
    MinimaDataError,
    minima_band,
    minima_from_mapping,
    load_minima_table,
)

__all__ = [
    "PolicyAdvisory",
    "RunwayCondition",
    "CrosswindAssessment",
    "Band",
    "LVO_BANDS",
    "CAT_BANDS",
    "lvo_band_key",
    "cat_band_key",
    "CROSSWIND_LIMITS_KT",
    "angle_difference",
    "crosswind_component",
    "crosswind_limit_kt",
    "assess_crosswind",
    "evaluate_policy",
    "evaluate_policy_sets",
    "estimate_runway_condition",
    "Minima",
    "MinimaBand",
    "MinimaEntry",
    "MinimaTable",
    "MinimaDataError",
    "minima_band",
    "minima_from_mapping",
    "load_minima_table",
]
