# omwx/policy/engine.py
"""
OM policy evaluator.

Evaluates a set of reports (METAR and/or TAF) into a PolicyAdvisory. Every
flag is decided from the observations first; evidence for the flag is
recorded afterwards and never read back.

Evaluated sets:
- combined: METAR and TAF together
- METAR only / TAF only: one report, the other omitted
"""

from typing import Optional, List, Tuple, Sequence, Callable, FrozenSet

from ..reports.models import ParsedObservation, Token, TokenKind
from ..reports.extract import (
    HEAVY_PRECIP_TOKENS,
    VISIBILITY_KINDS,
    is_current_weather,
    tokens_with_hazard,
)
from ..runways.geometry import RunwayEnd
from ..evidence.trail import TrailBuilder
from .bands import (
    LVO_BANDS,
    CAT_BANDS,
    RVR_REPORTING_BAND,
    band_by_key,
    lvo_band_key,
    cat_band_key,
)
from .crosswind import RWYCC_BY_CONDITION, assess_crosswind
from .models import PolicyAdvisory, RunwayCondition

# Runway condition estimate, first match wins
RUNWAY_CONDITION_LADDER: List[Tuple[RunwayCondition, Tuple[str, ...]]] = [
    (RunwayCondition.SEVERE, ("FZRA", "FZDZ", "PL", "GR")),
    (RunwayCondition.CONTAM, ("SN", "SG", "GS", "BLSN", "DRSN", "SHSN")),
    (RunwayCondition.WET, ("RA", "DZ")),
]

NO_OPS_RWYCC = 3
COLD_CORRECTION_MAX_C = 0


def _evaluated(*observations: Optional[ParsedObservation]) -> List[ParsedObservation]:
    return [o for o in observations if o is not None and not o.is_empty]


def _min_present(values) -> Optional[int]:
    present = [v for v in values if v is not None]
    return min(present) if present else None


def estimate_runway_condition(hazards: FrozenSet[str]) -> Tuple[RunwayCondition, Tuple[str, ...]]:
    """
    Runway condition from weather-code proxies.

    Returns:
        (condition, hazard codes that selected it)
    """
    for condition, codes in RUNWAY_CONDITION_LADDER:
        matched = tuple(c for c in codes if c in hazards)
        if matched:
            return condition, matched
    return RunwayCondition.DRY, ()


def _value_tokens(
    obs: ParsedObservation,
    kinds: Sequence[TokenKind],
    predicate: Callable[[int], bool],
) -> Tuple[Token, ...]:
    """Tokens of the given kinds carrying at least one value satisfying predicate."""
    return tuple(
        t for t in obs.tokens
        if t.kind in kinds and any(v is not None and predicate(v) for v in t.values)
    )


def _record_values(
    trail: TrailBuilder,
    flag: str,
    sources: Sequence[ParsedObservation],
    kinds: Sequence[TokenKind],
    predicate: Callable[[int], bool],
    threshold: str,
):
    """One evidence item per source whose own value crosses the threshold."""
    for obs in sources:
        tokens = _value_tokens(obs, kinds, predicate)
        if tokens:
            trail.add(flag, obs, tokens, threshold)


def _record_hazard(
    trail: TrailBuilder,
    flag: str,
    sources: Sequence[ParsedObservation],
    codes: Sequence[str],
    threshold: str,
):
    for obs in sources:
        tokens = tokens_with_hazard(obs.tokens, *codes)
        if tokens:
            trail.add(flag, obs, tokens, threshold)


def _prevailing_wind_source(
    metar: Optional[ParsedObservation],
    taf: Optional[ParsedObservation],
) -> Optional[ParsedObservation]:
    """METAR wind when a METAR is evaluated, else the TAF's prevailing group."""
    if metar is not None and not metar.is_empty:
        return metar
    if taf is not None and not taf.is_empty:
        return taf
    return None


def _wind_token(obs: ParsedObservation) -> Tuple[Token, ...]:
    for token in obs.tokens_of(TokenKind.WIND):
        if token.detail == "KT":
            return (token,)
    return ()


def evaluate_policy(
    metar: Optional[ParsedObservation] = None,
    taf: Optional[ParsedObservation] = None,
    runways: Sequence[RunwayEnd] = (),
) -> PolicyAdvisory:
    """
    Evaluate OM-A/OM-B advisories over the supplied reports.

    Args:
        metar: Parsed METAR, or None to leave it out of the evaluated set
        taf: Parsed TAF, or None to leave it out of the evaluated set
        runways: Runway ends for the station (crosswind only)

    Returns:
        PolicyAdvisory with its evidence trail
    """
    sources = _evaluated(metar, taf)
    trail = TrailBuilder()

    worst_vis = _min_present(o.visibility_m for o in sources)
    rvr_min = _min_present(o.rvr_m for o in sources)
    rvr_present = any(o.rvr_present for o in sources)
    reference = rvr_min if rvr_present else worst_vis
    reference_kinds = (TokenKind.RVR,) if rvr_present else VISIBILITY_KINDS
    reference_name = "RVR min" if rvr_present else "visibility"

    hazards: FrozenSet[str] = frozenset().union(*(o.hazards for o in sources))
    heavy: FrozenSet[str] = frozenset().union(*(o.heavy_precip_tokens for o in sources))

    # --- Takeoff prohibition (unconditional) ---
    to_prohibited = bool(heavy)
    if to_prohibited:
        for obs in sources:
            tokens = tuple(
                t for t in obs.tokens
                if is_current_weather(t) and t.text in HEAVY_PRECIP_TOKENS
            )
            if tokens:
                trail.add("toProhibited", obs, tokens,
                          "heavy precipitation: " + " ".join(sorted(HEAVY_PRECIP_TOKENS)))

    # --- Low-visibility operations ---
    lvto = reference is not None and reference < band_by_key(LVO_BANDS, "lvto").threshold
    lvp = reference is not None and reference < band_by_key(LVO_BANDS, "lvp").threshold
    lvto_qual = rvr_min is not None and rvr_min < band_by_key(LVO_BANDS, "lvto150").threshold
    rvr125 = rvr_min is not None and rvr_min < band_by_key(LVO_BANDS, "rvr125").threshold
    lvo_band = lvo_band_key(reference, rvr_min)

    for flag, key, value, is_rvr_only in (
        ("rvr125", "rvr125", rvr125, True),
        ("lvtoCrewQualRequired", "lvto150", lvto_qual, True),
        ("lvp", "lvp", lvp, False),
        ("lvto", "lvto", lvto, False),
    ):
        if not value:
            continue
        band = band_by_key(LVO_BANDS, key)
        if is_rvr_only:
            _record_values(trail, flag, sources, (TokenKind.RVR,),
                           lambda v, t=band.threshold: v < t, band.description)
        else:
            _record_values(trail, flag, sources, reference_kinds,
                           lambda v, t=band.threshold: v < t,
                           f"{reference_name} {band.description}")

    rvr_reporting_required = (
        worst_vis is not None and worst_vis < RVR_REPORTING_BAND.threshold and not rvr_present
    )
    if rvr_reporting_required:
        _record_values(trail, "rvrReportingRequired", sources, VISIBILITY_KINDS,
                       lambda v: v < RVR_REPORTING_BAND.threshold, RVR_REPORTING_BAND.description)

    # --- Approach category (tightest only) ---
    cat_band = cat_band_key(rvr_min)
    if cat_band:
        band = band_by_key(CAT_BANDS, cat_band)
        flag = {"cat3min": "cat3BelowMin", "cat3only": "cat3Only", "cat2plus": "cat2Plus"}[cat_band]
        _record_values(trail, flag, sources, (TokenKind.RVR,),
                       lambda v: v < band.threshold, band.description)

    # --- Runway condition ---
    condition, condition_codes = estimate_runway_condition(hazards)
    rwycc = RWYCC_BY_CONDITION[condition]
    no_ops_likely = rwycc < NO_OPS_RWYCC
    if no_ops_likely:
        _record_hazard(trail, "noOpsLikely", sources, condition_codes,
                       f"estimated RWYCC {rwycc} < {NO_OPS_RWYCC} ({condition.value})")

    # --- Crosswind ---
    wind_source = _prevailing_wind_source(metar, taf)
    crosswind = assess_crosswind(wind_source.wind if wind_source else None, runways, rwycc)
    crosswind_exceed = crosswind.exceed if crosswind else None
    if crosswind_exceed:
        width = "narrow" if crosswind.narrow else "standard"
        trail.add("crosswindExceed", wind_source, _wind_token(wind_source),
                  f"crosswind {crosswind.crosswind_kt} kt > {crosswind.limit_kt} kt "
                  f"(RWYCC {rwycc}, {width} runway)")

    # --- Hazard flags ---
    volcanic_ash = "VA" in hazards
    if volcanic_ash:
        _record_hazard(trail, "volcanicAsh", sources, ("VA",), "volcanic ash reported")

    metar_evaluated = metar is not None and not metar.is_empty
    cold_correction = (
        metar_evaluated
        and metar.temperature_c is not None
        and metar.temperature_c <= COLD_CORRECTION_MAX_C
    )
    if cold_correction:
        _record_values(trail, "coldCorrection", [metar], (TokenKind.TEMPERATURE,),
                       lambda v: v <= COLD_CORRECTION_MAX_C,
                       f"METAR temperature <= {COLD_CORRECTION_MAX_C} C")

    ts_or_cb = "TS" in hazards or "CB" in hazards
    if ts_or_cb:
        _record_hazard(trail, "tsOrCb", sources, ("TS", "CB"), "thunderstorm or convective cloud")

    return PolicyAdvisory(
        to_prohibited=to_prohibited,
        heavy_precip_matches=heavy,
        lvto=lvto,
        lvp=lvp,
        lvto_crew_qual_required=lvto_qual,
        rvr_below_absolute_min=rvr125,
        rvr_reporting_required=rvr_reporting_required,
        lvo_band=lvo_band,
        cat2_plus=cat_band == "cat2plus",
        cat3_only=cat_band == "cat3only",
        cat3_below_min=cat_band == "cat3min",
        cat_band=cat_band,
        runway_condition_estimate=condition,
        rwycc_estimate=rwycc,
        no_ops_likely=no_ops_likely,
        crosswind_exceed=crosswind_exceed,
        crosswind=crosswind,
        ts_or_cb=ts_or_cb,
        volcanic_ash=volcanic_ash,
        cold_correction=cold_correction,
        worst_visibility_m=worst_vis,
        rvr_min_m=rvr_min,
        explanation=trail.build(),
    )


def evaluate_policy_sets(
    metar: ParsedObservation,
    taf: ParsedObservation,
    runways: Sequence[RunwayEnd] = (),
) -> Tuple[PolicyAdvisory, PolicyAdvisory, PolicyAdvisory]:
    """(combined, METAR only, TAF only) advisories for one station."""
    return (
        evaluate_policy(metar, taf, runways),
        evaluate_policy(metar, None, runways),
        evaluate_policy(None, taf, runways),
    )
