# omwx/reports/extract.py
"""
Field extraction from METAR/TAF token streams.

NOTE: Every extractor is total. A field that cannot be found is returned
as None (or an empty set); malformed groups are skipped, never raised.

Each extractor has two forms:
- *_from_tokens(tokens): works on an already tokenized report
- extract_*(text): convenience wrapper that tokenizes first
"""

import re
from typing import Optional, Tuple, FrozenSet, Set, Iterable

from .models import (
    RawReport,
    ReportKind,
    ParsedObservation,
    Token,
    TokenKind,
    Wind,
    empty_observation,
)
from .tokenizer import tokenize

VISIBILITY_KINDS = (TokenKind.CAVOK, TokenKind.VISIBILITY_M, TokenKind.VISIBILITY_SM)
CEILING_COVERS = frozenset({"BKN", "OVC", "VV"})

# Codes matched by substring containment inside isolated weather tokens,
# so combined groups such as -RASN or SHRASN raise every phenomenon.
SUBSTRING_HAZARDS: Tuple[str, ...] = (
    "FZFG", "FZRA", "FZDZ",
    "BLSN", "DRSN", "SHSN",
    "SN", "RA", "DZ", "FG", "BR",
    "GR", "GS", "PL", "SG", "SQ",
)

# Individually prohibit takeoff (OM-A 8.3.8.7). Exact-token list: light
# intensities such as -FZRA and -GR do not match here.
HEAVY_PRECIP_TOKENS = frozenset({"+SN", "+GS", "+SG", "+PL", "FZRA", "+FZRA", "GR", "+GR"})

THUNDERSTORM_RE = re.compile(r"^(?:[+-]?TS|VCTS)")
CONVECTIVE_CLOUD_SUFFIXES = ("CB", "TCU")


def _first_value(token: Token) -> Optional[int]:
    return token.values[0] if token.values else None


# ============================================================
# VISIBILITY / RVR / CEILING
# ============================================================

def visibility_from_tokens(tokens: Iterable[Token]) -> Optional[int]:
    """Worst (minimum) prevailing visibility in metres, over all groups."""
    values = [
        _first_value(t) for t in tokens
        if t.kind in VISIBILITY_KINDS and _first_value(t) is not None
    ]
    return min(values) if values else None


def rvr_values_from_tokens(tokens: Iterable[Token]) -> Tuple[int, ...]:
    """All RVR values in metres, two per group when a variability range is given."""
    values = []
    for token in tokens:
        if token.kind is TokenKind.RVR:
            values.extend(v for v in token.values if v is not None)
    return tuple(values)


def rvr_from_tokens(tokens: Iterable[Token]) -> Optional[int]:
    values = rvr_values_from_tokens(tokens)
    return min(values) if values else None


def ceiling_from_tokens(tokens: Iterable[Token]) -> Optional[int]:
    """Lowest BKN/OVC/VV base in feet. FEW/SCT never form a ceiling."""
    bases = [
        _first_value(t) for t in tokens
        if t.kind is TokenKind.CLOUD and t.detail in CEILING_COVERS
    ]
    return min(bases) if bases else None


# ============================================================
# WIND / TEMPERATURE
# ============================================================

def _knot_winds(tokens: Iterable[Token]) -> Tuple[Token, ...]:
    return tuple(t for t in tokens if t.kind is TokenKind.WIND and t.detail == "KT")


def wind_from_tokens(tokens: Iterable[Token]) -> Optional[Wind]:
    """Prevailing wind: the first knot wind group in the report."""
    winds = _knot_winds(tokens)
    if not winds:
        return None
    direction, speed, gust = winds[0].values
    return Wind(direction_deg=direction, speed_kt=speed, gust_kt=gust, token=winds[0].text)


def gust_from_tokens(tokens: Iterable[Token]) -> Optional[int]:
    """Maximum gust across every wind group (all TAF periods included)."""
    gusts = [t.values[2] for t in _knot_winds(tokens) if t.values[2] is not None]
    return max(gusts) if gusts else None


def temperature_from_tokens(tokens: Iterable[Token]) -> Optional[int]:
    for token in tokens:
        if token.kind is TokenKind.TEMPERATURE:
            return token.values[0]
    return None


# ============================================================
# HAZARDS
# ============================================================

def is_current_weather(token: Token) -> bool:
    """Isolated weather token describing present or forecast weather (not RE recent)."""
    return token.kind is TokenKind.WEATHER and not token.text.startswith("RE")


def token_hazards(token: Token) -> FrozenSet[str]:
    """
    Hazard codes raised by a single token.

    Only WEATHER and CLOUD tokens can raise hazards; header keywords and the
    station identifier are never WEATHER tokens, so an identifier ending in
    "TS" cannot raise a thunderstorm.
    """
    codes: Set[str] = set()

    if token.kind is TokenKind.CLOUD:
        if token.text.endswith(CONVECTIVE_CLOUD_SUFFIXES):
            codes.add("CB")
        return frozenset(codes)

    if not is_current_weather(token):
        return frozenset()

    word = token.text
    for code in SUBSTRING_HAZARDS:
        if code in word:
            codes.add(code)

    if THUNDERSTORM_RE.match(word):
        codes.add("TS")

    if any(suffix in word for suffix in CONVECTIVE_CLOUD_SUFFIXES):
        codes.add("CB")

    bare = word.lstrip("+-")
    if bare.startswith("VC"):
        bare = bare[2:]
    if bare == "VA":
        codes.add("VA")

    return frozenset(codes)


def hazards_from_tokens(tokens: Iterable[Token]) -> FrozenSet[str]:
    hazards: Set[str] = set()
    for token in tokens:
        hazards |= token_hazards(token)
    return frozenset(hazards)


def tokens_with_hazard(tokens: Iterable[Token], *codes: str) -> Tuple[Token, ...]:
    """Tokens that raised any of the given hazard codes, in report order."""
    wanted = set(codes)
    return tuple(t for t in tokens if token_hazards(t) & wanted)


def heavy_precip_from_tokens(tokens: Iterable[Token]) -> FrozenSet[str]:
    return frozenset(
        t.text for t in tokens
        if is_current_weather(t) and t.text in HEAVY_PRECIP_TOKENS
    )


# ============================================================
# TEXT-LEVEL WRAPPERS
# ============================================================

def extract_visibility(text: str) -> Optional[int]:
    return visibility_from_tokens(tokenize(text))


def extract_rvr(text: str) -> Optional[int]:
    return rvr_from_tokens(tokenize(text))


def extract_ceiling(text: str) -> Optional[int]:
    return ceiling_from_tokens(tokenize(text))


def extract_gust(text: str) -> Optional[int]:
    return gust_from_tokens(tokenize(text))


def extract_wind(text: str) -> Optional[Wind]:
    return wind_from_tokens(tokenize(text))


def extract_temperature(text: str) -> Optional[int]:
    return temperature_from_tokens(tokenize(text))


def extract_hazards(text: str) -> FrozenSet[str]:
    return hazards_from_tokens(tokenize(text))


def extract_heavy_precip(text: str) -> FrozenSet[str]:
    return heavy_precip_from_tokens(tokenize(text))


# ============================================================
# OBSERVATION
# ============================================================

def parse_tokens(
    kind: ReportKind,
    tokens: Tuple[Token, ...],
    text: str = "",
    station_icao: Optional[str] = None,
) -> ParsedObservation:
    """Build a ParsedObservation from a token stream."""
    return ParsedObservation(
        kind=kind,
        station_icao=station_icao,
        text=text,
        visibility_m=visibility_from_tokens(tokens),
        rvr_m=rvr_from_tokens(tokens),
        rvr_present=any(t.kind is TokenKind.RVR for t in tokens),
        ceiling_ft=ceiling_from_tokens(tokens),
        gust_kt=gust_from_tokens(tokens),
        wind=wind_from_tokens(tokens),
        temperature_c=temperature_from_tokens(tokens),
        hazards=hazards_from_tokens(tokens),
        heavy_precip_tokens=heavy_precip_from_tokens(tokens),
        tokens=tokens,
    )


def parse_observation(report: Optional[RawReport], kind: Optional[ReportKind] = None) -> ParsedObservation:
    """
    Extract every field from one report.

    Args:
        report: Raw METAR or TAF; None stands for a report that was not supplied
        kind: Report kind to use for the empty observation when report is None

    Returns:
        ParsedObservation (all fields absent for a missing report)
    """
    if report is None:
        return empty_observation(kind or ReportKind.METAR)
    return parse_tokens(report.kind, tokenize(report.text), report.text, report.station_icao)
