# omwx/reports/tokenizer.py
"""
METAR/TAF tokenizer.

Splits a report on whitespace and classifies every token by its whole
shape, producing a typed token stream. Field extraction dispatches on
token kind instead of running independent regexes over the raw string,
so a TAF validity range (3012/3112) or an RVR group (R27/0600) can never
be read as a visibility, and a station identifier can never be read as
weather.

Classification order:
1. Leading header keywords (METAR, SPECI, TAF, AUTO, COR, AMD, CNL, NIL)
2. The station identifier immediately after the header
3. Everything after RMK is REMARK
4. Shape-specific groups (time, validity, wind, RVR, visibility, cloud, ...)
5. Letter-only leftovers of at most 10 characters are WEATHER
"""

import re
from typing import List, Optional, Tuple

from .models import Token, TokenKind, ReportValidationError
from .units import (
    VISIBILITY_SENTINEL,
    VISIBILITY_UNLIMITED_M,
    statute_miles_to_meters,
    feet_to_meters,
)

HEADER_KEYWORDS = frozenset({"METAR", "SPECI", "TAF", "AUTO", "COR", "AMD", "CNL", "NIL"})

# Letter-only words that are never weather phenomena
KEYWORDS = frozenset({
    "METAR", "SPECI", "TAF", "AUTO", "COR", "AMD", "CNL", "NIL",
    "NOSIG", "NSW", "RMK", "WS", "ALL", "RWY", "NDV", "TL", "AT",
})

WEATHER_MAX_LENGTH = 10

# Military aerodrome colour states (BLU, WHT, GRN, YLO1, AMB, RED; BLACK prefix
# when the airfield is closed). Classified as KEYWORD, never WEATHER.
COLOUR_STATE_RE = re.compile(r"^(?:BLACK)?(?:BLU|WHT|GRN|YLO\d?|AMB|RED)\+?$")

_SPLIT_RE = re.compile(r"\S+")

TIME_RE = re.compile(r"^\d{6}Z$")
VALIDITY_RE = re.compile(r"^\d{4}/\d{4}$")
CHANGE_RE = re.compile(r"^(TEMPO|BECMG|INTER|PROB\d{2}|FM\d{4,6})$")
WIND_RE = re.compile(r"^(\d{3}|VRB)(\d{2,3})(?:G(\d{2,3}))?(KT|MPS|KMH)$")
WIND_VARIATION_RE = re.compile(r"^\d{3}V\d{3}$")
VIS_M_RE = re.compile(r"^(\d{4})(N|NE|E|SE|S|SW|W|NW|NDV)?$")
VIS_SM_WHOLE_RE = re.compile(r"^([PM])?(\d{1,2})SM$")
VIS_SM_FRACTION_RE = re.compile(r"^M?(\d{1,2})/(\d{1,2})SM$")
SPLIT_WHOLE_RE = re.compile(r"^\d{1,2}$")
RVR_RE = re.compile(
    r"^R(\d{2}[LRC]?)/([PM])?(\d{4})(?:V([PM])?(\d{4}))?(FT)?(?:/?([UDN]))?(FT)?$"
)
CLOUD_RE = re.compile(r"^(FEW|SCT|BKN|OVC|VV)(\d{3})(CB|TCU)?$")
SKY_CLEAR_RE = re.compile(r"^(NSC|NCD|SKC|CLR)$")
TEMPERATURE_RE = re.compile(r"^(M?\d{2})/(M?\d{2}|//)?$")
PRESSURE_RE = re.compile(r"^([QA])(\d{4})$")
WEATHER_RE = re.compile(r"^[+-]?[A-Z]{2,}$")
STATION_TOKEN_RE = re.compile(r"^[A-Z][A-Z0-9]{3}$")


def _signed(value: str) -> int:
    if value.startswith("M"):
        return -int(value[1:])
    return int(value)


def _split(text: str) -> List[Tuple[str, int, int]]:
    return [(m.group(0), m.start(), m.end()) for m in _SPLIT_RE.finditer(text)]


def _classify(word: str, start: int, end: int) -> Token:
    """Classify one body token (header, station and remarks handled by caller)."""
    if TIME_RE.match(word):
        return Token(TokenKind.TIME, word, start, end)
    if VALIDITY_RE.match(word):
        return Token(TokenKind.VALIDITY, word, start, end)
    if CHANGE_RE.match(word):
        return Token(TokenKind.CHANGE, word, start, end)
    if word == "CAVOK":
        return Token(TokenKind.CAVOK, word, start, end, (VISIBILITY_UNLIMITED_M,))

    m = WIND_RE.match(word)
    if m:
        direction = None if m.group(1) == "VRB" else int(m.group(1))
        gust = int(m.group(3)) if m.group(3) else None
        return Token(TokenKind.WIND, word, start, end,
                     (direction, int(m.group(2)), gust), detail=m.group(4))

    if WIND_VARIATION_RE.match(word):
        return Token(TokenKind.WIND_VARIATION, word, start, end)

    m = RVR_RE.match(word)
    if m:
        in_feet = bool(m.group(6) or m.group(8))
        values = [int(m.group(3))]
        if m.group(5):
            values.append(int(m.group(5)))
        if in_feet:
            values = [feet_to_meters(v) for v in values]
        return Token(TokenKind.RVR, word, start, end, tuple(values), detail=m.group(1))

    m = VIS_M_RE.match(word)
    if m:
        meters = int(m.group(1))
        if meters == VISIBILITY_SENTINEL:
            meters = VISIBILITY_UNLIMITED_M
        return Token(TokenKind.VISIBILITY_M, word, start, end, (meters,))

    m = VIS_SM_WHOLE_RE.match(word)
    if m:
        return Token(TokenKind.VISIBILITY_SM, word, start, end,
                     (statute_miles_to_meters(int(m.group(2))),))

    m = VIS_SM_FRACTION_RE.match(word)
    if m:
        meters = statute_miles_to_meters(0, int(m.group(1)), int(m.group(2)))
        if meters is not None:
            return Token(TokenKind.VISIBILITY_SM, word, start, end, (meters,))
        return Token(TokenKind.UNKNOWN, word, start, end)

    m = CLOUD_RE.match(word)
    if m:
        return Token(TokenKind.CLOUD, word, start, end,
                     (int(m.group(2)) * 100,), detail=m.group(1))

    if SKY_CLEAR_RE.match(word):
        return Token(TokenKind.SKY_CLEAR, word, start, end)

    m = TEMPERATURE_RE.match(word)
    if m:
        dew = m.group(2)
        dewpoint = _signed(dew) if dew and dew != "//" else None
        return Token(TokenKind.TEMPERATURE, word, start, end, (_signed(m.group(1)), dewpoint))

    m = PRESSURE_RE.match(word)
    if m:
        return Token(TokenKind.PRESSURE, word, start, end, (int(m.group(2)),), detail=m.group(1))

    if word in KEYWORDS or COLOUR_STATE_RE.match(word):
        return Token(TokenKind.KEYWORD, word, start, end)

    if len(word) <= WEATHER_MAX_LENGTH and WEATHER_RE.match(word):
        return Token(TokenKind.WEATHER, word, start, end)

    return Token(TokenKind.UNKNOWN, word, start, end)


def _split_statute_miles(words: List[Tuple[str, int, int]], index: int) -> Optional[Token]:
    """Merge "1 1/2SM" (two whitespace tokens) into one visibility token."""
    word, start, _ = words[index]
    if index + 1 >= len(words) or not SPLIT_WHOLE_RE.match(word):
        return None
    fraction, _, end = words[index + 1]
    m = VIS_SM_FRACTION_RE.match(fraction)
    if not m:
        return None
    meters = statute_miles_to_meters(int(word), int(m.group(1)), int(m.group(2)))
    if meters is None:
        return None
    return Token(TokenKind.VISIBILITY_SM, f"{word} {fraction}", start, end, (meters,))


def tokenize(text: str) -> Tuple[Token, ...]:
    """
    Tokenize a raw METAR or TAF.

    Never fails on malformed report content: unrecognized groups become
    UNKNOWN tokens.

    Args:
        text: Raw report text (TAF may span several lines)

    Returns:
        Tuple of classified tokens in report order

    Raises:
        ReportValidationError: If text is not a string
    """
    if not isinstance(text, str):
        raise ReportValidationError(f"Report text must be a string, got {type(text).__name__}")

    words = [(w.upper().rstrip("="), s, e) for w, s, e in _split(text)]
    words = [(w, s, e) for w, s, e in words if w]

    tokens: List[Token] = []
    index = 0

    while index < len(words) and words[index][0] in HEADER_KEYWORDS:
        word, start, end = words[index]
        tokens.append(Token(TokenKind.HEADER, word, start, end))
        index += 1

    if index < len(words) and STATION_TOKEN_RE.match(words[index][0]):
        word, start, end = words[index]
        tokens.append(Token(TokenKind.STATION, word, start, end))
        index += 1

    in_remarks = False
    while index < len(words):
        word, start, end = words[index]

        if in_remarks:
            tokens.append(Token(TokenKind.REMARK, word, start, end))
            index += 1
            continue

        if word == "RMK":
            in_remarks = True
            tokens.append(Token(TokenKind.KEYWORD, word, start, end))
            index += 1
            continue

        merged = _split_statute_miles(words, index)
        if merged is not None:
            tokens.append(merged)
            index += 2
            continue

        tokens.append(_classify(word, start, end))
        index += 1

    return tuple(tokens)
