# omwx/reports/models.py
"""
Report models.

RawReport is the immutable input to the engine. ParsedObservation is
derived from exactly one RawReport and never mutated afterwards.
"""

import re
from enum import Enum
from typing import Optional, Tuple, FrozenSet, Dict, Any
from dataclasses import dataclass, field


STATION_RE = re.compile(r"^[A-Z0-9]{4}$")


class ReportValidationError(ValueError):
    """Raised when a caller hands the engine something that is not a report."""
    pass


class ReportKind(Enum):
    """Coded report types understood by the engine."""
    METAR = "METAR"
    TAF = "TAF"


class TokenKind(Enum):
    """Shape of a single report token."""
    HEADER = "HEADER"
    STATION = "STATION"
    TIME = "TIME"
    VALIDITY = "VALIDITY"
    CHANGE = "CHANGE"
    WIND = "WIND"
    WIND_VARIATION = "WIND_VARIATION"
    CAVOK = "CAVOK"
    VISIBILITY_M = "VISIBILITY_M"
    VISIBILITY_SM = "VISIBILITY_SM"
    RVR = "RVR"
    CLOUD = "CLOUD"
    SKY_CLEAR = "SKY_CLEAR"
    TEMPERATURE = "TEMPERATURE"
    PRESSURE = "PRESSURE"
    WEATHER = "WEATHER"
    KEYWORD = "KEYWORD"
    REMARK = "REMARK"
    UNKNOWN = "UNKNOWN"


def normalize_station(icao: Any) -> str:
    """
    Validate and normalize a station identifier.

    Args:
        icao: Candidate 4-character ICAO code

    Returns:
        Upper-case identifier

    Raises:
        ReportValidationError: If the identifier is not 4 alphanumeric characters
    """
    if not isinstance(icao, str):
        raise ReportValidationError(f"Station identifier must be a string, got {type(icao).__name__}")
    value = icao.strip().upper()
    if not STATION_RE.match(value):
        raise ReportValidationError(f"Station identifier must be 4 alphanumeric characters: {icao!r}")
    return value


@dataclass(frozen=True)
class RawReport:
    """One coded weather report as received from the data source."""
    kind: ReportKind
    station_icao: str
    text: str

    def __post_init__(self):
        if not isinstance(self.kind, ReportKind):
            raise ReportValidationError(f"Unknown report kind: {self.kind!r}")
        if not isinstance(self.text, str):
            raise ReportValidationError(
                f"Report text must be a string, got {type(self.text).__name__}"
            )
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "station_icao", normalize_station(self.station_icao))

    @classmethod
    def metar(cls, station_icao: str, text: str) -> "RawReport":
        return cls(kind=ReportKind.METAR, station_icao=station_icao, text=text)

    @classmethod
    def taf(cls, station_icao: str, text: str) -> "RawReport":
        return cls(kind=ReportKind.TAF, station_icao=station_icao, text=text)


@dataclass(frozen=True)
class Token:
    """
    A classified report token.

    start/end are character offsets into the original report text.
    values holds the decoded numbers for the token (metres for
    visibility and RVR, feet for cloud bases, knots for wind).
    """
    kind: TokenKind
    text: str
    start: int
    end: int
    values: Tuple[Optional[int], ...] = ()
    detail: Optional[str] = None  # cloud cover, RVR runway, wind unit, ...


@dataclass(frozen=True)
class Wind:
    """Prevailing wind group."""
    direction_deg: Optional[int]  # None for VRB
    speed_kt: int
    gust_kt: Optional[int] = None
    token: Optional[str] = None

    @property
    def effective_speed_kt(self) -> int:
        """Speed used for crosswind: the stronger of sustained and gust."""
        return max(self.speed_kt, self.gust_kt or 0)


@dataclass(frozen=True)
class ParsedObservation:
    """Typed fields extracted from one report. Every field may be absent."""
    kind: ReportKind
    station_icao: Optional[str] = None
    text: str = ""
    visibility_m: Optional[int] = None
    rvr_m: Optional[int] = None
    rvr_present: bool = False
    ceiling_ft: Optional[int] = None
    gust_kt: Optional[int] = None
    wind: Optional[Wind] = None
    temperature_c: Optional[int] = None
    hazards: FrozenSet[str] = field(default_factory=frozenset)
    heavy_precip_tokens: FrozenSet[str] = field(default_factory=frozenset)
    tokens: Tuple[Token, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()

    def has(self, hazard: str) -> bool:
        return hazard in self.hazards

    def tokens_of(self, *kinds: TokenKind) -> Tuple[Token, ...]:
        return tuple(t for t in self.tokens if t.kind in kinds)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe view (token stream omitted)."""
        return {
            "kind": self.kind.value,
            "stationIcao": self.station_icao,
            "visibilityMeters": self.visibility_m,
            "rvrMeters": self.rvr_m,
            "ceilingFeet": self.ceiling_ft,
            "gustKt": self.gust_kt,
            "wind": {
                "directionDeg": self.wind.direction_deg,
                "speedKt": self.wind.speed_kt,
                "gustKt": self.wind.gust_kt,
            } if self.wind else None,
            "temperatureC": self.temperature_c,
            "hazards": sorted(self.hazards),
            "heavyPrecipTokens": sorted(self.heavy_precip_tokens),
        }


def empty_observation(kind: ReportKind) -> ParsedObservation:
    """Observation standing in for a report that was not supplied."""
    return ParsedObservation(kind=kind)
