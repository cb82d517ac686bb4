# Reports module - tokenizer and field extractors for METAR/TAF text
from .models import (
    RawReport,
    ReportKind,
    ReportValidationError,
    ParsedObservation,
    Token,
    TokenKind,
    Wind,
    normalize_station,
)
from .tokenizer import tokenize
from .extract import (
    parse_observation,
    parse_tokens,
    extract_visibility,
    extract_rvr,
    extract_ceiling,
    extract_gust,
    extract_wind,
    extract_temperature,
    extract_hazards,
    extract_heavy_precip,
    HEAVY_PRECIP_TOKENS,
)

__all__ = [
    "RawReport",
    "ReportKind",
    "ReportValidationError",
    "ParsedObservation",
    "Token",
    "TokenKind",
    "Wind",
    "normalize_station",
    "tokenize",
    "parse_observation",
    "parse_tokens",
    "extract_visibility",
    "extract_rvr",
    "extract_ceiling",
    "extract_gust",
    "extract_wind",
    "extract_temperature",
    "extract_hazards",
    "extract_heavy_precip",
    "HEAVY_PRECIP_TOKENS",
]
