# omwx/policy/minima.py
"""
Approach minima comparison.

Table format (JSON):
    {"EGLL": {"best": {"vis_m": 550, "cig_ft": 200},
              "alt":  {"vis_m": 1500, "cig_ft": 400}}}
"""

import json
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Optional, Dict, Any, Mapping, Union
from dataclasses import dataclass

from ..logging import get_logger

logger = get_logger(__name__)


class MinimaDataError(ValueError):
    """Raised when a minima table source cannot be read."""
    pass


class MinimaBand(Enum):
    BELOW_BEST = "BELOW_BEST"
    BELOW_ALT = "BELOW_ALT"


@dataclass(frozen=True)
class Minima:
    vis_m: Optional[int] = None
    cig_ft: Optional[int] = None

    def is_below(self, visibility_m: Optional[int], ceiling_ft: Optional[int]) -> bool:
        """True if visibility or ceiling is under these minima (missing values never count)."""
        return (
            (self.vis_m is not None and visibility_m is not None and visibility_m < self.vis_m)
            or (self.cig_ft is not None and ceiling_ft is not None and ceiling_ft < self.cig_ft)
        )


@dataclass(frozen=True)
class MinimaEntry:
    best: Minima
    alt: Minima


class MinimaTable:
    """Read-only mapping of station identifier to minima entry."""

    def __init__(self, entries: Optional[Mapping[str, MinimaEntry]] = None):
        self._entries = MappingProxyType({
            icao.strip().upper(): entry for icao, entry in (entries or {}).items()
        })

    def get(self, icao: Optional[str]) -> Optional[MinimaEntry]:
        if not isinstance(icao, str):
            return None
        return self._entries.get(icao.strip().upper())

    def __len__(self) -> int:
        return len(self._entries)


def _int_or_none(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _minima(data: Any) -> Minima:
    if not isinstance(data, Mapping):
        return Minima()
    return Minima(vis_m=_int_or_none(data.get("vis_m")), cig_ft=_int_or_none(data.get("cig_ft")))


def minima_from_mapping(data: Mapping[str, Any]) -> MinimaTable:
    """
    Build a minima table from decoded JSON.

    Raises:
        MinimaDataError: If data is not a mapping
    """
    if not isinstance(data, Mapping):
        raise MinimaDataError(f"Minima data must be a mapping, got {type(data).__name__}")

    entries: Dict[str, MinimaEntry] = {}
    for icao, entry in data.items():
        if not isinstance(entry, Mapping):
            continue
        entries[str(icao)] = MinimaEntry(best=_minima(entry.get("best")), alt=_minima(entry.get("alt")))
    return MinimaTable(entries)


def load_minima_table(path: Union[str, Path]) -> MinimaTable:
    """Load a minima table from a JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise MinimaDataError(f"Cannot read minima file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise MinimaDataError(f"Invalid minima JSON in {path}: {e}") from e

    table = minima_from_mapping(data)
    logger.info("minima_table_loaded", path=str(path), stations=len(table))
    return table


def minima_band(
    table: Optional[MinimaTable],
    icao: str,
    visibility_m: Optional[int],
    ceiling_ft: Optional[int],
) -> Optional[MinimaBand]:
    """
    Compare worst visibility and ceiling against station minima.

    Returns:
        BELOW_BEST, BELOW_ALT, or None (also None without a table entry)
    """
    if table is None:
        return None
    entry = table.get(icao)
    if entry is None:
        return None
    if entry.best.is_below(visibility_m, ceiling_ft):
        return MinimaBand.BELOW_BEST
    if entry.alt.is_below(visibility_m, ceiling_ft):
        return MinimaBand.BELOW_ALT
    return None
