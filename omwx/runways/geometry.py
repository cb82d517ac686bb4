# omwx/runways/geometry.py
"""
Runway geometry models.

A RunwayTable is built once by a loader and is read-only afterwards, so it
can be shared across concurrent station evaluations.
"""

from types import MappingProxyType
from typing import Optional, Dict, Any, Mapping, Tuple, Iterable
from dataclasses import dataclass


class RunwayDataError(ValueError):
    """Raised when a runway table source cannot be read."""
    pass


@dataclass(frozen=True)
class RunwayEnd:
    """One usable runway direction."""
    heading_deg: int  # 0..359, true
    width_m: Optional[float] = None
    name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "heading_deg", int(self.heading_deg) % 360)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headingDeg": self.heading_deg,
            "widthMeters": self.width_m,
            "name": self.name,
        }


class RunwayTable:
    """
    Read-only mapping of station identifier to runway ends.

    Usage:
        table = RunwayTable({"EGLL": (RunwayEnd(270, 50.0, "27L"),)})
        ends = table.resolve("egll")
    """

    def __init__(self, entries: Optional[Mapping[str, Iterable[RunwayEnd]]] = None):
        frozen = {
            icao.strip().upper(): tuple(ends)
            for icao, ends in (entries or {}).items()
        }
        self._entries: Mapping[str, Tuple[RunwayEnd, ...]] = MappingProxyType(frozen)

    def resolve(self, icao: Optional[str]) -> Tuple[RunwayEnd, ...]:
        """
        Runway ends for a station.

        Args:
            icao: Station identifier (case-insensitive)

        Returns:
            Tuple of RunwayEnd; empty when the station is unknown
        """
        if not isinstance(icao, str):
            return ()
        return self._entries.get(icao.strip().upper(), ())

    @property
    def stations(self) -> Tuple[str, ...]:
        return tuple(sorted(self._entries))

    def __contains__(self, icao: object) -> bool:
        return isinstance(icao, str) and icao.strip().upper() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"RunwayTable(stations={len(self._entries)})"


EMPTY_RUNWAY_TABLE = RunwayTable()
