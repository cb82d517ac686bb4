# omwx/runways/loader.py
"""
Runway table loaders.

Supported sources:
- Mapping of ICAO to runway end records {headingDeg, widthMeters, name}
- runways.json snapshot {ICAO: [{name, le_heading, he_heading, width_m}]}
  where every physical runway contributes both ends
- OurAirports runways.csv (airport_ident, le_ident, he_ident,
  le_heading_degT, he_heading_degT, width_ft)

Loaders only read supplied text or a local file. Fetching the data is the
caller's job.
"""

import csv
import io
import json
from pathlib import Path
from typing import Optional, Dict, Any, List, Iterable, Mapping, Union

from ..logging import get_logger
from ..reports.units import METERS_PER_FOOT, round_half_up
from .geometry import RunwayEnd, RunwayTable, RunwayDataError

logger = get_logger(__name__)

OURAIRPORTS_REQUIRED_COLUMN = "airport_ident"


def _number(value: Any) -> Optional[float]:
    """Float from a JSON/CSV cell; None for blanks and garbage."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _heading(value: Any) -> Optional[int]:
    number = _number(value)
    if number is None:
        return None
    return round_half_up(number) % 360


def _width_ft_to_m(value: Any) -> Optional[float]:
    width_ft = _number(value)
    if width_ft is None:
        return None
    return round_half_up(width_ft * METERS_PER_FOOT * 10) / 10


def _end_names(name: Optional[str]) -> List[Optional[str]]:
    """Split "09L/27R" into per-end names."""
    if not name:
        return [None, None]
    parts = [p.strip() or None for p in str(name).split("/")]
    if len(parts) == 2:
        return parts
    return [name, name]


def _ends_from_record(record: Mapping[str, Any]) -> List[RunwayEnd]:
    """Runway ends described by one JSON record (either supported shape)."""
    if "headingDeg" in record:
        heading = _heading(record.get("headingDeg"))
        if heading is None:
            return []
        return [RunwayEnd(heading, _number(record.get("widthMeters")), record.get("name"))]

    width_m = _number(record.get("width_m"))
    le_name, he_name = _end_names(record.get("name"))
    ends = []
    for key, end_name in (("le_heading", le_name), ("he_heading", he_name)):
        heading = _heading(record.get(key))
        if heading is not None:
            ends.append(RunwayEnd(heading, width_m, end_name))
    return ends


def from_mapping(data: Mapping[str, Iterable[Mapping[str, Any]]]) -> RunwayTable:
    """
    Build a runway table from decoded JSON.

    Records without a usable heading are skipped.

    Args:
        data: {ICAO: [record, ...]} in either supported record shape

    Returns:
        Read-only RunwayTable

    Raises:
        RunwayDataError: If data is not a mapping of lists
    """
    if not isinstance(data, Mapping):
        raise RunwayDataError(f"Runway data must be a mapping, got {type(data).__name__}")

    entries: Dict[str, List[RunwayEnd]] = {}
    for icao, records in data.items():
        if not isinstance(records, (list, tuple)):
            raise RunwayDataError(f"Runway records for {icao!r} must be a list")
        ends: List[RunwayEnd] = []
        for record in records:
            if isinstance(record, Mapping):
                ends.extend(_ends_from_record(record))
        entries[str(icao).strip().upper()] = ends

    return RunwayTable(entries)


def from_ourairports_csv(text: str, stations: Optional[Iterable[str]] = None) -> RunwayTable:
    """
    Build a runway table from the OurAirports runways.csv export.

    Args:
        text: CSV content with a header row
        stations: Optional ICAO filter; all airports when omitted

    Returns:
        Read-only RunwayTable

    Raises:
        RunwayDataError: If the airport_ident column is missing
    """
    reader = csv.DictReader(io.StringIO(text or ""))
    if not reader.fieldnames or OURAIRPORTS_REQUIRED_COLUMN not in reader.fieldnames:
        raise RunwayDataError(f"runways.csv: missing {OURAIRPORTS_REQUIRED_COLUMN} column")

    wanted = {s.strip().upper() for s in stations} if stations is not None else None

    entries: Dict[str, List[RunwayEnd]] = {}
    for row in reader:
        icao = (row.get(OURAIRPORTS_REQUIRED_COLUMN) or "").strip().upper()
        if not icao or (wanted is not None and icao not in wanted):
            continue

        width_m = _width_ft_to_m(row.get("width_ft"))
        for heading_col, ident_col in (("le_heading_degT", "le_ident"), ("he_heading_degT", "he_ident")):
            heading = _heading(row.get(heading_col))
            if heading is None:
                continue
            name = (row.get(ident_col) or "").strip() or None
            entries.setdefault(icao, []).append(RunwayEnd(heading, width_m, name))

    return RunwayTable(entries)


def load_runway_table(path: Union[str, Path], stations: Optional[Iterable[str]] = None) -> RunwayTable:
    """
    Load a runway table from a .json or .csv file.

    Raises:
        RunwayDataError: If the file is unreadable or of an unsupported type
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in (".json", ".csv"):
        raise RunwayDataError(f"Unsupported runway file type: {path.name}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RunwayDataError(f"Cannot read runway file {path}: {e}") from e

    if suffix == ".csv":
        table = from_ourairports_csv(text, stations)
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise RunwayDataError(f"Invalid runway JSON in {path}: {e}") from e
        table = from_mapping(data)

    logger.info("runway_table_loaded", path=str(path), stations=len(table))
    return table
