# tests/conftest.py
"""
Pytest configuration and fixtures.

All tests are pure: reports are literal strings and reference tables are
built in memory, so no network or files are needed (loader tests use
tmp_path).
"""

import pytest

from omwx.reports.models import RawReport
from omwx.reports.extract import parse_observation
from omwx.runways.geometry import RunwayEnd, RunwayTable
from omwx.policy.minima import minima_from_mapping
from omwx.packets.builder import StationPacketBuilder


# ============================================================
# SAMPLE REPORTS
# ============================================================

# Snow with RVR exactly at the LVP boundary
KXYZ_METAR = "KXYZ 241200Z 27015G25KT 1/4SM R27/0400 -SN BKN003 M02/M05 A2990"

# Freezing fog below 150 m: engine ice operations
EGLL_FZFG_METAR = "METAR EGLL 011200Z 00000KT 0100 FZFG VV001 M03/M03 Q1020"

EGLL_CAVOK_METAR = "METAR EGLL 011220Z 24008KT CAVOK 15/08 Q1018"

# Multi-line TAF: worst visibility is the TEMPO group
EGLL_TAF = """TAF EGLL 011100Z 0112/0212 24010KT 9999 SCT030
      TEMPO 0114/0118 1600 RA BKN008"""

# TAF with fog later in the period
EGLL_FOG_TAF = """TAF EGLL 011100Z 0112/0212 24005KT 9999 FEW030
      BECMG 0200/0202 0300 FG OVC002"""


def metar(text: str, icao: str = None) -> RawReport:
    """RawReport for a METAR; station taken from the text when omitted."""
    return RawReport.metar(icao or _station_of(text), text)


def taf(text: str, icao: str = None) -> RawReport:
    """RawReport for a TAF; station taken from the text when omitted."""
    return RawReport.taf(icao or _station_of(text), text)


def _station_of(text: str) -> str:
    for word in text.split():
        if word not in ("METAR", "SPECI", "TAF", "AUTO", "COR", "AMD"):
            return word
    raise ValueError("no station in report")


def parsed_metar(text: str):
    return parse_observation(metar(text))


def parsed_taf(text: str):
    return parse_observation(taf(text))


# ============================================================
# REFERENCE TABLES
# ============================================================

@pytest.fixture
def runway_table() -> RunwayTable:
    """Runways for the sample stations."""
    return RunwayTable({
        "KXYZ": (
            RunwayEnd(90, 45.0, "09"),
            RunwayEnd(270, 45.0, "27"),
        ),
        "EGLL": (
            RunwayEnd(90, 50.0, "09L"),
            RunwayEnd(270, 50.0, "27R"),
        ),
        "LXNR": (
            RunwayEnd(0, 30.0, "36"),
            RunwayEnd(180, 30.0, "18"),
        ),
    })


@pytest.fixture
def minima_table():
    """Approach minima for the sample stations."""
    return minima_from_mapping({
        "KXYZ": {
            "best": {"vis_m": 550, "cig_ft": 200},
            "alt": {"vis_m": 1500, "cig_ft": 500},
        },
    })


@pytest.fixture
def builder(runway_table, minima_table) -> StationPacketBuilder:
    """Station builder over the sample tables."""
    return StationPacketBuilder(runway_table, minima_table)
