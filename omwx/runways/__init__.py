# Runways module - runway geometry lookup for crosswind evaluation
from .geometry import RunwayEnd, RunwayTable, RunwayDataError, EMPTY_RUNWAY_TABLE
from .loader import from_mapping, from_ourairports_csv, load_runway_table

__all__ = [
    "RunwayEnd",
    "RunwayTable",
    "RunwayDataError",
    "EMPTY_RUNWAY_TABLE",
    "from_mapping",
    "from_ourairports_csv",
    "load_runway_table",
]
