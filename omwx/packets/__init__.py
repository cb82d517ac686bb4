# Packets module - per-station assessment packets
from .models import StationAssessment, Trigger
from .triggers import build_triggers, trigger_source
from .builder import (
    StationPacketBuilder,
    evaluate_station,
    evaluate_stations,
    validate_station_reports,
    get_station_builder,
)

__all__ = [
    "StationAssessment",
    "Trigger",
    "build_triggers",
    "trigger_source",
    "StationPacketBuilder",
    "evaluate_station",
    "evaluate_stations",
    "validate_station_reports",
    "get_station_builder",
]
