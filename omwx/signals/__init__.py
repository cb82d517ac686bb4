# Signals module - severity scores and alert levels derived from parsed reports
from .severity import score_observation, engine_ice_ops, hazard_points
from .alert import (
    AlertLevel,
    SeverityAssessment,
    alert_from_score,
    min_score_for_alert,
    max_alert,
    wind_pillar_alert,
    snow_pillar_alert,
    assess_observation,
    combined_score,
    classify_station,
    station_priorities,
)

__all__ = [
    "score_observation",
    "engine_ice_ops",
    "hazard_points",
    "AlertLevel",
    "SeverityAssessment",
    "alert_from_score",
    "min_score_for_alert",
    "max_alert",
    "wind_pillar_alert",
    "snow_pillar_alert",
    "assess_observation",
    "combined_score",
    "classify_station",
    "station_priorities",
]
