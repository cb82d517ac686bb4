# omwx/packets/models.py
"""
Station packet models.

The StationAssessment is the primary output of the engine: everything a
dispatcher dashboard needs for one station, plus the evidence trail that
explains every raised advisory flag.
"""

from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field

from ..reports.models import ParsedObservation
from ..signals.alert import SeverityAssessment, AlertLevel
from ..policy.models import PolicyAdvisory
from ..policy.minima import MinimaBand


@dataclass(frozen=True)
class Trigger:
    """Dashboard trigger tag."""
    label: str  # e.g., "LVP (<400)"
    category: str  # stop, warn, lvto, vis, rvr, cig, gust, wx, eng
    source: str  # M, T or MT

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "category": self.category, "source": self.source}


@dataclass(frozen=True)
class StationAssessment:
    """Complete evaluation of one station's METAR and TAF."""
    station_icao: str
    metar: ParsedObservation
    taf: ParsedObservation

    # Severity
    metar_severity: SeverityAssessment
    taf_severity: SeverityAssessment
    severity: SeverityAssessment  # combined, escalated
    engine_ice_ops: bool

    # Combined reference values
    worst_visibility_m: Optional[int]
    rvr_min_m: Optional[int]
    ceiling_ft: Optional[int]

    # Advisories
    policy: PolicyAdvisory  # combined
    policy_metar: PolicyAdvisory
    policy_taf: PolicyAdvisory
    minima_band: Optional[MinimaBand] = None

    triggers: List[Trigger] = field(default_factory=list)

    # Sort keys (METAR outranks TAF)
    metar_priority: int = 0
    taf_priority: int = 0

    @property
    def alert_level(self) -> AlertLevel:
        return self.severity.alert_level

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "icao": self.station_icao,
            "metar": {**self.metar.to_dict(), "raw": self.metar.text or None},
            "taf": {**self.taf.to_dict(), "raw": self.taf.text or None},
            "alert": self.severity.alert_level.value,
            "severityScore": self.severity.score,
            "severity": self.severity.to_dict(),
            "metarSeverity": self.metar_severity.to_dict(),
            "tafSeverity": self.taf_severity.to_dict(),
            "engIceOps": self.engine_ice_ops,
            "worstVisibilityMeters": self.worst_visibility_m,
            "rvrMinMeters": self.rvr_min_m,
            "ceilingFeet": self.ceiling_ft,
            "om": self.policy.to_dict(),
            "omMetar": self.policy_metar.to_dict(),
            "omTaf": self.policy_taf.to_dict(),
            "minimaBand": self.minima_band.value if self.minima_band else None,
            "triggers": [t.to_dict() for t in self.triggers],
            "metarPriority": self.metar_priority,
            "tafPriority": self.taf_priority,
        }
