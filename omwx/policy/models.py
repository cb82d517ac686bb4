# omwx/policy/models.py
"""
Policy models.
"""

from enum import Enum
from typing import Optional, Dict, Any, FrozenSet
from dataclasses import dataclass, field

from ..evidence.models import EvidenceTrail
from ..runways.geometry import RunwayEnd


class RunwayCondition(Enum):
    """Runway condition estimated from weather-code proxies (never SNOWTAM)."""
    DRY = "DRY"
    WET = "WET"
    CONTAM = "CONTAM"
    SEVERE = "SEVERE"


@dataclass(frozen=True)
class CrosswindAssessment:
    """Best runway end for the prevailing wind and its company limit."""
    crosswind_kt: int
    runway: RunwayEnd
    wind_direction_deg: int
    wind_speed_used_kt: int  # max(speed, gust)
    narrow: Optional[bool]  # None when the runway width is unknown
    limit_kt: Optional[int]  # None when no limit row exists for the RWYCC
    exceed: bool


@dataclass(frozen=True)
class PolicyAdvisory:
    """OM-A/OM-B advisory flags for one set of evaluated reports."""
    to_prohibited: bool = False
    heavy_precip_matches: FrozenSet[str] = field(default_factory=frozenset)

    # Low-visibility operations
    lvto: bool = False
    lvp: bool = False
    lvto_crew_qual_required: bool = False
    rvr_below_absolute_min: bool = False
    rvr_reporting_required: bool = False
    lvo_band: Optional[str] = None  # rvr125 | lvto150 | lvp | lvto

    # Approach category (only the tightest is True)
    cat2_plus: bool = False
    cat3_only: bool = False
    cat3_below_min: bool = False
    cat_band: Optional[str] = None  # cat3min | cat3only | cat2plus

    # Runway condition
    runway_condition_estimate: RunwayCondition = RunwayCondition.DRY
    rwycc_estimate: int = 6
    no_ops_likely: bool = False

    # Crosswind
    crosswind_exceed: Optional[bool] = None  # None without runway geometry or wind direction
    crosswind: Optional[CrosswindAssessment] = None

    # Informational
    ts_or_cb: bool = False
    volcanic_ash: bool = False
    cold_correction: bool = False

    # Reference values used for the bands
    worst_visibility_m: Optional[int] = None
    rvr_min_m: Optional[int] = None

    explanation: EvidenceTrail = ()

    @property
    def crosswind_kt(self) -> Optional[int]:
        return self.crosswind.crosswind_kt if self.crosswind else None

    @property
    def crosswind_limit_kt(self) -> Optional[int]:
        return self.crosswind.limit_kt if self.crosswind else None

    @property
    def crosswind_runway(self) -> Optional[str]:
        if not self.crosswind:
            return None
        return self.crosswind.runway.name or f"{self.crosswind.runway.heading_deg:03d}"

    @property
    def crosswind_narrow(self) -> Optional[bool]:
        return self.crosswind.narrow if self.crosswind else None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe view with the stable camelCase vocabulary."""
        return {
            "toProhibited": self.to_prohibited,
            "heavyPrecipMatches": sorted(self.heavy_precip_matches),
            "lvto": self.lvto,
            "lvp": self.lvp,
            "lvtoCrewQualRequired": self.lvto_crew_qual_required,
            "rvr125": self.rvr_below_absolute_min,
            "rvrReportingRequired": self.rvr_reporting_required,
            "lvoBand": self.lvo_band,
            "cat2Plus": self.cat2_plus,
            "cat3Only": self.cat3_only,
            "cat3BelowMin": self.cat3_below_min,
            "catBand": self.cat_band,
            "runwayConditionEstimate": self.runway_condition_estimate.value,
            "rwyccEstimate": self.rwycc_estimate,
            "noOpsLikely": self.no_ops_likely,
            "crosswindExceed": self.crosswind_exceed,
            "crosswindKt": self.crosswind_kt,
            "crosswindLimitKt": self.crosswind_limit_kt,
            "crosswindRunway": self.crosswind_runway,
            "crosswindNarrow": self.crosswind_narrow,
            "tsOrCb": self.ts_or_cb,
            "volcanicAsh": self.volcanic_ash,
            "coldCorrection": self.cold_correction,
            "explanation": [item.to_dict() for item in self.explanation],
        }
