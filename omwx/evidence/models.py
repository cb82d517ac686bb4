# omwx/evidence/models.py
"""
Evidence models.
"""

from typing import Optional, Tuple, Dict, Any
from dataclasses import dataclass

from ..reports.models import ReportKind


@dataclass(frozen=True)
class EvidenceItem:
    """Why one advisory flag is true, attributed to one report."""
    flag: str  # e.g., "lvp", "toProhibited"
    source_report: ReportKind
    matched_tokens: Tuple[str, ...]
    threshold_description: str  # e.g., "RVR min < 400 m"
    snippet: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "flag": self.flag,
            "sourceReport": self.source_report.value,
            "matchedTokens": list(self.matched_tokens),
            "thresholdDescription": self.threshold_description,
            "snippet": self.snippet,
        }


# Ordered, immutable
EvidenceTrail = Tuple[EvidenceItem, ...]
