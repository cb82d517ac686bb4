# Evidence module - audit trail explaining every raised advisory flag
from .models import EvidenceItem, EvidenceTrail
from .extract import extract_snippet, SNIPPET_WINDOW
from .trail import TrailBuilder

__all__ = [
    "EvidenceItem",
    "EvidenceTrail",
    "extract_snippet",
    "SNIPPET_WINDOW",
    "TrailBuilder",
]
