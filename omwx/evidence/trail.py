# omwx/evidence/trail.py
"""
Evidence trail builder.

The policy evaluator decides a flag first and only then records evidence
for it. The builder reads observations and never returns anything that
feeds back into a flag.
"""

from typing import List, Sequence

from ..reports.models import ParsedObservation, Token
from .extract import extract_snippet
from .models import EvidenceItem, EvidenceTrail


class TrailBuilder:
    """
    Accumulates evidence items in flag evaluation order.

    Usage:
        trail = TrailBuilder()
        trail.add("lvp", metar, metar.tokens_of(TokenKind.RVR), "RVR min < 400 m")
        advisory.explanation = trail.build()
    """

    def __init__(self):
        self._items: List[EvidenceItem] = []

    def add(
        self,
        flag: str,
        source: ParsedObservation,
        tokens: Sequence[Token],
        threshold: str,
    ):
        """
        Record evidence for a true flag.

        Args:
            flag: Advisory field name (camelCase output vocabulary)
            source: Observation that produced the flag
            tokens: Matched tokens, in report order
            threshold: Human-readable threshold compared against
        """
        snippet = None
        if tokens:
            first = tokens[0]
            snippet = extract_snippet(source.text, first.start, first.end)

        self._items.append(EvidenceItem(
            flag=flag,
            source_report=source.kind,
            matched_tokens=tuple(t.text for t in tokens),
            threshold_description=threshold,
            snippet=snippet,
        ))

    def __len__(self) -> int:
        return len(self._items)

    def build(self) -> EvidenceTrail:
        return tuple(self._items)
