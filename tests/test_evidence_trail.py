# tests/test_evidence_trail.py
"""
Test evidence trails on policy advisories.
"""

from omwx.evidence.extract import extract_snippet
from omwx.policy.engine import evaluate_policy
from omwx.reports.models import ReportKind

from conftest import KXYZ_METAR, EGLL_CAVOK_METAR, parsed_metar, parsed_taf


class TestSnippets:
    """Tests for snippet extraction."""

    def test_cut_on_both_sides(self):
        """Snippets are marked where the text was cut."""
        start = KXYZ_METAR.index("R27/0400")

        snippet = extract_snippet(KXYZ_METAR, start, start + len("R27/0400"))

        assert "R27/0400" in snippet
        assert snippet.startswith("...")
        assert snippet.endswith("...")

    def test_short_text_not_cut(self):
        """A short report is returned whole."""
        assert extract_snippet("EGLL 0300 FG", 5, 9) == "EGLL 0300 FG"

    def test_newlines_collapsed(self):
        """Multi-line TAF snippets read as one line."""
        text = "TAF EGLL 011100Z 0112/0212 9999\n      BECMG 0200/0202 0300 FG"
        start = text.index("0300")

        assert "\n" not in extract_snippet(text, start, start + 4)

    def test_bad_offsets(self):
        """Offsets outside the text yield no snippet."""
        assert extract_snippet("EGLL", 2, 10) is None
        assert extract_snippet("", 0, 1) is None


class TestTrail:
    """Tests for evidence recorded by the policy evaluator."""

    def test_kxyz_trail(self):
        """Evidence follows flag evaluation order."""
        policy = evaluate_policy(parsed_metar(KXYZ_METAR))

        flags = [item.flag for item in policy.explanation]

        assert flags == ["lvto", "cat2Plus", "coldCorrection"]
        assert policy.explanation[0].matched_tokens == ("R27/0400",)
        assert policy.explanation[0].source_report is ReportKind.METAR
        assert policy.explanation[2].matched_tokens == ("M02/M05",)

    def test_items_only_for_true_flags(self):
        """Every item's flag is true in the advisory view."""
        policy = evaluate_policy(parsed_metar(KXYZ_METAR))
        view = policy.to_dict()

        for item in policy.explanation:
            assert view[item.flag] is True

    def test_one_item_per_source(self):
        """A flag raised by both reports gets one item for each."""
        met = parsed_metar("EGLL 011200Z 27005KT 9999 TSRA FEW030CB 20/15 Q1010")
        fcst = parsed_taf("TAF EGLL 011100Z 0112/0212 27005KT 9999 TEMPO 0114/0118 TSRA BKN020CB")

        policy = evaluate_policy(met, fcst)
        items = [item for item in policy.explanation if item.flag == "tsOrCb"]

        assert [item.source_report for item in items] == [ReportKind.METAR, ReportKind.TAF]
        assert items[0].matched_tokens == ("TSRA", "FEW030CB")

    def test_empty_trail(self):
        """Benign weather records nothing."""
        policy = evaluate_policy(parsed_metar(EGLL_CAVOK_METAR))

        assert policy.explanation == ()

    def test_serialized_item(self):
        """Items serialize with camelCase keys."""
        policy = evaluate_policy(parsed_metar(KXYZ_METAR))

        item = policy.to_dict()["explanation"][0]

        assert item["flag"] == "lvto"
        assert item["sourceReport"] == "METAR"
        assert item["matchedTokens"] == ["R27/0400"]
        assert "R27/0400" in item["snippet"]
