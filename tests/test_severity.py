# tests/test_severity.py
"""
Test severity scoring.

Scores are additive over visibility, RVR, ceiling, hazard and gust
contributions, capped at 100.
"""

import pytest

from omwx.reports.models import ParsedObservation, ReportKind
from omwx.signals.severity import score_observation, engine_ice_ops

from conftest import KXYZ_METAR, EGLL_FZFG_METAR, EGLL_CAVOK_METAR, parsed_metar


def obs(**fields) -> ParsedObservation:
    return ParsedObservation(kind=ReportKind.METAR, **fields)


class TestScoreBands:
    """Tests for the individual band tables."""

    @pytest.mark.parametrize("visibility,points", [
        (150, 35), (151, 30), (175, 30), (176, 26), (250, 26), (300, 24),
        (500, 18), (550, 16), (800, 12), (801, 0), (10000, 0),
    ])
    def test_visibility(self, visibility, points):
        """Visibility bands are inclusive upper bounds."""
        assert score_observation(obs(visibility_m=visibility)) == points

    @pytest.mark.parametrize("rvr,points", [
        (75, 28), (76, 22), (200, 22), (300, 18), (500, 12), (501, 0),
    ])
    def test_rvr(self, rvr, points):
        """RVR bands are inclusive upper bounds."""
        assert score_observation(obs(rvr_m=rvr, rvr_present=True)) == points

    @pytest.mark.parametrize("ceiling,points", [
        (100, 22), (499, 22), (500, 12), (799, 12), (800, 0),
    ])
    def test_ceiling(self, ceiling, points):
        """Ceiling bands are strict upper bounds."""
        assert score_observation(obs(ceiling_ft=ceiling)) == points

    @pytest.mark.parametrize("gust,points", [
        (24, 0), (25, 4), (29, 4), (30, 6), (39, 6), (40, 10), (60, 10),
    ])
    def test_gust(self, gust, points):
        """Gust bands are inclusive lower bounds."""
        assert score_observation(obs(gust_kt=gust)) == points

    @pytest.mark.parametrize("hazards,points", [
        ({"TS"}, 22), ({"CB"}, 12), ({"FZFG", "FG"}, 32), ({"FG"}, 14),
        ({"SN"}, 10), ({"RA"}, 8), ({"DZ"}, 8), ({"RA", "DZ"}, 8), ({"BR"}, 6),
        ({"VA"}, 0),
    ])
    def test_hazards(self, hazards, points):
        """Hazard bonuses add up; RA and DZ share one bonus."""
        assert score_observation(obs(hazards=frozenset(hazards))) == points


class TestReportScores:
    """Tests for whole-report scores."""

    def test_empty_report(self):
        """A missing report scores zero."""
        assert score_observation(ParsedObservation(kind=ReportKind.TAF)) == 0

    def test_benign_report(self):
        """CAVOK scores zero."""
        assert score_observation(parsed_metar(EGLL_CAVOK_METAR)) == 0

    def test_kxyz(self):
        """vis 18 + RVR 12 + ceiling 22 + SN 10 + gust 4."""
        assert score_observation(parsed_metar(KXYZ_METAR)) == 66

    def test_convective(self):
        """TS 22 + CB 12 + RA 8."""
        text = "EGLL 011200Z 27005KT 9999 TSRA BKN010CB 20/18 Q1005"

        assert score_observation(parsed_metar(text)) == 42

    def test_capped_at_100(self):
        """Stacked contributions never exceed 100."""
        text = "EGLL 011200Z 27030G45KT 0100 R27/0050 +TSSN FZFG BKN001CB M05/M06 Q0990"

        assert score_observation(parsed_metar(text)) == 100


class TestEngineIceOps:
    """Tests for the engine ice operations condition."""

    def test_fzfg_below_150(self):
        """Freezing fog with visibility <= 150 m."""
        assert engine_ice_ops(parsed_metar(EGLL_FZFG_METAR)) is True

    def test_boundary(self):
        """150 m qualifies, 200 m does not."""
        assert engine_ice_ops(parsed_metar("EGLL 011200Z 00000KT 0150 FZFG")) is True
        assert engine_ice_ops(parsed_metar("EGLL 011200Z 00000KT 0200 FZFG")) is False

    def test_fog_without_freezing(self):
        """Plain fog never triggers engine ice ops."""
        assert engine_ice_ops(parsed_metar("EGLL 011200Z 00000KT 0100 FG")) is False

    def test_no_visibility(self):
        """Missing visibility never triggers engine ice ops."""
        assert engine_ice_ops(ParsedObservation(kind=ReportKind.METAR, hazards=frozenset({"FZFG"}))) is False
