# tests/test_policy_engine.py
"""
Test OM policy evaluation.

Tests ladder exclusivity, LVO boundaries, takeoff prohibition, runway
condition estimation and per-source advisories.
"""

import pytest

from omwx.policy.engine import evaluate_policy, evaluate_policy_sets, estimate_runway_condition
from omwx.policy.models import RunwayCondition
from omwx.reports.models import ReportKind

from conftest import (
    KXYZ_METAR,
    EGLL_CAVOK_METAR,
    EGLL_FOG_TAF,
    parsed_metar,
    parsed_taf,
)


def rvr_metar(rvr: str) -> str:
    return f"EGLL 011200Z 27005KT 0300 R27/{rvr} FG VV001 05/05 Q1010"


class TestTakeoffProhibition:
    """Tests for heavy precipitation takeoff prohibition."""

    def test_heavy_snow(self):
        """+SN prohibits takeoff."""
        policy = evaluate_policy(parsed_metar("EGLL 011200Z 27005KT 3000 +SN BKN010 M01/M02 Q1000"))

        assert policy.to_prohibited is True
        assert policy.heavy_precip_matches == frozenset({"+SN"})
        assert policy.explanation[0].flag == "toProhibited"

    def test_freezing_rain(self):
        """FZRA prohibits takeoff and makes the runway SEVERE."""
        policy = evaluate_policy(parsed_metar("EGLL 011200Z 27005KT 3000 FZRA BKN010 M01/M02 Q1000"))

        assert policy.to_prohibited is True
        assert policy.runway_condition_estimate is RunwayCondition.SEVERE
        assert policy.rwycc_estimate == 2
        assert policy.no_ops_likely is True

    def test_light_snow_allowed(self):
        """-SN is not heavy precipitation."""
        policy = evaluate_policy(parsed_metar("EGLL 011200Z 27005KT 3000 -SN BKN010 M01/M02 Q1000"))

        assert policy.to_prohibited is False
        assert policy.heavy_precip_matches == frozenset()

    def test_recent_weather_ignored(self):
        """RE-prefixed recent weather never prohibits takeoff."""
        policy = evaluate_policy(parsed_metar("EGLL 011200Z 27005KT 9999 FEW030 05/01 Q1010 REFZRA"))

        assert policy.to_prohibited is False


class TestLowVisibility:
    """Tests for LVO flags and the LVO band."""

    def test_kxyz(self):
        """RVR exactly 400 m is not below the LVP limit."""
        policy = evaluate_policy(parsed_metar(KXYZ_METAR))

        assert policy.lvto is True
        assert policy.lvp is False
        assert policy.lvo_band == "lvto"
        assert policy.rvr_min_m == 400

    def test_lvp_boundary(self):
        """399 m is below the LVP limit."""
        policy = evaluate_policy(parsed_metar(rvr_metar("0399")))

        assert policy.lvp is True
        assert policy.lvto is True
        assert policy.lvo_band == "lvp"

    @pytest.mark.parametrize("rvr,band,qual,rvr125", [
        ("0500", "lvto", False, False),
        ("0400", "lvto", False, False),
        ("0300", "lvp", False, False),
        ("0149", "lvto150", True, False),
        ("0140", "lvto150", True, False),
        ("0124", "rvr125", True, True),
        ("0100", "rvr125", True, True),
    ])
    def test_band_ladder(self, rvr, band, qual, rvr125):
        """Only the tightest band is reported; raw booleans stay raw."""
        policy = evaluate_policy(parsed_metar(rvr_metar(rvr)))

        assert policy.lvo_band == band
        assert policy.lvto_crew_qual_required is qual
        assert policy.rvr_below_absolute_min is rvr125

    def test_rvr_reporting_required(self):
        """Visibility below 800 m without RVR requires RVR reporting."""
        policy = evaluate_policy(parsed_metar("EGLL 011200Z 27005KT 0600 BR OVC003 05/05 Q1010"))

        assert policy.rvr_reporting_required is True
        assert policy.lvto is False

    def test_rvr_reported(self):
        """No RVR reporting flag once RVR is present."""
        policy = evaluate_policy(parsed_metar(rvr_metar("0600")))

        assert policy.rvr_reporting_required is False


class TestApproachCategory:
    """Tests for the exclusive CAT ladder."""

    @pytest.mark.parametrize("rvr,cat3min,cat3only,cat2plus", [
        ("0050", True, False, False),
        ("0150", False, True, False),
        ("0300", False, False, True),
        ("0500", False, False, False),
    ])
    def test_exclusive(self, rvr, cat3min, cat3only, cat2plus):
        """At most one CAT flag is true."""
        policy = evaluate_policy(parsed_metar(rvr_metar(rvr)))

        assert policy.cat3_below_min is cat3min
        assert policy.cat3_only is cat3only
        assert policy.cat2_plus is cat2plus

    def test_kxyz(self):
        """RVR 400 m requires CAT II or better."""
        policy = evaluate_policy(parsed_metar(KXYZ_METAR))

        assert policy.cat_band == "cat2plus"


class TestRunwayCondition:
    """Tests for the runway condition estimate."""

    @pytest.mark.parametrize("hazards,condition", [
        ({"FZRA", "RA"}, RunwayCondition.SEVERE),
        ({"GR"}, RunwayCondition.SEVERE),
        ({"SN", "RA"}, RunwayCondition.CONTAM),
        ({"BLSN", "SN"}, RunwayCondition.CONTAM),
        ({"RA"}, RunwayCondition.WET),
        ({"DZ"}, RunwayCondition.WET),
        ({"FG"}, RunwayCondition.DRY),
        (set(), RunwayCondition.DRY),
    ])
    def test_ladder(self, hazards, condition):
        """First match wins."""
        result, _ = estimate_runway_condition(frozenset(hazards))

        assert result is condition

    def test_colour_state_is_not_hail(self):
        """A GRN colour state leaves the runway DRY."""
        policy = evaluate_policy(parsed_metar("EGXC 011200Z 27005KT 9999 FEW030 10/05 Q1010 GRN"))

        assert policy.runway_condition_estimate is RunwayCondition.DRY
        assert policy.rwycc_estimate == 6
        assert policy.no_ops_likely is False

    def test_snow_is_rwycc_3(self):
        """Contaminated runway is RWYCC 3, not yet no-ops."""
        policy = evaluate_policy(parsed_metar(KXYZ_METAR))

        assert policy.runway_condition_estimate is RunwayCondition.CONTAM
        assert policy.rwycc_estimate == 3
        assert policy.no_ops_likely is False


class TestInformationalFlags:
    """Tests for hazard and temperature flags."""

    def test_cold_correction(self):
        """METAR temperature at or below 0 C."""
        assert evaluate_policy(parsed_metar(KXYZ_METAR)).cold_correction is True
        assert evaluate_policy(parsed_metar("EGLL 011200Z 27005KT 9999 FEW030 00/M01 Q1010")).cold_correction is True
        assert evaluate_policy(parsed_metar(EGLL_CAVOK_METAR)).cold_correction is False

    def test_volcanic_ash(self):
        """VA is reported."""
        policy = evaluate_policy(parsed_metar("EGLL 011200Z 27005KT 9999 VA FEW030 10/05 Q1010"))

        assert policy.volcanic_ash is True

    def test_thunderstorm(self):
        """TS or CB raises tsOrCb."""
        policy = evaluate_policy(parsed_metar("EGLL 011200Z 27005KT 9999 FEW030CB 20/15 Q1010"))

        assert policy.ts_or_cb is True


class TestCrosswindAdvisory:
    """Tests for the crosswind flag through the evaluator."""

    def test_exceed_on_narrow_runway(self, runway_table):
        """25 kt across a 30 m runway exceeds the narrow limit."""
        met = parsed_metar("LXNR 011200Z 27025KT 9999 FEW030 10/05 Q1010")

        policy = evaluate_policy(met, None, runway_table.resolve("LXNR"))

        assert policy.crosswind_exceed is True
        assert policy.crosswind_kt == 25
        assert policy.crosswind_limit_kt == 20
        assert policy.crosswind_runway == "36"
        assert policy.crosswind_narrow is True

    def test_no_geometry(self):
        """Without runways the crosswind fields are absent."""
        policy = evaluate_policy(parsed_metar("LXNR 011200Z 27025KT 9999 FEW030 10/05 Q1010"))

        assert policy.crosswind is None
        assert policy.crosswind_exceed is None

        view = policy.to_dict()
        for key in ("crosswindExceed", "crosswindKt", "crosswindLimitKt", "crosswindRunway", "crosswindNarrow"):
            assert view[key] is None

    def test_variable_wind(self, runway_table):
        """VRB wind has no crosswind, so the fields are absent."""
        policy = evaluate_policy(
            parsed_metar("LXNR 011200Z VRB03KT 9999 FEW030 10/05 Q1010"), None, runway_table.resolve("LXNR")
        )

        assert policy.crosswind_exceed is None

    def test_within_limit(self, runway_table):
        """A computed crosswind inside the limit is False, not absent."""
        policy = evaluate_policy(
            parsed_metar("LXNR 011200Z 36025KT 9999 FEW030 10/05 Q1010"), None, runway_table.resolve("LXNR")
        )

        assert policy.crosswind_exceed is False
        assert policy.to_dict()["crosswindExceed"] is False


class TestPerSourcePolicies:
    """Tests for combined, METAR-only and TAF-only advisories."""

    def test_fog_only_in_taf(self, runway_table):
        """Forecast fog flags the combined and TAF advisories, not the METAR one."""
        met = parsed_metar(EGLL_CAVOK_METAR)
        fcst = parsed_taf(EGLL_FOG_TAF)

        combined, metar_only, taf_only = evaluate_policy_sets(met, fcst, runway_table.resolve("EGLL"))

        assert combined.lvp is True
        assert taf_only.lvp is True
        assert metar_only.lvp is False
        assert metar_only.lvto is False

    def test_combined_evidence_attributed_to_taf(self):
        """Evidence names the report whose value crossed the threshold."""
        combined = evaluate_policy(parsed_metar(EGLL_CAVOK_METAR), parsed_taf(EGLL_FOG_TAF))

        lvp_items = [item for item in combined.explanation if item.flag == "lvp"]

        assert len(lvp_items) == 1
        assert lvp_items[0].source_report is ReportKind.TAF
        assert lvp_items[0].matched_tokens == ("0300",)

    def test_empty_set(self):
        """No reports, no flags."""
        policy = evaluate_policy()

        assert policy.to_prohibited is False
        assert policy.lvo_band is None
        assert policy.cat_band is None
        assert policy.explanation == ()
