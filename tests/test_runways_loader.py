# tests/test_runways_loader.py
"""
Test runway table loading.

Both JSON record shapes and the OurAirports CSV export are covered;
files are written to tmp_path.
"""

import json

import pytest

from omwx.runways.geometry import RunwayEnd, RunwayTable, RunwayDataError
from omwx.runways.loader import from_mapping, from_ourairports_csv, load_runway_table

OURAIRPORTS_CSV = """id,airport_ref,airport_ident,length_ft,width_ft,surface,le_ident,le_heading_degT,he_ident,he_heading_degT
1,100,EGLL,12799,164,ASP,09L,89.6,27R,269.6
2,101,LXNR,6000,150,ASP,18,180,36,0
3,102,KXYZ,8000,,ASP,09,,27,
"""


class TestRunwayTable:
    """Tests for the read-only table."""

    def test_resolve_case_insensitive(self, runway_table):
        """Identifiers are matched case-insensitively."""
        assert runway_table.resolve("egll") == runway_table.resolve("EGLL")
        assert "egll" in runway_table

    def test_unknown_station(self, runway_table):
        """An unknown station has no runways."""
        assert runway_table.resolve("ZZZZ") == ()
        assert runway_table.resolve(None) == ()

    def test_read_only(self, runway_table):
        """Entries cannot be replaced after loading."""
        with pytest.raises(TypeError):
            runway_table._entries["ZZZZ"] = ()

    def test_heading_wrapped(self):
        """Headings are stored modulo 360."""
        assert RunwayEnd(360).heading_deg == 0


class TestFromMapping:
    """Tests for JSON mappings."""

    def test_end_records(self):
        """{headingDeg, widthMeters, name} records map one-to-one."""
        table = from_mapping({
            "egll": [
                {"headingDeg": 90, "widthMeters": 50, "name": "09L"},
                {"headingDeg": 270, "widthMeters": 50, "name": "27R"},
            ],
        })

        ends = table.resolve("EGLL")

        assert [e.heading_deg for e in ends] == [90, 270]
        assert ends[0].width_m == 50.0
        assert ends[1].name == "27R"

    def test_snapshot_records(self):
        """A snapshot record contributes both ends of the runway."""
        table = from_mapping({
            "LXNR": [{"name": "18/36", "le_heading": 179.5, "he_heading": 359.6, "width_m": 30}],
        })

        ends = table.resolve("LXNR")

        assert [(e.heading_deg, e.name) for e in ends] == [(180, "18"), (0, "36")]
        assert all(e.width_m == 30.0 for e in ends)

    def test_records_without_heading_skipped(self):
        """Unusable records are dropped, the station is kept."""
        table = from_mapping({"KXYZ": [{"headingDeg": None}, {"le_heading": ""}, "junk"]})

        assert "KXYZ" in table
        assert table.resolve("KXYZ") == ()

    def test_not_a_mapping(self):
        """Top-level data must be a mapping."""
        with pytest.raises(RunwayDataError):
            from_mapping([1, 2, 3])

    def test_records_not_a_list(self):
        """Per-station records must be a list."""
        with pytest.raises(RunwayDataError):
            from_mapping({"EGLL": "09L/27R"})


class TestOurAirportsCsv:
    """Tests for the OurAirports export."""

    def test_both_ends_loaded(self):
        """Each row contributes its le and he ends."""
        table = from_ourairports_csv(OURAIRPORTS_CSV)

        ends = table.resolve("EGLL")

        assert [(e.heading_deg, e.name) for e in ends] == [(90, "09L"), (270, "27R")]

    def test_width_converted(self):
        """width_ft is converted to metres at 0.1 m."""
        table = from_ourairports_csv(OURAIRPORTS_CSV)

        assert table.resolve("LXNR")[0].width_m == 45.7

    def test_missing_heading_skipped(self):
        """Ends without a heading are left out."""
        table = from_ourairports_csv(OURAIRPORTS_CSV)

        assert table.resolve("KXYZ") == ()

    def test_station_filter(self):
        """Only the requested stations are kept."""
        table = from_ourairports_csv(OURAIRPORTS_CSV, stations=["lxnr"])

        assert table.stations == ("LXNR",)

    def test_missing_column(self):
        """airport_ident is required."""
        with pytest.raises(RunwayDataError):
            from_ourairports_csv("id,le_ident\n1,09\n")

    def test_empty_text(self):
        """Empty input has no header row."""
        with pytest.raises(RunwayDataError):
            from_ourairports_csv("")


class TestLoadRunwayTable:
    """Tests for file loading."""

    def test_json_file(self, tmp_path):
        """JSON files are decoded and mapped."""
        path = tmp_path / "runways.json"
        path.write_text(json.dumps({"EGLL": [{"headingDeg": 270, "name": "27L"}]}), encoding="utf-8")

        table = load_runway_table(path)

        assert isinstance(table, RunwayTable)
        assert table.resolve("EGLL")[0].heading_deg == 270

    def test_csv_file(self, tmp_path):
        """CSV files go through the OurAirports reader."""
        path = tmp_path / "runways.csv"
        path.write_text(OURAIRPORTS_CSV, encoding="utf-8")

        table = load_runway_table(str(path), stations=["EGLL"])

        assert len(table) == 1

    def test_unsupported_suffix(self, tmp_path):
        """Only .json and .csv are accepted."""
        path = tmp_path / "runways.txt"
        path.write_text("{}", encoding="utf-8")

        with pytest.raises(RunwayDataError):
            load_runway_table(path)

    def test_missing_file(self, tmp_path):
        """Unreadable files raise RunwayDataError."""
        with pytest.raises(RunwayDataError):
            load_runway_table(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        """Malformed JSON raises RunwayDataError."""
        path = tmp_path / "runways.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(RunwayDataError):
            load_runway_table(path)
