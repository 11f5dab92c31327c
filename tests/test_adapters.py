"""Tests for reading uploaded spreadsheets through the content adapters."""

import pytest

from plantkit import EQUIPMENT_FIELDS, SheetReader, default_reader
from plantkit.adapters import CsvAdapter, ExcelAdapter


@pytest.fixture
def reader():
    return default_reader()


# =============================================================================
# EXCEL
# =============================================================================

class TestExcelAdapter:

    def test_header_row_keys_each_record(self, reader, make_xlsx):
        data = make_xlsx([
            ["Tag", "Name", "Steam Load"],
            ["B-101", "Boiler", 5],
            ["P-1", "Pump", None],
        ])
        rows = reader.read_rows(data)

        assert rows == [
            {"Tag": "B-101", "Name": "Boiler", "Steam Load": 5},
            {"Tag": "P-1", "Name": "Pump", "Steam Load": None},
        ]

    def test_only_first_sheet_is_read(self, reader, make_xlsx):
        data = make_xlsx(
            [["Name"], ["First"]],
            [["Name"], ["Second"]],
        )
        assert reader.read_rows(data) == [{"Name": "First"}]

    def test_blank_rows_are_skipped(self, reader, make_xlsx):
        data = make_xlsx([
            ["Name", "Power"],
            ["Mixer", 3],
            [None, None],
            ["Dryer", 7],
        ])
        assert [row["Name"] for row in reader.read_rows(data)] == ["Mixer", "Dryer"]

    def test_blank_header_cells_are_dropped(self, reader, make_xlsx):
        data = make_xlsx([
            ["Name", None, "Power"],
            ["Mixer", "stray", 3],
        ])
        assert reader.read_rows(data) == [{"Name": "Mixer", "Power": 3}]

    def test_header_only_sheet(self, reader, make_xlsx):
        assert reader.read_rows(make_xlsx([["Name", "Power"]])) == []

    def test_render_text_includes_header(self, reader, make_xlsx):
        data = make_xlsx([
            ["Tag", "Capacity"],
            ["CT-1", "300 TR"],
            ["B-2", 5.0],
        ])
        assert reader.render_text(data) == "Tag,Capacity\nCT-1,300 TR\nB-2,5\n"

    def test_can_handle(self, make_xlsx):
        adapter = ExcelAdapter()
        assert adapter.can_handle(make_xlsx([["Name"]]))
        assert not adapter.can_handle(b"Name\nPump\n")


# =============================================================================
# DELIMITED TEXT
# =============================================================================

class TestCsvAdapter:

    def test_comma_separated(self, reader, make_csv):
        data = make_csv("Tag,Name,Power Load\nP-1,Pump,10\n")
        assert reader.read_rows(data) == [{"Tag": "P-1", "Name": "Pump", "Power Load": "10"}]

    def test_semicolon_separated(self, reader, make_csv):
        data = make_csv("Tag;Name\nP-1;Pump\nP-2;Fan\n")
        rows = reader.read_rows(data)
        assert [row["Name"] for row in rows] == ["Pump", "Fan"]

    def test_tab_separated(self, reader, make_csv):
        data = make_csv("Step Name\tSteam\nHeating\t1.5\nCooling\t0\n")
        rows = reader.read_rows(data)
        assert rows[0] == {"Step Name": "Heating", "Steam": "1.5"}

    def test_utf8_bom_is_stripped(self, reader, make_csv):
        data = make_csv("Name,Power\nMixer,3\n", encoding="utf-8-sig")
        assert list(reader.read_rows(data)[0]) == ["Name", "Power"]

    def test_blank_lines_are_skipped(self, reader, make_csv):
        data = make_csv("Name,Power\nMixer,3\n,\nDryer,7\n")
        assert [row["Name"] for row in reader.read_rows(data)] == ["Mixer", "Dryer"]

    def test_short_row_fills_blank(self, reader, make_csv):
        data = make_csv("Name,Power,Steam\nMixer,3\n")
        assert reader.read_rows(data) == [{"Name": "Mixer", "Power": "3", "Steam": ""}]

    def test_empty_content(self, reader):
        assert reader.read_rows(b"") == []
        assert reader.render_text(b"   ") == ""

    def test_render_text_normalises_delimiter(self, reader, make_csv):
        data = make_csv("Tag;Name\nP-1;Pump\n")
        assert reader.render_text(data) == "Tag,Name\nP-1,Pump\n"

    def test_rejects_workbook_bytes(self, make_xlsx):
        adapter = CsvAdapter()
        assert not adapter.can_handle(make_xlsx([["Name"]]))
        assert not adapter.can_handle(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1")


# =============================================================================
# ADAPTER SELECTION
# =============================================================================

class TestSheetReader:

    def test_no_adapter_raises(self):
        with pytest.raises(ValueError, match="No adapter found"):
            SheetReader().read_rows(b"Name\nPump\n")

    def test_legacy_xls_is_rejected(self, reader):
        with pytest.raises(ValueError):
            reader.read_rows(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64)

    def test_mapping_report_for_upload(self, reader, make_xlsx):
        data = make_xlsx([
            ["EQPT.", "DESCRIPTION", "Steam Load", "Location"],
            ["B-1", "Boiler", 5, "North"],
        ])

        report = reader.get_mapping_report(data, EQUIPMENT_FIELDS)

        assert report["mapped"]["tag"] == ["EQPT."]
        assert report["mapped"]["name"] == ["DESCRIPTION"]
        assert report["mapped"]["max_steam_load"] == ["Steam Load"]
        assert "max_power_load" in report["unresolved"]
        assert report["unmapped"] == ["Location"]

    def test_mapping_report_unreadable_upload(self, reader):
        with pytest.raises(ValueError):
            reader.get_mapping_report(b"\xd0\xcf\x11\xe0", EQUIPMENT_FIELDS)
