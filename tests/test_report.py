"""Tests for the report rendering module."""

from __future__ import annotations

from datetime import date

import pytest

from weightbalance.calc import crew_totals, galley_totals
from weightbalance.config import AircraftConfig
from weightbalance.models import CrewDetail, FlightRecord, FlightRecordDetail, GalleyDetail, ReportTotals
from weightbalance.report.render import (
    format_report_text,
    render_index,
    render_login,
    render_record_form,
    render_report,
)
from weightbalance.validation import CREW_DETAIL


@pytest.fixture
def sample_record():
    galley = [GalleyDetail(
        id=1, flight_record_id=7, galley_no="G1", arm_m=20.0,
        domestic_weight_kg=100.0, domestic_index=0.12,
        international_weight_kg=50.0, international_index=0.06,
    )]
    crew = [CrewDetail(
        id=1, flight_record_id=7, description="Cabin crew <2>", qty=2,
        arm_m=5.5, weight_kg=170.0, index=-2.27,
    )]
    return FlightRecordDetail(
        id=7,
        loading_index_doc="10000068454",
        weight_report_doc="WR-2024-017",
        report_date=date(2024, 3, 15),
        aircraft_reg=None,
        empty_weight=13311.5,
        empty_weight_index=52.43,
        dow_domestic=13890.0,
        doi_domestic=48.12,
        dow_international=13975.0,
        doi_international=47.8,
        galley_details=galley,
        crew_details=crew,
        totals=ReportTotals(galley=galley_totals(galley), crew=crew_totals(crew)),
    )


class TestRenderHtml:
    def test_report(self, sample_record):
        html = render_report(sample_record, AircraftConfig(name="ATR 72", reference_arm_m=12.5))
        assert "Report: 10000068454 / WR-2024-017" in html
        assert "2024-03-15" in html
        assert "13311.50" in html
        assert "20.000" in html
        assert "TOTAL:" in html
        assert "12.5" in html
        assert "ATR 72" in html

    def test_report_escapes_text(self, sample_record):
        html = render_report(sample_record, AircraftConfig())
        assert "Cabin crew &lt;2&gt;" in html

    def test_report_error(self):
        html = render_report(None, AircraftConfig(), error="Flight Record not found.")
        assert "Flight Record not found." in html
        assert "TOTAL:" not in html

    def test_index(self, sample_record):
        summary = FlightRecord(**sample_record.model_dump(
            exclude={"galley_details", "crew_details", "totals"}
        ))
        html = render_index([summary], user_name="Alice")
        assert 'href="/report/7"' in html
        assert "Alice" in html
        assert "Sign out" in html

    def test_index_error(self):
        html = render_index([], error="Internal Server Error")
        assert "Failed to load reports: Internal Server Error" in html

    def test_login(self):
        assert "/auth/login/google" in render_login()
        assert "expired" in render_login("Your session has expired.")

    def test_report_inline_forms(self, sample_record):
        html = render_report(sample_record, AircraftConfig(reference_arm_m=12.5))
        assert 'action="/report/7/galley-details"' in html
        assert 'action="/report/7/crew-details"' in html
        assert 'data-reference-arm="12.5"' in html
        assert 'data-weight="weight_kg"' in html
        assert 'href="/edit-report/7"' in html

    def test_report_form_error(self, sample_record):
        forms = {CREW_DETAIL: {"values": {"description": "Pilots"}, "error": "Failed to add crew: bad"}}
        html = render_report(sample_record, AircraftConfig(), forms=forms)
        assert "Failed to add crew: bad" in html
        assert 'value="Pilots"' in html

    def test_add_form(self):
        html = render_record_form({"loading_index_doc": "DOC1", "aircraft_reg": None})
        assert 'action="/add-report"' in html
        assert 'value="DOC1"' in html
        assert 'value="None"' not in html
        assert 'type="date" name="report_date"' in html

    def test_edit_form_load_error(self):
        html = render_record_form(None, error="Failed to load report data: gone", record_id=3)
        assert "Failed to load report data: gone" in html
        assert 'action="/edit-report/3"' not in html
        assert 'href="/report/3"' in html


class TestFormatText:
    def test_tables_and_totals(self, sample_record):
        text = format_report_text(sample_record)
        lines = text.splitlines()
        assert lines[0] == "Report: 10000068454 / WR-2024-017"
        assert "Aircraft: -" in lines[1]
        assert "Galley details" in lines
        assert "Crew details" in lines
        totals = [line for line in lines if line.startswith("TOTAL")]
        assert len(totals) == 2
        assert "-2.27" in totals[1]
