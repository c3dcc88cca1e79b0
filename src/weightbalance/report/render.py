"""Render the report list, report detail, entry forms and sign-in pages, plus a plain-text report."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jinja2 import Environment, PackageLoader

from weightbalance.calc import format_index
from weightbalance.config import AircraftConfig
from weightbalance.models import FlightRecord, FlightRecordDetail
from weightbalance.validation import CREW_DETAIL, GALLEY_DETAIL


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    type: str = "number"
    required: bool = True
    weight_field: str | None = None  # index inputs: the weight they are filled from


RECORD_FIELDS = (
    FormField("loading_index_doc", "Loading Index Doc.", "text"),
    FormField("weight_report_doc", "Weight Report Doc.", "text"),
    FormField("report_date", "Report Date", "date"),
    FormField("aircraft_reg", "Aircraft Reg.", "text", required=False),
    FormField("empty_weight", "Empty Weight"),
    FormField("empty_weight_index", "Empty Weight Index"),
    FormField("dow_domestic", "DOW Domestic"),
    FormField("doi_domestic", "DOI Domestic"),
    FormField("dow_international", "DOW International"),
    FormField("doi_international", "DOI International"),
)

DETAIL_FIELDS = {
    GALLEY_DETAIL: (
        FormField("galley_no", "Galley No.", "text"),
        FormField("arm_m", "Arm (m)"),
        FormField("domestic_weight_kg", "Domestic Weight (kg)"),
        FormField("domestic_index", "Domestic Index", required=False, weight_field="domestic_weight_kg"),
        FormField("international_weight_kg", "International Weight (kg)"),
        FormField("international_index", "International Index", required=False,
                  weight_field="international_weight_kg"),
    ),
    CREW_DETAIL: (
        FormField("description", "Description", "text"),
        FormField("qty", "Qty"),
        FormField("arm_m", "Arm (m)"),
        FormField("weight_kg", "Weight (kg)"),
        FormField("index", "Index", required=False, weight_field="weight_kg"),
    ),
}


def _get_template_env() -> Environment:
    """Create Jinja2 environment pointing to the templates/ subdir."""
    env = Environment(
        loader=PackageLoader("weightbalance.report", "templates"),
        autoescape=True,
    )
    env.filters["fixed2"] = format_index
    env.filters["fixed3"] = lambda v: "" if v is None else f"{v:.3f}"
    return env


def render_index(records: list[FlightRecord], error: str | None = None, user_name: str = "") -> str:
    """Render the list of reports; ``error`` replaces the table with a page-level error."""
    template = _get_template_env().get_template("index.html")
    return template.render(records=records, error=error, user_name=user_name)


def render_report(
    record: FlightRecordDetail | None,
    aircraft: AircraftConfig,
    error: str | None = None,
    user_name: str = "",
    forms: dict[str, dict[str, Any]] | None = None,
) -> str:
    """Render one report with its galley and crew tables and their totals.

    ``forms`` maps a detail kind to the ``values`` and ``error`` of a failed
    add-line submission, so the inline form shows them again.
    """
    forms = forms or {}
    detail_forms = {
        kind: {"values": {}, "error": None, **forms.get(kind, {})} for kind in DETAIL_FIELDS
    }
    template = _get_template_env().get_template("report.html")
    return template.render(
        record=record,
        aircraft=aircraft,
        error=error,
        user_name=user_name,
        galley_fields=DETAIL_FIELDS[GALLEY_DETAIL],
        crew_fields=DETAIL_FIELDS[CREW_DETAIL],
        galley_form=detail_forms[GALLEY_DETAIL],
        crew_form=detail_forms[CREW_DETAIL],
    )


def render_record_form(
    values: dict[str, Any] | None,
    error: str | None = None,
    record_id: int | None = None,
    user_name: str = "",
) -> str:
    """Render the add form, or the edit form when ``record_id`` is given.

    ``values`` of None means the record could not be loaded; only the error shows.
    """
    if record_id is None:
        heading, action, submit, back_url = (
            "Add New Flight Weight & Balance Report", "/add-report", "Add Report", "/",
        )
    else:
        heading, action, submit, back_url = (
            "Edit Flight Weight & Balance Report", f"/edit-report/{record_id}",
            "Update Report", f"/report/{record_id}",
        )
    template = _get_template_env().get_template("record_form.html")
    return template.render(
        heading=heading,
        action=action,
        submit=submit,
        back_url=back_url,
        fields=RECORD_FIELDS,
        values=values,
        error=error,
        user_name=user_name,
    )


def render_login(error: str | None = None) -> str:
    template = _get_template_env().get_template("login.html")
    return template.render(error=error)


def format_report_text(record: FlightRecordDetail) -> str:
    """Plain-text rendering of a report for the terminal."""
    lines = [
        f"Report: {record.loading_index_doc} / {record.weight_report_doc}",
        f"Date: {record.report_date.isoformat()}   Aircraft: {record.aircraft_reg or '-'}",
        f"Empty weight: {format_index(record.empty_weight)}  "
        f"Empty weight index: {format_index(record.empty_weight_index)}",
        f"DOW/DOI domestic: {format_index(record.dow_domestic)} / {format_index(record.doi_domestic)}",
        f"DOW/DOI international: {format_index(record.dow_international)} / "
        f"{format_index(record.doi_international)}",
        "",
        "Galley details",
        f"{'Galley':<10}{'Arm (m)':>10}{'Dom kg':>12}{'Dom idx':>10}{'Intl kg':>12}{'Intl idx':>10}",
    ]
    for g in record.galley_details:
        lines.append(
            f"{g.galley_no:<10}{g.arm_m:>10.3f}{g.domestic_weight_kg:>12.2f}"
            f"{g.domestic_index:>10.2f}{g.international_weight_kg:>12.2f}{g.international_index:>10.2f}"
        )
    gt = record.totals.galley
    lines.append(
        f"{'TOTAL':<10}{'':>10}{gt.domestic_weight_kg:>12.2f}{gt.domestic_index:>10.2f}"
        f"{gt.international_weight_kg:>12.2f}{gt.international_index:>10.2f}"
    )

    lines += [
        "",
        "Crew details",
        f"{'Description':<24}{'Qty':>6}{'Arm (m)':>10}{'Weight kg':>12}{'Index':>10}",
    ]
    for c in record.crew_details:
        lines.append(
            f"{c.description:<24}{c.qty:>6d}{c.arm_m:>10.3f}{c.weight_kg:>12.2f}{c.index:>10.2f}"
        )
    ct = record.totals.crew
    lines.append(f"{'TOTAL':<24}{ct.qty:>6d}{'':>10}{ct.weight_kg:>12.2f}{ct.index:>10.2f}")
    return "\n".join(lines)
