"""Server-rendered pages and entry forms, each behind the session gate."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from weightbalance.api.details import index_policy
from weightbalance.api.session_gate import SIGN_IN_PATH, SessionContext, SessionGate
from weightbalance.calc import try_compute_index
from weightbalance.config import AircraftConfig
from weightbalance.db.deps import current_session, get_db
from weightbalance.errors import RecordError
from weightbalance.report.render import (
    RECORD_FIELDS,
    render_index,
    render_login,
    render_record_form,
    render_report,
)
from weightbalance.storage.details import IndexPolicy, create_detail
from weightbalance.storage.flight_records import (
    create_flight_record,
    get_flight_record,
    list_flight_records,
    update_flight_record,
)
from weightbalance.validation import CREW_DETAIL, GALLEY_DETAIL, get_schema

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"], include_in_schema=False)

INVALID_ID_MESSAGE = "Invalid or missing ID."


def _gate(request: Request, context: SessionContext) -> RedirectResponse | None:
    target = SessionGate.from_context(context).redirect_for(request.url.path)
    if target is None:
        return None
    return RedirectResponse(url=target, status_code=302)


def _parse_id(raw: str) -> int | None:
    """Positive integer path id, or None."""
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def _see_other(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


async def _form_values(request: Request) -> dict[str, Any]:
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


def fill_blank_indexes(kind: str, values: dict[str, Any], reference_arm: float) -> dict[str, Any]:
    """Fill empty index inputs from their weight and the line's arm.

    Mirrors the live fill the report page does in the browser, so a form
    submitted without scripts still carries an index. Inputs the user typed
    are left alone.
    """
    filled = dict(values)
    for index_field, weight_field in get_schema(kind).index_pairs:
        if str(filled.get(index_field) or "").strip():
            continue
        index = try_compute_index(filled.get(weight_field), filled.get("arm_m"), reference_arm)
        if index is not None:
            filled[index_field] = index
    return filled


@router.get("/", response_class=HTMLResponse)
def index_page(
    request: Request,
    context: SessionContext = Depends(current_session),
    db: Session = Depends(get_db),
):
    """List of all reports."""
    redirect = _gate(request, context)
    if redirect:
        return redirect
    try:
        records = list_flight_records(db)
    except RecordError as exc:
        return HTMLResponse(
            render_index([], error=exc.message, user_name=context.name),
            status_code=exc.status_code,
        )
    return HTMLResponse(render_index(records, user_name=context.name))


@router.get("/report/{record_id}", response_class=HTMLResponse)
def report_page(
    record_id: str,
    request: Request,
    context: SessionContext = Depends(current_session),
    db: Session = Depends(get_db),
):
    """One report with its galley and crew tables and the add-line forms."""
    redirect = _gate(request, context)
    if redirect:
        return redirect
    aircraft: AircraftConfig = request.app.state.aircraft
    parsed_id = _parse_id(record_id)
    if parsed_id is None:
        return HTMLResponse(
            render_report(None, aircraft, error=INVALID_ID_MESSAGE, user_name=context.name),
            status_code=400,
        )
    try:
        record = get_flight_record(db, parsed_id)
    except RecordError as exc:
        return HTMLResponse(
            render_report(None, aircraft, error=exc.message, user_name=context.name),
            status_code=exc.status_code,
        )
    return HTMLResponse(render_report(record, aircraft, user_name=context.name))


@router.get("/add-report", response_class=HTMLResponse)
def add_report_form(
    request: Request,
    context: SessionContext = Depends(current_session),
):
    redirect = _gate(request, context)
    if redirect:
        return redirect
    return HTMLResponse(render_record_form({}, user_name=context.name))


@router.post("/add-report", response_class=HTMLResponse)
async def add_report(
    request: Request,
    context: SessionContext = Depends(current_session),
    db: Session = Depends(get_db),
):
    """Create a report from the add form and open it."""
    redirect = _gate(request, context)
    if redirect:
        return redirect
    values = await _form_values(request)
    try:
        record = create_flight_record(db, values)
    except RecordError as exc:
        db.rollback()
        return HTMLResponse(
            render_record_form(
                values, error=f"Failed to add report: {exc.message}", user_name=context.name
            ),
            status_code=exc.status_code,
        )
    return _see_other(f"/report/{record.id}")


@router.get("/edit-report/{record_id}", response_class=HTMLResponse)
def edit_report_form(
    record_id: str,
    request: Request,
    context: SessionContext = Depends(current_session),
    db: Session = Depends(get_db),
):
    """Edit form pre-filled with the stored report."""
    redirect = _gate(request, context)
    if redirect:
        return redirect
    parsed_id = _parse_id(record_id)
    if parsed_id is None:
        return HTMLResponse(
            render_record_form(None, error=INVALID_ID_MESSAGE, user_name=context.name),
            status_code=400,
        )
    try:
        record = get_flight_record(db, parsed_id)
    except RecordError as exc:
        return HTMLResponse(
            render_record_form(
                None, error=f"Failed to load report data: {exc.message}",
                record_id=parsed_id, user_name=context.name,
            ),
            status_code=exc.status_code,
        )
    values = {f.name: getattr(record, f.name) for f in RECORD_FIELDS}
    values["report_date"] = record.report_date.isoformat()
    return HTMLResponse(render_record_form(values, record_id=parsed_id, user_name=context.name))


@router.post("/edit-report/{record_id}", response_class=HTMLResponse)
async def edit_report(
    record_id: str,
    request: Request,
    context: SessionContext = Depends(current_session),
    db: Session = Depends(get_db),
):
    redirect = _gate(request, context)
    if redirect:
        return redirect
    parsed_id = _parse_id(record_id)
    if parsed_id is None:
        return HTMLResponse(
            render_record_form(None, error=INVALID_ID_MESSAGE, user_name=context.name),
            status_code=400,
        )
    values = await _form_values(request)
    try:
        update_flight_record(db, parsed_id, values)
    except RecordError as exc:
        db.rollback()
        return HTMLResponse(
            render_record_form(
                values, error=f"Failed to update report: {exc.message}",
                record_id=parsed_id, user_name=context.name,
            ),
            status_code=exc.status_code,
        )
    return _see_other(f"/report/{parsed_id}")


async def _add_detail_line(
    kind: str,
    label: str,
    record_id: str,
    request: Request,
    context: SessionContext,
    db: Session,
    policy: IndexPolicy,
):
    redirect = _gate(request, context)
    if redirect:
        return redirect
    aircraft: AircraftConfig = request.app.state.aircraft
    parsed_id = _parse_id(record_id)
    if parsed_id is None:
        return HTMLResponse(
            render_report(None, aircraft, error=INVALID_ID_MESSAGE, user_name=context.name),
            status_code=400,
        )
    try:
        record = get_flight_record(db, parsed_id)
    except RecordError as exc:
        return HTMLResponse(
            render_report(None, aircraft, error=exc.message, user_name=context.name),
            status_code=exc.status_code,
        )

    values = fill_blank_indexes(kind, await _form_values(request), aircraft.reference_arm_m)
    try:
        create_detail(db, kind, {**values, "flight_record_id": parsed_id}, policy)
    except RecordError as exc:
        db.rollback()
        logger.info("Rejected %s line for report %d: %s", kind, parsed_id, exc.message)
        forms = {kind: {"values": values, "error": f"Failed to add {label}: {exc.message}"}}
        return HTMLResponse(
            render_report(record, aircraft, user_name=context.name, forms=forms),
            status_code=exc.status_code,
        )
    return _see_other(f"/report/{parsed_id}")


@router.post("/report/{record_id}/galley-details", response_class=HTMLResponse)
async def add_galley_line(
    record_id: str,
    request: Request,
    context: SessionContext = Depends(current_session),
    db: Session = Depends(get_db),
    policy: IndexPolicy = Depends(index_policy),
):
    """Add a galley line from the inline form on the report page."""
    return await _add_detail_line(GALLEY_DETAIL, "galley", record_id, request, context, db, policy)


@router.post("/report/{record_id}/crew-details", response_class=HTMLResponse)
async def add_crew_line(
    record_id: str,
    request: Request,
    context: SessionContext = Depends(current_session),
    db: Session = Depends(get_db),
    policy: IndexPolicy = Depends(index_policy),
):
    """Add a crew line from the inline form on the report page."""
    return await _add_detail_line(CREW_DETAIL, "crew", record_id, request, context, db, policy)


@router.get(SIGN_IN_PATH, response_class=HTMLResponse)
def login_page(
    request: Request,
    context: SessionContext = Depends(current_session),
):
    """Sign-in page; signed-in users are sent to the landing page."""
    redirect = _gate(request, context)
    if redirect:
        return redirect
    error = "Your session has expired. Please sign in again." if context.expired else None
    return HTMLResponse(render_login(error))
