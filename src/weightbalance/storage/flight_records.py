"""Flight record persistence: list, create, fetch with detail lines, update, delete."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy import delete, insert, select, update
from sqlalchemy.orm import Session

from weightbalance.calc import crew_totals, galley_totals
from weightbalance.db.gateway import execute
from weightbalance.db.models import CrewDetailRow, FlightRecordRow, GalleyDetailRow
from weightbalance.errors import NotFound
from weightbalance.models import (
    CrewDetail,
    FlightRecord,
    FlightRecordDetail,
    FlightRecordPayload,
    GalleyDetail,
    ReportTotals,
)
from weightbalance.validation import FLIGHT_RECORD, validate_payload

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "A report with this Loading Index Doc already exists."
DUPLICATE_UPDATE_MESSAGE = "Another report with this Loading Index Doc already exists."


# --- Conversion helpers ---


def _num(value: Any) -> float:
    """Coerce a stored numeric (float, Decimal or text) to float."""
    return float(value)


def row_to_flight_record(row: FlightRecordRow) -> FlightRecord:
    return FlightRecord(
        id=row.id,
        loading_index_doc=row.loading_index_doc,
        weight_report_doc=row.weight_report_doc,
        report_date=row.report_date,
        aircraft_reg=row.aircraft_reg,
        empty_weight=_num(row.empty_weight),
        empty_weight_index=_num(row.empty_weight_index),
        dow_domestic=_num(row.dow_domestic),
        doi_domestic=_num(row.doi_domestic),
        dow_international=_num(row.dow_international),
        doi_international=_num(row.doi_international),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def row_to_galley_detail(row: GalleyDetailRow) -> GalleyDetail:
    return GalleyDetail(
        id=row.id,
        flight_record_id=row.flight_record_id,
        galley_no=row.galley_no,
        arm_m=_num(row.arm_m),
        domestic_weight_kg=_num(row.domestic_weight_kg),
        domestic_index=_num(row.domestic_index),
        international_weight_kg=_num(row.international_weight_kg),
        international_index=_num(row.international_index),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def row_to_crew_detail(row: CrewDetailRow) -> CrewDetail:
    return CrewDetail(
        id=row.id,
        flight_record_id=row.flight_record_id,
        description=row.description,
        qty=int(row.qty),
        arm_m=_num(row.arm_m),
        weight_kg=_num(row.weight_kg),
        index=_num(row.index),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _values(payload: FlightRecordPayload) -> dict[str, Any]:
    return payload.model_dump()


# --- Flight record CRUD ---


def list_flight_records(session: Session) -> list[FlightRecord]:
    """List all flight records (summary attributes only), newest first."""
    stmt = select(FlightRecordRow).order_by(FlightRecordRow.id.desc())
    rows = execute(session, stmt, action="listing flight records").scalars().all()
    return [row_to_flight_record(r) for r in rows]


def create_flight_record(session: Session, raw: Mapping[str, Any]) -> FlightRecord:
    """Validate and insert a new flight record.

    Raises ValidationError before touching the database, DuplicateKey when
    loading_index_doc is already taken.
    """
    payload = validate_payload(FLIGHT_RECORD, raw)
    stmt = insert(FlightRecordRow).values(**_values(payload)).returning(FlightRecordRow)
    row = execute(
        session, stmt, action="creating flight record", duplicate_message=DUPLICATE_MESSAGE
    ).scalar_one()
    logger.info("Flight record %d created (%s)", row.id, row.loading_index_doc)
    return row_to_flight_record(row)


def get_flight_record(session: Session, record_id: int) -> FlightRecordDetail:
    """Load a flight record with its galley and crew lines. Raises NotFound."""
    stmt = select(FlightRecordRow).where(FlightRecordRow.id == record_id)
    row = execute(session, stmt, action="loading flight record").scalar_one_or_none()
    if row is None:
        raise NotFound("Flight Record not found.")

    galley_stmt = (
        select(GalleyDetailRow)
        .where(GalleyDetailRow.flight_record_id == record_id)
        .order_by(GalleyDetailRow.id)
    )
    crew_stmt = (
        select(CrewDetailRow)
        .where(CrewDetailRow.flight_record_id == record_id)
        .order_by(CrewDetailRow.id)
    )
    galley = [
        row_to_galley_detail(r)
        for r in execute(session, galley_stmt, action="loading galley details").scalars()
    ]
    crew = [
        row_to_crew_detail(r)
        for r in execute(session, crew_stmt, action="loading crew details").scalars()
    ]

    return FlightRecordDetail(
        **row_to_flight_record(row).model_dump(),
        galley_details=galley,
        crew_details=crew,
        totals=ReportTotals(galley=galley_totals(galley), crew=crew_totals(crew)),
    )


def update_flight_record(
    session: Session, record_id: int, raw: Mapping[str, Any]
) -> FlightRecord:
    """Replace every mutable field of a flight record; detail lines are untouched.

    Raises ValidationError, NotFound, or DuplicateKey.
    """
    payload = validate_payload(FLIGHT_RECORD, raw)
    stmt = (
        update(FlightRecordRow)
        .where(FlightRecordRow.id == record_id)
        .values(**_values(payload))
        .returning(FlightRecordRow)
        .execution_options(populate_existing=True)
    )
    row = execute(
        session, stmt, action="updating flight record", duplicate_message=DUPLICATE_UPDATE_MESSAGE
    ).scalar_one_or_none()
    if row is None:
        raise NotFound("Flight Record not found for update.")
    logger.info("Flight record %d updated", record_id)
    return row_to_flight_record(row)


def delete_flight_record(session: Session, record_id: int) -> None:
    """Delete a flight record and all of its detail lines. Raises NotFound."""
    # Explicit child deletes keep the cascade on backends without FK enforcement
    execute(
        session,
        delete(GalleyDetailRow).where(GalleyDetailRow.flight_record_id == record_id),
        action="deleting galley details",
    )
    execute(
        session,
        delete(CrewDetailRow).where(CrewDetailRow.flight_record_id == record_id),
        action="deleting crew details",
    )
    stmt = (
        delete(FlightRecordRow)
        .where(FlightRecordRow.id == record_id)
        .returning(FlightRecordRow.id)
    )
    deleted = execute(session, stmt, action="deleting flight record").scalar_one_or_none()
    if deleted is None:
        raise NotFound("Flight Record not found for deletion.")
    logger.info("Flight record %d deleted", record_id)
