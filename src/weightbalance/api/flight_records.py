"""API endpoints for flight records."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from weightbalance.db.deps import current_user_id, get_db
from weightbalance.models import FlightRecord, FlightRecordDetail
from weightbalance.storage.flight_records import (
    create_flight_record,
    delete_flight_record,
    get_flight_record,
    list_flight_records,
    update_flight_record,
)

router = APIRouter(prefix="/flight-records", tags=["flight-records"])


@router.get("", response_model=list[FlightRecord])
def list_records(
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """List all flight records, most recently created first."""
    return list_flight_records(db)


@router.post("", response_model=FlightRecord, status_code=201)
def create_record(
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """Create a flight record with no detail lines."""
    return create_flight_record(db, payload)


@router.get("/{record_id}", response_model=FlightRecordDetail)
def get_record(
    record_id: int,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """Get a flight record with its galley and crew lines and their totals."""
    return get_flight_record(db, record_id)


@router.put("/{record_id}", response_model=FlightRecord)
def update_record(
    record_id: int,
    payload: dict[str, Any] = Body(...),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """Update a flight record's own fields."""
    return update_flight_record(db, record_id, payload)


@router.delete("/{record_id}")
def delete_record(
    record_id: int,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """Delete a flight record and all its detail lines."""
    delete_flight_record(db, record_id)
    return {"message": f"Flight Record with ID {record_id} deleted successfully."}
