"""Pydantic v2 models for flight records and their detail lines (API/storage layer)."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


# --- Validated payloads ---


class FlightRecordPayload(BaseModel):
    """Mutable fields of a flight record, after validation."""

    loading_index_doc: str  # business identifier, unique
    weight_report_doc: str
    report_date: date
    aircraft_reg: Optional[str] = None
    empty_weight: float
    empty_weight_index: float
    dow_domestic: float
    doi_domestic: float
    dow_international: float
    doi_international: float


class GalleyDetailPayload(BaseModel):
    galley_no: str
    arm_m: float
    domestic_weight_kg: float
    domestic_index: float
    international_weight_kg: float
    international_index: float


class GalleyDetailCreate(GalleyDetailPayload):
    flight_record_id: int


class CrewDetailPayload(BaseModel):
    description: str
    qty: int
    arm_m: float
    weight_kg: float
    index: float


class CrewDetailCreate(CrewDetailPayload):
    flight_record_id: int


# --- Stored entities ---


class FlightRecord(FlightRecordPayload):
    """Summary attributes of a stored flight record (no children)."""

    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GalleyDetail(GalleyDetailPayload):
    id: int
    flight_record_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CrewDetail(CrewDetailPayload):
    id: int
    flight_record_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Aggregate ---


class GalleyTotals(BaseModel):
    """Column sums over a record's galley lines."""

    domestic_weight_kg: float = 0.0
    domestic_index: float = 0.0
    international_weight_kg: float = 0.0
    international_index: float = 0.0


class CrewTotals(BaseModel):
    """Column sums over a record's crew lines."""

    qty: int = 0
    weight_kg: float = 0.0
    index: float = 0.0


class ReportTotals(BaseModel):
    galley: GalleyTotals = Field(default_factory=GalleyTotals)
    crew: CrewTotals = Field(default_factory=CrewTotals)


class FlightRecordDetail(FlightRecord):
    """A flight record with its galley and crew lines, as shown on the detail view."""

    galley_details: list[GalleyDetail] = Field(default_factory=list)
    crew_details: list[CrewDetail] = Field(default_factory=list)
    totals: ReportTotals = Field(default_factory=ReportTotals)
