"""Presence and numeric checks for incoming flight-record and detail-line payloads.

Each entity kind declares which of its fields are required strings, dates,
numbers and integers. :func:`validate_payload` applies the same rules to every
kind and returns a typed payload model, so nothing reaches the database
unless every declared field passed.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping

from pydantic import BaseModel

from weightbalance.errors import ValidationError
from weightbalance.models import (
    CrewDetailCreate,
    CrewDetailPayload,
    FlightRecordPayload,
    GalleyDetailCreate,
    GalleyDetailPayload,
)

MISSING_FIELD = "missing_field"
NON_NUMERIC_FIELD = "non_numeric_field"
INVALID_DATE = "invalid_date"

FLIGHT_RECORD = "flight_record"
GALLEY_DETAIL = "galley_detail"
CREW_DETAIL = "crew_detail"

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class EntitySchema:
    """Field declarations for one entity kind."""

    kind: str
    label: str  # human name used in messages, e.g. "Galley Detail"
    strings: tuple[str, ...] = ()
    dates: tuple[str, ...] = ()
    numbers: tuple[str, ...] = ()
    integers: tuple[str, ...] = ()
    optional: tuple[str, ...] = ()
    owner_field: str | None = None
    payload_model: type[BaseModel] = BaseModel
    create_model: type[BaseModel] | None = None
    index_pairs: tuple[tuple[str, str], ...] = field(default=())  # (index field, weight field)

    @property
    def required(self) -> tuple[str, ...]:
        return self.strings + self.dates + self.numbers + self.integers


SCHEMAS: dict[str, EntitySchema] = {
    FLIGHT_RECORD: EntitySchema(
        kind=FLIGHT_RECORD,
        label="Flight Record",
        strings=("loading_index_doc", "weight_report_doc"),
        dates=("report_date",),
        numbers=(
            "empty_weight",
            "empty_weight_index",
            "dow_domestic",
            "doi_domestic",
            "dow_international",
            "doi_international",
        ),
        optional=("aircraft_reg",),
        payload_model=FlightRecordPayload,
    ),
    GALLEY_DETAIL: EntitySchema(
        kind=GALLEY_DETAIL,
        label="Galley Detail",
        strings=("galley_no",),
        numbers=(
            "arm_m",
            "domestic_weight_kg",
            "domestic_index",
            "international_weight_kg",
            "international_index",
        ),
        owner_field="flight_record_id",
        payload_model=GalleyDetailPayload,
        create_model=GalleyDetailCreate,
        index_pairs=(
            ("domestic_index", "domestic_weight_kg"),
            ("international_index", "international_weight_kg"),
        ),
    ),
    CREW_DETAIL: EntitySchema(
        kind=CREW_DETAIL,
        label="Crew Detail",
        strings=("description",),
        numbers=("arm_m", "weight_kg", "index"),
        integers=("qty",),
        owner_field="flight_record_id",
        payload_model=CrewDetailPayload,
        create_model=CrewDetailCreate,
        index_pairs=(("index", "weight_kg"),),
    ),
}


def get_schema(kind: str) -> EntitySchema:
    try:
        return SCHEMAS[kind]
    except KeyError:
        raise ValueError(f"Unknown entity kind: {kind}") from None


def parse_number(value: Any) -> float | None:
    """Parse a JSON number or numeric string to a finite float, else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_date(value: Any) -> date | None:
    """Parse a ``YYYY-MM-DD`` date; compact and week-date ISO forms are rejected."""
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not ISO_DATE_RE.match(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _parse_owner_id(value: Any) -> int | None:
    number = parse_number(value)
    if number is None or not number.is_integer() or number <= 0:
        return None
    return int(number)


def validate_payload(kind: str, raw: Mapping[str, Any], *, create: bool = False) -> BaseModel:
    """Check a raw payload for one entity kind and return the typed model.

    Args:
        kind: One of "flight_record", "galley_detail", "crew_detail".
        raw: Decoded JSON body.
        create: For detail lines, also require the owning flight_record_id.

    Raises ValidationError naming the class of problem and the offending fields.
    Missing fields are reported before non-numeric ones.
    """
    schema = get_schema(kind)
    if not isinstance(raw, Mapping):
        raise ValidationError(MISSING_FIELD, list(schema.required), "Request body must be a JSON object.")

    required = schema.required
    if create and schema.owner_field:
        required = (schema.owner_field,) + required

    missing = [name for name in required if _is_missing(raw.get(name))]
    if missing:
        raise ValidationError(MISSING_FIELD, missing, _message(schema, "Missing required fields", missing))

    values: dict[str, Any] = {}
    bad: list[str] = []

    for name in schema.strings:
        value = raw[name]
        if not isinstance(value, str):
            value = str(value)
        values[name] = value.strip()

    for name in schema.numbers:
        number = parse_number(raw[name])
        if number is None:
            bad.append(name)
        else:
            values[name] = number

    for name in schema.integers:
        number = parse_number(raw[name])
        if number is None or not number.is_integer():
            bad.append(name)
        else:
            values[name] = int(number)

    if create and schema.owner_field:
        owner_id = _parse_owner_id(raw[schema.owner_field])
        if owner_id is None:
            bad.insert(0, schema.owner_field)
        else:
            values[schema.owner_field] = owner_id

    if bad:
        raise ValidationError(NON_NUMERIC_FIELD, bad, _message(schema, "Invalid numeric values", bad))

    for name in schema.dates:
        parsed = parse_date(raw[name])
        if parsed is None:
            raise ValidationError(
                INVALID_DATE, [name], _message(schema, "Dates must be YYYY-MM-DD", [name])
            )
        values[name] = parsed

    for name in schema.optional:
        value = raw.get(name)
        if _is_missing(value):
            values[name] = None
        else:
            values[name] = str(value).strip()

    model = schema.create_model if (create and schema.create_model) else schema.payload_model
    return model(**values)


def _message(schema: EntitySchema, problem: str, fields: list[str]) -> str:
    return f"{problem} for {schema.label}: {', '.join(fields)}."
