"""Galley and crew detail-line persistence.

Both kinds share one contract: create under an owning flight record, update
by the line's own id (never re-parenting it), delete by id. Whether the
owning record exists is left to the foreign key.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from pydantic import BaseModel
from sqlalchemy import delete, insert, update
from sqlalchemy.orm import Session

from weightbalance.calc import DEFAULT_REFERENCE_ARM_M, compute_index
from weightbalance.db.gateway import execute
from weightbalance.db.models import Base, CrewDetailRow, GalleyDetailRow
from weightbalance.errors import NotFound
from weightbalance.storage.flight_records import row_to_crew_detail, row_to_galley_detail
from weightbalance.validation import CREW_DETAIL, GALLEY_DETAIL, get_schema, validate_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexPolicy:
    """How index fields are treated on the way in.

    With ``enforce`` off, supplied index values are stored as-is; with it on,
    every index field is recomputed from its weight and the line's arm.
    """

    enforce: bool = False
    reference_arm_m: float = DEFAULT_REFERENCE_ARM_M


ADVISORY = IndexPolicy()


@dataclass(frozen=True)
class _DetailKind:
    kind: str
    row: type[Base]
    to_model: Callable[[Any], BaseModel]


_KINDS: dict[str, _DetailKind] = {
    GALLEY_DETAIL: _DetailKind(GALLEY_DETAIL, GalleyDetailRow, row_to_galley_detail),
    CREW_DETAIL: _DetailKind(CREW_DETAIL, CrewDetailRow, row_to_crew_detail),
}


def _kind(kind: str) -> _DetailKind:
    try:
        return _KINDS[kind]
    except KeyError:
        raise ValueError(f"Not a detail-line kind: {kind}") from None


def apply_index_policy(kind: str, values: dict[str, Any], policy: IndexPolicy) -> dict[str, Any]:
    """Return ``values`` with index fields recomputed when the policy enforces them."""
    if not policy.enforce:
        return values
    values = dict(values)
    for index_field, weight_field in get_schema(kind).index_pairs:
        values[index_field] = round(
            compute_index(values[weight_field], values["arm_m"], policy.reference_arm_m), 2
        )
    return values


def create_detail(
    session: Session,
    kind: str,
    raw: Mapping[str, Any],
    policy: IndexPolicy = ADVISORY,
) -> BaseModel:
    """Validate and insert a detail line, returning the stored row with id and timestamps."""
    k = _kind(kind)
    label = get_schema(kind).label
    payload = validate_payload(kind, raw, create=True)
    values = apply_index_policy(kind, payload.model_dump(), policy)

    stmt = insert(k.row).values(**values).returning(k.row)
    row = execute(session, stmt, action=f"creating {label.lower()}").scalar_one()
    logger.info("%s %d created for flight record %d", label, row.id, row.flight_record_id)
    return k.to_model(row)


def update_detail(
    session: Session,
    kind: str,
    detail_id: int,
    raw: Mapping[str, Any],
    policy: IndexPolicy = ADVISORY,
) -> BaseModel:
    """Replace every field of a detail line except its owning record. Raises NotFound."""
    k = _kind(kind)
    label = get_schema(kind).label
    payload = validate_payload(kind, raw)
    values = apply_index_policy(kind, payload.model_dump(), policy)

    stmt = (
        update(k.row)
        .where(k.row.id == detail_id)
        .values(**values)
        .returning(k.row)
        .execution_options(populate_existing=True)
    )
    row = execute(session, stmt, action=f"updating {label.lower()}").scalar_one_or_none()
    if row is None:
        raise NotFound(f"{label} not found for update.")
    logger.info("%s %d updated", label, detail_id)
    return k.to_model(row)


def delete_detail(session: Session, kind: str, detail_id: int) -> None:
    """Delete a detail line by id. Raises NotFound."""
    k = _kind(kind)
    label = get_schema(kind).label
    stmt = delete(k.row).where(k.row.id == detail_id).returning(k.row.id)
    deleted = execute(session, stmt, action=f"deleting {label.lower()}").scalar_one_or_none()
    if deleted is None:
        raise NotFound(f"{label} not found for deletion.")
    logger.info("%s %d deleted", label, detail_id)
