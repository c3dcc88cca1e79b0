"""API endpoints for galley and crew detail lines.

Both resources expose POST on the collection and PUT/DELETE on an item;
the handlers differ only in the entity kind they pass to the storage layer.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session

from weightbalance.db.deps import current_user_id, get_db
from weightbalance.models import CrewDetail, GalleyDetail
from weightbalance.storage.details import ADVISORY, IndexPolicy, create_detail, delete_detail, update_detail
from weightbalance.validation import CREW_DETAIL, GALLEY_DETAIL, get_schema


def index_policy(request: Request) -> IndexPolicy:
    return getattr(request.app.state, "index_policy", ADVISORY)


def _build_router(kind: str, prefix: str, response_model: type) -> APIRouter:
    label = get_schema(kind).label
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])

    @router.post(
        "", response_model=response_model, status_code=201, summary=f"Create {label}"
    )
    def create(
        payload: dict[str, Any] = Body(...),
        policy: IndexPolicy = Depends(index_policy),
        user_id: str = Depends(current_user_id),
        db: Session = Depends(get_db),
    ):
        return create_detail(db, kind, payload, policy)

    @router.put("/{detail_id}", response_model=response_model, summary=f"Update {label}")
    def update(
        detail_id: int,
        payload: dict[str, Any] = Body(...),
        policy: IndexPolicy = Depends(index_policy),
        user_id: str = Depends(current_user_id),
        db: Session = Depends(get_db),
    ):
        return update_detail(db, kind, detail_id, payload, policy)

    @router.delete("/{detail_id}", summary=f"Delete {label}")
    def remove(
        detail_id: int,
        user_id: str = Depends(current_user_id),
        db: Session = Depends(get_db),
    ):
        delete_detail(db, kind, detail_id)
        return {"message": f"{label} with ID {detail_id} deleted successfully."}

    return router


galley_router = _build_router(GALLEY_DETAIL, "/galley-details", GalleyDetail)
crew_router = _build_router(CREW_DETAIL, "/crew-details", CrewDetail)
