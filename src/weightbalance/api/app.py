"""FastAPI app factory."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from weightbalance import __version__
from weightbalance.api.auth import router as auth_router
from weightbalance.api.auth_config import get_jwt_secret, is_dev_mode
from weightbalance.api.details import crew_router, galley_router
from weightbalance.api.errors import register_error_handlers
from weightbalance.api.flight_records import router as flight_records_router
from weightbalance.api.pages import router as pages_router
from weightbalance.config import INDEX_POLICY_ENFORCE, get_index_policy, load_aircraft
from weightbalance.db.engine import (
    SessionLocal,
    ensure_dev_user,
    get_engine,
    init_db,
)
from weightbalance.storage.details import IndexPolicy

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    env = os.environ.get("ENVIRONMENT", "development")
    engine = get_engine()

    if env == "development":
        init_db(engine)
        logger.info("Dev mode: tables created via init_db")

    if is_dev_mode():
        with SessionLocal() as session:
            ensure_dev_user(session)
        logger.info("Dev user ensured")

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    load_dotenv()

    app = FastAPI(
        title="Weight & Balance API",
        description="Aircraft weight-and-balance report records",
        version=__version__,
        lifespan=lifespan,
    )

    aircraft = load_aircraft()
    app.state.aircraft = aircraft
    app.state.index_policy = IndexPolicy(
        enforce=get_index_policy() == INDEX_POLICY_ENFORCE,
        reference_arm_m=aircraft.reference_arm_m,
    )
    logger.info(
        "Aircraft '%s' (reference arm %.2f m), index policy: %s",
        aircraft.key, aircraft.reference_arm_m,
        "enforce" if app.state.index_policy.enforce else "advisory",
    )

    # SessionMiddleware required by authlib for OAuth CSRF state
    app.add_middleware(SessionMiddleware, secret_key=get_jwt_secret())

    if is_dev_mode():
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_error_handlers(app)

    app.include_router(auth_router)
    app.include_router(flight_records_router)
    app.include_router(galley_router)
    app.include_router(crew_router)
    app.include_router(pages_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
