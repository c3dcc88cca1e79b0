"""Pydantic v2 models for weightbalance.

Re-exports from submodules so ``from weightbalance.models import X`` keeps working.
"""

from weightbalance.models.records import (  # noqa: F401
    CrewDetail,
    CrewDetailCreate,
    CrewDetailPayload,
    CrewTotals,
    FlightRecord,
    FlightRecordDetail,
    FlightRecordPayload,
    GalleyDetail,
    GalleyDetailCreate,
    GalleyDetailPayload,
    GalleyTotals,
    ReportTotals,
)
