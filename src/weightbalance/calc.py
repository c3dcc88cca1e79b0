"""Balance index computation and detail-line totals."""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from weightbalance.models import CrewDetail, CrewTotals, GalleyDetail, GalleyTotals

# Reference arm (m) of the modelled aircraft type; overridden via config/aircraft.yaml.
DEFAULT_REFERENCE_ARM_M = 18.85


def compute_index(
    weight: float, arm: float, reference_arm: float = DEFAULT_REFERENCE_ARM_M
) -> float:
    """Balance index of a load: ``weight * (arm - reference_arm) / 1000``.

    The result is not rounded; use :func:`format_index` for display.
    """
    return (weight * (arm - reference_arm)) / 1000


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def try_compute_index(
    weight: Any, arm: Any, reference_arm: float = DEFAULT_REFERENCE_ARM_M
) -> float | None:
    """Index rounded to 2 decimals, or None when either input is not a number.

    This is the value an entry form pre-fills from raw field text.
    """
    w = _as_number(weight)
    a = _as_number(arm)
    if w is None or a is None:
        return None
    return round(compute_index(w, a, reference_arm), 2)


def format_index(value: float | None) -> str:
    """Render an index (or any weight) to 2 decimals; absent values render empty."""
    if value is None:
        return ""
    return f"{value:.2f}"


def galley_totals(lines: Iterable[GalleyDetail]) -> GalleyTotals:
    totals = GalleyTotals()
    for line in lines:
        totals.domestic_weight_kg += line.domestic_weight_kg
        totals.domestic_index += line.domestic_index
        totals.international_weight_kg += line.international_weight_kg
        totals.international_index += line.international_index
    return totals


def crew_totals(lines: Iterable[CrewDetail]) -> CrewTotals:
    totals = CrewTotals()
    for line in lines:
        totals.qty += line.qty
        totals.weight_kg += line.weight_kg
        totals.index += line.index
    return totals
