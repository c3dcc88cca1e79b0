"""Aircraft and index-policy configuration."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel

from weightbalance.calc import DEFAULT_REFERENCE_ARM_M

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "config"

INDEX_POLICY_ADVISORY = "advisory"
INDEX_POLICY_ENFORCE = "enforce"


class AircraftConfig(BaseModel):
    """Per-type constants used by the index formula."""

    key: str = "default"
    name: str = "Default aircraft"
    reference_arm_m: float = DEFAULT_REFERENCE_ARM_M


def _load_aircraft_yaml(config_dir: Path) -> dict:
    aircraft_file = config_dir / "aircraft.yaml"
    if not aircraft_file.exists():
        return {}
    with open(aircraft_file) as f:
        data = yaml.safe_load(f) or {}
    return data.get("aircraft", {}) or {}


def load_aircraft(name: str | None = None, config_dir: Path | None = None) -> AircraftConfig:
    """Load an aircraft type from aircraft.yaml.

    Args:
        name: Key in aircraft.yaml; defaults to the AIRCRAFT_TYPE env var, then "default".
        config_dir: Override for config directory (testing).

    Falls back to the built-in reference arm when the file or key is missing.
    """
    config_dir = config_dir or CONFIG_DIR
    name = name or os.environ.get("AIRCRAFT_TYPE", "default")

    types = _load_aircraft_yaml(config_dir)
    if name not in types:
        if types:
            logger.warning("Aircraft type '%s' not in aircraft.yaml, using defaults", name)
        return AircraftConfig(key=name)

    a = types[name]
    return AircraftConfig(
        key=name,
        name=a.get("name", name),
        reference_arm_m=float(a.get("reference_arm_m", DEFAULT_REFERENCE_ARM_M)),
    )


def list_aircraft(config_dir: Path | None = None) -> list[str]:
    """List configured aircraft type keys."""
    return list(_load_aircraft_yaml(config_dir or CONFIG_DIR).keys())


def get_index_policy() -> str:
    """Return "advisory" (store supplied index values) or "enforce" (recompute)."""
    policy = os.environ.get("INDEX_POLICY", INDEX_POLICY_ADVISORY).strip().lower()
    if policy not in (INDEX_POLICY_ADVISORY, INDEX_POLICY_ENFORCE):
        raise ValueError(f"INDEX_POLICY must be 'advisory' or 'enforce', got '{policy}'")
    return policy
