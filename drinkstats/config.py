"""Tunable constants for the statistics core.

Defaults follow the WHO-style guideline figures used throughout the app.
A YAML file can override any field:

    session_gap_hours: 3
    weekly_limit_grams: {male: 196, female: 140}
    extra_units: {pint: 56.8}
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DRINKSTATS_CONFIG"


@dataclass(frozen=True)
class StatsConfig:
    # Sessions
    session_gap_hours: float = 4.0

    # Widmark model
    elimination_per_hour: float = 0.15  # g/L per hour
    distribution_factors: dict[str, float] = field(
        default_factory=lambda: {"male": 0.68, "female": 0.55}
    )
    legal_limit_g_per_l: float = 0.5

    # Guideline limits (grams of ethanol)
    weekly_limit_grams: dict[str, float] = field(
        default_factory=lambda: {"male": 210.0, "female": 140.0}
    )
    daily_limit_grams: dict[str, float] = field(
        default_factory=lambda: {"male": 40.0, "female": 30.0}
    )

    # Output shaping
    drink_limit: int = 20
    recent_sessions: int = 5

    # Units added on top of drinkstats.drinks.UNIT_TABLE (unit -> cL per unit)
    extra_units: dict[str, float] = field(default_factory=dict)

    def distribution_factor(self, gender: str | None) -> float:
        """Widmark r for a gender; unknown falls back to the larger factor."""
        factors = self.distribution_factors
        if gender in factors:
            return factors[gender]
        return max(factors.values())

    def weekly_limit(self, gender: str | None) -> float:
        limits = self.weekly_limit_grams
        return limits[gender] if gender in limits else max(limits.values())

    def daily_limit(self, gender: str | None) -> float:
        limits = self.daily_limit_grams
        return limits[gender] if gender in limits else max(limits.values())


DEFAULT_CONFIG = StatsConfig()

_FLOAT_FIELDS = {"session_gap_hours", "elimination_per_hour", "legal_limit_g_per_l"}
_INT_FIELDS = {"drink_limit", "recent_sessions"}
_MAPPING_FIELDS = {
    "distribution_factors",
    "weekly_limit_grams",
    "daily_limit_grams",
    "extra_units",
}


def _coerce_mapping(key: str, value: Any) -> dict[str, float]:
    if not isinstance(value, dict):
        raise ValueError(f"{key} must be a mapping")
    try:
        return {str(k): float(v) for k, v in value.items()}
    except (TypeError, ValueError):
        raise ValueError(f"{key} values must be numbers")


def config_from_dict(data: dict[str, Any], base: StatsConfig = DEFAULT_CONFIG) -> StatsConfig:
    """Overlay a plain mapping onto ``base``. Unknown keys are ignored."""
    known = {f.name for f in fields(StatsConfig)}
    overrides: dict[str, Any] = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        try:
            if key in _FLOAT_FIELDS:
                overrides[key] = float(value)
            elif key in _INT_FIELDS:
                overrides[key] = int(value)
            elif key in _MAPPING_FIELDS:
                merged = dict(getattr(base, key))
                merged.update(_coerce_mapping(key, value))
                overrides[key] = merged
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value for {key}: {value!r}") from exc

    config = replace(base, **overrides)
    if config.session_gap_hours <= 0:
        raise ValueError("session_gap_hours must be > 0")
    if config.elimination_per_hour < 0:
        raise ValueError("elimination_per_hour must be >= 0")
    if not config.distribution_factors or min(config.distribution_factors.values()) <= 0:
        raise ValueError("distribution_factors must be positive")
    if not config.weekly_limit_grams or not config.daily_limit_grams:
        raise ValueError("guideline limits cannot be empty")
    return config


def load_config(path: str | os.PathLike | None = None) -> StatsConfig:
    """Load config from ``path`` or $DRINKSTATS_CONFIG; defaults when neither is set."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return DEFAULT_CONFIG

    with open(Path(path), encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    logger.debug("Loaded stats config from %s", path)
    return config_from_dict(data)
