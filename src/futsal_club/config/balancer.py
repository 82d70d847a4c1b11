"""Tunable constants for player scoring and the team balancer."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace


logger = logging.getLogger("uvicorn.error")

_ITERATIONS_ENV = "FUTSAL_BALANCER_ITERATIONS"
_CHEMISTRY_WEIGHT_ENV = "FUTSAL_CHEMISTRY_WEIGHT"

_ITERATIONS_DEFAULT = 1000
_CHEMISTRY_WEIGHT_DEFAULT = 0.0


@dataclass(frozen=True)
class ScoreWeights:
    attack: float = 1.0
    mid: float = 1.0
    defense: float = 1.0
    base: float = 0.8
    physical: float = 0.6


@dataclass(frozen=True)
class BalancerSettings:
    iterations: int = _ITERATIONS_DEFAULT
    weights: ScoreWeights = field(default_factory=ScoreWeights)
    # Missing ratings score as the midpoint of the 1-10 scale.
    default_skill: int = 5
    default_physical: int = 5
    # 0.0 keeps acceptance on team-total spread only.
    chemistry_weight: float = _CHEMISTRY_WEIGHT_DEFAULT

    def with_overrides(self, **changes) -> "BalancerSettings":
        return replace(self, **changes)


def _env_float(name: str, default: float, *, clamp_min: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def load_settings() -> BalancerSettings:
    """Return balancer settings with environment overrides applied."""

    return BalancerSettings(
        iterations=_env_int(_ITERATIONS_ENV, _ITERATIONS_DEFAULT, min_value=0),
        chemistry_weight=_env_float(_CHEMISTRY_WEIGHT_ENV, _CHEMISTRY_WEIGHT_DEFAULT, clamp_min=0.0),
    )
