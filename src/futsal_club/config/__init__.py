"""Configuration helpers for team balancing."""

from .balancer import BalancerSettings, ScoreWeights, load_settings

__all__ = [
    "BalancerSettings",
    "ScoreWeights",
    "load_settings",
]
