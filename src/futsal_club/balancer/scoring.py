"""Player and team scoring used by the balancer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from futsal_club.config import BalancerSettings
from futsal_club.models import PlayerProfile


_DEFAULT_SETTINGS = BalancerSettings()


@dataclass(frozen=True)
class ScoreBreakdown:
    attack: int
    mid: int
    defense: int
    base: int
    physical: int


@dataclass(frozen=True)
class TeamStats:
    attack: int
    mid: int
    defense: int
    base: int
    physical: int
    total: float


def _skill(value: Optional[int], default: int) -> int:
    return default if value is None else value


def score_breakdown(player: PlayerProfile, settings: BalancerSettings = _DEFAULT_SETTINGS) -> ScoreBreakdown:
    """Group the eight skill ratings into attack/mid/defense/base plus physical."""

    d = settings.default_skill
    return ScoreBreakdown(
        attack=_skill(player.shooting, d) + _skill(player.offball_run, d),
        mid=_skill(player.ball_keeping, d) + _skill(player.passing, d),
        defense=_skill(player.intercept, d) + _skill(player.marking, d),
        base=_skill(player.stamina, d) + _skill(player.speed, d),
        physical=_skill(player.physical_rating, settings.default_physical),
    )


def weighted_score(breakdown: ScoreBreakdown, settings: BalancerSettings = _DEFAULT_SETTINGS) -> float:
    w = settings.weights
    return (
        w.attack * breakdown.attack
        + w.mid * breakdown.mid
        + w.defense * breakdown.defense
        + w.base * breakdown.base
        + w.physical * breakdown.physical
    )


def player_score(player: PlayerProfile, settings: BalancerSettings = _DEFAULT_SETTINGS) -> float:
    """Single comparable overall rating for ``player``."""

    return weighted_score(score_breakdown(player, settings), settings)


def team_stats(players: Iterable[PlayerProfile], settings: BalancerSettings = _DEFAULT_SETTINGS) -> TeamStats:
    """Sum raw breakdown components and weighted overall for a team's members."""

    attack = mid = defense = base = physical = 0
    total = 0.0
    for player in players:
        parts = score_breakdown(player, settings)
        attack += parts.attack
        mid += parts.mid
        defense += parts.defense
        base += parts.base
        physical += parts.physical
        total += weighted_score(parts, settings)
    return TeamStats(attack=attack, mid=mid, defense=defense, base=base, physical=physical, total=total)
