"""Snake-draft seeding plus hill-climbing swaps to split attendees into even teams."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from futsal_club.config import BalancerSettings
from futsal_club.models import AffinityEdge, PlayerProfile

from .affinity import affinity_lookup, team_chemistry
from .scoring import TeamStats, player_score, team_stats


logger = logging.getLogger("uvicorn.error")


class InvalidTeamCount(ValueError):
    """Raised when a balancing run is requested with a non-positive team count."""

    def __init__(self, num_teams: object):
        super().__init__(f"num_teams must be a positive integer, got {num_teams!r}")
        self.num_teams = num_teams


@dataclass(frozen=True)
class Team:
    team_id: str
    players: Tuple[PlayerProfile, ...]
    stats: TeamStats

    @property
    def size(self) -> int:
        return len(self.players)


@dataclass(frozen=True)
class SwapRecord:
    iteration: int
    player_a: str
    player_b: str
    variance: float
    chemistry: float


@dataclass(frozen=True)
class GeneratorResult:
    teams: Tuple[Team, ...]
    balance_score: float
    variance: float
    logs: Tuple[str, ...]
    swaps: Tuple[SwapRecord, ...] = ()


def team_label(index: int) -> str:
    """Spreadsheet-style ordinal: 0 -> A, 25 -> Z, 26 -> AA."""

    label = ""
    index += 1
    while index > 0:
        index, rem = divmod(index - 1, 26)
        label = chr(65 + rem) + label
    return label


def _validate_team_count(num_teams: object) -> int:
    if isinstance(num_teams, bool) or not isinstance(num_teams, int) or num_teams <= 0:
        raise InvalidTeamCount(num_teams)
    return num_teams


def rank_players(
    players: Sequence[PlayerProfile],
    settings: BalancerSettings,
) -> List[PlayerProfile]:
    """Sort by overall score descending; equal scores keep input order."""

    indexed = list(enumerate(players))
    indexed.sort(key=lambda item: (-player_score(item[1], settings), item[0]))
    return [player for _, player in indexed]


def snake_seed(ranked: Sequence[PlayerProfile], num_teams: int) -> List[List[PlayerProfile]]:
    """Deal ``ranked`` into ``num_teams`` buckets, reversing direction every round."""

    num_teams = _validate_team_count(num_teams)
    buckets: List[List[PlayerProfile]] = [[] for _ in range(num_teams)]
    round_size = num_teams * 2
    for i, player in enumerate(ranked):
        slot = i % round_size
        index = slot if slot < num_teams else round_size - 1 - slot
        buckets[index].append(player)
    return buckets


def spread(buckets: Sequence[Sequence[PlayerProfile]], settings: BalancerSettings) -> float:
    """Max minus min of team totals."""

    totals = [team_stats(bucket, settings).total for bucket in buckets]
    if not totals:
        return 0.0
    return max(totals) - min(totals)


class TeamBalancer:
    """Partition a roster into evenly matched teams.

    Affinity edges are optional. They only influence swap acceptance when
    ``settings.chemistry_weight`` is positive; otherwise the search minimises
    the spread between the strongest and weakest team totals.
    """

    def __init__(
        self,
        players: Iterable[PlayerProfile],
        affinity: Iterable[AffinityEdge] = (),
        *,
        settings: Optional[BalancerSettings] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ):
        self._players = list(players)
        self._affinity = affinity_lookup(affinity)
        self._settings = settings or BalancerSettings()
        if rng is not None:
            self._rng = rng
        else:
            self._rng = random.Random(seed)

    @property
    def settings(self) -> BalancerSettings:
        return self._settings

    def _chemistry(self, buckets: Sequence[Sequence[PlayerProfile]]) -> float:
        if not self._affinity:
            return 0.0
        return sum(
            team_chemistry([player.player_id for player in bucket], self._affinity)
            for bucket in buckets
        )

    def _objective(self, variance: float, chemistry: float) -> float:
        return variance - self._settings.chemistry_weight * chemistry

    def _optimize(self, buckets: List[List[PlayerProfile]], logs: List[str]) -> Tuple[float, List[SwapRecord]]:
        settings = self._settings
        rng = self._rng
        num_teams = len(buckets)
        use_chemistry = settings.chemistry_weight > 0 and bool(self._affinity)

        variance = spread(buckets, settings)
        chemistry = self._chemistry(buckets) if use_chemistry else 0.0
        current = self._objective(variance, chemistry)
        swaps: List[SwapRecord] = []

        for iteration in range(settings.iterations):
            t1 = rng.randrange(num_teams)
            t2 = rng.randrange(num_teams)
            if t1 == t2:
                continue
            team_a = buckets[t1]
            team_b = buckets[t2]
            if not team_a or not team_b:
                continue
            i1 = rng.randrange(len(team_a))
            i2 = rng.randrange(len(team_b))
            p1 = team_a[i1]
            p2 = team_b[i2]

            team_a[i1], team_b[i2] = p2, p1

            new_variance = spread(buckets, settings)
            new_chemistry = self._chemistry(buckets) if use_chemistry else 0.0
            candidate = self._objective(new_variance, new_chemistry)

            if candidate < current:
                current = candidate
                variance = new_variance
                chemistry = new_chemistry
                swaps.append(
                    SwapRecord(
                        iteration=iteration,
                        player_a=p1.name,
                        player_b=p2.name,
                        variance=new_variance,
                        chemistry=new_chemistry,
                    )
                )
                if use_chemistry:
                    logs.append(
                        f"Swap {p1.name} <-> {p2.name}: Var {new_variance:.1f}, "
                        f"Chem {new_chemistry:g}, Score {candidate:.1f}"
                    )
                else:
                    logs.append(f"Swap {p1.name} <-> {p2.name}: Var {new_variance:.1f}")
            else:
                team_a[i1], team_b[i2] = p1, p2

        return variance, swaps

    def generate(self, num_teams: int) -> GeneratorResult:
        num_teams = _validate_team_count(num_teams)
        settings = self._settings
        logs: List[str] = [
            f"Starting generation with {len(self._players)} players for {num_teams} teams."
        ]

        if not self._players:
            logs.append("No players supplied; returning empty teams.")
            empty = tuple(
                Team(team_id=team_label(idx), players=(), stats=team_stats((), settings))
                for idx in range(num_teams)
            )
            return GeneratorResult(teams=empty, balance_score=100.0, variance=0.0, logs=tuple(logs))

        buckets = snake_seed(rank_players(self._players, settings), num_teams)
        logs.append("Initial snake distribution done.")

        swaps: List[SwapRecord] = []
        if num_teams > 1:
            variance, swaps = self._optimize(buckets, logs)
        else:
            variance = spread(buckets, settings)

        if settings.chemistry_weight > 0 and self._affinity:
            logs.append(f"Final variance: {variance:.2f}, Final chemistry: {self._chemistry(buckets):g}")
        else:
            logs.append(f"Final variance: {variance:.2f}")

        teams = tuple(
            Team(team_id=team_label(idx), players=tuple(bucket), stats=team_stats(bucket, settings))
            for idx, bucket in enumerate(buckets)
        )
        balance_score = max(0.0, 100.0 - variance)
        logger.info(
            "Balanced %s players into %s teams (%s swaps accepted, variance %.2f, score %.1f)",
            len(self._players),
            num_teams,
            len(swaps),
            variance,
            balance_score,
        )
        return GeneratorResult(
            teams=teams,
            balance_score=balance_score,
            variance=variance,
            logs=tuple(logs),
            swaps=tuple(swaps),
        )


def generate_teams(
    players: Iterable[PlayerProfile],
    num_teams: int,
    *,
    affinity: Iterable[AffinityEdge] = (),
    settings: Optional[BalancerSettings] = None,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
) -> GeneratorResult:
    """Convenience wrapper around :class:`TeamBalancer`."""

    balancer = TeamBalancer(players, affinity, settings=settings, rng=rng, seed=seed)
    return balancer.generate(num_teams)
