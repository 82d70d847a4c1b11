"""Goal / assist / point leaderboards."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Iterable, List, Literal, Mapping, Sequence, Tuple, Union, get_args


PlayerKey = Union[int, str]
RankingMetric = Literal["goals", "assists", "points"]
RANKING_METRICS: Tuple[str, ...] = get_args(RankingMetric)


@dataclass(frozen=True)
class PlayerRanking:
    player_id: PlayerKey
    name: str
    goals: int = 0
    assists: int = 0
    games: int = 0
    rank: int = 0

    @property
    def points(self) -> int:
        return self.goals + self.assists


def compute_rankings(
    players: Iterable[Tuple[PlayerKey, str]],
    stat_totals: Mapping[PlayerKey, Tuple[int, int]],
    team_members: Iterable[Tuple[int, PlayerKey]],
    matches: Iterable[Tuple[int, int]],
) -> List[PlayerRanking]:
    """Combine per-player goal/assist totals with games played.

    A player is credited with a game for every match involving a team they
    belonged to. Stats for unknown player ids are ignored.
    """

    members_by_team: dict[int, list[PlayerKey]] = defaultdict(list)
    for team_id, player_id in team_members:
        members_by_team[team_id].append(player_id)

    games: dict[PlayerKey, int] = defaultdict(int)
    for team1_id, team2_id in matches:
        for team_id in (team1_id, team2_id):
            for player_id in members_by_team.get(team_id, ()):
                games[player_id] += 1

    entries: List[PlayerRanking] = []
    for player_id, name in players:
        goals, assists = stat_totals.get(player_id, (0, 0))
        entries.append(
            PlayerRanking(
                player_id=player_id,
                name=name,
                goals=int(goals or 0),
                assists=int(assists or 0),
                games=games.get(player_id, 0),
            )
        )
    return entries


def top_rankings(
    entries: Sequence[PlayerRanking],
    metric: str,
    *,
    limit: int = 10,
) -> List[PlayerRanking]:
    """Sort by metric (desc), games played (asc, fewer is more efficient), then name."""

    if metric not in RANKING_METRICS:
        raise ValueError(f"Invalid ranking type {metric!r}")
    ordered = sorted(entries, key=lambda e: (-getattr(e, metric), e.games, e.name))
    return [replace(entry, rank=idx + 1) for idx, entry in enumerate(ordered[:limit])]
