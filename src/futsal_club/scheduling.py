"""Team naming and match fixtures for a session."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from futsal_club.balancer import Team
from futsal_club.models import PlayerProfile


TEAM_NAME_SUFFIX = "팀"
DEFAULT_AUTOFILL_TARGET = 9
_TWO_TEAM_MATCHES = 5
_THREE_TEAM_ROUNDS = 3


@dataclass(frozen=True)
class Fixture:
    match_no: int
    team1_id: int
    team2_id: int


def _join_timestamp(player: PlayerProfile) -> Optional[float]:
    if not player.join_date:
        return None
    try:
        return datetime.fromisoformat(player.join_date).timestamp()
    except ValueError:
        return None


def senior_member(players: Iterable[PlayerProfile]) -> Optional[PlayerProfile]:
    """Earliest joiner; members without a usable join date sort last, then by name."""

    def _key(player: PlayerProfile) -> tuple:
        ts = _join_timestamp(player)
        return (ts is None, ts or 0.0, player.name)

    ordered = sorted(players, key=_key)
    return ordered[0] if ordered else None


def name_teams(teams: Sequence[Team]) -> List[str]:
    names: List[str] = []
    for team in teams:
        senior = senior_member(team.players)
        if senior is None:
            names.append(f"Team {team.team_id}")
        else:
            names.append(f"{senior.name}{TEAM_NAME_SUFFIX}")
    return names


def _cycle(team_ids: Sequence[int]) -> List[tuple[int, int]]:
    if len(team_ids) == 3:
        a, b, c = team_ids
        return [(a, b), (b, c), (c, a)]
    if len(team_ids) == 2:
        return [(team_ids[0], team_ids[1])]
    return []


def _number(pairs: Iterable[tuple[int, int]], start: int = 1) -> List[Fixture]:
    return [Fixture(match_no=start + i, team1_id=t1, team2_id=t2) for i, (t1, t2) in enumerate(pairs)]


def round_robin(team_ids: Sequence[int]) -> List[Fixture]:
    pairs = [
        (team_ids[i], team_ids[j])
        for i in range(len(team_ids))
        for j in range(i + 1, len(team_ids))
    ]
    return _number(pairs)


def build_fixtures(team_ids: Sequence[int], *, round_robin_fallback: bool = True) -> List[Fixture]:
    """Three teams rotate A-B, B-C, C-A three times; two teams meet five times."""

    if len(team_ids) < 2:
        raise ValueError("At least two teams are required to schedule matches")
    if len(team_ids) == 3:
        return _number(_cycle(team_ids) * _THREE_TEAM_ROUNDS)
    if len(team_ids) == 2:
        return _number(_cycle(team_ids) * _TWO_TEAM_MATCHES)
    if round_robin_fallback:
        return round_robin(team_ids)
    return []


def rotation_fixtures(team_ids: Sequence[int], total_matches: int) -> List[Fixture]:
    if len(team_ids) != 3:
        raise ValueError("Rotation requires exactly 3 teams")
    if total_matches < 0:
        raise ValueError("total_matches must be non-negative")
    cycle = _cycle(team_ids)
    return _number(cycle[i % 3] for i in range(total_matches))


def autofill_fixtures(
    team_ids: Sequence[int],
    existing_count: int,
    *,
    target: int = DEFAULT_AUTOFILL_TARGET,
) -> List[Fixture]:
    """Continue the two/three-team cycle from ``existing_count`` up to ``target``."""

    if len(team_ids) < 2:
        raise ValueError("At least two teams are required to schedule matches")
    if existing_count >= target:
        return []
    if len(team_ids) == 3:
        return rotation_fixtures(team_ids, target)[existing_count:]
    if len(team_ids) == 2:
        pair = _cycle(team_ids)[0]
        return _number([pair] * (target - existing_count), start=existing_count + 1)
    return []
