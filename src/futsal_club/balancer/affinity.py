"""Assemble chemistry edges from stored pairings and player preferences."""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Mapping, Sequence, Union

from futsal_club.models import AffinityEdge, PlayerPreference


PlayerKey = Union[int, str]

PREFERENCE_RANK_SCORES: Mapping[int, float] = {1: 5.0, 2: 3.0}
_PREFERENCE_FALLBACK_SCORE = 1.0


def _pair_key(a: PlayerKey, b: PlayerKey) -> FrozenSet[PlayerKey]:
    return frozenset((a, b))


def preference_score(rank: int) -> float:
    return PREFERENCE_RANK_SCORES.get(rank, _PREFERENCE_FALLBACK_SCORE)


def combine_affinity(
    edges: Iterable[AffinityEdge] = (),
    preferences: Iterable[PlayerPreference] = (),
) -> List[AffinityEdge]:
    """Merge static edges and ranked preferences into one undirected edge per pair."""

    totals: Dict[FrozenSet[PlayerKey], float] = {}
    order: Dict[FrozenSet[PlayerKey], tuple[PlayerKey, PlayerKey]] = {}

    def _add(a: PlayerKey, b: PlayerKey, score: float) -> None:
        if a == b:
            return
        key = _pair_key(a, b)
        totals[key] = totals.get(key, 0.0) + score
        order.setdefault(key, (a, b))

    for edge in edges:
        _add(edge.player_a_id, edge.player_b_id, edge.score)
    for pref in preferences:
        _add(pref.player_id, pref.target_player_id, preference_score(pref.rank))

    return [
        AffinityEdge(player_a_id=order[key][0], player_b_id=order[key][1], score=score)
        for key, score in totals.items()
    ]


def affinity_lookup(edges: Iterable[AffinityEdge]) -> Dict[FrozenSet[PlayerKey], float]:
    lookup: Dict[FrozenSet[PlayerKey], float] = {}
    for edge in edges:
        if edge.player_a_id == edge.player_b_id:
            continue
        key = _pair_key(edge.player_a_id, edge.player_b_id)
        lookup[key] = lookup.get(key, 0.0) + edge.score
    return lookup


def team_chemistry(
    member_ids: Sequence[PlayerKey],
    lookup: Mapping[FrozenSet[PlayerKey], float],
) -> float:
    total = 0.0
    for i in range(len(member_ids)):
        for j in range(i + 1, len(member_ids)):
            total += lookup.get(_pair_key(member_ids[i], member_ids[j]), 0.0)
    return total
