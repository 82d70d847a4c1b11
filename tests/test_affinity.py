import pytest

from futsal_club.balancer import combine_affinity, preference_score
from futsal_club.balancer.affinity import affinity_lookup, team_chemistry
from futsal_club.models import AffinityEdge, PlayerPreference


def test_preference_rank_scores():
    assert preference_score(1) == 5.0
    assert preference_score(2) == 3.0
    assert preference_score(3) == 1.0
    assert preference_score(7) == 1.0


def test_mutual_preferences_sum_into_one_edge():
    prefs = [
        PlayerPreference(player_id=1, target_player_id=2, rank=1),
        PlayerPreference(player_id=2, target_player_id=1, rank=2),
        PlayerPreference(player_id=1, target_player_id=3, rank=3),
    ]

    edges = combine_affinity(preferences=prefs)

    assert [(e.player_a_id, e.player_b_id, e.score) for e in edges] == [(1, 2, 8.0), (1, 3, 1.0)]


def test_static_edges_and_preferences_combine():
    edges = [AffinityEdge(player_a_id=2, player_b_id=1, score=4)]
    prefs = [PlayerPreference(player_id=1, target_player_id=2, rank=1)]

    combined = combine_affinity(edges, prefs)

    assert len(combined) == 1
    assert (combined[0].player_a_id, combined[0].player_b_id) == (2, 1)
    assert combined[0].score == pytest.approx(9.0)


def test_self_pairs_are_dropped():
    prefs = [PlayerPreference(player_id=4, target_player_id=4, rank=1)]
    edges = [AffinityEdge(player_a_id=4, player_b_id=4, score=2)]

    assert combine_affinity(edges, prefs) == []
    assert affinity_lookup(edges) == {}


def test_team_chemistry_sums_pairs_inside_team():
    lookup = affinity_lookup(
        [
            AffinityEdge(player_a_id="a", player_b_id="b", score=2),
            AffinityEdge(player_a_id="b", player_b_id="c", score=3),
            AffinityEdge(player_a_id="a", player_b_id="d", score=10),
        ]
    )

    assert team_chemistry(["a", "b", "c"], lookup) == pytest.approx(5.0)
    assert team_chemistry(["c", "d"], lookup) == 0.0
    assert team_chemistry([], lookup) == 0.0
