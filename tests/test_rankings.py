import pytest

from futsal_club.rankings import compute_rankings, top_rankings


def _entries():
    players = [(1, "Kim"), (2, "Lee"), (3, "Park"), (4, "Choi")]
    stats = {1: (3, 1), 2: (3, 0), 3: (0, 4), 99: (10, 10)}
    members = [(100, 1), (100, 3), (200, 2), (200, 4)]
    matches = [(100, 200), (100, 200), (200, 300)]
    return compute_rankings(players, stats, members, matches)


def test_games_count_every_match_of_a_players_team():
    games = {entry.player_id: entry.games for entry in _entries()}

    assert games == {1: 2, 2: 3, 3: 2, 4: 3}


def test_goals_ranking_breaks_ties_on_fewer_games():
    ranking = top_rankings(_entries(), "goals")

    assert [(e.name, e.goals, e.rank) for e in ranking[:2]] == [("Kim", 3, 1), ("Lee", 3, 2)]
    assert ranking[-1].name == "Choi"


def test_points_and_assists():
    points = top_rankings(_entries(), "points")
    assists = top_rankings(_entries(), "assists")

    assert [(e.name, e.points) for e in points] == [("Kim", 4), ("Park", 4), ("Lee", 3), ("Choi", 0)]
    assert assists[0].name == "Park"


def test_name_breaks_remaining_ties_and_limit_applies():
    players = [(i, name) for i, name in enumerate(["Zed", "Amy", "Bob"])]

    ranking = top_rankings(compute_rankings(players, {}, [], []), "goals", limit=2)

    assert [e.name for e in ranking] == ["Amy", "Bob"]
    assert [e.rank for e in ranking] == [1, 2]


def test_invalid_metric_rejected():
    with pytest.raises(ValueError):
        top_rankings(_entries(), "saves")
