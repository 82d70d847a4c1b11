import pytest

from futsal_club.ingest import load_profile_csv, load_profiles_from_csv, rows_to_profiles


def _write(tmp_path, text):
    path = tmp_path / "roster.csv"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_profiles_with_default_columns(tmp_path):
    path = _write(
        tmp_path,
        "id,name,shooting,passing,physical_rating,height_cm,join_date\n"
        "7,Kim,8,6,7,175.5,2021-03-01\n"
        "x9,Lee,,5,,,\n",
    )

    players = load_profiles_from_csv(path)

    kim, lee = players
    assert kim.player_id == 7
    assert (kim.shooting, kim.passing, kim.physical_rating) == (8, 6, 7)
    assert kim.height_cm == pytest.approx(175.5)
    assert kim.join_date == "2021-03-01"
    assert lee.player_id == "x9"
    assert lee.shooting is None
    assert lee.physical_rating is None


def test_custom_column_mapping(tmp_path):
    path = _write(tmp_path, "Player,Shot\nPark,9\n")

    players = load_profiles_from_csv(path, mapping={"name": "Player", "shooting": "Shot"})

    assert players[0].name == "Park"
    assert players[0].shooting == 9
    # No id column: the name doubles as the identifier.
    assert players[0].player_id == "Park"


def test_rows_without_name_are_skipped(tmp_path):
    path = _write(tmp_path, "id,name,speed\n1,,5\n2,Choi,6\n")

    players = rows_to_profiles(load_profile_csv(path))

    assert [p.name for p in players] == ["Choi"]


def test_non_numeric_rating_raises(tmp_path):
    path = _write(tmp_path, "id,name,speed\n1,Choi,fast\n")

    with pytest.raises(ValueError, match="speed"):
        load_profiles_from_csv(path)


def test_fractional_rating_rejected(tmp_path):
    path = _write(tmp_path, "id,name,shooting,passing\n1,Choi,7.0,7.5\n")

    with pytest.raises(ValueError, match="passing"):
        load_profiles_from_csv(path)


def test_whole_number_with_decimal_point_accepted(tmp_path):
    path = _write(tmp_path, "id,name,shooting\n1,Choi,7.0\n")

    assert load_profiles_from_csv(path)[0].shooting == 7
