"""Load player profiles from roster CSV exports."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from futsal_club.models import SKILL_FIELDS, PlayerProfile


logger = logging.getLogger(__name__)

_NUMERIC_FIELDS: tuple[str, ...] = (*SKILL_FIELDS, "physical_rating")
_MEASURE_FIELDS: tuple[str, ...] = ("height_cm", "weight_kg")

DEFAULT_PROFILE_MAPPING: Dict[str, str] = {
    "player_id": "id",
    "name": "name",
    "join_date": "join_date",
    **{name: name for name in (*_NUMERIC_FIELDS, *_MEASURE_FIELDS)},
}


class ProfileRow(BaseModel):
    raw_id: Optional[str] = None
    raw_name: str
    raw_join_date: Optional[str] = None
    raw_values: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, row: Mapping[str, str], mapping: Mapping[str, str]) -> "ProfileRow":
        def extract(key: str) -> Optional[str]:
            column = mapping.get(key)
            if column is None:
                return None
            value = row.get(column)
            if value is None:
                return None
            value = value.strip()
            return value or None

        values = {}
        for key in (*_NUMERIC_FIELDS, *_MEASURE_FIELDS):
            raw = extract(key)
            if raw is not None:
                values[key] = raw
        return cls(
            raw_id=extract("player_id"),
            raw_name=extract("name") or "",
            raw_join_date=extract("join_date"),
            raw_values=values,
        )


def _parse_rating(field_name: str, raw: str) -> int:
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{field_name} '{raw}' is not numeric") from None
    # "7.0" from spreadsheet exports is fine; "7.5" is not a rating.
    if not value.is_integer():
        raise ValueError(f"{field_name} '{raw}' is not a whole number")
    return int(value)


def _parse_measure(field_name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{field_name} '{raw}' is not numeric") from None


def _parse_player_id(raw_id: Optional[str], fallback: str) -> int | str:
    if raw_id is None:
        return fallback
    return int(raw_id) if raw_id.isdigit() else raw_id


def load_profile_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[ProfileRow]:
    mapping = {**DEFAULT_PROFILE_MAPPING, **(mapping or {})}
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        rows = [ProfileRow.from_mapping(row, mapping) for row in reader]
    return rows


def rows_to_profiles(rows: Sequence[ProfileRow]) -> List[PlayerProfile]:
    profiles: List[PlayerProfile] = []
    skipped = 0
    for row in rows:
        if not row.raw_name:
            skipped += 1
            continue
        values: Dict[str, object] = {}
        for key, raw in row.raw_values.items():
            if key in _NUMERIC_FIELDS:
                values[key] = _parse_rating(key, raw)
            else:
                values[key] = _parse_measure(key, raw)
        profiles.append(
            PlayerProfile(
                player_id=_parse_player_id(row.raw_id, row.raw_name),
                name=row.raw_name,
                join_date=row.raw_join_date,
                **values,
            )
        )
    if skipped:
        logger.warning("Skipped %d roster rows without a name", skipped)
    return profiles


def load_profiles_from_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[PlayerProfile]:
    return rows_to_profiles(load_profile_csv(path, mapping=mapping))
