"""Pairwise "play together" records."""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class AffinityEdge(BaseModel):
    """Undirected chemistry between two players; higher score is stronger."""

    player_a_id: Union[int, str]
    player_b_id: Union[int, str]
    score: float = 0.0

    model_config = ConfigDict(frozen=True)


class PlayerPreference(BaseModel):
    """Directed wish of ``player_id`` to play with ``target_player_id``."""

    player_id: Union[int, str]
    target_player_id: Union[int, str]
    rank: int = Field(default=3, ge=1)

    model_config = ConfigDict(frozen=True)
