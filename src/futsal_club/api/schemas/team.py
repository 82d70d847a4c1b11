from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from .player import PlayerResponse


# A pickup session never needs more than A-Z teams or a few dozen games.
MAX_TEAMS = 26
MAX_MATCHES = 60


class TeamGenerateRequest(BaseModel):
    num_teams: int = Field(default=3, le=MAX_TEAMS)
    seed: Optional[int] = None


class TeamStatsResponse(BaseModel):
    attack: int
    mid: int
    defense: int
    base: int
    physical: int
    total: float


class TeamResponse(BaseModel):
    team_id: Optional[int] = None
    label: str
    name: str
    players: List[PlayerResponse]
    stats: TeamStatsResponse


class TeamGenerateResponse(BaseModel):
    session_id: int
    teams: List[TeamResponse]
    balance_score: float
    variance: float
    logs: List[str]
    matches_created: int


class StoredTeamResponse(BaseModel):
    team_id: int
    label: str
    name: str
    player_ids: List[int]


class TeamAssignRequest(BaseModel):
    player_id: int
    team_id: Optional[int] = None
