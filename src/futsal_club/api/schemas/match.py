from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class MatchResponse(BaseModel):
    match_id: int
    session_id: int
    match_no: int
    team1_id: int
    team2_id: int
    team1_score: int
    team2_score: int
    status: str
    duration_min: Optional[int]


class ScoreUpdateRequest(BaseModel):
    team1_score: int = Field(..., ge=0)
    team2_score: int = Field(..., ge=0)
    status: Optional[Literal["pending", "live", "completed"]] = None


class EventRequest(BaseModel):
    type: str = Field(default="GOAL")
    scorer_id: int
    team_id: int
    assister_id: Optional[int] = None
    event_time: int = Field(default=0, ge=0)


class EventResponse(BaseModel):
    event_id: int
    type: str
    player_id: int
    player_name: str
    team_id: int
    assister_id: Optional[int]
    assister_name: Optional[str]
    event_time: int
    created_at: datetime


class EventListResponse(BaseModel):
    events: List[EventResponse]


class ScheduleResponse(BaseModel):
    session_id: int
    count: int
    matches: List[MatchResponse]
