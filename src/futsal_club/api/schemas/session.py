from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .player import PlayerResponse


class ParseRequest(BaseModel):
    text: str


class ParseResponse(BaseModel):
    date: str
    matched: List[PlayerResponse]
    unknown: List[str]
    count: int


class SessionCreateRequest(BaseModel):
    date: str = Field(..., min_length=1)
    title: Optional[str] = None
    pot_total: Optional[int] = Field(default=None, ge=0)
    base_fee: Optional[int] = Field(default=None, ge=0)
    player_ids: List[int] = Field(default_factory=list)


class SessionResponse(BaseModel):
    session_id: int
    date: str
    title: Optional[str]
    pot_total: Optional[int]
    base_fee: Optional[int]
    created_at: datetime
    player_ids: List[int]


class AttendanceRequest(BaseModel):
    player_ids: List[int] = Field(default_factory=list)
