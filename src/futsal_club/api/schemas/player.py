from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field


class PlayerCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    shooting: Optional[int] = Field(default=None, ge=0)
    offball_run: Optional[int] = Field(default=None, ge=0)
    ball_keeping: Optional[int] = Field(default=None, ge=0)
    passing: Optional[int] = Field(default=None, ge=0)
    intercept: Optional[int] = Field(default=None, ge=0)
    marking: Optional[int] = Field(default=None, ge=0)
    stamina: Optional[int] = Field(default=None, ge=0)
    speed: Optional[int] = Field(default=None, ge=0)
    physical_rating: Optional[int] = Field(default=None, ge=0)
    height_cm: Optional[float] = Field(default=None, gt=0)
    weight_kg: Optional[float] = Field(default=None, gt=0)
    join_date: Optional[str] = None


class PlayerResponse(BaseModel):
    player_id: Union[int, str]
    name: str
    shooting: Optional[int]
    offball_run: Optional[int]
    ball_keeping: Optional[int]
    passing: Optional[int]
    intercept: Optional[int]
    marking: Optional[int]
    stamina: Optional[int]
    speed: Optional[int]
    physical_rating: Optional[int]
    join_date: Optional[str]
    overall: float


class PreferenceRequest(BaseModel):
    player_id: int
    target_player_id: int
    rank: int = Field(default=1, ge=1, le=3)


class ChemistryRequest(BaseModel):
    player_a_id: int
    player_b_id: int
    score: float


class RankingResponse(BaseModel):
    rank: int
    player_id: Union[int, str]
    name: str
    goals: int
    assists: int
    points: int
    games: int


class RankingListResponse(BaseModel):
    metric: str
    rankings: List[RankingResponse]


class PlayerUpdateRequest(BaseModel):
    """Partial update; only fields present in the request body are written."""

    name: Optional[str] = Field(default=None, min_length=1)
    shooting: Optional[int] = Field(default=None, ge=0)
    offball_run: Optional[int] = Field(default=None, ge=0)
    ball_keeping: Optional[int] = Field(default=None, ge=0)
    passing: Optional[int] = Field(default=None, ge=0)
    intercept: Optional[int] = Field(default=None, ge=0)
    marking: Optional[int] = Field(default=None, ge=0)
    stamina: Optional[int] = Field(default=None, ge=0)
    speed: Optional[int] = Field(default=None, ge=0)
    physical_rating: Optional[int] = Field(default=None, ge=0)
    height_cm: Optional[float] = Field(default=None, gt=0)
    weight_kg: Optional[float] = Field(default=None, gt=0)
    join_date: Optional[str] = None
