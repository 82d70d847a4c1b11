"""Canonical player profile shared across ingestion, balancer and API layers."""

from __future__ import annotations

from typing import Optional, Tuple, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


SKILL_FIELDS: Tuple[str, ...] = (
    "shooting",
    "offball_run",
    "ball_keeping",
    "passing",
    "intercept",
    "marking",
    "stamina",
    "speed",
)


class PlayerProfile(BaseModel):
    """Skill snapshot of one attendee. Any rating may be missing."""

    player_id: Union[int, str]
    name: str = Field(..., min_length=1)
    shooting: Optional[int] = None
    offball_run: Optional[int] = None
    ball_keeping: Optional[int] = None
    passing: Optional[int] = None
    intercept: Optional[int] = None
    marking: Optional[int] = None
    stamina: Optional[int] = None
    speed: Optional[int] = None
    physical_rating: Optional[int] = None
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    join_date: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="ignore")
