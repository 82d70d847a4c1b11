"""Live match event records."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class EventType(str, Enum):
    GOAL = "GOAL"
    KEY_PASS = "KEY_PASS"
    DEFENSE = "DEFENSE"
    CLEARANCE = "CLEARANCE"

    @classmethod
    def parse(cls, value: str) -> "EventType":
        key = value.strip().upper()
        if key == "BLOCK":
            return cls.DEFENSE
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unsupported event type {value!r}") from None


class MatchEvent(BaseModel):
    """One recorded action. ``assister_id`` only applies to goals."""

    event_type: EventType
    player_id: Union[int, str]
    team_id: int
    assister_id: Optional[Union[int, str]] = None
    event_time: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)
