"""Pydantic models for API I/O."""

from .match import (
    EventListResponse,
    EventRequest,
    EventResponse,
    MatchResponse,
    ScheduleResponse,
    ScoreUpdateRequest,
)
from .player import (
    ChemistryRequest,
    PlayerCreateRequest,
    PlayerResponse,
    PlayerUpdateRequest,
    PreferenceRequest,
    RankingListResponse,
    RankingResponse,
)
from .session import AttendanceRequest, ParseRequest, ParseResponse, SessionCreateRequest, SessionResponse
from .team import (
    MAX_MATCHES,
    MAX_TEAMS,
    StoredTeamResponse,
    TeamAssignRequest,
    TeamGenerateRequest,
    TeamGenerateResponse,
    TeamResponse,
    TeamStatsResponse,
)

__all__ = [
    "AttendanceRequest",
    "MAX_MATCHES",
    "MAX_TEAMS",
    "ChemistryRequest",
    "EventListResponse",
    "EventRequest",
    "EventResponse",
    "MatchResponse",
    "ParseRequest",
    "ParseResponse",
    "PlayerCreateRequest",
    "PlayerResponse",
    "PlayerUpdateRequest",
    "PreferenceRequest",
    "RankingListResponse",
    "RankingResponse",
    "ScheduleResponse",
    "ScoreUpdateRequest",
    "SessionCreateRequest",
    "SessionResponse",
    "StoredTeamResponse",
    "TeamAssignRequest",
    "TeamGenerateRequest",
    "TeamGenerateResponse",
    "TeamResponse",
    "TeamStatsResponse",
]
