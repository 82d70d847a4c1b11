"""Domain records shared across ingest, balancer, persistence and API layers."""

from .affinity import AffinityEdge, PlayerPreference
from .match import EventType, MatchEvent
from .player import SKILL_FIELDS, PlayerProfile

__all__ = [
    "AffinityEdge",
    "EventType",
    "MatchEvent",
    "PlayerPreference",
    "PlayerProfile",
    "SKILL_FIELDS",
]
