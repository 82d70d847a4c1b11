"""Futsal club backend: attendance, team balancing, match recording and rankings."""

from .balancer import GeneratorResult, InvalidTeamCount, TeamBalancer, generate_teams
from .models import AffinityEdge, PlayerProfile

__all__ = [
    "AffinityEdge",
    "GeneratorResult",
    "InvalidTeamCount",
    "PlayerProfile",
    "TeamBalancer",
    "generate_teams",
]
