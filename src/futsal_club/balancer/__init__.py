"""Team balancing engine: player scoring, snake seeding and swap search."""

from .affinity import combine_affinity, preference_score
from .scoring import ScoreBreakdown, TeamStats, player_score, score_breakdown, team_stats
from .service import (
    GeneratorResult,
    InvalidTeamCount,
    SwapRecord,
    Team,
    TeamBalancer,
    generate_teams,
    rank_players,
    snake_seed,
    spread,
    team_label,
)

__all__ = [
    "GeneratorResult",
    "InvalidTeamCount",
    "ScoreBreakdown",
    "SwapRecord",
    "Team",
    "TeamBalancer",
    "TeamStats",
    "combine_affinity",
    "generate_teams",
    "player_score",
    "preference_score",
    "rank_players",
    "score_breakdown",
    "snake_seed",
    "spread",
    "team_label",
    "team_stats",
]
