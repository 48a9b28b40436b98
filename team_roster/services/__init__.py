"""
Service layer: team domain logic on top of the ordered store.
"""
from .team_service import (
    TeamService,
    TeamServiceError,
    InvalidInputError,
    TeamNotFoundError,
    DuplicateTeamNameError,
    NotTeamCoachError,
    PlayerNotFoundError,
    MonotonicClock,
    new_team_id,
)

__all__ = [
    "TeamService",
    "TeamServiceError",
    "InvalidInputError",
    "TeamNotFoundError",
    "DuplicateTeamNameError",
    "NotTeamCoachError",
    "PlayerNotFoundError",
    "MonotonicClock",
    "new_team_id",
]
