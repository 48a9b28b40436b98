"""
Team service: validation, coach authorization, name uniqueness, timestamps.
Built only on OrderedStore get / insert / remove / values. Every public
operation returns a Result; domain errors never escape as exceptions.
"""
from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from team_roster.models import Player, Principal, Team
from team_roster.persistence.ordered_store import OrderedStore, StoreError
from team_roster.result import ErrorKind, Result

logger = logging.getLogger(__name__)

# ---------- Exceptions ----------


class TeamServiceError(Exception):
    """Base for domain failures; kind selects the returned error."""
    kind: ErrorKind = ErrorKind.INVALID_INPUT


class InvalidInputError(TeamServiceError):
    """Malformed request (missing name, sport type or roster)."""
    kind = ErrorKind.INVALID_INPUT


class TeamNotFoundError(TeamServiceError):
    kind = ErrorKind.NOT_FOUND


class DuplicateTeamNameError(TeamServiceError):
    """Another stored team already uses this name."""
    kind = ErrorKind.DUPLICATE_NAME


class NotTeamCoachError(TeamServiceError):
    """Caller is not the identity that created the team."""
    kind = ErrorKind.UNAUTHORIZED


class PlayerNotFoundError(TeamServiceError):
    kind = ErrorKind.PLAYER_NOT_FOUND


# ---------- Collaborators ----------


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MonotonicClock:
    """Wall-clock UTC time that never goes backwards between calls."""

    def __init__(self, source: Callable[[], datetime] = _utcnow) -> None:
        self._source = source
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        with self._lock:
            now = self._source()
            if self._last is not None and now < self._last:
                now = self._last
            self._last = now
            return now


def new_team_id() -> str:
    return str(uuid.uuid4())


# ---------- TeamService ----------


class TeamService:
    """
    Domain logic for teams and their rosters.
    Reads are public; create records the caller as owner; every other write
    requires the caller to be that owner.
    """

    def __init__(
        self,
        store: OrderedStore[Team],
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or MonotonicClock()
        self._new_id = id_factory or new_team_id
        # Serializes read-modify-write sequences; sync endpoints run in a thread pool.
        self._lock = threading.Lock()

    # ---------- Boundary ----------

    def _run(self, op: Callable[..., Any], *args: Any) -> Result[Any]:
        try:
            return Result.ok(op(*args))
        except TeamServiceError as e:
            return Result.err(e.kind, str(e))
        except StoreError as e:
            logger.exception("Storage failure in %s", op.__name__)
            return Result.err(ErrorKind.STORAGE_ERROR, str(e))

    # ---------- Helpers ----------

    def _require_team(self, team_id: str) -> Team:
        team = self._store.get(team_id)
        if team is None:
            raise TeamNotFoundError(f"Team with id={team_id} not found")
        return team

    def _require_coach(self, team: Team, caller: Principal) -> None:
        if team.owner != caller:
            logger.warning("Caller %s refused: not coach of team %s", caller, team.id)
            raise NotTeamCoachError("You are not the team's coach")

    def _touch(self, team: Team) -> None:
        """Set updated_at to now, never earlier than the team's previous timestamp."""
        floor = team.updated_at or team.created_at
        now = self._clock()
        team.updated_at = now if now >= floor else floor

    # ---------- Operations ----------

    def create_team(
        self, caller: Principal, name: str, sport_type: str, roster: list[Player] | None
    ) -> Result[Team]:
        """Create a team owned by caller. Name must not match any stored team."""
        return self._run(self._create_team, caller, name, sport_type, roster)

    def _create_team(
        self, caller: Principal, name: str, sport_type: str, roster: list[Player] | None
    ) -> Team:
        if not name or not sport_type or roster is None:
            raise InvalidInputError("Invalid payload: name, sport_type and roster are required")
        with self._lock:
            if any(t.name == name for t in self._store.values()):
                raise DuplicateTeamNameError(f"Team with name {name} already exists")
            team = Team(
                id=self._new_id(),
                owner=caller,
                name=name,
                sport_type=sport_type,
                roster=[p.copy() for p in roster],
                created_at=self._clock(),
                updated_at=None,
            )
            self._store.insert(team.id, team)
        logger.info("Team %s (%s) created by %s", team.id, team.name, caller)
        return team

    def get_team(self, team_id: str) -> Result[Team]:
        return self._run(self._require_team, team_id)

    def get_all_teams(self) -> Result[list[Team]]:
        """All stored teams in store (key) order."""
        return self._run(self._store.values)

    def update_team(self, caller: Principal, team_id: str, roster: list[Player] | None) -> Result[Team]:
        """Replace the roster wholesale."""
        return self._run(self._update_team, caller, team_id, roster)

    def _update_team(self, caller: Principal, team_id: str, roster: list[Player] | None) -> Team:
        if roster is None:
            raise InvalidInputError("Invalid payload: roster is required")
        with self._lock:
            team = self._require_team(team_id)
            self._require_coach(team, caller)
            team.roster = [p.copy() for p in roster]
            self._touch(team)
            self._store.insert(team.id, team)
        return team

    def delete_team(self, caller: Principal, team_id: str) -> Result[Team]:
        """Remove the team. Returns the record as it was before deletion."""
        return self._run(self._delete_team, caller, team_id)

    def _delete_team(self, caller: Principal, team_id: str) -> Team:
        with self._lock:
            team = self._require_team(team_id)
            self._require_coach(team, caller)
            self._store.remove(team_id)
        logger.info("Team with id=%s has been deleted.", team_id)
        return team

    def add_player_to_team(self, caller: Principal, team_id: str, player: Player | None) -> Result[Team]:
        """Append a copy of player to the roster. Duplicate names are allowed."""
        return self._run(self._add_player_to_team, caller, team_id, player)

    def _add_player_to_team(self, caller: Principal, team_id: str, player: Player | None) -> Team:
        if player is None:
            raise InvalidInputError("Invalid payload: player is required")
        with self._lock:
            team = self._require_team(team_id)
            self._require_coach(team, caller)
            team.roster = [*team.roster, player.copy()]
            self._touch(team)
            self._store.insert(team.id, team)
        return team

    def delete_player_from_team(self, caller: Principal, team_id: str, player_name: str) -> Result[Team]:
        """Remove every roster entry named player_name."""
        return self._run(self._delete_player_from_team, caller, team_id, player_name)

    def _delete_player_from_team(self, caller: Principal, team_id: str, player_name: str) -> Team:
        with self._lock:
            team = self._require_team(team_id)
            self._require_coach(team, caller)
            if not any(p.name == player_name for p in team.roster):
                raise PlayerNotFoundError(f"Player {player_name} not found in the team's roster")
            team.roster = [p for p in team.roster if p.name != player_name]
            self._touch(team)
            self._store.insert(team.id, team)
        return team
