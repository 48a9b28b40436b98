"""
REST API for the team roster service.
Thin wrappers around TeamService; every service error maps to an HTTP status.
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from team_roster.auth import decode_token
from team_roster.config import settings
from team_roster.logging_config import setup_logging
from team_roster.models import Player, Principal, Statistics, Team
from team_roster.persistence import get_db_path, open_team_store
from team_roster.result import ErrorKind, Result
from team_roster.services import TeamService


# ---------- Lifespan: one store and service per app ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging(settings.log_level, settings.log_file)
    conn, store = open_team_store(get_db_path())
    app.state.team_service = TeamService(store)
    try:
        yield
    finally:
        conn.close()


# ---------- FastAPI app ----------
app = FastAPI(
    title="Team Roster API",
    description="Coach-owned sports teams with embedded player rosters",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

security = HTTPBearer(auto_error=False)

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PLAYER_NOT_FOUND: 404,
    ErrorKind.DUPLICATE_NAME: 409,
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.STORAGE_ERROR: 500,
}


# ---------- Request models ----------


class StatisticsIn(BaseModel):
    goals_scored: float = 0.0
    assists: float = 0.0
    personal_records: list[str] = Field(default_factory=list)


class PlayerIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    position: str
    statistics: StatisticsIn = Field(default_factory=StatisticsIn)

    def to_player(self) -> Player:
        return Player(
            name=self.name,
            position=self.position,
            statistics=Statistics(
                goals_scored=self.statistics.goals_scored,
                assists=self.statistics.assists,
                personal_records=list(self.statistics.personal_records),
            ),
        )


class CreateTeamRequest(BaseModel):
    # Empty strings reach the service, which reports InvalidInput
    name: str = Field(..., max_length=200)
    sport_type: str = Field(..., max_length=100)
    roster: list[PlayerIn] | None = Field(None, description="Required; may be an empty list")


class UpdateRosterRequest(BaseModel):
    roster: list[PlayerIn]


# ---------- Dependencies ----------


def get_team_service(request: Request) -> TeamService:
    return request.app.state.team_service


def _get_caller(credentials: HTTPAuthorizationCredentials | None = Depends(security)) -> Principal | None:
    """Principal from the bearer token, or None if no/invalid token."""
    if credentials is None:
        return None
    subject = decode_token(credentials.credentials)
    return Principal(subject) if subject else None


def _require_caller(caller: Principal | None = Depends(_get_caller)) -> Principal:
    if caller is None:
        raise HTTPException(status_code=401, detail="Login required")
    return caller


def _unwrap(result: Result[Any]) -> Any:
    if result.error is not None:
        raise HTTPException(
            status_code=_STATUS_BY_KIND.get(result.error.kind, 500),
            detail=result.error.to_dict(),
        )
    return result.value


def _roster(players: list[PlayerIn] | None) -> list[Player] | None:
    if players is None:
        return None
    return [p.to_player() for p in players]


# ---------- Endpoints ----------


@app.get("/health")
def health_check() -> dict[str, Any]:
    return {"status": "healthy", "service": "team-roster"}


@app.post("/teams")
def create_team(
    req: CreateTeamRequest,
    caller: Principal = Depends(_require_caller),
    service: TeamService = Depends(get_team_service),
) -> dict[str, Any]:
    """Create a team owned by the caller."""
    team: Team = _unwrap(service.create_team(caller, req.name, req.sport_type, _roster(req.roster)))
    return team.to_dict()


@app.get("/teams")
def list_teams(service: TeamService = Depends(get_team_service)) -> dict[str, Any]:
    teams: list[Team] = _unwrap(service.get_all_teams())
    return {"teams": [t.to_dict() for t in teams]}


@app.get("/teams/{team_id}")
def get_team(team_id: str, service: TeamService = Depends(get_team_service)) -> dict[str, Any]:
    team: Team = _unwrap(service.get_team(team_id))
    return team.to_dict()


@app.put("/teams/{team_id}/roster")
def update_team(
    team_id: str,
    req: UpdateRosterRequest,
    caller: Principal = Depends(_require_caller),
    service: TeamService = Depends(get_team_service),
) -> dict[str, Any]:
    """Replace the whole roster. Coach only."""
    team: Team = _unwrap(service.update_team(caller, team_id, _roster(req.roster)))
    return team.to_dict()


@app.delete("/teams/{team_id}")
def delete_team(
    team_id: str,
    caller: Principal = Depends(_require_caller),
    service: TeamService = Depends(get_team_service),
) -> dict[str, Any]:
    """Delete a team. Coach only. Returns the deleted team."""
    team: Team = _unwrap(service.delete_team(caller, team_id))
    return team.to_dict()


@app.post("/teams/{team_id}/players")
def add_player(
    team_id: str,
    req: PlayerIn,
    caller: Principal = Depends(_require_caller),
    service: TeamService = Depends(get_team_service),
) -> dict[str, Any]:
    """Append a player to the roster. Coach only."""
    team: Team = _unwrap(service.add_player_to_team(caller, team_id, req.to_player()))
    return team.to_dict()


@app.delete("/teams/{team_id}/players/{player_name}")
def delete_player(
    team_id: str,
    player_name: str,
    caller: Principal = Depends(_require_caller),
    service: TeamService = Depends(get_team_service),
) -> dict[str, Any]:
    """Remove every roster entry with this name. Coach only."""
    team: Team = _unwrap(service.delete_player_from_team(caller, team_id, player_name))
    return team.to_dict()


# ---------- Run with: uvicorn team_roster.api:app --reload ----------
