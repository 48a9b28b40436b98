"""
Tests for TeamService: validation, uniqueness, coach authorization,
roster edits and updated_at handling.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from team_roster.models import Player, Principal, Statistics
from team_roster.persistence.db import get_connection, init_db
from team_roster.persistence.ordered_store import OrderedStore
from team_roster.persistence.team_store import decode_team, encode_team, team_store
from team_roster.result import ErrorKind
from team_roster.services.team_service import MonotonicClock, TeamService

COACH = Principal("coach-alice")
OTHER = Principal("coach-bob")
T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Advances one second per call."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(seconds=1)
        return current


class SequentialIds:
    def __init__(self) -> None:
        self.n = 0

    def __call__(self) -> str:
        self.n += 1
        return f"team-{self.n:04d}"


def _player(name: str, position: str = "striker", goals: float = 0, assists: float = 0) -> Player:
    return Player(name=name, position=position, statistics=Statistics(goals_scored=goals, assists=assists))


@pytest.fixture
def db_conn(tmp_path):
    db_path = tmp_path / "service_test.db"
    init_db(db_path)
    conn = get_connection(db_path)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def store(db_conn):
    return team_store(db_conn)


@pytest.fixture
def service(store):
    return TeamService(store, clock=FakeClock(), id_factory=SequentialIds())


@pytest.fixture
def hawks(service):
    return service.create_team(COACH, "Hawks", "soccer", []).unwrap()


def _snapshot(db_conn) -> list[tuple]:
    return [tuple(r) for r in db_conn.execute("SELECT memory_id, key, value FROM ordered_store ORDER BY key")]


# ---------- create_team ----------


def test_create_team(service, store):
    result = service.create_team(COACH, "Hawks", "soccer", [])
    assert result.is_ok
    team = result.value
    assert team.id == "team-0001"
    assert team.name == "Hawks"
    assert team.sport_type == "soccer"
    assert team.roster == []
    assert team.owner == COACH
    assert team.created_at == T0
    assert team.updated_at is None
    assert store.get(team.id) == team


@pytest.mark.parametrize(
    "name, sport_type, roster",
    [("", "soccer", []), ("Hawks", "", []), ("Hawks", "soccer", None), (None, "soccer", [])],
)
def test_create_team_invalid_input(service, store, name, sport_type, roster):
    result = service.create_team(COACH, name, sport_type, roster)
    assert not result.is_ok
    assert result.error.kind == ErrorKind.INVALID_INPUT
    assert store.is_empty()


def test_create_team_duplicate_name_leaves_storage_unchanged(service, hawks, db_conn):
    before = _snapshot(db_conn)
    result = service.create_team(OTHER, "Hawks", "basketball", [_player("Sam")])
    assert result.error.kind == ErrorKind.DUPLICATE_NAME
    assert "Hawks" in result.error.message
    assert _snapshot(db_conn) == before


def test_created_names_stay_unique(service):
    names = ["Hawks", "Owls", "Hawks", "Owls", "Eagles"]
    results = [service.create_team(COACH, n, "soccer", []) for n in names]
    assert [r.is_ok for r in results] == [True, True, False, False, True]
    stored = service.get_all_teams().unwrap()
    assert sorted(t.name for t in stored) == ["Eagles", "Hawks", "Owls"]


def test_create_team_copies_roster(service):
    roster = [_player("Alex", goals=3)]
    team = service.create_team(COACH, "Hawks", "soccer", roster).unwrap()
    roster[0].statistics.personal_records.append("mutated later")
    assert service.get_team(team.id).unwrap().roster[0].statistics.personal_records == []


def test_create_team_storage_failure(db_conn):
    tiny = OrderedStore(db_conn, encode=encode_team, decode=decode_team, max_value_size=50)
    svc = TeamService(tiny, clock=FakeClock(), id_factory=SequentialIds())
    result = svc.create_team(COACH, "Hawks", "soccer", [])
    assert result.error.kind == ErrorKind.STORAGE_ERROR
    assert tiny.is_empty()


# ---------- get_team / get_all_teams ----------


def test_get_team_not_found(service):
    result = service.get_team("missing-id")
    assert result.error.kind == ErrorKind.NOT_FOUND
    assert "missing-id" in result.error.message


def test_get_team_is_idempotent(service, hawks):
    first = service.get_team(hawks.id)
    second = service.get_team(hawks.id)
    assert first == second
    assert first.value == hawks


def test_get_all_teams_in_key_order(service):
    for name in ["Owls", "Hawks", "Eagles"]:
        service.create_team(COACH, name, "soccer", [])
    teams = service.get_all_teams().unwrap()
    assert [t.id for t in teams] == ["team-0001", "team-0002", "team-0003"]


def test_get_all_teams_empty(service):
    assert service.get_all_teams().unwrap() == []


# ---------- update_team ----------


def test_update_team_replaces_roster(service, hawks):
    service.add_player_to_team(COACH, hawks.id, _player("Old"))
    result = service.update_team(COACH, hawks.id, [_player("Alex"), _player("Sam", "keeper")])
    team = result.unwrap()
    assert [p.name for p in team.roster] == ["Alex", "Sam"]
    assert team.updated_at is not None
    assert service.get_team(hawks.id).unwrap() == team


def test_update_team_not_found(service):
    assert service.update_team(COACH, "missing", []).error.kind == ErrorKind.NOT_FOUND


def test_update_team_unauthorized(service, hawks, db_conn):
    before = _snapshot(db_conn)
    result = service.update_team(OTHER, hawks.id, [_player("Intruder")])
    assert result.error.kind == ErrorKind.UNAUTHORIZED
    assert _snapshot(db_conn) == before


# ---------- delete_team ----------


def test_delete_team_returns_snapshot(service, hawks, store):
    result = service.delete_team(COACH, hawks.id)
    assert result.unwrap() == hawks
    assert store.get(hawks.id) is None
    assert service.get_team(hawks.id).error.kind == ErrorKind.NOT_FOUND


def test_delete_unknown_team(service):
    result = service.delete_team(COACH, "unknown-id")
    assert result.error.kind == ErrorKind.NOT_FOUND


def test_delete_team_unauthorized(service, hawks, db_conn):
    before = _snapshot(db_conn)
    assert service.delete_team(OTHER, hawks.id).error.kind == ErrorKind.UNAUTHORIZED
    assert _snapshot(db_conn) == before


def test_deleted_name_can_be_reused(service, hawks):
    service.delete_team(COACH, hawks.id).unwrap()
    assert service.create_team(OTHER, "Hawks", "soccer", []).is_ok


# ---------- add_player_to_team ----------


def test_add_player_appends_copy(service, hawks):
    alex = Player(
        name="Alex",
        position="striker",
        statistics=Statistics(goals_scored=3, assists=1, personal_records=["hat-trick"]),
    )
    team = service.add_player_to_team(COACH, hawks.id, alex).unwrap()
    assert team.roster == [alex]
    assert team.roster[0] is not alex
    assert team.roster[0].statistics.personal_records is not alex.statistics.personal_records
    team = service.add_player_to_team(COACH, hawks.id, _player("Sam")).unwrap()
    assert [p.name for p in team.roster] == ["Alex", "Sam"]


def test_add_player_by_non_owner_is_unauthorized(service, hawks, db_conn):
    before = _snapshot(db_conn)
    alex = Player(name="Alex", position="striker", statistics=Statistics(goals_scored=3, assists=1))
    result = service.add_player_to_team(OTHER, hawks.id, alex)
    assert result.error.kind == ErrorKind.UNAUTHORIZED
    assert service.get_team(hawks.id).unwrap().roster == []
    assert _snapshot(db_conn) == before


def test_add_player_allows_duplicate_names(service, hawks):
    service.add_player_to_team(COACH, hawks.id, _player("Sam"))
    team = service.add_player_to_team(COACH, hawks.id, _player("Sam", "keeper")).unwrap()
    assert [p.name for p in team.roster] == ["Sam", "Sam"]


def test_add_player_not_found(service):
    assert service.add_player_to_team(COACH, "missing", _player("Sam")).error.kind == ErrorKind.NOT_FOUND


# ---------- delete_player_from_team ----------


def test_delete_player_removes_all_matches(service, hawks):
    service.add_player_to_team(COACH, hawks.id, _player("Sam"))
    service.add_player_to_team(COACH, hawks.id, _player("Alex"))
    service.add_player_to_team(COACH, hawks.id, _player("Sam", "keeper"))
    team = service.delete_player_from_team(COACH, hawks.id, "Sam").unwrap()
    assert [p.name for p in team.roster] == ["Alex"]
    assert [p.name for p in service.get_team(hawks.id).unwrap().roster] == ["Alex"]


def test_delete_player_not_in_roster(service, hawks, db_conn):
    service.add_player_to_team(COACH, hawks.id, _player("Alex"))
    before = _snapshot(db_conn)
    result = service.delete_player_from_team(COACH, hawks.id, "Sam")
    assert result.error.kind == ErrorKind.PLAYER_NOT_FOUND
    assert "Sam" in result.error.message
    assert _snapshot(db_conn) == before


def test_delete_player_name_match_is_exact(service, hawks):
    service.add_player_to_team(COACH, hawks.id, _player("sam"))
    assert service.delete_player_from_team(COACH, hawks.id, "Sam").error.kind == ErrorKind.PLAYER_NOT_FOUND


def test_delete_player_checks_owner_before_roster(service, hawks):
    result = service.delete_player_from_team(OTHER, hawks.id, "Nobody")
    assert result.error.kind == ErrorKind.UNAUTHORIZED


def test_delete_player_team_not_found(service):
    assert service.delete_player_from_team(COACH, "missing", "Sam").error.kind == ErrorKind.NOT_FOUND


# ---------- updated_at ----------


def test_every_mutation_advances_updated_at(service, hawks):
    previous = hawks.created_at
    steps = [
        lambda: service.add_player_to_team(COACH, hawks.id, _player("Sam")),
        lambda: service.update_team(COACH, hawks.id, [_player("Sam"), _player("Alex")]),
        lambda: service.delete_player_from_team(COACH, hawks.id, "Alex"),
    ]
    for step in steps:
        team = step().unwrap()
        assert team.updated_at is not None
        assert team.updated_at >= previous
        previous = team.updated_at
    stored = service.get_team(hawks.id).unwrap()
    assert stored.created_at == hawks.created_at
    assert stored.owner == COACH
    assert stored.name == "Hawks"


def test_updated_at_never_precedes_previous_timestamp(store):
    # Clock stuck before the team was created
    svc = TeamService(store, clock=lambda: T0, id_factory=SequentialIds())
    team = svc.create_team(COACH, "Hawks", "soccer", []).unwrap()
    later = TeamService(store, clock=lambda: T0 - timedelta(hours=1))
    updated = later.add_player_to_team(COACH, team.id, _player("Sam")).unwrap()
    assert updated.updated_at == team.created_at


def test_monotonic_clock_does_not_go_backwards():
    readings = iter([T0, T0 - timedelta(seconds=5), T0 + timedelta(seconds=1)])
    clock = MonotonicClock(source=lambda: next(readings))
    assert clock() == T0
    assert clock() == T0
    assert clock() == T0 + timedelta(seconds=1)


def test_storage_fault_on_update_is_reported(db_conn, hawks, service):
    small = OrderedStore(db_conn, encode=encode_team, decode=decode_team, max_value_size=400)
    svc = TeamService(small, clock=FakeClock(T0 + timedelta(days=1)))
    big_roster = [_player(f"Player {i}") for i in range(20)]
    result = svc.update_team(COACH, hawks.id, big_roster)
    assert result.error.kind == ErrorKind.STORAGE_ERROR
    assert service.get_team(hawks.id).unwrap().roster == []
