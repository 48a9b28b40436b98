"""
Team records in the ordered store: JSON codec and store construction.
"""
from __future__ import annotations

import json
import sqlite3
from pathlib import Path

from team_roster.config import settings
from team_roster.models import Team

from .db import get_connection, init_db
from .ordered_store import OrderedStore


def encode_team(team: Team) -> str:
    return json.dumps(team.to_dict(), separators=(",", ":"), ensure_ascii=False)


def decode_team(raw: str) -> Team:
    return Team.from_dict(json.loads(raw))


def team_store(conn: sqlite3.Connection) -> OrderedStore[Team]:
    """Wrap an open connection (schema must already exist) as the team map."""
    return OrderedStore(
        conn,
        encode=encode_team,
        decode=decode_team,
        memory_id=settings.store_memory_id,
        max_key_size=settings.store_max_key_size,
        max_value_size=settings.store_max_value_size,
    )


def open_team_store(db_path: str | Path | None = None) -> tuple[sqlite3.Connection, OrderedStore[Team]]:
    """
    Ensure the schema exists and open a thread-shareable connection for the team map.
    The caller owns the connection and must close it.
    """
    init_db(db_path)
    conn = get_connection(db_path, shared=True)
    return conn, team_store(conn)
