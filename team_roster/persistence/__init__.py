"""
Persistence layer for team rosters.
No business logic: only the ordered key-value store and its SQLite plumbing.
"""
from .db import get_connection, get_db_path, init_db, set_db_path
from .ordered_store import OrderedStore, StoreCapacityError, StoreError
from .team_store import decode_team, encode_team, open_team_store, team_store

__all__ = [
    "get_connection",
    "get_db_path",
    "init_db",
    "set_db_path",
    "OrderedStore",
    "StoreError",
    "StoreCapacityError",
    "encode_team",
    "decode_team",
    "open_team_store",
    "team_store",
]
