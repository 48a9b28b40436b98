"""
SQLite schema for the ordered key-value store.
Migration-friendly: each table created with IF NOT EXISTS.
"""
from __future__ import annotations


def ordered_store_schema() -> str:
    """
    One table shared by every OrderedStore; memory_id namespaces each map.
    The default BINARY collation orders TEXT keys by UTF-8 bytes.
    """
    return """
    CREATE TABLE IF NOT EXISTS ordered_store (
        memory_id INTEGER NOT NULL,
        key TEXT NOT NULL,
        value TEXT NOT NULL,
        PRIMARY KEY (memory_id, key)
    ) WITHOUT ROWID;
    """


def all_schema_sql() -> str:
    return ordered_store_schema()
