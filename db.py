"""
db.py
SQLite helpers + initialization (creates DB/tables for users and member lists).
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

import config

log = logging.getLogger(__name__)


@contextmanager
def get_conn(db_file: Path | str | None = None):
    conn = sqlite3.connect(db_file or config.DB_FILE, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def execute(sql: str, params: tuple = (), db_file: Path | str | None = None) -> int:
    with get_conn(db_file) as conn:
        cur = conn.execute(sql, params)
        return cur.lastrowid


def fetch_one(sql: str, params: tuple = (), db_file: Path | str | None = None):
    with get_conn(db_file) as conn:
        cur = conn.execute(sql, params)
        return cur.fetchone()


def fetch_all(sql: str, params: tuple = (), db_file: Path | str | None = None) -> list[sqlite3.Row]:
    with get_conn(db_file) as conn:
        cur = conn.execute(sql, params)
        return cur.fetchall()


def init_db(db_file: Path | str | None = None) -> None:
    """
    Create tables if missing. Safe to call on every start.
    - users: login email + bcrypt hash
    - member_lists: one JSON document per owner (wholesale read/write)
    """
    execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            email TEXT PRIMARY KEY,
            password_hash TEXT NOT NULL,
            created_at TEXT NOT NULL
        )
        """,
        db_file=db_file,
    )

    execute(
        """
        CREATE TABLE IF NOT EXISTS member_lists (
            owner TEXT PRIMARY KEY,
            payload TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """,
        db_file=db_file,
    )
    log.debug("Database ready at %s", db_file or config.DB_FILE)
