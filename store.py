"""
store.py
Keyed stores the app reads and writes wholesale: member lists per owner, and user accounts.
Callers own the store instance and pass it in; nothing here is module-level state.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path

import db
from models import Member, member_from_dict, member_to_dict

log = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class MemberStore(ABC):
    @abstractmethod
    def load(self, owner: str) -> list[Member]:
        """Return the owner's members (empty list if none saved yet)."""

    @abstractmethod
    def save(self, owner: str, members: list[Member]) -> None:
        """Replace the owner's whole member list."""


class InMemoryMemberStore(MemberStore):
    def __init__(self):
        self._lists: dict[str, list[dict]] = {}

    def load(self, owner: str) -> list[Member]:
        return [member_from_dict(d) for d in self._lists.get(owner, [])]

    def save(self, owner: str, members: list[Member]) -> None:
        self._lists[owner] = [member_to_dict(m) for m in members]


class SqliteMemberStore(MemberStore):
    def __init__(self, db_file: Path | str | None = None):
        self.db_file = db_file
        db.init_db(db_file)

    def load(self, owner: str) -> list[Member]:
        row = db.fetch_one("SELECT payload FROM member_lists WHERE owner = ?", (owner,), db_file=self.db_file)
        if not row:
            return []
        return [member_from_dict(d) for d in json.loads(row["payload"])]

    def save(self, owner: str, members: list[Member]) -> None:
        payload = json.dumps([member_to_dict(m) for m in members])
        db.execute(
            """
            INSERT INTO member_lists(owner, payload, updated_at) VALUES(?, ?, ?)
            ON CONFLICT(owner) DO UPDATE SET payload=excluded.payload, updated_at=excluded.updated_at
            """,
            (owner, payload, _now_iso()),
            db_file=self.db_file,
        )
        log.info("Saved %d members for %s", len(members), owner)


class UserStore(ABC):
    @abstractmethod
    def get(self, email: str) -> dict | None:
        """Return {'email', 'password_hash'} or None."""

    @abstractmethod
    def add(self, email: str, password_hash: str) -> None:
        ...


class InMemoryUserStore(UserStore):
    def __init__(self):
        self._users: dict[str, dict] = {}

    def get(self, email: str) -> dict | None:
        user = self._users.get(email)
        return dict(user) if user else None

    def add(self, email: str, password_hash: str) -> None:
        self._users[email] = {"email": email, "password_hash": password_hash}


class SqliteUserStore(UserStore):
    def __init__(self, db_file: Path | str | None = None):
        self.db_file = db_file
        db.init_db(db_file)

    def get(self, email: str) -> dict | None:
        row = db.fetch_one(
            "SELECT email, password_hash FROM users WHERE email = ?", (email,), db_file=self.db_file
        )
        return dict(row) if row else None

    def add(self, email: str, password_hash: str) -> None:
        db.execute(
            "INSERT INTO users(email, password_hash, created_at) VALUES(?,?,?)",
            (email, password_hash, _now_iso()),
            db_file=self.db_file,
        )
