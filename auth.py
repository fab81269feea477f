"""
auth.py
Owner accounts: bcrypt hashing, register / login, signed API tokens, session context.

Tokens carry only the email and never expire; there is no refresh or revocation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import bcrypt
import jwt

import config
from store import UserStore

log = logging.getLogger(__name__)


class AuthError(Exception):
    pass


class UserExists(AuthError):
    pass


class UserNotFound(AuthError):
    pass


class InvalidPassword(AuthError):
    pass


@dataclass(frozen=True)
class Session:
    """The signed-in owner. Member lists are keyed by `email`."""
    email: str
    token: str


def _to_bcrypt_secret(password: str) -> bytes:
    """
    bcrypt only uses the first 72 BYTES of the password.
    We truncate to 72 bytes to avoid ValueError and to make behavior explicit.
    """
    pw = password.encode("utf-8")
    if len(pw) > 72:
        pw = pw[:72]
    return pw


def hash_password(password: str) -> str:
    """
    Returns a bcrypt hash as a UTF-8 string (stored in SQLite).
    """
    secret = _to_bcrypt_secret(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(secret, salt)
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against stored bcrypt hash.
    """
    secret = _to_bcrypt_secret(password)
    stored = password_hash.encode("utf-8")
    return bcrypt.checkpw(secret, stored)


def issue_token(email: str, secret: str | None = None) -> str:
    return jwt.encode({"email": email}, secret or config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def verify_token(token: str | None, secret: str | None = None) -> str | None:
    """
    Return the email inside a valid token, else None.
    """
    if not token:
        return None
    try:
        claims = jwt.decode(token, secret or config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.InvalidTokenError as e:
        log.warning("Rejected token: %s", e)
        return None
    return claims.get("email")


def register(users: UserStore, email: str, password: str, secret: str | None = None) -> Session:
    if users.get(email):
        raise UserExists("User already exists")
    users.add(email, hash_password(password))
    log.info("Registered %s", email)
    return Session(email=email, token=issue_token(email, secret))


def login(users: UserStore, email: str, password: str, secret: str | None = None) -> Session:
    user = users.get(email)
    if not user:
        raise UserNotFound("User not found")
    if not verify_password(password, user["password_hash"]):
        log.info("Failed login for %s", email)
        raise InvalidPassword("Invalid password")
    log.info("Logged in %s", email)
    return Session(email=email, token=issue_token(email, secret))
