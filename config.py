"""
config.py
Runtime settings (DB location, token secret, logging), read from env / .env.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DB_FILE = Path(os.getenv("GYM_DB_FILE") or Path(__file__).with_name("gym.db"))

# Signing key for API tokens. Override in production.
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-this-is-only-a-local-dev-secret")
JWT_ALGORITHM = "HS256"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Members with this many days or fewer left (but more than zero) are "ending soon"
ENDING_SOON_DAYS = 7
