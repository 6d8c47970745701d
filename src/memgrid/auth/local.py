"""Offline session provider with accounts in the local SQLite database."""

import asyncio
import hashlib
import hmac
import secrets
import sqlite3
from datetime import datetime
from pathlib import Path
from uuid import uuid4

import aiosqlite

from memgrid.auth.base import Session, SessionProvider
from memgrid.core.errors import AuthError, StoreError
from memgrid.core.logging import get_logger

logger = get_logger("auth.local")

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    salt TEXT NOT NULL,
    created_at TEXT NOT NULL
);
"""

MIN_PASSWORD_LENGTH = 6
PBKDF2_ITERATIONS = 200_000


def _hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), bytes.fromhex(salt), PBKDF2_ITERATIONS)
    return digest.hex()


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class LocalAuthProvider(SessionProvider):
    """Email/password accounts kept next to the local memory rows."""

    def __init__(self, db_path: Path):
        super().__init__()
        self.db_path = db_path
        self._conn: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the database and ensure the users table exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(self.db_path)
        await self._conn.executescript(SCHEMA)
        await self._conn.commit()
        logger.info(f"Local accounts at {self.db_path}")

    async def close(self) -> None:
        if self._conn:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Auth provider not connected. Call connect() first.")
        return self._conn

    async def sign_up(self, email: str, password: str) -> Session | None:
        email = _normalize_email(email)
        if not email or "@" not in email:
            raise AuthError("sign up", "A valid email address is required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError("sign up", f"Password should be at least {MIN_PASSWORD_LENGTH} characters")

        user_id = str(uuid4())
        salt = secrets.token_hex(16)
        password_hash = await asyncio.to_thread(_hash_password, password, salt)
        try:
            await self.conn.execute(
                "INSERT INTO users (id, email, password_hash, salt, created_at) VALUES (?, ?, ?, ?, ?)",
                (user_id, email, password_hash, salt, datetime.now().isoformat()),
            )
            await self.conn.commit()
        except sqlite3.IntegrityError as e:
            raise AuthError("sign up", "User already registered") from e
        except sqlite3.Error as e:
            raise StoreError("sign up", str(e)) from e

        session = Session(user_id=user_id, email=email, access_token=secrets.token_urlsafe(24))
        logger.info(f"Registered local account {email}")
        self._set_session(session)
        return session

    async def sign_in(self, email: str, password: str) -> Session:
        email = _normalize_email(email)
        try:
            async with self.conn.execute(
                "SELECT id, password_hash, salt FROM users WHERE email = ?", (email,)
            ) as cursor:
                row = await cursor.fetchone()
        except sqlite3.Error as e:
            raise StoreError("sign in", str(e)) from e

        if row is None:
            raise AuthError("sign in", "Invalid login credentials")
        # PBKDF2 runs off the event loop
        candidate = await asyncio.to_thread(_hash_password, password, row[2])
        if not hmac.compare_digest(row[1], candidate):
            raise AuthError("sign in", "Invalid login credentials")

        session = Session(user_id=row[0], email=email, access_token=secrets.token_urlsafe(24))
        logger.info(f"Signed in as {email}")
        self._set_session(session)
        return session

    async def sign_out(self) -> None:
        self._set_session(None)
