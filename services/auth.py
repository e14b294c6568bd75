"""Local account and session handling for the dashboard pages."""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from functools import lru_cache
from threading import Lock
from typing import Set

from datastore.credentials import CredentialRecord, CredentialStore, build_default_store

logger = logging.getLogger(__name__)

_PBKDF2_ROUNDS = 200_000

MISSING_FIELDS = "Please fill in all fields."
PASSWORD_MISMATCH = "Passwords do not match."
NO_ACCOUNT = "No account found. Please register first."
INVALID_LOGIN = "Invalid Username or Password."


class AuthenticationError(Exception):
    """Raised with a user-facing message when sign-in or sign-up fails."""


def _hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), bytes.fromhex(salt), _PBKDF2_ROUNDS
    )
    return digest.hex()


class AuthService:
    """Checks credentials against the local record and tracks session tokens."""

    def __init__(self, store: CredentialStore) -> None:
        self.store = store
        self._sessions: Set[str] = set()
        self._sessions_lock = Lock()

    def create_account(self, username: str, password: str, confirm_password: str) -> None:
        if not username or not password:
            raise AuthenticationError(MISSING_FIELDS)
        if password != confirm_password:
            raise AuthenticationError(PASSWORD_MISMATCH)

        salt = secrets.token_hex(16)
        self.store.put_record(
            CredentialRecord(
                username=username,
                password_hash=_hash_password(password, salt),
                salt=salt,
            )
        )
        logger.info("Account created", extra={"username": username})

    def check_credentials(self, username: str, password: str) -> bool:
        record = self.store.get_record()
        if record is None:
            raise AuthenticationError(NO_ACCOUNT)
        candidate = _hash_password(password, record.salt)
        matches = username == record.username and hmac.compare_digest(
            candidate, record.password_hash
        )
        if not matches:
            logger.info("Rejected sign-in", extra={"username": username})
            raise AuthenticationError(INVALID_LOGIN)
        return True

    def login(self, username: str, password: str) -> str:
        self.check_credentials(username, password)
        token = secrets.token_urlsafe(24)
        with self._sessions_lock:
            self._sessions.add(token)
        return token

    def logout(self, token: str | None) -> None:
        if not token:
            return
        with self._sessions_lock:
            self._sessions.discard(token)

    def is_active(self, token: str | None) -> bool:
        if not token:
            return False
        with self._sessions_lock:
            return token in self._sessions


@lru_cache
def build_default_auth() -> AuthService:
    return AuthService(store=build_default_store())
