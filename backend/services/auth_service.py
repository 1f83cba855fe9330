"""
Calibration Tracker - Auth Provider
Version: 1.2.0

Changelog:
v1.2.0 (2026-10-19): Passwords over the 72-byte bcrypt limit rejected instead of raising
v1.1.0 (2026-10-12): Failed-login lockout (too-many-requests); session expiry
v1.0.0 (2026-10-05): Email/password login with bcrypt hashes and bearer sessions
"""

import logging
import re
import secrets
import uuid
from collections import defaultdict
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional

import aiosqlite
import bcrypt

from config import settings
from database import get_db, fetch_one, execute_write
from models.user import LoginResult, User, UserRole
from services.translations import translate

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# bcrypt only hashes the first 72 bytes and rejects longer input
BCRYPT_MAX_PASSWORD_BYTES = 72


class AuthErrorCode(str, Enum):
    INVALID_CREDENTIALS = "invalid-credentials"
    TOO_MANY_REQUESTS = "too-many-requests"
    NETWORK_REQUEST_FAILED = "network-request-failed"
    EMAIL_ALREADY_IN_USE = "email-already-in-use"
    WEAK_PASSWORD = "weak-password"
    INVALID_EMAIL = "invalid-email"


AUTH_ERROR_MESSAGE_KEYS = {
    AuthErrorCode.INVALID_CREDENTIALS.value: "login.invalidCredentials",
    AuthErrorCode.TOO_MANY_REQUESTS.value: "login.tooManyRequests",
    AuthErrorCode.NETWORK_REQUEST_FAILED.value: "login.networkError",
    AuthErrorCode.EMAIL_ALREADY_IN_USE.value: "register.emailInUse",
    AuthErrorCode.WEAK_PASSWORD.value: "register.weakPassword",
    AuthErrorCode.INVALID_EMAIL.value: "register.invalidEmail",
}


def auth_error_message(code: Optional[str], lang: Optional[str] = None,
                       fallback_key: str = "login.error") -> str:
    """Localized message for an auth error code; unknown codes get the generic message"""
    key = AUTH_ERROR_MESSAGE_KEYS.get(code or "", fallback_key)
    return translate(key, lang)


def normalize_login(identifier: str) -> str:
    """Bare demo usernames ('admin') log in as admin@<DEMO_EMAIL_DOMAIN>"""
    identifier = (identifier or "").strip().lower()
    if identifier and "@" not in identifier:
        return f"{identifier}@{settings.DEMO_EMAIL_DOMAIN}"
    return identifier


def hash_password(password: str) -> str:
    """Hash the provided password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def password_too_long(password: str) -> bool:
    return len((password or "").encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES


def check_password(stored_hash: str, provided_password: str) -> bool:
    """Validate a plaintext password against the stored hash."""
    if password_too_long(provided_password):
        return False
    return bcrypt.checkpw(provided_password.encode("utf-8"), stored_hash.encode("utf-8"))


class AuthProvider:
    """Users table + opaque session tokens"""

    def __init__(self):
        self._failures: Dict[str, List[datetime]] = defaultdict(list)

    # -- Lockout --

    def _recent_failures(self, email: str) -> List[datetime]:
        cutoff = datetime.now() - timedelta(minutes=settings.AUTH_LOCKOUT_MINUTES)
        recent = [t for t in self._failures.get(email, []) if t >= cutoff]
        self._failures[email] = recent
        return recent

    def _is_rate_limited(self, email: str) -> bool:
        return len(self._recent_failures(email)) >= settings.AUTH_MAX_FAILED_ATTEMPTS

    def _record_failure(self, email: str):
        self._failures[email].append(datetime.now())

    # -- Login / logout --

    async def login(self, email: str, password: str, lang: Optional[str] = None) -> LoginResult:
        email = normalize_login(email)

        if self._is_rate_limited(email):
            logger.warning(f"Login rate-limited for '{email}'")
            return self._failure(AuthErrorCode.TOO_MANY_REQUESTS, lang)

        try:
            async with get_db() as db:
                row = await fetch_one(db, "SELECT * FROM users WHERE email = ?", (email,))
                if not row or not check_password(row["password_hash"], password or ""):
                    self._record_failure(email)
                    logger.warning(f"Authentication failed for '{email}': invalid credentials")
                    return self._failure(AuthErrorCode.INVALID_CREDENTIALS, lang)

                token = await self._create_session(db, row["uid"])
        except (aiosqlite.Error, OSError) as e:
            logger.error(f"Login error for '{email}': {e}")
            return self._failure(AuthErrorCode.NETWORK_REQUEST_FAILED, lang)

        self._failures.pop(email, None)
        user = self._to_user(row)
        logger.info(f"User '{user.username}' ({user.role.value}) logged in")
        return LoginResult(success=True, token=token, user=user)

    async def logout(self, token: str) -> None:
        try:
            async with get_db() as db:
                await execute_write(db, "DELETE FROM auth_sessions WHERE token = ?", (token,))
        except (aiosqlite.Error, OSError) as e:
            logger.error(f"Logout error: {e}")

    async def current_user(self, token: Optional[str]) -> Optional[User]:
        """User owning a live session token, or None"""
        if not token:
            return None
        async with get_db() as db:
            row = await fetch_one(db, """
                SELECT u.*, s.expires_at FROM auth_sessions s
                JOIN users u ON u.uid = s.uid
                WHERE s.token = ?
            """, (token,))
            if not row:
                return None
            if datetime.fromisoformat(row["expires_at"]) <= datetime.now():
                await execute_write(db, "DELETE FROM auth_sessions WHERE token = ?", (token,))
                return None
        return self._to_user(row)

    # -- Registration --

    async def register(self, email: str, password: str, username: str,
                       role: UserRole = UserRole.USER, lang: Optional[str] = None) -> LoginResult:
        """Create a user profile and log it in"""
        email = (email or "").strip().lower()
        if not EMAIL_PATTERN.match(email):
            return self._failure(AuthErrorCode.INVALID_EMAIL, lang, "register.error")
        if len(password or "") < settings.AUTH_MIN_PASSWORD_LENGTH or password_too_long(password):
            return self._failure(AuthErrorCode.WEAK_PASSWORD, lang, "register.error")

        uid = uuid.uuid4().hex
        try:
            async with get_db() as db:
                await execute_write(db, """
                    INSERT INTO users (uid, email, username, role, password_hash, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                """, (uid, email, username.strip() or email, UserRole(role).value,
                      hash_password(password), datetime.now().isoformat()))
                token = await self._create_session(db, uid)
        except aiosqlite.IntegrityError:
            logger.warning(f"Registration rejected for '{email}': email already in use")
            return self._failure(AuthErrorCode.EMAIL_ALREADY_IN_USE, lang, "register.error")
        except (aiosqlite.Error, OSError) as e:
            logger.error(f"Registration error for '{email}': {e}")
            return self._failure(AuthErrorCode.NETWORK_REQUEST_FAILED, lang, "register.error")

        user = User(uid=uid, email=email, username=username.strip() or email, role=role)
        logger.info(f"User '{user.username}' registered as {user.role.value}")
        return LoginResult(success=True, token=token, user=user)

    # -- Helpers --

    async def _create_session(self, db, uid: str) -> str:
        token = secrets.token_urlsafe(32)
        now = datetime.now()
        expires = now + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
        await execute_write(db, """
            INSERT INTO auth_sessions (token, uid, created_at, expires_at)
            VALUES (?, ?, ?, ?)
        """, (token, uid, now.isoformat(), expires.isoformat()))
        return token

    @staticmethod
    def _failure(code: AuthErrorCode, lang: Optional[str],
                 fallback_key: str = "login.error") -> LoginResult:
        return LoginResult(
            success=False,
            error_code=code.value,
            error=auth_error_message(code.value, lang, fallback_key),
        )

    @staticmethod
    def _to_user(row: dict) -> User:
        return User(uid=row["uid"], email=row["email"], username=row["username"],
                    role=UserRole(row["role"]))


# Singleton instance
auth_provider = AuthProvider()
