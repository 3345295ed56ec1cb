"""
Password hashing and JWT helpers for API accounts
"""
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from foodhub.config import settings

BCRYPT_ROUNDS = 12
BCRYPT_MAX_BYTES = 72

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def _password_bytes(password) -> bytes:
    data = password.encode("utf-8") if isinstance(password, str) else password
    # bcrypt ignores everything past 72 bytes and newer releases refuse longer input
    return data[:BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored hash is not a bcrypt hash
        return False


def get_password_hash(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def _encode_token(data: Dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    issued_at = datetime.utcnow()
    claims = dict(data)
    claims.update({"exp": issued_at + expires_delta, "iat": issued_at, "type": token_type})
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    return _encode_token(
        data,
        ACCESS_TOKEN,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )


def create_refresh_token(data: Dict[str, Any]) -> str:
    return _encode_token(data, REFRESH_TOKEN, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Claims of a valid token, or None when the signature or expiry check fails"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
