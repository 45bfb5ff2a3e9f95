import hashlib
import logging
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bool(pwd_context.verify(plain_password, hashed_password))


def get_password_hash(password: str) -> str:
    return str(pwd_context.hash(password))


def _encode(payload: dict[str, Any], lifetime: timedelta, token_type: str) -> str:
    now = datetime.now(UTC)
    to_encode = payload.copy()
    to_encode.update({"exp": now + lifetime, "iat": now, "type": token_type})
    encoded_jwt: str = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return encoded_jwt


def create_access_token(data: dict[str, Any]) -> str:
    return _encode(data, timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES), "access")


def create_refresh_token(data: dict[str, Any]) -> str:
    # jti keeps two refresh tokens issued in the same second distinct
    payload = {**data, "jti": str(uuid.uuid4())}
    return _encode(payload, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS), "refresh")


def refresh_token_ttl_seconds() -> int:
    return settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60


def decode_token(token: str) -> dict[str, Any] | None:
    try:
        payload: dict[str, Any] = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        return payload
    except JWTError:
        logger.debug("Rejected token that failed signature or expiry checks")
        return None


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()
