from datetime import datetime, timedelta, timezone

from jose import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from app.core.config import get_settings

PASSWORD_HASH_METHOD = "pbkdf2:sha256"


def get_password_hash(password: str) -> str:
    return generate_password_hash(password, method=PASSWORD_HASH_METHOD)


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return check_password_hash(hashed_password, password)
    except ValueError:
        # Unknown or malformed hash format.
        return False


def create_access_token(subject: str, *, session_id: str, expires_delta: timedelta) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + expires_delta
    claims = {"sub": subject, "sid": session_id, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
