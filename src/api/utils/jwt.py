from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import jwt

from config import ApplicationConfig
from src.adapter.services.session_resolver import ALGORITHM


def generate_jwt(user_id: UUID, expires_delta: timedelta = timedelta(hours=12)) -> str:
    """
    Generate a session token the way the auth provider issues them

    Args:
        user_id: User UUID
        expires_delta: Token lifetime

    Returns:
        JWT token string (HS256)
    """
    now = datetime.now(UTC)
    payload = {
        "user_id": str(user_id),
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm=ALGORITHM)
