"""
Session resolver backed by JWTs issued by the external auth provider.
"""

import logging
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from src.app.services.session_resolver import ISessionResolver

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class JwtSessionResolver(ISessionResolver):
    """
    Verifies an HS256 session token with the shared secret and reads the
    principal from its ``user_id`` claim. Expiry (``exp``) is enforced by
    python-jose.
    """

    def __init__(self, secret: str, algorithm: str = ALGORITHM):
        self.secret = secret
        self.algorithm = algorithm

    async def resolve(self, credential: str) -> Optional[UUID]:
        try:
            payload = jwt.decode(credential, self.secret, algorithms=[self.algorithm])
        except JWTError as exc:
            logger.info(f"Session token rejected: {exc}")
            return None

        user_id = payload.get("user_id") or payload.get("sub")
        if not user_id:
            return None
        try:
            return UUID(str(user_id))
        except ValueError:
            return None
