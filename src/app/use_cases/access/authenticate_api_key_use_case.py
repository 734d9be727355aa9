"""
Authenticate API Key Use Case

Validates a machine credential and attaches its tenant to an AccessContext.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from src.libs.result import Error, Result, Return
from src.app.services.api_key_secrets import MISSING_KEY_HASH, parse_api_key, verify_api_key
from src.app.services.unit_of_work import UnitOfWork
from src.domain.access_context import AccessContext, ApiKeyIdentity

logger = logging.getLogger(__name__)

INVALID_API_KEY = Error("INVALID_API_KEY", "Invalid API key.")


class AuthenticateApiKeyUseCase:
    """
    Use case for authenticating `Authorization: Bearer <api key>` requests.

    Business Rules:
    - Rejections are checked in order: malformed, unknown or hash mismatch,
      inactive, revoked, expired
    - Every rejection returns the same INVALID_API_KEY error; only the log
      records which check failed
    - Hash comparison is bcrypt (constant time), never string equality
    - last_used_at is updated best-effort; a failure there does not fail
      the request
    """

    def __init__(
        self,
        uow: UnitOfWork,
        key_prefix: str,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.uow = uow
        self.key_prefix = key_prefix
        self.clock = clock

    async def execute(self, presented_key: Optional[str]) -> Result[AccessContext]:
        """
        Execute authenticate API key use case.

        Args:
            presented_key: Raw key taken from the bearer credential

        Returns:
            Result with an AccessContext scoped to the key's tenant, or
            Error(INVALID_API_KEY)
        """
        if not presented_key:
            logger.info("API key rejected: empty credential")
            return Return.err(INVALID_API_KEY)

        parsed = parse_api_key(presented_key, self.key_prefix)
        if parsed is None:
            logger.info("API key rejected: malformed credential")
            return Return.err(INVALID_API_KEY)

        async with self.uow:
            api_key = await self.uow.api_keys.get_by_lookup(parsed.key_lookup)

            # an unknown lookup costs one bcrypt comparison like a known one
            key_hash = api_key.key_hash if api_key is not None else MISSING_KEY_HASH
            if not verify_api_key(presented_key, key_hash) or api_key is None:
                logger.info(f"API key rejected: no match for lookup {parsed.key_lookup}")
                return Return.err(INVALID_API_KEY)

            if not api_key.is_active:
                logger.info(f"API key rejected: key {api_key.id} is inactive")
                return Return.err(INVALID_API_KEY)

            if api_key.revoked_at is not None:
                logger.info(f"API key rejected: key {api_key.id} is revoked")
                return Return.err(INVALID_API_KEY)

            now = self.clock()
            if api_key.expires_at is not None and api_key.expires_at <= now:
                logger.info(f"API key rejected: key {api_key.id} expired at {api_key.expires_at}")
                return Return.err(INVALID_API_KEY)

            context = AccessContext(
                tenant_selector=str(api_key.tenant_id),
                tenant_id=api_key.tenant_id,
                api_key=ApiKeyIdentity(
                    key_id=api_key.id,
                    name=api_key.name,
                    scopes=list(api_key.scopes or []),
                ),
            )

            try:
                await self.uow.api_keys.touch_last_used(api_key.id, now)
                await self.uow.commit()
            except SQLAlchemyError:
                await self.uow.rollback()
                logger.warning(f"Failed to record last use of api key {context.api_key.key_id}", exc_info=True)

            return Return.ok(context)
