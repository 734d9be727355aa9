from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import WebhookEvent


class IWebhookEventRepository(ABC):
    """WebhookEvent repository interface - application layer"""

    @abstractmethod
    async def get_by_event_id(self, event_id: str) -> Optional[WebhookEvent]:
        """Get webhook event record by provider event id"""
        pass

    @abstractmethod
    async def insert_if_absent(self, event: WebhookEvent) -> bool:
        """
        Insert the record in a single unique-constrained write.

        Returns:
            True if inserted, False if a record with the same event_id exists
        """
        pass

    @abstractmethod
    async def claim_failed(self, event_id: str) -> bool:
        """
        Atomically move a failed record back to processing.

        Returns:
            True if this caller claimed the record for reprocessing
        """
        pass

    @abstractmethod
    async def update(self, event: WebhookEvent) -> WebhookEvent:
        """Update existing webhook event record"""
        pass
