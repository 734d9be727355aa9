"""
WebhookEvent Entity

Idempotency ledger for billing-provider webhook deliveries.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from .enums import WebhookEventStatus


class WebhookEvent(SQLModel, table=True):
    """
    WebhookEvent entity - one row per provider event id.

    Business Rules:
    - event_id is unique; the unique insert is the idempotency gate
    - At most one delivery of an event id applies side effects
    - failed records may be claimed again by a provider retry,
      rejected records never are
    - event_data keeps the raw payload for audit/replay
    """

    __tablename__ = "webhook_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    event_id: str = Field(unique=True, index=True, max_length=255)
    event_type: str = Field(max_length=100)

    status: WebhookEventStatus = Field(default=WebhookEventStatus.processing)
    event_data: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Error tracking
    error: Optional[str] = Field(default=None)
    retry_count: int = Field(default=0)

    # Timestamps
    processed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_webhook_event_status", "status"),)
