"""
ApiKey Entity

Long-lived machine credential scoped to exactly one tenant.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel


class ApiKey(SQLModel, table=True):
    """
    ApiKey entity - machine credential for the public API.

    Business Rules:
    - Full secret is <key_prefix>_<key_lookup>_<secret>; shown once at
      creation, only the bcrypt hash is retained
    - key_lookup is non-secret and unique; it locates the record, the hash
      authenticates it
    - Active -> Revoked is terminal; expiry is computed at validation time
    - Scopes limit which public endpoints the key may call
    """

    __tablename__ = "api_keys"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)

    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)

    # Security
    key_prefix: str = Field(max_length=32)
    key_lookup: str = Field(unique=True, index=True, max_length=32)
    key_hash: str = Field(max_length=60)  # Bcrypt output

    scopes: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    # Lifecycle
    is_active: bool = Field(default=True)
    expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_by: Optional[UUID] = Field(default=None)
    last_used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Audit
    created_by: UUID = Field(nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.utcnow(), sa_column=Column(DateTime)
    )

    __table_args__ = (Index("idx_api_key_tenant_active", "tenant_id", "is_active"),)

    def masked(self) -> str:
        """Display form of the key, e.g. sk_live_3f9a0c1b2d4e_****"""
        return f"{self.key_prefix}_{self.key_lookup}_{'*' * 8}"
