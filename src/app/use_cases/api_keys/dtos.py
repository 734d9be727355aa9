"""
API Key Use Case DTOs (Data Transfer Objects)
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class CreateApiKeyCommand(BaseModel):
    name: str
    description: Optional[str] = None
    scopes: Optional[List[str]] = None
    expires_at: Optional[datetime] = None


class ApiKeyInfo(BaseModel):
    """API key as listed; never includes the secret"""

    id: str
    name: str
    description: Optional[str] = None
    key_prefix: str
    masked_key: str
    scopes: List[str]
    expires_at: Optional[datetime] = None
    last_used_at: Optional[datetime] = None
    created_at: datetime


class CreateApiKeyResponse(ApiKeyInfo):
    """Creation response - the only time the full key is returned"""

    key: str


class RevokeApiKeyResponse(BaseModel):
    id: str
    name: str
    status: str
