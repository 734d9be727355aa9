"""
API Key Use Cases

Issuing, listing and revoking machine credentials.
"""

from .create_api_key_use_case import ALL_SCOPES, KNOWN_SCOPES, CreateApiKeyUseCase
from .dtos import (
    ApiKeyInfo,
    CreateApiKeyCommand,
    CreateApiKeyResponse,
    RevokeApiKeyResponse,
)
from .list_api_keys_use_case import ListApiKeysUseCase
from .revoke_api_key_use_case import RevokeApiKeyUseCase

__all__ = [
    "ALL_SCOPES",
    "KNOWN_SCOPES",
    "CreateApiKeyUseCase",
    "ListApiKeysUseCase",
    "RevokeApiKeyUseCase",
    "ApiKeyInfo",
    "CreateApiKeyCommand",
    "CreateApiKeyResponse",
    "RevokeApiKeyResponse",
]
