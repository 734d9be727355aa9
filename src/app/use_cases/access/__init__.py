"""
Access Use Cases

Identity and tenant resolution for session and machine requests.
"""

from .authenticate_api_key_use_case import AuthenticateApiKeyUseCase
from .resolve_context_use_case import ResolveAccessContextUseCase

__all__ = [
    "AuthenticateApiKeyUseCase",
    "ResolveAccessContextUseCase",
]
