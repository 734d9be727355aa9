"""
API key secret generation and verification.

A key secret has the shape ``<prefix>_<lookup>_<secret>``:
- prefix: display prefix such as ``sk_live`` (may itself contain ``_``)
- lookup: 12 hex chars, non-secret, unique; locates the stored record
- secret: 32 random bytes, url-safe base64
Only the bcrypt hash of the full key is stored.
"""

import re
import secrets
from dataclasses import dataclass
from typing import Optional

import bcrypt

LOOKUP_LENGTH = 12
_LOOKUP_PATTERN = re.compile(r"^[0-9a-f]{12}$")

# Compared against when no key matches the lookup
MISSING_KEY_HASH = bcrypt.hashpw(b"no-such-key", bcrypt.gensalt(10)).decode("utf-8")


@dataclass(frozen=True)
class GeneratedKey:
    key: str
    key_prefix: str
    key_lookup: str
    key_hash: str


@dataclass(frozen=True)
class ParsedKey:
    key_lookup: str
    secret: str


def generate_api_key(prefix: str, rounds: int = 10) -> GeneratedKey:
    key_lookup = secrets.token_hex(LOOKUP_LENGTH // 2)
    secret = secrets.token_urlsafe(32)
    key = f"{prefix}_{key_lookup}_{secret}"
    key_hash = bcrypt.hashpw(key.encode("utf-8"), bcrypt.gensalt(rounds))
    return GeneratedKey(
        key=key,
        key_prefix=prefix,
        key_lookup=key_lookup,
        key_hash=key_hash.decode("utf-8"),
    )


def parse_api_key(key: str, prefix: str) -> Optional[ParsedKey]:
    """Split a presented key; None if it does not have the expected shape"""
    head = f"{prefix}_"
    if not key.startswith(head):
        return None
    key_lookup, sep, secret = key[len(head):].partition("_")
    if not sep or not secret or not _LOOKUP_PATTERN.match(key_lookup):
        return None
    return ParsedKey(key_lookup=key_lookup, secret=secret)


def verify_api_key(key: str, key_hash: str) -> bool:
    """Constant-time bcrypt comparison of a presented key with its stored hash"""
    try:
        return bcrypt.checkpw(key.encode("utf-8"), key_hash.encode("utf-8"))
    except ValueError:
        # malformed stored hash or over-long input
        return False
