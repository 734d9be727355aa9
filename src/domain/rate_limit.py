"""
Rate limit values: per-endpoint rules and per-request decisions.
"""

import re
from dataclasses import dataclass

_WINDOW_PATTERN = re.compile(r"^(\d+)([smhd])$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_window(window: str) -> int:
    """
    Convert a window string such as "60s", "15m", "1h" or "1d" to seconds.

    Raises:
        ValueError: if the format is invalid or the window is zero
    """
    match = _WINDOW_PATTERN.match(window)
    if not match:
        raise ValueError(f"Invalid window format: {window}")
    amount, unit = match.groups()
    seconds = int(amount) * _UNIT_SECONDS[unit]
    if seconds <= 0:
        raise ValueError(f"Window must be positive: {window}")
    return seconds


@dataclass(frozen=True)
class RateLimitRule:
    """Request budget declared by an endpoint: `requests` per `window`"""

    requests: int
    window: str

    def __post_init__(self):
        if self.requests <= 0:
            raise ValueError("requests must be positive")
        parse_window(self.window)

    @property
    def window_seconds(self) -> int:
        return parse_window(self.window)

    def describe(self) -> str:
        return f"Maximum {self.requests} requests per {self.window}."


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of counting one request against a fixed window"""

    allowed: bool
    limit: int
    remaining: int
    reset_at: int  # epoch seconds when the current window ends
    window: str

    def headers(self) -> dict:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_at),
        }
