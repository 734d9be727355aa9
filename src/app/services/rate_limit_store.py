from abc import ABC, abstractmethod


class IRateLimitStore(ABC):
    """Counter storage for fixed-window rate limiting"""

    @abstractmethod
    async def increment(self, key: str, ttl_seconds: int) -> int:
        """
        Atomically increment the counter at `key` and return the new value.

        The counter expires `ttl_seconds` after it is first created. Increment
        and read are one operation so concurrent callers never observe the
        same count.
        """
        pass

    async def close(self) -> None:
        """Release connections held by the store"""
        pass
