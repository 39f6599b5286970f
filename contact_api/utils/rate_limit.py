import math
import time

from limits import RateLimitItem, RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter
from starlette.requests import Request


class RateLimiter:
    """
    Fixed window counter keyed by client address.

    The window of an address opens with its first hit and lasts `window` seconds. Expired counters are evicted by
    the storage. A request reserves its slot with `hit` before it is handled and can hand it back with `release`, so
    concurrent requests of one address cannot pass the limit together.
    """

    def __init__(self, limit: int, window: int) -> None:
        self.item: RateLimitItem = RateLimitItemPerSecond(limit, window)
        self.storage = MemoryStorage()
        self.strategy = FixedWindowRateLimiter(self.storage)

    @property
    def limit(self) -> int:
        return self.item.amount

    def remaining(self, key: str) -> int:
        return max(0, self.strategy.get_window_stats(self.item, key).remaining)

    def is_limited(self, key: str) -> bool:
        return not self.strategy.test(self.item, key)

    def hit(self, key: str) -> bool:
        """Count one request and return whether it is within the limit."""

        return self.strategy.hit(self.item, key)

    def release(self, key: str) -> None:
        """Hand back a slot taken by `hit`."""

        self.storage.decr(self.item.key_for(key))

    def retry_after(self, key: str) -> int:
        if self.remaining(key) == self.limit:
            return 0
        reset_time = self.strategy.get_window_stats(self.item, key).reset_time
        return max(1, math.ceil(reset_time - time.time()))

    def headers(self, key: str) -> dict[str, str]:
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining(key)),
            "RateLimit-Reset": str(self.retry_after(key)),
        }

    def reset(self) -> None:
        self.storage.reset()


def get_client_address(request: Request, trusted_proxy_hops: int) -> str:
    """Return the client address, honoring `X-Forwarded-For` entries appended by trusted proxies."""

    if trusted_proxy_hops > 0 and (forwarded := request.headers.get("x-forwarded-for")):
        addresses = [address.strip() for address in forwarded.split(",") if address.strip()]
        if addresses:
            return addresses[-min(trusted_proxy_hops, len(addresses))]
    return request.client.host if request.client else "unknown"
