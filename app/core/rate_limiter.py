"""
Redis-based rate limiting.

Fixed window counters: the first request in a window creates the key with a
TTL, later requests increment it until the window expires.
"""

import logging

import redis
from fastapi import Request

from app.core.errors import RateLimitExceeded

logger = logging.getLogger(__name__)

AUTH_RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again after 15 minutes"


class RateLimiter:
    """
    Counts requests per key in Redis.

    The redis client is passed in so the app (or a test) decides where the
    counters live.
    """

    def __init__(self, redis_client: redis.Redis):
        self.redis_client = redis_client

    def check_rate_limit(
        self,
        key: str,
        max_requests: int,
        window_seconds: int,
        error_message: str = "Rate limit exceeded",
    ) -> None:
        """
        Count one request against `key`.

        Raises:
            RateLimitExceeded: once more than max_requests hit the same window
        """
        try:
            pipe = self.redis_client.pipeline()
            pipe.incr(key)
            pipe.ttl(key)
            count, ttl = pipe.execute()
            # No TTL: a new window, or an earlier expire call was lost
            if ttl == -1:
                self.redis_client.expire(key, window_seconds)
        except redis.RedisError as e:
            # Fail open: a Redis outage must not lock everyone out of login
            logger.warning("Redis rate limiter error for %s: %s", key, e)
            return

        if count > max_requests:
            logger.info("Rate limit exceeded for %s (%d requests)", key, count)
            raise RateLimitExceeded(error_message)


def get_client_ip(request: Request, trust_proxy: bool = True) -> str:
    """
    Extract the client's IP address from the request.

    With trust_proxy the first X-Forwarded-For entry wins (the app sits behind
    one reverse proxy); otherwise the socket peer is used.
    """
    if trust_proxy:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

    return request.client.host if request.client else "unknown"
