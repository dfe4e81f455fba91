"""Redis connection and utilities."""

import logging

import redis

logger = logging.getLogger(__name__)


class RedisClient:
    def __init__(self, url: str, max_requests: int = 100, window_seconds: int = 900):
        self.client = redis.Redis.from_url(url)
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    def rate_limit_check(self, client_id: str, endpoint: str) -> bool:
        """Check if a client has exceeded the rate limit. Returns True if allowed, False if rate limit exceeded."""
        key = f"rate_limit:{client_id}:{endpoint}"
        pipe = self.client.pipeline()
        pipe.incr(key)
        # nx keeps the window anchored at the first request
        pipe.expire(key, self.window_seconds, nx=True)
        count, _ = pipe.execute()
        return int(count) <= self.max_requests

    def ping(self) -> bool:
        return bool(self.client.ping())

    def close(self):
        self.client.close()
