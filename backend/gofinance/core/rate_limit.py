import logging
import threading
import time

from redis import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

SWEEP_INTERVAL_SECONDS = 60


class RateLimiter:
    """Fixed-window attempt counter.

    Counts are kept in Redis when a reachable ``redis_url`` is given so that
    several workers share one budget; otherwise they live in this process.
    A Redis failure mid-flight falls back to the local counter for that call.
    """

    def __init__(self, redis_url: str | None = None, key_prefix: str = "gofinance") -> None:
        # key -> (window_start, window_end, count)
        self._windows: dict[str, tuple[int, int, int]] = {}
        self._next_sweep = 0.0
        self._lock = threading.Lock()
        self._key_prefix = key_prefix
        self._redis: Redis | None = None
        if redis_url:
            try:
                client = Redis.from_url(redis_url, decode_responses=True)
                client.ping()
                self._redis = client
            except (RedisError, ValueError):
                logger.warning("rate_limit_redis_unavailable url=%s; using local counters", redis_url)

    def _redis_key(self, key: str, window_start: int) -> str:
        return f"{self._key_prefix}:ratelimit:{key}:{window_start}"

    def _hit_redis(self, key: str, window_start: int, window_seconds: int) -> int | None:
        if self._redis is None:
            return None
        redis_key = self._redis_key(key, window_start)
        try:
            pipe = self._redis.pipeline()
            pipe.incr(redis_key)
            pipe.expire(redis_key, window_seconds + 1)
            count, _ = pipe.execute()
            return int(count)
        except RedisError:
            logger.warning("rate_limit_redis_error key=%s", key)
            return None

    def _sweep_expired(self, now: float) -> None:
        if now < self._next_sweep:
            return
        for key in [k for k, (_, end, _) in self._windows.items() if end <= now]:
            del self._windows[key]
        self._next_sweep = now + SWEEP_INTERVAL_SECONDS

    def _hit_local(self, key: str, window_start: int, window_seconds: int, now: float) -> int:
        with self._lock:
            self._sweep_expired(now)
            started, _, count = self._windows.get(key, (window_start, 0, 0))
            if started != window_start:
                count = 0
            count += 1
            self._windows[key] = (window_start, window_start + window_seconds, count)
            return count

    def exceeded(self, key: str, limit: int, window_seconds: int) -> bool:
        limit = max(1, int(limit))
        window_seconds = max(1, int(window_seconds))
        now = time.time()
        window_start = int(now) // window_seconds * window_seconds

        count = self._hit_redis(key, window_start, window_seconds)
        if count is None:
            count = self._hit_local(key, window_start, window_seconds, now)
        return count > limit
