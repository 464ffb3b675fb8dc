import uuid
from contextlib import contextmanager

import redis

from foodmarket.domain.errors import CartBusyError
from foodmarket.utils.retry import redis_retry, wait_for_lock
from foodmarket.utils.settings import REDIS_URL, CART_LOCK_TTL_SECONDS, CART_LOCK_WAIT_SECONDS
from foodmarket.utils.logging import get_logger

logger = get_logger(__name__)

# compare-and-delete runs as one Lua script, so nothing can slip in between GET and DEL
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    Per-user mutual exclusion for cart mutations and checkout.

    - acquire: SET key token NX EX ttl
    - release: only the holder's token may delete the key
    - the TTL frees the lock if a worker dies while holding it
    """

    def __init__(
        self,
        url: str | None = None,
        client: redis.Redis | None = None,
        ttl: int = CART_LOCK_TTL_SECONDS,
        max_wait: float = CART_LOCK_WAIT_SECONDS,
    ):
        if client is None:
            client = redis.Redis.from_url(url or REDIS_URL, decode_responses=True)
        self.redis = client
        self.ttl = ttl
        self.max_wait = max_wait

    @staticmethod
    def cart_key(email: str) -> str:
        return f"user:{email}:cart:lock"

    @redis_retry()
    def acquire_cart_lock(self, email: str, token: str) -> bool:
        key = self.cart_key(email)
        # SET user:a@b.c:cart:lock "<token>" NX EX 10
        return bool(self.redis.set(name=key, value=token, nx=True, ex=self.ttl))

    @redis_retry()
    def release_cart_lock(self, email: str, token: str) -> bool:
        key = self.cart_key(email)
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @contextmanager
    def cart_lock(self, email: str):
        """Hold the user's cart lock for the duration of the block.

        Waits up to ``max_wait`` seconds, then raises CartBusyError.
        """
        token = uuid.uuid4().hex
        acquire = wait_for_lock(self.max_wait)(self.acquire_cart_lock)
        if not acquire(email, token):
            logger.warning(f"Cart lock for {email} still held after {self.max_wait}s")
            raise CartBusyError(email)

        logger.debug(f"Acquired cart lock for {email}")
        try:
            yield token
        finally:
            if not self.release_cart_lock(email, token):
                # TTL ran out mid-operation and someone else may own the key now
                logger.warning(f"Cart lock for {email} expired before release")
            else:
                logger.debug(f"Released cart lock for {email}")
