import redis
from tenacity import retry, stop_after_attempt, wait_fixed, retry_if_result

from app.utils.retry import redis_retry
from app.utils.settings import REDIS_URL
from app.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#zwalnia tylko wlasciciel tokena, nie mozna wcisnac sie miedzy GET a DEL


def _not_acquired(acquired) -> bool:
    return not acquired


class LockService:
    """
    -mutex na koszyk (jedna mutacja koszyka naraz, takze miedzy procesami)
    -zwalnianie locka tylko przez wlasciciela
    -atomowosc przy pomocy lua
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(cart_id: int) -> str:
        return f"cart:{cart_id}:lock"

    @redis_retry()
    def acquire_cart_lock(self, cart_id: int, token: str, ttl: int) -> bool:
        key = self._key(cart_id)
        logger.debug(f"Acquire lock {key}")
        #SET cart:1:lock "<token>" NX EX 10
        return bool(
            self.redis.set(
                name=key,
                value=token,
                nx=True, #tylko jesli klucz nie istnieje
                ex=ttl, #wygasa sam po ttl
            )
        )

    @retry(
        stop=stop_after_attempt(5),
        wait=wait_fixed(0.05),
        retry=retry_if_result(_not_acquired),
        retry_error_callback=lambda retry_state: False,
    )
    def wait_for_cart_lock(self, cart_id: int, token: str, ttl: int) -> bool:
        return self.acquire_cart_lock(cart_id, token, ttl)

    @redis_retry()
    def release_cart_lock(self, cart_id: int, token: str) -> bool:
        key = self._key(cart_id)
        logger.debug(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)
