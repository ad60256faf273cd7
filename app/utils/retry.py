# app/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import redis

from app.domain.errors import ConcurrencyConflictError
from app.utils.settings import CART_CONFLICT_RETRIES


def conflict_retry():
    #ponawiamy cala operacje gdy optimistic lock wykryl zmiane wersji koszyka
    #bledy bazy (SQLAlchemyError) nie sa ponawiane
    return retry(
        reraise=True,
        stop=stop_after_attempt(CART_CONFLICT_RETRIES),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(ConcurrencyConflictError),
    )


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )
