"""Tests for the Redis cart mutex and its use in CartService"""
from decimal import Decimal
from unittest.mock import Mock

import pytest
from redis.exceptions import RedisError

from app.domain.errors import ConcurrencyConflictError, NotFoundError
from app.services.cart_service import CartService
from app.services.lock_service import LockService


@pytest.fixture
def redis_client():
    return Mock()


@pytest.fixture
def lock_service(redis_client) -> LockService:
    return LockService(client=redis_client)


class TestLockService:
    def test_acquire_uses_set_nx_with_ttl(self, lock_service, redis_client):
        redis_client.set.return_value = True

        assert lock_service.acquire_cart_lock(5, "tok", 10) is True
        redis_client.set.assert_called_once_with(name="cart:5:lock", value="tok", nx=True, ex=10)

    def test_acquire_when_held_elsewhere(self, lock_service, redis_client):
        redis_client.set.return_value = None

        assert lock_service.acquire_cart_lock(5, "tok", 10) is False

    def test_wait_gives_up_after_attempts(self, lock_service, redis_client):
        redis_client.set.return_value = None

        assert lock_service.wait_for_cart_lock(5, "tok", 10) is False
        assert redis_client.set.call_count == 5

    def test_wait_succeeds_once_released(self, lock_service, redis_client):
        redis_client.set.side_effect = [None, None, True]

        assert lock_service.wait_for_cart_lock(5, "tok", 10) is True
        assert redis_client.set.call_count == 3

    def test_redis_error_is_retried(self, lock_service, redis_client):
        redis_client.set.side_effect = [RedisError("timeout"), True]

        assert lock_service.acquire_cart_lock(5, "tok", 10) is True

    def test_release_compares_token(self, lock_service, redis_client):
        redis_client.eval.return_value = 1

        assert lock_service.release_cart_lock(5, "tok") is True
        args = redis_client.eval.call_args.args
        assert args[1:] == (1, "cart:5:lock", "tok")


class TestCartServiceLocking:
    def test_mutation_runs_under_lock(self, db, user_id):
        locks = Mock(spec=LockService)
        locks.wait_for_cart_lock.return_value = True
        svc = CartService(db, lock_service=locks)
        svc.create_cart(user_id)

        view = svc.add_item(user_id, 10, 2, Decimal("1.50"))

        assert view["total_amount"] == Decimal("3.00")
        cart_id, token, _ = locks.wait_for_cart_lock.call_args.args
        locks.release_cart_lock.assert_called_once_with(cart_id, token)

    def test_busy_lock_rejects_mutation(self, db, user_id):
        locks = Mock(spec=LockService)
        locks.wait_for_cart_lock.return_value = False
        svc = CartService(db, lock_service=locks)
        svc.create_cart(user_id)

        with pytest.raises(ConcurrencyConflictError):
            svc.add_item(user_id, 10, 2, Decimal("1.50"))

        assert svc.get_cart(user_id)["items"] == []
        locks.release_cart_lock.assert_not_called()

    def test_lock_released_when_store_fails(self, db, user_id):
        locks = Mock(spec=LockService)
        locks.wait_for_cart_lock.return_value = True
        svc = CartService(db, lock_service=locks)
        svc.create_cart(user_id)

        with pytest.raises(NotFoundError):
            svc.update_item(user_id, 10, 3)

        locks.release_cart_lock.assert_called_once()
