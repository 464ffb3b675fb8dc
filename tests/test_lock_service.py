"""Tests for the per-user Redis cart lock."""

import pytest

from foodmarket.domain.errors import CartBusyError


EMAIL = "buyer@example.com"


def test_acquire_is_exclusive(lock_service):
    assert lock_service.acquire_cart_lock(EMAIL, "token-a")
    assert not lock_service.acquire_cart_lock(EMAIL, "token-b")


def test_lock_has_ttl(lock_service):
    lock_service.acquire_cart_lock(EMAIL, "token-a")
    assert 0 < lock_service.redis.ttl(lock_service.cart_key(EMAIL)) <= lock_service.ttl


def test_release_requires_owner_token(lock_service):
    lock_service.acquire_cart_lock(EMAIL, "token-a")

    assert not lock_service.release_cart_lock(EMAIL, "token-b")
    assert lock_service.release_cart_lock(EMAIL, "token-a")
    assert lock_service.acquire_cart_lock(EMAIL, "token-b")


def test_locks_are_per_user(lock_service):
    assert lock_service.acquire_cart_lock(EMAIL, "token-a")
    assert lock_service.acquire_cart_lock("other@example.com", "token-b")


def test_context_manager_releases(lock_service):
    with lock_service.cart_lock(EMAIL) as token:
        assert lock_service.redis.get(lock_service.cart_key(EMAIL)) == token

    assert lock_service.redis.get(lock_service.cart_key(EMAIL)) is None


def test_context_manager_releases_on_error(lock_service):
    with pytest.raises(RuntimeError):
        with lock_service.cart_lock(EMAIL):
            raise RuntimeError("boom")

    assert lock_service.redis.get(lock_service.cart_key(EMAIL)) is None


def test_context_manager_gives_up_when_held(lock_service):
    lock_service.acquire_cart_lock(EMAIL, "someone-else")

    with pytest.raises(CartBusyError):
        with lock_service.cart_lock(EMAIL):
            pass

    # the holder's lock is untouched
    assert lock_service.redis.get(lock_service.cart_key(EMAIL)) == "someone-else"
