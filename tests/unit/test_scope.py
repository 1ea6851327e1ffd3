"""Unit tests for role-scoped data access decisions."""

import pytest

from src.ft_common.cache import CacheAside, summary_key
from src.ft_common.enums import UserRole
from src.ft_common.errors import PermissionDeniedError
from src.ft_gateway.auth.scope import (
    Caller,
    can_modify,
    prepare_scope,
    require_writer,
    resolve_scope,
)

USER = Caller("u1", UserRole.USER)
ADMIN = Caller("a1", UserRole.ADMIN)
READ_ONLY = Caller("r1", UserRole.READ_ONLY)


class TestResolveScope:
    def test_user_and_admin_are_owner_scoped(self) -> None:
        assert resolve_scope(USER).owner_id == "u1"
        assert resolve_scope(ADMIN).owner_id == "a1"
        assert resolve_scope(USER).cache_segment == "own"

    def test_read_only_is_system_wide(self) -> None:
        scope = resolve_scope(READ_ONLY)
        assert scope.system_wide
        assert scope.cache_segment == "all"
        assert scope.can_see("anyone")

    def test_admin_only_requires_admin(self) -> None:
        assert resolve_scope(ADMIN, admin_only=True).system_wide
        for caller in (USER, READ_ONLY):
            with pytest.raises(PermissionDeniedError):
                resolve_scope(caller, admin_only=True)

    def test_owner_scope_hides_other_rows(self) -> None:
        scope = resolve_scope(USER)
        assert scope.can_see("u1")
        assert not scope.can_see("u2")


class TestPrepareScope:
    async def test_read_only_cache_dropped_before_read(self, cache: CacheAside, store) -> None:
        store.data = {summary_key("r1", "all"): {"stale": True}, summary_key("u1", "own"): {}}
        scope = await prepare_scope(READ_ONLY, cache)
        assert scope.system_wide
        assert list(store.data) == [summary_key("u1", "own")]

    async def test_user_cache_untouched(self, cache: CacheAside, store) -> None:
        store.data = {summary_key("u1", "own"): {"cached": True}}
        await prepare_scope(USER, cache)
        assert summary_key("u1", "own") in store.data

    async def test_cache_down_still_resolves(self, cache: CacheAside, store) -> None:
        store.fail = True
        assert (await prepare_scope(READ_ONLY, cache)).system_wide


class TestWriteRules:
    def test_read_only_cannot_write(self) -> None:
        with pytest.raises(PermissionDeniedError):
            require_writer(READ_ONLY)
        require_writer(USER)
        require_writer(ADMIN)

    def test_can_modify(self) -> None:
        assert can_modify(USER, "u1")
        assert not can_modify(USER, "u2")
        assert can_modify(ADMIN, "u2")
