"""Unit tests for CategoryApplicationService using a mock repository."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from src.ft_category.application.schemas import CategoryCreateRequest, CategoryUpdateRequest
from src.ft_category.application.service import CategoryApplicationService
from src.ft_category.domain.models import Category
from src.ft_common.cache import CATEGORIES_ALL_KEY, CacheAside
from src.ft_common.errors import CategoryExistsError, CategoryNotFoundError


def _make_category(cat_id: int = 1, name: str = "food", active: bool = True) -> Category:
    return Category(
        id=cat_id, name=name, description="Food and dining", color="#ef4444", is_active=active
    )


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def repo() -> MagicMock:
    return MagicMock()


@pytest.fixture
def svc(repo, cache: CacheAside) -> CategoryApplicationService:
    return CategoryApplicationService(repo=repo, cache=cache)


class TestSchemas:
    def test_name_is_normalized_to_lowercase(self) -> None:
        req = CategoryCreateRequest(name="  Food ", description="d", color="#fff")
        assert req.name == "food"

    def test_bad_color_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CategoryCreateRequest(name="food", description="d", color="red")


class TestListCategories:
    async def test_cached_after_first_read(self, svc, repo, db, store) -> None:
        repo.list_active = AsyncMock(return_value=[_make_category(), _make_category(2, "bills")])

        first = await svc.list_categories(db)
        second = await svc.list_categories(db)

        assert first == second
        assert first["count"] == 2
        assert repo.list_active.await_count == 1
        assert store.ttls[CATEGORIES_ALL_KEY] == 3600


class TestWrites:
    async def test_create_invalidates_list(self, svc, repo, db, store) -> None:
        store.data[CATEGORIES_ALL_KEY] = {"categories": [], "count": 0}
        repo.get_by_name = AsyncMock(return_value=None)
        repo.create = AsyncMock(return_value=_make_category(3, "travel"))

        resp = await svc.create_category(
            db, CategoryCreateRequest(name="Travel", description="Trips", color="#123456")
        )

        assert resp.name == "travel"
        repo.create.assert_awaited_once_with(db, "travel", "Trips", "#123456")
        db.commit.assert_awaited_once()
        assert CATEGORIES_ALL_KEY not in store.data

    async def test_duplicate_name(self, svc, repo, db) -> None:
        repo.get_by_name = AsyncMock(return_value=_make_category())
        with pytest.raises(CategoryExistsError):
            await svc.create_category(
                db, CategoryCreateRequest(name="FOOD", description="x", color="#000")
            )

    async def test_race_on_unique_index_maps_to_conflict(self, svc, repo, db) -> None:
        repo.get_by_name = AsyncMock(return_value=None)
        repo.create = AsyncMock(side_effect=IntegrityError("INSERT", {}, Exception("dup")))
        with pytest.raises(CategoryExistsError):
            await svc.create_category(
                db, CategoryCreateRequest(name="food", description="x", color="#000")
            )
        db.rollback.assert_awaited_once()

    async def test_update_missing(self, svc, repo, db) -> None:
        repo.get_by_id = AsyncMock(return_value=None)
        with pytest.raises(CategoryNotFoundError):
            await svc.update_category(db, 9, CategoryUpdateRequest(color="#abc"))

    async def test_soft_delete(self, svc, repo, db, store) -> None:
        store.data[CATEGORIES_ALL_KEY] = {}
        repo.soft_delete = AsyncMock(return_value=_make_category(active=False))

        resp = await svc.delete_category(db, 1)

        assert resp.is_active is False
        assert CATEGORIES_ALL_KEY not in store.data

    async def test_delete_missing(self, svc, repo, db) -> None:
        repo.soft_delete = AsyncMock(return_value=None)
        with pytest.raises(CategoryNotFoundError):
            await svc.delete_category(db, 1)
        db.commit.assert_not_awaited()
