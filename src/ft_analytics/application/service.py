"""AnalyticsApplicationService: role-scoped, cache-aside analytics reads.

Every read: prepare_scope (role decision + read-only cache guard) →
get_or_compute on a key carrying caller, scope segment and parameters →
on miss, load scoped transactions and run the pure aggregation engine.
"""

import logging
from datetime import date
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ft_analytics.application.schemas import (
    CategoryBreakdownResponse,
    MonthBucketResponse,
    MonthlyTrendResponse,
    SummaryResponse,
    YearlyOverviewResponse,
)
from src.ft_analytics.domain import aggregation
from src.ft_common.cache import (
    CacheAside,
    category_breakdown_key,
    get_cache,
    monthly_trend_key,
    summary_key,
    yearly_overview_key,
)
from src.ft_common.datetime_utils import month_bounds, month_name, year_bounds
from src.ft_common.money import to_money
from src.ft_gateway.auth.scope import Caller, DataScope, prepare_scope
from src.ft_transaction.application.schemas import TransactionResponse
from src.ft_transaction.domain.models import Transaction, TransactionFilter
from src.ft_transaction.domain.repository import TransactionRepositoryProtocol
from src.ft_transaction.infrastructure.persistence import TransactionRepository

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS_LIMIT = 10


class AnalyticsApplicationService:
    def __init__(
        self,
        repo: TransactionRepositoryProtocol | None = None,
        cache: CacheAside | None = None,
    ) -> None:
        self._repo: TransactionRepositoryProtocol = repo or TransactionRepository()
        self._cache = cache

    @property
    def cache(self) -> CacheAside:
        return self._cache or get_cache()

    async def _load(
        self,
        db: AsyncSession,
        scope: DataScope,
        start: date | None = None,
        end: date | None = None,
        tx_type: str | None = None,
    ) -> list[Transaction]:
        filters = TransactionFilter(
            owner_id=scope.owner_id, type=tx_type, start_date=start, end_date=end
        )
        return await self._repo.find(db, filters)

    async def get_summary(self, db: AsyncSession, caller: Caller) -> dict[str, Any]:
        scope = await prepare_scope(caller, self.cache)

        async def compute() -> dict[str, Any]:
            transactions = await self._load(db, scope)
            recent = [
                TransactionResponse.from_domain(t)
                for t in transactions[:RECENT_TRANSACTIONS_LIMIT]
            ]
            return SummaryResponse.build(
                scope.cache_segment, aggregation.summarize(transactions), recent
            ).model_dump(mode="json")

        return await self.cache.get_or_compute(
            summary_key(caller.user_id, scope.cache_segment),
            compute,
            settings.ANALYTICS_CACHE_TTL_SECONDS,
        )

    async def get_monthly_trend(
        self, db: AsyncSession, caller: Caller, year: int
    ) -> dict[str, Any]:
        scope = await prepare_scope(caller, self.cache)

        async def compute() -> dict[str, Any]:
            start, end = year_bounds(year)
            buckets = aggregation.monthly_trend(await self._load(db, scope, start, end), year)
            return MonthlyTrendResponse(
                scope=scope.cache_segment,
                year=year,
                months=[MonthBucketResponse.from_domain(b) for b in buckets],
            ).model_dump(mode="json")

        return await self.cache.get_or_compute(
            monthly_trend_key(caller.user_id, scope.cache_segment, year),
            compute,
            settings.ANALYTICS_CACHE_TTL_SECONDS,
        )

    async def get_yearly_overview(
        self, db: AsyncSession, caller: Caller, year: int
    ) -> dict[str, Any]:
        scope = await prepare_scope(caller, self.cache)

        async def compute() -> dict[str, Any]:
            start, end = year_bounds(year)
            overview = aggregation.yearly_overview(await self._load(db, scope, start, end), year)
            return YearlyOverviewResponse.from_domain(scope.cache_segment, overview).model_dump(
                mode="json"
            )

        return await self.cache.get_or_compute(
            yearly_overview_key(caller.user_id, scope.cache_segment, year),
            compute,
            settings.ANALYTICS_CACHE_TTL_SECONDS,
        )

    async def get_category_breakdown(
        self,
        db: AsyncSession,
        caller: Caller,
        year: int,
        month: int,
        tx_type: str,
    ) -> dict[str, Any]:
        scope = await prepare_scope(caller, self.cache)

        async def compute() -> dict[str, Any]:
            start, end = month_bounds(year, month)
            transactions = await self._load(db, scope, start, end, tx_type)
            breakdown = aggregation.category_breakdown(transactions, year, month, tx_type)
            return CategoryBreakdownResponse(
                scope=scope.cache_segment,
                year=year,
                month=month,
                month_name=month_name(month),
                type=tx_type,
                breakdown=breakdown,
                total=to_money(sum(breakdown.values(), to_money(0))),
            ).model_dump(mode="json")

        return await self.cache.get_or_compute(
            category_breakdown_key(caller.user_id, scope.cache_segment, year, month, tx_type),
            compute,
            settings.ANALYTICS_CACHE_TTL_SECONDS,
        )
