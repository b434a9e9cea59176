"""Resolves an ASIN into a renderable product record.

Strategies are tried in order and the first success wins. Every failure is
absorbed here: ``ProductResolver.resolve`` always returns a fully populated
``ProductRecord``, falling back to synthesized placeholder data.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence

from golink.config import Settings
from golink.models import ProductRecord, RecordSource, StrategyResult
from golink.paapi import PaapiStrategy
from golink.scraper import ScrapeStrategy

logger = logging.getLogger(__name__)


class Strategy(Protocol):
    name: str

    @property
    def available(self) -> bool: ...

    async def fetch(self, asin: str) -> StrategyResult: ...


@dataclass(frozen=True)
class RetryPolicy:
    """Fetch once more after a short delay when a result looks like placeholder data.

    "Looks generic" is a heuristic and can misfire, so it can be switched off.
    """

    enabled: bool = True
    delay: float = 1.0

    def should_retry(self, result: StrategyResult) -> bool:
        return (self.enabled and result.ok and result.record is not None
                and result.record.source != RecordSource.BLOCKED and result.record.is_generic)


class RetryingStrategy:
    """Wraps a strategy with a single delayed retry governed by a RetryPolicy."""

    def __init__(self, inner: Strategy, policy: RetryPolicy,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.inner = inner
        self.policy = policy
        self.sleep = sleep
        self.name = inner.name

    @property
    def available(self) -> bool:
        return self.inner.available

    async def fetch(self, asin: str) -> StrategyResult:
        first = await self.inner.fetch(asin)
        if not self.policy.should_retry(first):
            return first

        logger.info(f"{self.name} returned generic data for ASIN {asin}, retrying in {self.policy.delay}s")
        await self.sleep(self.policy.delay)
        second = await self.inner.fetch(asin)
        return second if second.ok else first


def default_strategies(settings: Settings, retry_policy: RetryPolicy,
                       sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> List[Strategy]:
    return [
        PaapiStrategy(settings),
        RetryingStrategy(ScrapeStrategy(settings), retry_policy, sleep=sleep),
    ]


class ProductResolver:
    def __init__(self, settings: Settings, strategies: Optional[Sequence[Strategy]] = None,
                 retry_policy: Optional[RetryPolicy] = None,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.settings = settings
        self.retry_policy = retry_policy or RetryPolicy(
            enabled=settings.scrape_retry, delay=settings.scrape_retry_delay)
        if strategies is None:
            strategies = default_strategies(settings, self.retry_policy, sleep=sleep)
        self.strategies = list(strategies)

    async def resolve(self, asin: str, credentials_available: Optional[bool] = None) -> ProductRecord:
        """Walk the strategy chain; never raises.

        credentials_available overrides the settings check for the PA-API strategy.
        """
        if credentials_available is None:
            credentials_available = self.settings.credentials_available

        for strategy in self.strategies:
            if strategy.name == PaapiStrategy.name and not credentials_available:
                logger.info("Amazon API credentials not found, skipping PA-API")
                continue
            if not strategy.available:
                continue

            try:
                result = await strategy.fetch(asin)
            except Exception as e:
                logger.error(f"Strategy {strategy.name} raised for ASIN {asin}: {e!r}")
                continue

            if result.ok and result.record is not None:
                return result.record
            logger.info(f"Strategy {strategy.name} failed for ASIN {asin} ({result.reason}), falling through")

        logger.warning(f"All strategies failed for ASIN {asin}, using placeholder data")
        return ProductRecord.placeholder(asin)
