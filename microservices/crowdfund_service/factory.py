"""
Crowdfund Service Factory

Factory for creating crowdfund service instances with proper dependency injection.
"""

import logging
from typing import Optional

from core.config import CrowdfundSettings, get_settings

from .campaign_ledger import CampaignLedger
from .campaign_store import InMemoryCampaignStore, PostgresCampaignStore
from .clock import SystemClock
from .protocols import CampaignStoreProtocol, ClockProtocol

logger = logging.getLogger(__name__)


class CrowdfundServiceFactory:
    """Factory for creating crowdfund service components"""

    def __init__(
        self,
        settings: Optional[CrowdfundSettings] = None,
        store: Optional[CampaignStoreProtocol] = None,
        clock: Optional[ClockProtocol] = None,
    ):
        self.settings = settings or get_settings()
        self._store: Optional[CampaignStoreProtocol] = store
        self._clock: Optional[ClockProtocol] = clock
        self._ledger: Optional[CampaignLedger] = None

    def _create_store(self) -> CampaignStoreProtocol:
        backend = self.settings.service.storage_backend
        if backend == "postgres":
            return PostgresCampaignStore(self.settings.infra)
        return InMemoryCampaignStore()

    async def initialize(self) -> None:
        """Initialize all components"""
        logger.info("Initializing Crowdfund Service components...")

        if self._store is None:
            self._store = self._create_store()
        await self._store.initialize()

        if self._clock is None:
            self._clock = SystemClock()

        self._ledger = CampaignLedger(
            store=self._store,
            clock=self._clock,
            id_max_attempts=self.settings.service.id_max_attempts,
        )

        logger.info(
            f"Crowdfund Service components initialized "
            f"(storage={type(self._store).__name__})"
        )

    async def close(self) -> None:
        """Close all components"""
        logger.info("Closing Crowdfund Service components...")

        if self._store is not None:
            await self._store.close()

        logger.info("Crowdfund Service components closed")

    @property
    def store(self) -> CampaignStoreProtocol:
        """Get campaign store"""
        if self._store is None:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._store

    @property
    def clock(self) -> ClockProtocol:
        """Get clock"""
        if self._clock is None:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._clock

    @property
    def ledger(self) -> CampaignLedger:
        """Get campaign ledger"""
        if self._ledger is None:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._ledger


# Global factory instance
_factory: Optional[CrowdfundServiceFactory] = None


async def get_factory() -> CrowdfundServiceFactory:
    """Get or create factory instance"""
    global _factory
    if _factory is None:
        _factory = CrowdfundServiceFactory()
        await _factory.initialize()
    return _factory


async def close_factory() -> None:
    """Close factory instance"""
    global _factory
    if _factory:
        await _factory.close()
        _factory = None


__all__ = [
    "CrowdfundServiceFactory",
    "get_factory",
    "close_factory",
]
