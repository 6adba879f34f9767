"""
Component Tests for CrowdfundServiceFactory
"""

import pytest

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config import CrowdfundSettings, InfraConfig, ServiceConfig
from microservices.crowdfund_service import factory as factory_module
from microservices.crowdfund_service.campaign_ledger import CampaignLedger
from microservices.crowdfund_service.campaign_store import (
    InMemoryCampaignStore,
    PostgresCampaignStore,
)
from microservices.crowdfund_service.clock import SystemClock
from microservices.crowdfund_service.factory import CrowdfundServiceFactory


class TestCrowdfundServiceFactory:
    """Tests for component wiring"""

    def test_properties_require_initialize(self):
        service_factory = CrowdfundServiceFactory(settings=CrowdfundSettings())

        for name in ("store", "clock", "ledger"):
            with pytest.raises(RuntimeError, match="not initialized"):
                getattr(service_factory, name)

    @pytest.mark.asyncio
    async def test_defaults_to_memory_store_and_system_clock(self):
        service_factory = CrowdfundServiceFactory(settings=CrowdfundSettings())

        await service_factory.initialize()

        assert isinstance(service_factory.store, InMemoryCampaignStore)
        assert isinstance(service_factory.clock, SystemClock)
        assert isinstance(service_factory.ledger, CampaignLedger)
        await service_factory.close()

    @pytest.mark.asyncio
    async def test_injected_components_are_used(self, mock_store, clock):
        settings = CrowdfundSettings(service=ServiceConfig(id_max_attempts=2))
        service_factory = CrowdfundServiceFactory(settings=settings, store=mock_store, clock=clock)

        await service_factory.initialize()

        ledger = service_factory.ledger
        assert ledger.store is mock_store
        assert ledger.clock is clock
        assert ledger.id_max_attempts == 2

    def test_postgres_backend_selected(self):
        settings = CrowdfundSettings(
            service=ServiceConfig(storage_backend="postgres"),
            infra=InfraConfig(postgres_schema="crowdfund_test"),
        )

        store = CrowdfundServiceFactory(settings=settings)._create_store()

        assert isinstance(store, PostgresCampaignStore)
        assert store.table == "crowdfund_test.campaigns"

    @pytest.mark.asyncio
    async def test_global_factory(self, monkeypatch):
        monkeypatch.setattr(factory_module, "_factory", None)
        monkeypatch.setattr(factory_module, "get_settings", lambda: CrowdfundSettings())

        first = await factory_module.get_factory()
        second = await factory_module.get_factory()

        assert first is second
        await factory_module.close_factory()
        assert factory_module._factory is None
