"""
Component Test Fixtures for Crowdfund Service

Provides fixtures for component testing with in-memory dependencies:
a campaign store with failure injection and an advanceable clock.
"""

import asyncio
from typing import Dict, List, Optional, Tuple
from unittest.mock import patch

import pytest

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config import CrowdfundSettings
from microservices.crowdfund_service.campaign_ledger import CampaignLedger
from microservices.crowdfund_service.clock import FixedClock
from microservices.crowdfund_service.factory import CrowdfundServiceFactory
from tests.contracts.crowdfund.data_contract import (
    DEFAULT_START_NS,
    Campaign,
    CrowdfundTestDataFactory,
)


# ====================
# Mock Campaign Store
# ====================


class MockCampaignStore:
    """Mock durable map for component testing

    Stores JSON like a real backend, records every call, and raises injected
    failures per operation ("get", "insert", "remove").
    """

    def __init__(self):
        self.records: Dict[str, str] = {}
        self.calls: List[Tuple[str, str]] = []
        self.failures: Dict[str, Exception] = {}
        self.yield_on_access = False
        self.healthy = True

    def fail(self, operation: str, exc: Optional[Exception] = None) -> None:
        self.failures[operation] = exc or ConnectionError(f"{operation} unavailable")

    def heal(self) -> None:
        self.failures.clear()

    async def _access(self, operation: str, key: str) -> None:
        self.calls.append((operation, key))
        if self.yield_on_access:
            # Give other tasks a chance to interleave
            await asyncio.sleep(0)
        if operation in self.failures:
            raise self.failures[operation]

    def calls_for(self, operation: str) -> List[str]:
        return [key for op, key in self.calls if op == operation]

    def raw(self, key: str) -> Optional[str]:
        return self.records.get(key)

    async def initialize(self):
        pass

    async def close(self):
        pass

    async def health_check(self) -> bool:
        return self.healthy

    async def get(self, key: str) -> Optional[Campaign]:
        await self._access("get", key)
        raw = self.records.get(key)
        return Campaign.model_validate_json(raw) if raw is not None else None

    async def insert(self, key: str, value: Campaign) -> None:
        await self._access("insert", key)
        self.records[key] = value.model_dump_json()

    async def remove(self, key: str) -> Optional[Campaign]:
        await self._access("remove", key)
        raw = self.records.pop(key, None)
        return Campaign.model_validate_json(raw) if raw is not None else None

    def seed(self, campaign: Campaign) -> Campaign:
        """Store a campaign without recording a call"""
        self.records[campaign.campaign_id] = campaign.model_dump_json()
        return campaign


class FailingClock:
    """Clock whose time source is unavailable"""

    def now(self) -> int:
        raise OSError("clock source unavailable")


# ====================
# Fixtures
# ====================


@pytest.fixture
def factory():
    """Provide CrowdfundTestDataFactory"""
    return CrowdfundTestDataFactory


@pytest.fixture
def clock():
    """Advanceable clock starting at a fixed instant"""
    return FixedClock(start=DEFAULT_START_NS)


@pytest.fixture
def mock_store():
    """Fresh mock store for each test"""
    return MockCampaignStore()


@pytest.fixture
def failing_clock():
    return FailingClock()


@pytest.fixture
def ledger(mock_store, clock):
    """Campaign ledger over the mock store and fixed clock"""
    return CampaignLedger(store=mock_store, clock=clock)


@pytest.fixture
async def open_campaign(ledger, factory):
    """A campaign with goal=100 and a one day deadline"""
    result = await ledger.create_campaign(**factory.make_create_kwargs(goal=100, deadline_days=1))
    assert result.success, result.message
    return result.campaign


@pytest.fixture
def service_factory(mock_store, clock):
    """Service factory wired to the mock store and clock (not yet initialized)"""
    return CrowdfundServiceFactory(
        settings=CrowdfundSettings(),
        store=mock_store,
        clock=clock,
    )


@pytest.fixture
def client(service_factory):
    """FastAPI test client; the app lifespan initializes the injected factory"""
    from fastapi.testclient import TestClient
    from microservices.crowdfund_service import main

    with patch.object(main, "CrowdfundServiceFactory", return_value=service_factory):
        with TestClient(main.app, raise_server_exceptions=False) as test_client:
            yield test_client


@pytest.fixture
async def asgi_app(service_factory):
    """FastAPI app served in-process with an initialized factory"""
    from microservices.crowdfund_service import main

    await service_factory.initialize()
    with patch.object(main, "factory", service_factory):
        yield main.app
    await service_factory.close()
