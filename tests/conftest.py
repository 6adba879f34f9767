"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/  : Component tests (in-memory or mocked dependencies)
    - unit/       : Unit tests (pure functions, no I/O)
"""
import os
import sys

import pytest

# Testing environment before any service imports read it
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("STORAGE_BACKEND", "memory")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tests.contracts.crowdfund.data_contract import (
    DEFAULT_START_NS,
    CrowdfundTestDataFactory,
)


# =============================================================================
# Test Configuration
# =============================================================================

class TestConfig:
    """Centralized test configuration"""

    SERVICE_NAME = "crowdfund_service"
    SERVICE_PORT = 8260
    START_NS = DEFAULT_START_NS

    @classmethod
    def get_service_url(cls) -> str:
        return f"http://localhost:{cls.SERVICE_PORT}"


@pytest.fixture(scope="session")
def test_config() -> TestConfig:
    """Provide test configuration"""
    return TestConfig()


@pytest.fixture
def factory():
    """Provide CrowdfundTestDataFactory"""
    return CrowdfundTestDataFactory


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "component: marks tests as component tests")
