"""
Component Test Layer Configuration

Structure:
    tests/component/
    └── crowdfund/   Ledger, stores, API and client with in-memory dependencies

Usage:
    pytest tests/component -v
    pytest tests/component/crowdfund -v
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ["ENV"] = "testing"
os.environ["ENVIRONMENT"] = "testing"
os.environ["STORAGE_BACKEND"] = "memory"

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))


def pytest_collection_modifyitems(config, items):
    """Auto-add component marker to all tests in this directory"""
    for item in items:
        if "/component/" in str(item.path):
            item.add_marker(pytest.mark.component)
