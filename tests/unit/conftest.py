"""
Unit Test Layer Configuration

Structure:
    tests/unit/
    └── crowdfund/   Models, clocks, errors, config

Usage:
    pytest tests/unit -v                 # All unit tests
    pytest tests/unit -m unit -v         # By marker
"""
import os
import sys

import pytest

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))


def pytest_collection_modifyitems(config, items):
    """Auto-add unit marker to all tests in this directory"""
    for item in items:
        if "/unit/" in str(item.path):
            item.add_marker(pytest.mark.unit)
