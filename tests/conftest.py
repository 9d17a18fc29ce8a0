"""
Test bootstrap:
- Make tests/helpers importable as ``helpers``
- Replace backoff sleeps with a recorder
- Provide a client factory bound to a mock session
"""
import pathlib
import sys

import pytest

TESTS_DIR = pathlib.Path(__file__).parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from dmm_client import DmmApiClient
from dmm_client.recovery import retry as retry_module

API_ID = "test-api-id"
AFFILIATE_ID = "test-affiliate-id"


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff delays instead of sleeping."""
    recorded = []
    monkeypatch.setattr(retry_module.time, "sleep", recorded.append)
    return recorded


@pytest.fixture
def make_client(sleeps):
    """Build a DmmApiClient around a mock session with fast test settings."""
    def factory(session, **overrides):
        options = {
            "api_id": API_ID,
            "affiliate_id": AFFILIATE_ID,
            "timeout": 500,
            "max_retries": 3,
            "retry_delay": 50,
        }
        options.update(overrides)
        return DmmApiClient(session=session, **options)
    return factory
