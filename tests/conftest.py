"""
Pytest configuration and shared fixtures
"""
import pytest
import sys
from pathlib import Path
from unittest.mock import Mock

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def pytest_addoption(parser):
    """Add custom pytest option for integration tests"""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="Run integration tests that require real Supabase and Redis connections"
    )


@pytest.fixture(autouse=True)
def setup_logging():
    """Disable logging during tests unless explicitly needed"""
    import logging
    logging.disable(logging.CRITICAL)
    yield
    logging.disable(logging.NOTSET)


@pytest.fixture(autouse=True)
def settings_env(request, monkeypatch):
    """Give unit tests a complete Settings without a .env file"""
    from shared.utils.config import get_settings

    if not request.config.getoption("--integration", default=False):
        monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
        monkeypatch.setenv("SUPABASE_KEY", "test-key")
        monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/15")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_supabase():
    """Chainable mock Supabase client."""
    m = Mock()
    m.table.return_value = m
    m.select.return_value = m
    m.insert.return_value = m
    m.update.return_value = m
    m.upsert.return_value = m
    m.eq.return_value = m
    m.lte.return_value = m
    m.order.return_value = m
    m.limit.return_value = m
    m.range.return_value = m
    return m


@pytest.fixture
def mock_queue():
    """RQ queue double; enqueue calls return a job with an id."""
    queue = Mock()
    queue.enqueue.return_value = Mock(id="job-1")
    queue.enqueue_in.return_value = Mock(id="job-2")
    return queue
