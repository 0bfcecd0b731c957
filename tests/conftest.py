"""
pytest configuration and fixtures for Quote Feed tests
"""

import pytest
import random
import tempfile
import shutil
from pathlib import Path
from unittest.mock import AsyncMock
import sys

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from database import DatabaseManager, KVStoreOperations, MEMORY_DB
from feed import FeedBatcher, ReactionStore
from utils import FeedConfig, GestureConfig
from tests.mocks import MockCorpusSource, build_sample_corpus


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def sample_quotes():
    """12-quote corpus with 3 Stoic quotes"""
    return build_sample_corpus()


@pytest.fixture
def feed_config():
    """Feed config with a short load delay"""
    return FeedConfig(batch_size=5, load_delay_ms=10, autoscroll_interval_ms=4000, near_end_px=5.0)


@pytest.fixture
def gesture_config():
    return GestureConfig()


@pytest.fixture
def seeded_batcher(feed_config):
    return FeedBatcher(rng=random.Random(42), feed_config=feed_config)


@pytest.fixture
def kv_store():
    """KV store over an in-memory database"""
    store = KVStoreOperations(DatabaseManager(MEMORY_DB))
    yield store
    store.close()


@pytest.fixture
def reaction_store(kv_store):
    store = ReactionStore(kv_store)
    store.load()
    yield store
    store.close()


@pytest.fixture
def mock_corpus_source(sample_quotes):
    return MockCorpusSource(sample_quotes)


@pytest.fixture
def mock_share_collaborator():
    """Mock share collaborator"""
    mock = AsyncMock()
    mock.export.return_value = b"png-bytes"
    return mock


# Pytest configuration
def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
