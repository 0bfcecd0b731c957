"""
Test data factories for Quote Feed tests
Provides factories for creating realistic test data
"""

import random
from typing import List, Dict, Any, Optional
from faker import Faker

from database.models import Quote

# Initialize faker
fake = Faker()

DEFAULT_CATEGORIES = ["Stoic", "Motivation", "Love", "Life", "Wisdom", "Success"]


class QuoteFactory:
    """Factory for creating test quotes"""

    @staticmethod
    def create_quote_dict(quote_id: int = 1, category: Optional[str] = None,
                          content: Optional[str] = None) -> Dict[str, Any]:
        """Create a single raw quote record, as served by the corpus"""
        return {
            'id': quote_id,
            'content': content or fake.sentence(nb_words=12),
            'category': category or random.choice(DEFAULT_CATEGORIES)
        }

    @staticmethod
    def create_quote(quote_id: int = 1, category: Optional[str] = None,
                     content: Optional[str] = None) -> Quote:
        return Quote.model_validate(QuoteFactory.create_quote_dict(quote_id, category, content))

    @staticmethod
    def create_payload(count: int = 10, categories: Optional[List[str]] = None) -> List[Dict[str, Any]]:
        """Create a raw corpus payload with sequential ids"""
        categories = categories or DEFAULT_CATEGORIES
        return [
            QuoteFactory.create_quote_dict(quote_id, random.choice(categories))
            for quote_id in range(1, count + 1)
        ]

    @staticmethod
    def create_quotes(count: int = 10, categories: Optional[List[str]] = None) -> List[Quote]:
        return [Quote.model_validate(item) for item in QuoteFactory.create_payload(count, categories)]


class ConfigFactory:
    """Factory for creating test configuration files"""

    @staticmethod
    def create_test_config() -> Dict[str, Any]:
        return {
            "logging_config": {
                "level": "WARNING",
                "file_config": {"enabled": False},
                "console_config": {"enabled": False}
            },
            "feed_config": {
                "batch_size": 3,
                "load_delay_ms": 10,
                "autoscroll_interval_ms": 1000,
                "near_end_px": 5
            },
            "gesture_config": {
                "swipe_threshold_px": 80
            },
            "storage_config": {
                "db_path": ":memory:"
            },
            "corpus_config": {
                "source": "remote",
                "remote_url": "https://example.com/quotes.json",
                "timeout_seconds": 5,
                "retry_times": 2,
                "retry_interval": 0.01
            }
        }
