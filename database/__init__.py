"""
Database module for the quote feed.
Provides SQLite-backed durable key-value storage.
"""

from .connection import DatabaseManager, MEMORY_DB
from .models import Base, KVEntryDB, Quote
from .operations import KVStoreOperations, LIKED_QUOTES_KEY, SAVED_QUOTES_KEY, THEME_KEY

__all__ = [
    'DatabaseManager', 'MEMORY_DB', 'Base', 'KVEntryDB', 'Quote',
    'KVStoreOperations', 'LIKED_QUOTES_KEY', 'SAVED_QUOTES_KEY', 'THEME_KEY'
]
