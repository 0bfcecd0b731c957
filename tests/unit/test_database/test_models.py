"""
Unit tests for database models
"""

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from database.models import Base, KVEntryDB, Quote


@pytest.mark.unit
class TestDatabaseModels:
    """Test cases for database models"""

    @pytest.fixture
    def in_memory_db(self):
        """Create in-memory SQLite database for testing"""
        engine = create_engine("sqlite:///:memory:")
        Base.metadata.create_all(engine)
        SessionLocal = sessionmaker(bind=engine)
        session = SessionLocal()
        yield session
        session.close()

    def test_kv_entry_creation(self, in_memory_db):
        """Test KVEntryDB creation and timestamps"""
        in_memory_db.add(KVEntryDB(key='theme', value='"dark"'))
        in_memory_db.commit()

        retrieved = in_memory_db.get(KVEntryDB, 'theme')
        assert retrieved is not None
        assert retrieved.value == '"dark"'
        assert retrieved.created_at is not None
        assert retrieved.updated_at is not None


@pytest.mark.unit
class TestQuoteModel:
    """Test cases for the Quote value model"""

    def test_quote_from_payload(self):
        quote = Quote.model_validate({'id': 1, 'content': "Know thyself.", 'category': "Wisdom"})
        assert (quote.id, quote.content, quote.category) == (1, "Know thyself.", "Wisdom")

    def test_quote_is_immutable(self):
        quote = Quote(id=1, content="Know thyself.", category="Wisdom")
        with pytest.raises(PydanticValidationError):
            quote.content = "changed"

    def test_quote_equality_and_hash(self):
        first = Quote(id=2, content="a", category="Life")
        second = Quote(id=2, content="a", category="Life")
        assert first == second
        assert len({first, second}) == 1

    @pytest.mark.parametrize("payload", [
        {'content': "no id", 'category': "Life"},
        {'id': 3, 'category': "Life"},
        {'id': 3, 'content': "no category"},
        {'id': "abc", 'content': "bad id", 'category': "Life"},
    ])
    def test_quote_rejects_invalid_payload(self, payload):
        with pytest.raises(PydanticValidationError):
            Quote.model_validate(payload)
