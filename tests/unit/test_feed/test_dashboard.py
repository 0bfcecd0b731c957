"""
Unit tests for the saved quotes dashboard
"""

import pytest

from feed import SavedQuotesDashboard
from utils import ValidationError
from tests.factories import QuoteFactory


@pytest.mark.unit
class TestSavedQuotesDashboard:
    """Test cases for SavedQuotesDashboard"""

    @pytest.fixture
    def dashboard(self, reaction_store):
        return SavedQuotesDashboard(reaction_store)

    def test_empty_dashboard(self, dashboard):
        assert dashboard.is_empty is True
        assert dashboard.count == 0
        assert dashboard.summary() == "You have 0 saved quotes."
        assert dashboard.entries() == []

    def test_entries_in_save_order(self, dashboard, reaction_store):
        first = QuoteFactory.create_quote(quote_id=3)
        second = QuoteFactory.create_quote(quote_id=1)
        reaction_store.toggle_save(first)
        reaction_store.toggle_save(second)

        assert dashboard.entries() == [first, second]
        assert dashboard.count == 2
        assert dashboard.summary() == "You have 2 saved quotes."

    def test_remove_delegates_to_store(self, dashboard, reaction_store):
        quote = QuoteFactory.create_quote(quote_id=5)
        reaction_store.toggle_save(quote)

        assert dashboard.remove(5) is True
        assert reaction_store.is_saved(5) is False
        assert dashboard.is_empty is True
        assert dashboard.remove(5) is False

    def test_copy_text_is_content_only(self, dashboard, reaction_store):
        quote = QuoteFactory.create_quote(quote_id=8, content="Waste no more time.")
        reaction_store.toggle_save(quote)

        assert dashboard.copy_text(8) == "Waste no more time."

    def test_copy_text_unknown_quote(self, dashboard):
        with pytest.raises(ValidationError):
            dashboard.copy_text(42)
