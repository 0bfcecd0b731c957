"""
Unit tests for the feed session
"""

import asyncio
import pytest
from unittest.mock import Mock

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from feed import FeedSession, ReactionStore, CorpusState, FeedViewState, VirtualViewport, ALL_CATEGORY
from database.operations import LIKED_QUOTES_KEY
from data_sources import StaticCorpusSource
from utils import CorpusUnavailableError, ValidationError, ErrorCodes
from tests.mocks import MockCorpusSource, STOIC_IDS


@pytest.fixture
def session(mock_corpus_source, reaction_store, seeded_batcher, mock_share_collaborator, feed_config, gesture_config):
    return FeedSession(
        mock_corpus_source,
        reaction_store,
        batcher=seeded_batcher,
        surface=VirtualViewport(client_height=800),
        share_collaborator=mock_share_collaborator,
        scheduler=AsyncIOScheduler(),
        feed_config=feed_config,
        gesture_config=gesture_config
    )


@pytest.mark.unit
class TestFeedSessionLoading:
    """Test cases for corpus loading and view state"""

    def test_initial_view_state_is_loading(self, session):
        assert session.view_state is FeedViewState.LOADING

    @pytest.mark.asyncio
    async def test_load_ready(self, session):
        state = await session.load()

        assert state is CorpusState.READY
        assert session.view_state is FeedViewState.FEED
        assert session.categories == ["All", "Stoic", "Motivation", "Love"]
        assert session.active_category == ALL_CATEGORY
        assert len(session.cards()) == 5
        assert session.error is None

    @pytest.mark.asyncio
    async def test_load_error_sets_error_payload(self, reaction_store, seeded_batcher, feed_config):
        source = MockCorpusSource(error=CorpusUnavailableError(
            "Failed to fetch quotes: HTTP 404 Not Found", ErrorCodes.CORPUS_BAD_STATUS, context={'status': 404}
        ))
        session = FeedSession(source, reaction_store, batcher=seeded_batcher, feed_config=feed_config)

        state = await session.load()

        assert state is CorpusState.ERROR
        assert session.view_state is FeedViewState.ERROR
        assert session.error['error_code'] == ErrorCodes.CORPUS_BAD_STATUS
        assert session.error['context'] == {'status': 404}
        assert session.cards() == []

    @pytest.mark.asyncio
    async def test_undecodable_corpus_file_shows_error(self, temp_dir, reaction_store, seeded_batcher, feed_config):
        path = temp_dir / "quotes.json"
        path.write_bytes(b'[{"id": 1, "content": "\xff\xfe", "category": "Stoic"}]')
        session = FeedSession(StaticCorpusSource(path=path), reaction_store, batcher=seeded_batcher, feed_config=feed_config)

        assert await session.load() is CorpusState.ERROR
        assert session.view_state is FeedViewState.ERROR
        assert session.error['error_code'] == ErrorCodes.CORPUS_INVALID_FORMAT

    @pytest.mark.asyncio
    async def test_load_empty_corpus(self, reaction_store, seeded_batcher, feed_config):
        session = FeedSession(MockCorpusSource([]), reaction_store, batcher=seeded_batcher, feed_config=feed_config)

        assert await session.load() is CorpusState.EMPTY
        assert session.view_state is FeedViewState.EMPTY
        assert session.categories == ["All"]

    @pytest.mark.asyncio
    async def test_reload_recovers_after_error(self, session, mock_corpus_source):
        mock_corpus_source.configure_failure(CorpusUnavailableError("offline", ErrorCodes.CORPUS_CONNECTION_FAILED))
        assert await session.load() is CorpusState.ERROR

        mock_corpus_source.error = None
        assert await session.reload() is CorpusState.READY
        assert session.error is None
        assert mock_corpus_source.calls == 2

    @pytest.mark.asyncio
    async def test_load_reads_persisted_reactions(self, mock_corpus_source, kv_store, seeded_batcher, feed_config):
        kv_store.set(LIKED_QUOTES_KEY, [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12])
        reactions = ReactionStore(kv_store)
        session = FeedSession(mock_corpus_source, reactions, batcher=seeded_batcher, feed_config=feed_config)

        await session.load()

        assert reactions.is_loaded is True
        assert all(card.is_liked for card in session.cards())


@pytest.mark.unit
class TestFeedSessionNavigation:
    """Test cases for category selection and scrolling"""

    @pytest.mark.asyncio
    async def test_select_category_resets_scroll(self, session):
        await session.load()
        session.advance()
        assert session.surface.scroll_top == 800

        session.select_category("Stoic")

        assert session.surface.scroll_top == 0
        assert {card.quote.id for card in session.cards()} == STOIC_IDS
        assert session.batcher.has_more is False

    @pytest.mark.asyncio
    async def test_unknown_category_shows_empty_state(self, session):
        await session.load()
        session.select_category("Poetry")

        assert session.view_state is FeedViewState.EMPTY
        assert session.cards() == []

    @pytest.mark.asyncio
    async def test_advance_requests_more_near_end(self, session):
        await session.load()
        for _ in range(4):
            assert session.advance() is None
        assert session.surface.scroll_top == 3200

        task = session.advance()

        assert task is not None
        assert session.is_loading_more is True
        # loading indicator occupies one more viewport
        assert session.surface.scroll_top == 4000

        await task
        assert len(session.cards()) == 10
        assert session.is_loading_more is False

    @pytest.mark.asyncio
    async def test_overlapping_advances_share_one_load(self, session):
        await session.load()
        session.surface.scroll_to(3200)

        first = session.advance()
        second = session.advance()

        assert second is first
        await first
        assert len(session.cards()) == 10

    @pytest.mark.asyncio
    async def test_on_scroll_near_end(self, session):
        await session.load()
        assert session.on_scroll() is None

        session.surface.scroll_to(3200)
        task = session.on_scroll()

        assert task is not None
        await task
        assert len(session.cards()) == 10

    @pytest.mark.asyncio
    async def test_handle_key(self, session):
        await session.load()

        assert session.handle_key("ArrowDown") is True
        assert session.surface.scroll_top == 800
        assert session.handle_key("ArrowUp") is True
        assert session.surface.scroll_top == 0
        assert session.handle_key("Enter") is False

    @pytest.mark.asyncio
    async def test_arrow_keys_stop_autoscroll_and_load_near_end(self, session):
        await session.load()
        assert session.toggle_autoscroll() is True

        session.handle_key("ArrowDown")
        assert session.is_autoscrolling is False

        for _ in range(3):
            session.handle_key("ArrowDown")
        assert session.surface.scroll_top == 3200
        assert session.is_loading_more is True

        while session.is_loading_more:
            await asyncio.sleep(0.005)
        assert len(session.cards()) == 10
        await session.close()

    @pytest.mark.asyncio
    async def test_manual_input_stops_autoscroll(self, session):
        await session.load()
        assert session.toggle_autoscroll() is True
        assert session.is_autoscrolling is True

        session.on_manual_input()

        assert session.is_autoscrolling is False
        await session.close()


@pytest.mark.unit
class TestFeedSessionCards:
    """Test cases for per-card interaction"""

    @pytest.mark.asyncio
    async def test_swipe_right_likes_and_advances(self, session):
        await session.load()
        quote = session.cards()[0].quote
        recognizer = session.recognizer_for(quote)

        recognizer.touch_start(100)
        recognizer.touch_move(250)
        recognizer.touch_end()

        assert session.reactions.is_liked(quote.id) is True
        assert session.cards()[0].is_liked is True
        assert session.surface.scroll_top == 800

    @pytest.mark.asyncio
    async def test_swipe_left_saves_and_advances(self, session):
        await session.load()
        quote = session.cards()[1].quote

        recognizer = session.recognizer_for(quote)
        recognizer.mouse_down(300)
        session.window.dispatch("mousemove", 150)
        session.window.dispatch("mouseup")

        assert session.reactions.is_saved(quote.id) is True
        assert session.surface.scroll_top == 800
        assert session.window.listener_count() == 0

    @pytest.mark.asyncio
    async def test_recognizer_is_cached_per_quote(self, session):
        await session.load()
        quote = session.cards()[0].quote
        assert session.recognizer_for(quote) is session.recognizer_for(quote)

    @pytest.mark.asyncio
    async def test_gesture_start_stops_autoscroll(self, session):
        await session.load()
        session.toggle_autoscroll()

        session.recognizer_for(session.cards()[0].quote).touch_start(10)

        assert session.is_autoscrolling is False
        await session.close()

    @pytest.mark.asyncio
    async def test_explicit_buttons(self, session):
        await session.load()
        quote = session.cards()[2].quote

        assert session.like(quote.id) is True
        assert session.save(quote) is True
        card = session.cards()[2]
        assert (card.is_liked, card.is_saved) == (True, True)
        assert session.surface.scroll_top == 0

    @pytest.mark.asyncio
    async def test_copy_text(self, session):
        await session.load()
        quote = session.cards()[0].quote

        assert session.copy_text(quote.id) == f'"{quote.content}" - {quote.category}'

    @pytest.mark.asyncio
    async def test_copy_text_unknown_quote(self, session):
        await session.load()
        with pytest.raises(ValidationError) as exc_info:
            session.copy_text(999)
        assert exc_info.value.error_code == ErrorCodes.VALIDATION_UNKNOWN_QUOTE

    @pytest.mark.asyncio
    async def test_card_region(self, session):
        await session.load()
        quote = session.cards()[3].quote

        region = session.card_region(quote.id)

        assert region.element_id == f"quote-{quote.id}"
        assert region.quote == quote
        assert (region.top, region.height) == (2400, 800)

    @pytest.mark.asyncio
    async def test_share_exports_region(self, session, mock_share_collaborator):
        await session.load()
        quote = session.cards()[0].quote

        assert await session.share(quote.id) is True
        mock_share_collaborator.export.assert_awaited_once_with(session.card_region(quote.id))

    @pytest.mark.asyncio
    async def test_share_failure_does_not_affect_state(self, session, mock_share_collaborator):
        await session.load()
        mock_share_collaborator.export.side_effect = RuntimeError("canvas tainted")
        visible = session.batcher.visible
        quote = visible[0]

        assert await session.share(quote.id) is False
        assert session.batcher.visible == visible
        assert session.view_state is FeedViewState.FEED

    @pytest.mark.asyncio
    async def test_share_with_sync_collaborator(self, session):
        await session.load()
        collaborator = Mock()
        session.share_collaborator = collaborator
        quote = session.cards()[0].quote

        assert await session.share(quote.id) is True
        collaborator.export.assert_called_once()

    @pytest.mark.asyncio
    async def test_share_without_collaborator(self, session):
        await session.load()
        session.share_collaborator = None
        assert await session.share(session.cards()[0].quote.id) is False

    @pytest.mark.asyncio
    async def test_close(self, session, mock_corpus_source):
        await session.load()

        await session.close()

        assert mock_corpus_source.closed is True
        assert session.reactions.is_loaded is False
