"""
Feed session.
Wires the corpus provider, batcher, reaction store, autoscroll timer and
per-card gesture recognizers into the single-screen quote feed.
"""

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from utils import (
    feed_logger, feed_metrics, log_execution, create_error_response, config_manager,
    CorpusUnavailableError, ValidationError, ErrorCodes, FeedConfig, GestureConfig
)
from database.models import Quote
from data_sources.base_source import BaseCorpusSource

from .ordering import FeedBatcher
from .surface import PresentingSurface, VirtualViewport, remaining_distance
from .autoscroll import AutoscrollTimer
from .gesture import SwipeRecognizer, PointerEventHub
from .reactions import ReactionStore


class CorpusState(str, Enum):
    """语录库加载状态"""
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


class FeedViewState(str, Enum):
    """页面应渲染的状态"""
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    FEED = "feed"


@dataclass(frozen=True)
class QuoteCardView:
    """卡片渲染数据"""
    quote: Quote
    is_liked: bool
    is_saved: bool


@dataclass(frozen=True)
class CardRegion:
    """卡片在内容中的只读区域，供分享导出使用"""
    element_id: str
    quote: Quote
    top: float
    height: float


class ShareCollaborator(Protocol):
    """分享导出接口，可同步或异步"""

    def export(self, region: CardRegion) -> Any: ...


KEY_ARROW_DOWN = "ArrowDown"
KEY_ARROW_UP = "ArrowUp"


class FeedSession:
    """语录流会话"""

    def __init__(self, source: BaseCorpusSource, reactions: ReactionStore,
                 batcher: Optional[FeedBatcher] = None,
                 surface: Optional[PresentingSurface] = None,
                 share_collaborator: Optional[ShareCollaborator] = None,
                 scheduler: Optional[AsyncIOScheduler] = None,
                 window: Optional[PointerEventHub] = None,
                 feed_config: Optional[FeedConfig] = None,
                 gesture_config: Optional[GestureConfig] = None):
        self.feed_config = feed_config or config_manager.get_feed_config()
        self.gesture_config = gesture_config or config_manager.get_gesture_config()

        self.source = source
        self.reactions = reactions
        self.batcher = batcher or FeedBatcher(feed_config=self.feed_config)
        self.surface = surface if surface is not None else VirtualViewport()
        if isinstance(self.surface, VirtualViewport):
            # 每张卡片一个视口，加载指示器另占一个
            self.surface.bind(lambda: len(self.batcher.visible) + (1 if self.batcher.is_loading else 0))

        self.share_collaborator = share_collaborator
        self.window = window or PointerEventHub()
        self.autoscroll = AutoscrollTimer(
            self.surface, self.batcher, self.advance,
            scheduler=scheduler, feed_config=self.feed_config
        )

        self.corpus_state = CorpusState.LOADING
        self.error: Optional[Dict[str, Any]] = None
        self._recognizers: Dict[int, SwipeRecognizer] = {}

    # ========================================================================
    # 加载
    # ========================================================================

    @log_execution("Feed", "load_corpus")
    async def _fetch_corpus(self) -> List[Quote]:
        return await self.source.get_quotes()

    async def load(self) -> CorpusState:
        """加载语录库：LOADING -> READY | EMPTY | ERROR"""
        if not self.reactions.is_loaded:
            self.reactions.load()

        self.corpus_state = CorpusState.LOADING
        self.error = None

        try:
            quotes = await self._fetch_corpus()
        except CorpusUnavailableError as e:
            feed_logger.error(f"[FeedSession] Corpus unavailable: {e}")
            self.error = create_error_response(e)
            self.batcher.set_corpus([])
            self.corpus_state = CorpusState.ERROR
            return self.corpus_state

        self.batcher.set_corpus(quotes)
        self._recognizers.clear()
        self.surface.scroll_to(0)
        self.corpus_state = CorpusState.READY if quotes else CorpusState.EMPTY
        feed_metrics.gauge("corpus_size", len(quotes))
        feed_logger.info(f"[FeedSession] Corpus loaded: {len(quotes)} quotes, state {self.corpus_state.value}")
        return self.corpus_state

    async def reload(self) -> CorpusState:
        """完整重新加载"""
        self.batcher.cancel_pending()
        return await self.load()

    @property
    def view_state(self) -> FeedViewState:
        if self.corpus_state is CorpusState.LOADING:
            return FeedViewState.LOADING
        if self.corpus_state is CorpusState.ERROR:
            return FeedViewState.ERROR
        if self.corpus_state is CorpusState.EMPTY or self.batcher.is_empty:
            return FeedViewState.EMPTY
        return FeedViewState.FEED

    # ========================================================================
    # 分类与内容
    # ========================================================================

    @property
    def categories(self) -> List[str]:
        return self.batcher.categories

    @property
    def active_category(self) -> str:
        return self.batcher.active_category

    def select_category(self, category: str) -> None:
        """切换分类并回到顶部"""
        if category not in self.batcher.categories:
            feed_logger.warning(f"[FeedSession] Unknown category '{category}' selected")
        self.batcher.set_category(category)
        self.surface.scroll_to(0)
        feed_metrics.increment("category_switches")

    def cards(self) -> List[QuoteCardView]:
        return [
            QuoteCardView(quote, self.reactions.is_liked(quote.id), self.reactions.is_saved(quote.id))
            for quote in self.batcher.visible
        ]

    @property
    def is_loading_more(self) -> bool:
        return self.batcher.is_loading

    # ========================================================================
    # 滚动
    # ========================================================================

    def advance(self):
        """前进一个视口；距底部不足一屏时先请求下一批"""
        client_height = self.surface.client_height
        task = None
        if remaining_distance(self.surface) < client_height:
            task = self.batcher.request_more()
        self.surface.scroll_by(client_height)
        return task

    def on_scroll(self):
        """滚动事件：接近底部时请求下一批"""
        if remaining_distance(self.surface) < self.feed_config.near_end_px:
            return self.batcher.request_more()
        return None

    def on_manual_input(self) -> None:
        """滚轮或触摸等手动输入立即停止自动滚动"""
        if self.autoscroll.is_running:
            feed_logger.debug("[FeedSession] Manual input, stopping autoscroll")
        self.autoscroll.stop()

    def toggle_autoscroll(self) -> bool:
        return self.autoscroll.toggle()

    @property
    def is_autoscrolling(self) -> bool:
        return self.autoscroll.is_running

    def handle_key(self, key: str) -> bool:
        """方向键翻页，属于手动滚动：停止自动滚动并检查是否需要加载"""
        if key == KEY_ARROW_DOWN:
            step = self.surface.client_height
        elif key == KEY_ARROW_UP:
            step = -self.surface.client_height
        else:
            return False

        self.on_manual_input()
        self.surface.scroll_by(step)
        self.on_scroll()
        return True

    # ========================================================================
    # 卡片交互
    # ========================================================================

    def recognizer_for(self, quote: Quote) -> SwipeRecognizer:
        recognizer = self._recognizers.get(quote.id)
        if recognizer is None:
            recognizer = SwipeRecognizer(
                quote,
                on_like=self.like,
                on_save=self.save,
                on_swipe_next=self.advance,
                window=self.window,
                on_gesture_start=self.on_manual_input,
                gesture_config=self.gesture_config
            )
            self._recognizers[quote.id] = recognizer
        return recognizer

    def like(self, quote_id: int) -> bool:
        return self.reactions.toggle_like(quote_id)

    def save(self, quote: Quote) -> bool:
        return self.reactions.toggle_save(quote)

    def _find_visible(self, quote_id: int):
        for index, quote in enumerate(self.batcher.visible):
            if quote.id == quote_id:
                return index, quote
        raise ValidationError(
            f"Quote {quote_id} is not in the visible feed",
            ErrorCodes.VALIDATION_UNKNOWN_QUOTE,
            context={'quote_id': quote_id}
        )

    def copy_text(self, quote_id: int) -> str:
        """剪贴板文本"""
        _, quote = self._find_visible(quote_id)
        return f'"{quote.content}" - {quote.category}'

    def card_region(self, quote_id: int) -> CardRegion:
        index, quote = self._find_visible(quote_id)
        height = self.surface.client_height
        return CardRegion(
            element_id=f"quote-{quote.id}",
            quote=quote,
            top=index * height,
            height=height
        )

    async def share(self, quote_id: int) -> bool:
        """导出卡片区域；导出结果和错误都不影响会话状态"""
        region = self.card_region(quote_id)
        if self.share_collaborator is None:
            feed_logger.warning(f"[FeedSession] No share collaborator configured, cannot share quote {quote_id}")
            return False

        try:
            result = self.share_collaborator.export(region)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            feed_logger.error(f"[FeedSession] Failed to share quote {quote_id}: {e}")
            return False

        feed_logger.info(f"[FeedSession] Shared quote {quote_id}")
        return True

    # ========================================================================
    # 关闭
    # ========================================================================

    async def close(self) -> None:
        self.autoscroll.shutdown()
        self.batcher.cancel_pending()
        self._recognizers.clear()
        self.reactions.close()
        await self.source.close()
        feed_logger.info("[FeedSession] Session closed")
