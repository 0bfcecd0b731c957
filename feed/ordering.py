"""
Feed ordering and batching.
Filters the corpus by category, shuffles it and materializes it in batches.
"""

import asyncio
import random
from typing import List, Optional, Sequence, Tuple, TypeVar

from utils import feed_logger, config_manager, FeedConfig
from database.models import Quote

ALL_CATEGORY = "All"

T = TypeVar('T')


def derive_categories(quotes: Sequence[Quote]) -> List[str]:
    """分类列表："All" 在首位，其余按首次出现顺序去重"""
    categories = [ALL_CATEGORY]
    seen = set()
    for quote in quotes:
        if quote.category not in seen:
            seen.add(quote.category)
            categories.append(quote.category)
    return categories


def shuffle(items: Sequence[T], rng: random.Random) -> List[T]:
    """Fisher-Yates 洗牌，返回新列表"""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randrange(i + 1)
        result[i], result[j] = result[j], result[i]
    return result


class FeedBatcher:
    """语录流排序与分批加载"""

    def __init__(self, batch_size: Optional[int] = None, load_delay: Optional[float] = None,
                 rng: Optional[random.Random] = None, feed_config: Optional[FeedConfig] = None):
        feed_config = feed_config or config_manager.get_feed_config()
        self.batch_size = batch_size or feed_config.batch_size
        # 加载延迟（秒）
        self.load_delay = feed_config.load_delay_ms / 1000.0 if load_delay is None else load_delay
        self.rng = rng or random.Random()

        self._corpus: Tuple[Quote, ...] = ()
        self._categories: List[str] = [ALL_CATEGORY]
        self._active_category = ALL_CATEGORY
        self._feed_order: List[Quote] = []
        self._visible: List[Quote] = []
        self._generation = 0
        self._pending: Optional[asyncio.Task] = None

    # ========================================================================
    # 只读状态
    # ========================================================================

    @property
    def categories(self) -> List[str]:
        return list(self._categories)

    @property
    def active_category(self) -> str:
        return self._active_category

    @property
    def feed_order(self) -> Tuple[Quote, ...]:
        return tuple(self._feed_order)

    @property
    def visible(self) -> Tuple[Quote, ...]:
        return tuple(self._visible)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def has_more(self) -> bool:
        return len(self._visible) < len(self._feed_order)

    @property
    def is_loading(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def is_empty(self) -> bool:
        return not self._feed_order

    # ========================================================================
    # 操作
    # ========================================================================

    def set_corpus(self, quotes: Sequence[Quote]) -> None:
        """替换语录库，重新计算分类并重新生成当前分类的顺序"""
        self._corpus = tuple(quotes)
        self._categories = derive_categories(self._corpus)
        category = self._active_category
        if category not in self._categories:
            feed_logger.info(f"[FeedBatcher] Category '{category}' no longer present, falling back to {ALL_CATEGORY}")
            category = ALL_CATEGORY
        self.set_category(category)

    def set_category(self, category: str) -> None:
        """切换分类：过滤、重新洗牌、重置可见窗口，并作废进行中的加载"""
        self.cancel_pending()
        self._generation += 1
        self._active_category = category

        if category == ALL_CATEGORY:
            filtered = self._corpus
        else:
            filtered = [q for q in self._corpus if q.category == category]

        self._feed_order = shuffle(filtered, self.rng)
        self._visible = self._feed_order[:self.batch_size]
        feed_logger.info(
            f"[FeedBatcher] Category '{category}' selected: {len(self._feed_order)} quotes, "
            f"{len(self._visible)} visible (generation {self._generation})"
        )

    def request_more(self) -> Optional[asyncio.Task]:
        """请求下一批；已全部可见时为空操作，加载中时合并到进行中的任务"""
        if self.is_loading:
            feed_logger.debug("[FeedBatcher] Load already in flight, coalescing request")
            return self._pending
        if not self.has_more:
            return None

        loop = asyncio.get_running_loop()
        self._pending = loop.create_task(self._load_next_batch(self._generation))
        return self._pending

    def cancel_pending(self) -> None:
        """取消进行中的加载"""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
            feed_logger.debug(f"[FeedBatcher] Cancelled in-flight load for generation {self._generation}")
        self._pending = None

    async def _load_next_batch(self, generation: int) -> int:
        await asyncio.sleep(self.load_delay)

        if generation != self._generation:
            feed_logger.debug(f"[FeedBatcher] Discarding stale batch for generation {generation}")
            return 0

        start = len(self._visible)
        batch = self._feed_order[start:start + self.batch_size]
        self._visible.extend(batch)
        self._pending = None
        feed_logger.debug(f"[FeedBatcher] Appended {len(batch)} quotes, {len(self._visible)}/{len(self._feed_order)} visible")
        return len(batch)
