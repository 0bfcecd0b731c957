"""
User reaction store.
Authoritative record of liked quote ids and saved quotes, persisted through the KV store.
"""

from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError

from utils import reaction_logger, reaction_metrics, PersistenceWriteError
from database.models import Quote
from database.operations import KVStoreOperations, LIKED_QUOTES_KEY, SAVED_QUOTES_KEY


class ReactionStore:
    """点赞与收藏状态"""

    def __init__(self, kv_store: KVStoreOperations):
        self.kv_store = kv_store
        self._liked: List[int] = []
        self._saved: Dict[int, Quote] = {}  # 保持收藏顺序
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ========================================================================
    # 生命周期
    # ========================================================================

    def load(self) -> None:
        """从 KV 存储读取已持久化的状态，格式错误的条目跳过"""
        self._liked = self._decode_liked(self.kv_store.get(LIKED_QUOTES_KEY, []))
        self._saved = self._decode_saved(self.kv_store.get(SAVED_QUOTES_KEY, []))
        self._loaded = True
        reaction_logger.info(f"[Reactions] Loaded {len(self._liked)} liked and {len(self._saved)} saved quotes")

    def close(self) -> None:
        self._loaded = False
        reaction_logger.debug("[Reactions] Reaction store closed")

    def _decode_liked(self, raw: Any) -> List[int]:
        if not isinstance(raw, list):
            reaction_logger.warning(f"[Reactions] Ignoring malformed {LIKED_QUOTES_KEY} value: {raw!r}")
            return []

        liked: List[int] = []
        for item in raw:
            # bool 是 int 的子类
            if not isinstance(item, int) or isinstance(item, bool):
                reaction_logger.warning(f"[Reactions] Skipping malformed liked entry: {item!r}")
                continue
            if item in liked:
                reaction_logger.warning(f"[Reactions] Skipping duplicate liked id {item}")
                continue
            liked.append(item)
        return liked

    def _decode_saved(self, raw: Any) -> Dict[int, Quote]:
        if not isinstance(raw, list):
            reaction_logger.warning(f"[Reactions] Ignoring malformed {SAVED_QUOTES_KEY} value: {raw!r}")
            return {}

        saved: Dict[int, Quote] = {}
        for item in raw:
            try:
                quote = Quote.model_validate(item)
            except PydanticValidationError as e:
                reaction_logger.warning(f"[Reactions] Skipping malformed saved entry {item!r}: {e.error_count()} errors")
                continue
            if quote.id in saved:
                reaction_logger.warning(f"[Reactions] Skipping duplicate saved id {quote.id}")
                continue
            saved[quote.id] = quote
        return saved

    def _ensure_loaded(self):
        if not self._loaded:
            raise RuntimeError("Reaction store not loaded")

    # ========================================================================
    # 修改
    # ========================================================================

    def toggle_like(self, quote_id: int) -> bool:
        """切换点赞，返回切换后是否已点赞"""
        self._ensure_loaded()
        if quote_id in self._liked:
            self._liked.remove(quote_id)
            liked = False
        else:
            self._liked.append(quote_id)
            liked = True

        reaction_metrics.increment("like_toggles")
        reaction_logger.debug(f"[Reactions] Quote {quote_id} {'liked' if liked else 'unliked'}")
        self._persist(LIKED_QUOTES_KEY, list(self._liked))
        return liked

    def toggle_save(self, quote: Quote) -> bool:
        """切换收藏，收藏时保存语录当时的完整内容；返回切换后是否已收藏"""
        self._ensure_loaded()
        if quote.id in self._saved:
            del self._saved[quote.id]
            saved = False
        else:
            self._saved[quote.id] = quote
            saved = True

        reaction_metrics.increment("save_toggles")
        reaction_logger.debug(f"[Reactions] Quote {quote.id} {'saved' if saved else 'unsaved'}")
        self._persist_saved()
        return saved

    def remove(self, quote_id: int) -> bool:
        """移除收藏；不存在时为空操作，返回是否移除"""
        self._ensure_loaded()
        if quote_id not in self._saved:
            return False

        del self._saved[quote_id]
        reaction_metrics.increment("removals")
        reaction_logger.debug(f"[Reactions] Quote {quote_id} removed from saved")
        self._persist_saved()
        return True

    def _persist_saved(self):
        self._persist(SAVED_QUOTES_KEY, [quote.model_dump() for quote in self._saved.values()])

    def _persist(self, key: str, value: Any):
        # 写入失败不回滚内存状态
        try:
            self.kv_store.set(key, value)
        except (PersistenceWriteError, OSError) as e:
            reaction_metrics.increment("write_failures")
            reaction_logger.warning(f"[Reactions] Failed to persist {key}, keeping in-memory state: {e}")

    # ========================================================================
    # 查询
    # ========================================================================

    def is_liked(self, quote_id: int) -> bool:
        return quote_id in self._liked

    def is_saved(self, quote_id: int) -> bool:
        return quote_id in self._saved

    def liked_ids(self) -> List[int]:
        return list(self._liked)

    def saved_quotes(self) -> List[Quote]:
        return list(self._saved.values())

    @property
    def saved_count(self) -> int:
        return len(self._saved)
