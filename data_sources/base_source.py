"""
base corpus source class for the quote feed.
Provides common lifecycle and payload parsing for all corpus providers.
"""

from abc import ABC, abstractmethod
from typing import Any, List

from pydantic import ValidationError as PydanticValidationError

from utils import corpus_logger, CorpusUnavailableError, ErrorCodes
from database.models import Quote


def parse_quotes(payload: Any, source_name: str = "corpus") -> List[Quote]:
    """将原始 JSON 数据解析为语录列表，保持原始顺序"""
    if not isinstance(payload, list):
        raise CorpusUnavailableError(
            f"Corpus payload from {source_name} must be a JSON array, got {type(payload).__name__}",
            ErrorCodes.CORPUS_INVALID_FORMAT,
            context={'source': source_name}
        )

    quotes: List[Quote] = []
    seen_ids = set()
    for index, item in enumerate(payload):
        try:
            quote = Quote.model_validate(item)
        except PydanticValidationError as e:
            raise CorpusUnavailableError(
                f"Invalid quote at index {index} from {source_name}: {e.error_count()} validation errors",
                ErrorCodes.CORPUS_INVALID_FORMAT,
                context={'source': source_name, 'index': index}
            ) from e

        if quote.id in seen_ids:
            raise CorpusUnavailableError(
                f"Duplicate quote id {quote.id} from {source_name}",
                ErrorCodes.VALIDATION_DUPLICATE_ID,
                context={'source': source_name, 'quote_id': quote.id}
            )
        seen_ids.add(quote.id)
        quotes.append(quote)

    return quotes


class BaseCorpusSource(ABC):
    """语录库来源基类"""

    def __init__(self, name: str):
        self.name = name
        self.is_initialized = False

    async def initialize(self):
        """初始化语录来源"""
        if not self.is_initialized:
            corpus_logger.info(f"[{self.name}] Initializing corpus source...")
            await self._initialize_impl()
            self.is_initialized = True
            corpus_logger.info(f"[{self.name}] corpus source initialized successfully")

    async def _initialize_impl(self):
        """初始化实现，子类按需覆盖"""
        pass

    async def close(self):
        """关闭语录来源"""
        self.is_initialized = False
        corpus_logger.info(f"[{self.name}] corpus source closed")

    @abstractmethod
    async def get_quotes(self) -> List[Quote]:
        """获取完整语录列表；失败时抛出 CorpusUnavailableError"""
        pass
