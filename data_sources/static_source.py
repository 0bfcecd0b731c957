"""
Static corpus source.
Reads the bundled quote list from a JSON file on disk.
"""

import asyncio
import json
from pathlib import Path
from typing import List, Optional, Union

from utils import corpus_logger, CorpusUnavailableError, ErrorCodes, BUNDLED_QUOTES_FILE
from database.models import Quote

from .base_source import BaseCorpusSource, parse_quotes


class StaticCorpusSource(BaseCorpusSource):
    """本地 JSON 文件语录来源"""

    def __init__(self, name: str = "static", path: Optional[Union[str, Path]] = None):
        super().__init__(name)
        self.path = Path(path) if path else BUNDLED_QUOTES_FILE

    def _read_payload(self):
        with open(self.path, 'r', encoding='utf-8') as f:
            return json.load(f)

    async def get_quotes(self) -> List[Quote]:
        """读取并解析语录文件"""
        try:
            # 文件读取放到线程池，避免阻塞事件循环
            payload = await asyncio.to_thread(self._read_payload)
        except FileNotFoundError as e:
            raise CorpusUnavailableError(
                f"Quote file not found: {self.path}",
                ErrorCodes.CORPUS_NOT_FOUND,
                context={'source': self.name, 'path': str(self.path)}
            ) from e
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorpusUnavailableError(
                f"Failed to read quote file {self.path}: {e}",
                ErrorCodes.CORPUS_INVALID_FORMAT,
                context={'source': self.name, 'path': str(self.path)}
            ) from e

        quotes = parse_quotes(payload, self.name)
        corpus_logger.info(f"[{self.name}] Loaded {len(quotes)} quotes from {self.path}")
        return quotes
