"""
Remote corpus source.
Fetches the quote list as JSON over HTTP with retry and backoff.
"""

import asyncio
import json
from typing import List, Optional

import aiohttp

from utils import corpus_logger, CorpusUnavailableError, ErrorCodes
from database.models import Quote

from .base_source import BaseCorpusSource, parse_quotes


class RemoteCorpusSource(BaseCorpusSource):
    """HTTP 语录来源"""

    def __init__(self, url: str, name: str = "remote", timeout_seconds: float = 15.0,
                 retry_times: int = 3, retry_interval: float = 1.0):
        super().__init__(name)
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.retry_times = max(1, retry_times)
        self.retry_interval = retry_interval
        self.aio_session: Optional[aiohttp.ClientSession] = None

    async def _initialize_impl(self):
        """创建异步HTTP会话"""
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        self.aio_session = aiohttp.ClientSession(timeout=timeout)

    async def close(self):
        """关闭HTTP会话"""
        if self.aio_session:
            await self.aio_session.close()
            self.aio_session = None
        await super().close()

    async def get_quotes(self) -> List[Quote]:
        """下载并解析语录列表"""
        if not self.url:
            raise CorpusUnavailableError(
                "Remote corpus URL is not configured",
                ErrorCodes.CORPUS_NOT_FOUND,
                context={'source': self.name}
            )

        await self.initialize()
        payload = await self._fetch_payload()
        quotes = parse_quotes(payload, self.name)
        corpus_logger.info(f"[{self.name}] Fetched {len(quotes)} quotes from {self.url}")
        return quotes

    async def _fetch_payload(self):
        """带重试的下载，仅对网络错误和5xx重试"""
        last_error: Optional[CorpusUnavailableError] = None

        for attempt in range(self.retry_times):
            corpus_logger.debug(f"[{self.name}] Fetching {self.url}, attempt {attempt + 1}/{self.retry_times}")
            try:
                async with self.aio_session.get(self.url) as response:
                    if response.status == 200:
                        raw = await response.read()
                        try:
                            return json.loads(raw.decode('utf-8'))
                        except (UnicodeDecodeError, json.JSONDecodeError) as e:
                            raise CorpusUnavailableError(
                                f"Corpus response from {self.url} is not valid UTF-8 JSON: {e}",
                                ErrorCodes.CORPUS_INVALID_FORMAT,
                                context={'source': self.name, 'url': self.url}
                            ) from e

                    last_error = CorpusUnavailableError(
                        f"Failed to fetch quotes: HTTP {response.status} {response.reason}",
                        ErrorCodes.CORPUS_BAD_STATUS,
                        context={'source': self.name, 'url': self.url, 'status': response.status}
                    )
                    if response.status < 500:
                        raise last_error

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = CorpusUnavailableError(
                    f"Failed to fetch quotes from {self.url}: {e or type(e).__name__}",
                    ErrorCodes.CORPUS_CONNECTION_FAILED,
                    context={'source': self.name, 'url': self.url}
                )

            corpus_logger.warning(f"[{self.name}] Attempt {attempt + 1} failed: {last_error.message}")
            if attempt < self.retry_times - 1:
                await asyncio.sleep(self.retry_interval * (2 ** attempt))  # 指数退避

        corpus_logger.error(f"[{self.name}] All {self.retry_times} attempts failed for {self.url}")
        raise last_error
