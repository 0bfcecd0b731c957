"""
corpus source factory for the quote feed.
Builds the configured corpus provider.
"""

from pathlib import Path
from typing import Optional

from utils import corpus_logger, config_manager, ConfigurationError, ErrorCodes, CorpusConfig, BASE_DIR

from .base_source import BaseCorpusSource
from .static_source import StaticCorpusSource
from .remote_source import RemoteCorpusSource


class CorpusSourceFactory:
    """corpus source factory class"""

    SOURCE_TYPES = ('static', 'remote')

    def __init__(self, corpus_config: Optional[CorpusConfig] = None):
        self.corpus_config = corpus_config or config_manager.get_corpus_config()

    def create(self) -> BaseCorpusSource:
        """根据配置创建语录来源"""
        source_type = self.corpus_config.source

        if source_type == 'static':
            path = self.corpus_config.static_path
            if path and not Path(path).is_absolute():
                # 相对路径相对于项目根目录
                path = BASE_DIR / path
            source = StaticCorpusSource(path=path)
        elif source_type == 'remote':
            source = RemoteCorpusSource(
                self.corpus_config.remote_url,
                timeout_seconds=self.corpus_config.timeout_seconds,
                retry_times=self.corpus_config.retry_times,
                retry_interval=self.corpus_config.retry_interval
            )
        else:
            raise ConfigurationError(
                f"Unknown corpus source type: {source_type}, expected one of {self.SOURCE_TYPES}",
                ErrorCodes.CORPUS_SOURCE_UNKNOWN,
                context={'source': source_type}
            )

        corpus_logger.info(f"[CorpusSourceFactory] Created {source_type} corpus source")
        return source
