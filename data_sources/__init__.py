"""
Corpus sources module for the quote feed.
Provides the bundled file source and the remote HTTP source.
"""

from .base_source import BaseCorpusSource, parse_quotes
from .static_source import StaticCorpusSource
from .remote_source import RemoteCorpusSource
from .source_factory import CorpusSourceFactory

__all__ = ['BaseCorpusSource', 'parse_quotes', 'StaticCorpusSource', 'RemoteCorpusSource', 'CorpusSourceFactory']
