"""
工具模块包
提供项目所需的通用工具和功能
"""

# 导出核心工具
from .config_manager import (
    config_manager,
    UnifiedConfigManager,
    LoggingConfig,
    FeedConfig,
    GestureConfig,
    StorageConfig,
    CorpusConfig
)
from .exceptions import (
    FeedSystemError,
    ConfigurationError,
    CorpusUnavailableError,
    DatabaseError,
    PersistenceWriteError,
    ValidationError,
    ErrorCodes,
    create_error_response
)
from .logging_manager import (
    LogContext,
    log_execution,
    MetricsLogger,
    logging_manager,
    logger,
    feed_metrics,
    reaction_metrics,
    LogConfig,
    initialize_logging,
    ModuleLoggers,
    feed_logger,
    autoscroll_logger,
    gesture_logger,
    reaction_logger,
    corpus_logger,
    storage_logger,
    config_logger
)
from .path_utils import BASE_DIR, CONFIG_DIR, LOG_DIR, DATA_DIR, BUNDLED_QUOTES_FILE

# 版本信息
__version__ = "1.0.0"

__all__ = [
    # 配置管理
    "config_manager",
    "UnifiedConfigManager",
    "LoggingConfig",
    "FeedConfig",
    "GestureConfig",
    "StorageConfig",
    "CorpusConfig",

    # 异常处理
    "FeedSystemError",
    "ConfigurationError",
    "CorpusUnavailableError",
    "DatabaseError",
    "PersistenceWriteError",
    "ValidationError",
    "ErrorCodes",
    "create_error_response",

    # 日志工具
    "LogContext",
    "log_execution",
    "MetricsLogger",
    "logging_manager",
    "logger",
    "feed_metrics",
    "reaction_metrics",
    "LogConfig",
    "initialize_logging",
    "ModuleLoggers",
    "feed_logger",
    "autoscroll_logger",
    "gesture_logger",
    "reaction_logger",
    "corpus_logger",
    "storage_logger",
    "config_logger",

    # 路径工具
    "BASE_DIR",
    "CONFIG_DIR",
    "LOG_DIR",
    "DATA_DIR",
    "BUNDLED_QUOTES_FILE",
]
