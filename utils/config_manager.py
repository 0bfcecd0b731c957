"""
统一的配置管理模块
整合底层配置操作和应用层类型安全访问
"""

import json
import logging
from typing import Any, Optional, Dict, TypeVar
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import ConfigurationError, ErrorCodes
from .path_utils import CONFIG_DIR

# 获取配置专用日志器
config_logger = logging.getLogger("Config")

# 为泛型类型定义一个TypeVar
T = TypeVar('T')

# ============================================================================
# 配置数据类型定义
# ============================================================================

@dataclass
class LoggingModuleConfig:
    """模块日志配置"""
    level: str = "INFO"
    enabled: bool = True

@dataclass
class FileLoggingConfig:
    """文件日志配置"""
    enabled: bool = True
    directory: str = "log"
    filename: str = "sys.log"
    rotation: Optional[Dict[str, Any]] = None

@dataclass
class ConsoleLoggingConfig:
    """控制台日志配置"""
    enabled: bool = True

@dataclass
class LoggingConfig:
    """完整日志配置"""
    level: str = "INFO"
    format: str = "[%(levelname)s][%(asctime)s][%(filename)s:%(lineno)d] - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_config: FileLoggingConfig = field(default_factory=FileLoggingConfig)
    console_config: ConsoleLoggingConfig = field(default_factory=ConsoleLoggingConfig)
    modules: Dict[str, LoggingModuleConfig] = field(default_factory=dict)

@dataclass
class FeedConfig:
    """语录流配置"""
    batch_size: int = 5
    load_delay_ms: int = 500
    autoscroll_interval_ms: int = 4000
    near_end_px: float = 5.0

@dataclass
class GestureConfig:
    """滑动手势配置"""
    swipe_threshold_px: float = 100.0
    overlay_fade_start_px: float = 10.0
    overlay_full_px: float = 150.0
    overlay_max_opacity: float = 0.8
    rotation_divisor: float = 20.0

@dataclass
class StorageConfig:
    """本地存储配置"""
    db_path: str = "data/feed_state.db"

@dataclass
class CorpusConfig:
    """语录库来源配置"""
    source: str = "static"  # static, remote
    static_path: Optional[str] = None
    remote_url: str = ""
    timeout_seconds: float = 15.0
    retry_times: int = 3
    retry_interval: float = 1.0


# ============================================================================
# 统一配置管理器
# ============================================================================

class UnifiedConfigManager:
    """统一配置管理器 - 整合底层操作和应用层抽象"""

    def __init__(self, config_dir: str = str(CONFIG_DIR)):
        self._config_dir = Path(config_dir)
        self._config_data: Dict[str, Any] = {}

        # 类型化配置缓存
        self._typed_cache: Dict[str, Any] = {}

        # 初始化配置
        self._load_config()

    def _load_config(self) -> None:
        """加载配置文件"""
        merged_config = {}
        config_logger.info(f"Loading configuration from directory: {self._config_dir}")

        if not self._config_dir.is_dir():
            raise ConfigurationError(
                f"Configuration path is not a directory: {self._config_dir}",
                ErrorCodes.CONFIG_NOT_FOUND
            )

        # 按文件名排序加载，确保加载顺序一致
        config_files = sorted(self._config_dir.glob('*.json'))
        if not config_files:
            raise ConfigurationError(
                f"No configuration files (.json) found in: {self._config_dir}",
                ErrorCodes.CONFIG_NOT_FOUND
            )

        for config_file in config_files:
            try:
                with open(config_file, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(
                    f"Invalid JSON in configuration file {config_file.name}: {e}",
                    ErrorCodes.CONFIG_INVALID_FORMAT
                ) from e
            if not isinstance(data, dict):
                raise ConfigurationError(
                    f"Configuration file {config_file.name} must contain a JSON object",
                    ErrorCodes.CONFIG_INVALID_FORMAT
                )
            merged_config.update(data)
            config_logger.debug(f"Loaded and merged: {config_file.name}")

        self._config_data = merged_config
        config_logger.info(f"Configuration loaded and merged from {len(config_files)} files.")
        # 清除类型化缓存
        self._typed_cache.clear()

    def reload_config(self) -> None:
        """重新加载配置"""
        config_logger.info("Reloading configuration...")
        self._load_config()

    # ========================================================================
    # 底层访问方法
    # ========================================================================

    def get(self, key: str, default: Optional[T] = None) -> Optional[T]:
        """获取配置值"""
        return self._config_data.get(key, default)

    def get_nested(self, path: str, default: Optional[T] = None) -> Optional[T]:
        """获取嵌套配置值，支持点分隔路径"""
        keys = path.split('.')
        current = self._config_data

        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default

        return current

    def set(self, key: str, value: Any) -> None:
        """设置配置值"""
        self._config_data[key] = value
        # 清除相关缓存
        self._typed_cache.pop(key, None)

    def set_nested(self, path: str, value: Any) -> None:
        """设置嵌套配置值"""
        keys = path.split('.')
        current = self._config_data

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value
        self._typed_cache.pop(keys[0], None)

    # ========================================================================
    # 类型安全访问方法
    # ========================================================================

    def get_logging_config(self) -> LoggingConfig:
        """获取日志配置（类型安全）"""
        if 'logging_config' not in self._typed_cache:
            try:
                logging_data = self.get_nested('logging_config', {})

                # 解析文件日志配置
                file_data = logging_data.get('file_config', {})
                file_config = FileLoggingConfig(
                    enabled=file_data.get('enabled', True),
                    directory=file_data.get('directory', 'log'),
                    filename=file_data.get('filename', 'sys.log'),
                    rotation=file_data.get('rotation')
                )

                console_data = logging_data.get('console_config', {})
                console_config = ConsoleLoggingConfig(
                    enabled=console_data.get('enabled', True)
                )

                # 解析模块配置
                modules = {}
                for module_name, module_data in logging_data.get('modules', {}).items():
                    modules[module_name] = LoggingModuleConfig(
                        level=module_data.get('level', 'INFO'),
                        enabled=module_data.get('enabled', True)
                    )

                defaults = LoggingConfig()
                self._typed_cache['logging_config'] = LoggingConfig(
                    level=logging_data.get('level', defaults.level),
                    format=logging_data.get('format', defaults.format),
                    date_format=logging_data.get('date_format', defaults.date_format),
                    file_config=file_config,
                    console_config=console_config,
                    modules=modules
                )
            except Exception as e:
                config_logger.error(f"Failed to parse logging config: {e}")
                self._typed_cache['logging_config'] = LoggingConfig()

        return self._typed_cache['logging_config']

    def get_feed_config(self) -> FeedConfig:
        """获取语录流配置（类型安全）"""
        if 'feed_config' not in self._typed_cache:
            try:
                feed_data = self.get_nested('feed_config', {})
                batch_size = int(feed_data.get('batch_size', 5))
                if batch_size < 1:
                    raise ValueError(f"batch_size must be positive, got {batch_size}")
                self._typed_cache['feed_config'] = FeedConfig(
                    batch_size=batch_size,
                    load_delay_ms=int(feed_data.get('load_delay_ms', 500)),
                    autoscroll_interval_ms=int(feed_data.get('autoscroll_interval_ms', 4000)),
                    near_end_px=float(feed_data.get('near_end_px', 5.0))
                )
            except Exception as e:
                config_logger.error(f"Failed to parse feed config: {e}")
                self._typed_cache['feed_config'] = FeedConfig()

        return self._typed_cache['feed_config']

    def get_gesture_config(self) -> GestureConfig:
        """获取手势配置（类型安全）"""
        if 'gesture_config' not in self._typed_cache:
            try:
                gesture_data = self.get_nested('gesture_config', {})
                self._typed_cache['gesture_config'] = GestureConfig(
                    swipe_threshold_px=float(gesture_data.get('swipe_threshold_px', 100.0)),
                    overlay_fade_start_px=float(gesture_data.get('overlay_fade_start_px', 10.0)),
                    overlay_full_px=float(gesture_data.get('overlay_full_px', 150.0)),
                    overlay_max_opacity=float(gesture_data.get('overlay_max_opacity', 0.8)),
                    rotation_divisor=float(gesture_data.get('rotation_divisor', 20.0))
                )
            except Exception as e:
                config_logger.error(f"Failed to parse gesture config: {e}")
                self._typed_cache['gesture_config'] = GestureConfig()

        return self._typed_cache['gesture_config']

    def get_storage_config(self) -> StorageConfig:
        """获取存储配置（类型安全）"""
        if 'storage_config' not in self._typed_cache:
            try:
                storage_data = self.get_nested('storage_config', {})
                self._typed_cache['storage_config'] = StorageConfig(
                    db_path=storage_data.get('db_path', 'data/feed_state.db')
                )
            except Exception as e:
                config_logger.error(f"Failed to parse storage config: {e}")
                self._typed_cache['storage_config'] = StorageConfig()

        return self._typed_cache['storage_config']

    def get_corpus_config(self) -> CorpusConfig:
        """获取语录库配置（类型安全）"""
        if 'corpus_config' not in self._typed_cache:
            try:
                corpus_data = self.get_nested('corpus_config', {})
                self._typed_cache['corpus_config'] = CorpusConfig(
                    source=corpus_data.get('source', 'static'),
                    static_path=corpus_data.get('static_path'),
                    remote_url=corpus_data.get('remote_url', ''),
                    timeout_seconds=float(corpus_data.get('timeout_seconds', 15.0)),
                    retry_times=int(corpus_data.get('retry_times', 3)),
                    retry_interval=float(corpus_data.get('retry_interval', 1.0))
                )
            except Exception as e:
                config_logger.error(f"Failed to parse corpus config: {e}")
                self._typed_cache['corpus_config'] = CorpusConfig()

        return self._typed_cache['corpus_config']

    # ========================================================================
    # 便捷方法
    # ========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """返回配置数据的字典副本"""
        return self._config_data.copy()

    def update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """从字典更新配置"""
        self._config_data.update(config_dict)
        self._typed_cache.clear()  # 清除缓存
        config_logger.info("Configuration updated from dict")


# ============================================================================
# 全局单例实例
# ============================================================================

config_manager = UnifiedConfigManager()
