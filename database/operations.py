"""
database operations for the quote feed.
Durable key-value access used for likes, saves and theme.
"""

import json
from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from utils import storage_logger, PersistenceWriteError, ErrorCodes
from .connection import DatabaseManager
from .models import KVEntryDB


# 存储键
LIKED_QUOTES_KEY = "likedQuotes"
SAVED_QUOTES_KEY = "savedQuotes"
THEME_KEY = "theme"


class KVStoreOperations:
    """key-value operations over the local database"""

    def __init__(self, db: Optional[DatabaseManager] = None, auto_initialize: bool = True):
        self.db = db or DatabaseManager()
        self.storage_logger = storage_logger

        # 自动初始化
        if auto_initialize:
            self.initialize()

    def initialize(self):
        """初始化数据库连接"""
        try:
            self.db.initialize()
            self.storage_logger.info("[KVStore] KVStoreOperations initialized successfully")
        except Exception as e:
            self.storage_logger.error(f"[KVStore] KVStoreOperations initialization failed: {e}")
            raise

    def get(self, key: str, default: Any = None) -> Any:
        """读取键值，不存在或无法解码时返回默认值"""
        try:
            with self.db.session_scope() as session:
                entry = session.get(KVEntryDB, key)
                raw = entry.value if entry is not None else None
        except SQLAlchemyError as e:
            self.storage_logger.error(f"[KVStore] Failed to read key {key}: {e}")
            return default

        if raw is None:
            return default

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            self.storage_logger.warning(f"[KVStore] Corrupt value for key {key}, using default: {e}")
            return default

    def set(self, key: str, value: Any) -> None:
        """写入键值（JSON 编码）"""
        try:
            encoded = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise PersistenceWriteError(
                f"Value for key {key} is not JSON serializable: {e}",
                ErrorCodes.DB_WRITE_FAILED,
                context={'key': key}
            ) from e

        try:
            with self.db.session_scope() as session:
                entry = session.get(KVEntryDB, key)
                if entry is None:
                    session.add(KVEntryDB(key=key, value=encoded))
                else:
                    entry.value = encoded
            self.storage_logger.debug(f"[KVStore] Wrote key {key} ({len(encoded)} bytes)")
        except SQLAlchemyError as e:
            raise PersistenceWriteError(
                f"Failed to write key {key}: {e}",
                ErrorCodes.DB_WRITE_FAILED,
                context={'key': key}
            ) from e

    def delete(self, key: str) -> bool:
        """删除键，返回是否存在"""
        try:
            with self.db.session_scope() as session:
                entry = session.get(KVEntryDB, key)
                if entry is None:
                    return False
                session.delete(entry)
                return True
        except SQLAlchemyError as e:
            raise PersistenceWriteError(
                f"Failed to delete key {key}: {e}",
                ErrorCodes.DB_WRITE_FAILED,
                context={'key': key}
            ) from e

    def keys(self) -> List[str]:
        """列出所有键"""
        try:
            with self.db.session_scope() as session:
                result = session.execute(select(KVEntryDB.key).order_by(KVEntryDB.key))
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.storage_logger.error(f"[KVStore] Failed to list keys: {e}")
            return []

    def close(self):
        """关闭数据库连接"""
        self.db.close()
