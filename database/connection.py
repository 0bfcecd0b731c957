"""
Database connection management.
Provides SQLite engine and session handling for the local state store.
"""

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from utils import storage_logger, config_manager, BASE_DIR

MEMORY_DB = ":memory:"


class DatabaseManager:
    """数据库管理器"""

    def __init__(self, db_path: Optional[str] = None):
        db_path = db_path or config_manager.get_storage_config().db_path
        if db_path != MEMORY_DB and not os.path.isabs(db_path):
            # 相对路径相对于项目根目录
            db_path = str(BASE_DIR / db_path)
        self.db_path = db_path
        storage_logger.info(f"[Database] Using database path: {self.db_path}")
        self.sync_engine = None
        self.SessionLocal = None

    @property
    def is_initialized(self) -> bool:
        return self.sync_engine is not None

    def initialize(self):
        """初始化数据库连接并建表"""
        if self.is_initialized:
            return
        try:
            if self.db_path != MEMORY_DB:
                # 确保数据目录存在
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

            self.sync_engine = create_engine(
                f"sqlite:///{self.db_path}",
                poolclass=StaticPool,
                connect_args={"check_same_thread": False}
            )

            # 创建会话工厂
            self.SessionLocal = sessionmaker(
                autocommit=False,
                autoflush=False,
                bind=self.sync_engine
            )

            self.create_tables()
            storage_logger.info("[Database] Database connection initialized successfully")

        except Exception as e:
            storage_logger.error(f"[Database] Failed to initialize database: {e}")
            raise

    def create_tables(self):
        """创建数据库表"""
        from .models import Base

        Base.metadata.create_all(bind=self.sync_engine)
        storage_logger.debug("[Database] Database tables created successfully")

    def get_session(self) -> Session:
        """获取数据库会话"""
        if not self.SessionLocal:
            raise RuntimeError("Database not initialized")
        return self.SessionLocal()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """事务会话上下文：成功提交，异常回滚"""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self):
        """关闭数据库连接"""
        if self.sync_engine:
            self.sync_engine.dispose()
            self.sync_engine = None
            self.SessionLocal = None
            storage_logger.info("[Database] Database connections closed")
