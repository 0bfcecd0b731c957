"""
统一异常定义模块
提供语录流系统的异常类和错误响应
"""

from typing import Optional, Dict, Any


class FeedSystemError(Exception):
    """语录流系统基础异常类"""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class ConfigurationError(FeedSystemError):
    """配置相关错误"""
    pass


class CorpusUnavailableError(FeedSystemError):
    """语录库获取或解析失败"""
    pass


class DatabaseError(FeedSystemError):
    """数据库相关错误"""
    pass


class PersistenceWriteError(DatabaseError):
    """持久化写入失败"""
    pass


class ValidationError(FeedSystemError):
    """数据验证错误"""
    pass


# 错误代码常量
class ErrorCodes:
    """错误代码常量"""

    # 配置错误
    CONFIG_NOT_FOUND = "CONFIG_001"
    CONFIG_INVALID_FORMAT = "CONFIG_002"

    # 语录库错误
    CORPUS_CONNECTION_FAILED = "CORPUS_001"
    CORPUS_BAD_STATUS = "CORPUS_002"
    CORPUS_INVALID_FORMAT = "CORPUS_003"
    CORPUS_NOT_FOUND = "CORPUS_004"
    CORPUS_SOURCE_UNKNOWN = "CORPUS_005"

    # 数据库错误
    DB_WRITE_FAILED = "DB_003"

    # 验证错误
    VALIDATION_DUPLICATE_ID = "VAL_002"
    VALIDATION_UNKNOWN_QUOTE = "VAL_003"


def create_error_response(error: FeedSystemError,
                          include_traceback: bool = False) -> Dict[str, Any]:
    """创建标准化的错误响应"""
    response = {
        "error": True,
        "error_code": error.error_code,
        "message": error.message,
        "context": error.context
    }

    if include_traceback:
        import traceback
        response["traceback"] = traceback.format_exc()

    return response
