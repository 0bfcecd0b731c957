"""
database models for the quote feed.
Key-value table for durable user state and the Quote value model.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base
from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


Base = declarative_base()


class KVEntryDB(Base):
    """database model for persisted key-value entries"""
    __tablename__ = 'kv_entries'

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)  # JSON 编码的值

    # Metadata
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)


# Pydantic models
class Quote(BaseModel):
    """quote value model"""
    id: int = Field(..., description="语录ID，语录库内唯一")
    content: str = Field(..., description="语录内容")
    category: str = Field(..., description="分类")

    class Config:
        frozen = True
