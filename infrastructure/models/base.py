"""
数据库模型基类（SQLAlchemy 2.0 风格）
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import DeclarativeBase


def new_uuid() -> str:
    """主键统一使用 36 位字符串 UUID"""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """created_at / updated_at（UTC）"""

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, comment="创建时间")
    updated_at = Column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
        comment="更新时间",
    )


# 元数据对象用于数据库迁移
metadata = Base.metadata
