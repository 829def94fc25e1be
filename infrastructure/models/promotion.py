"""
促销数据库模型
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, Text, JSON, Index

from .base import Base, TimestampMixin, new_uuid


class PromotionModel(TimestampMixin, Base):
    """数量阶梯促销"""
    __tablename__ = "promotions"
    __table_args__ = (
        Index("ix_promotions_active_priority", "active", "priority"),
    )

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(100), nullable=False, comment="促销名称")
    description = Column(Text, nullable=True, comment="展示文案")
    min_quantity = Column(Integer, nullable=False, comment="最小购买数量")
    discount_type = Column(String(20), nullable=False, comment="折扣类型: PERCENTAGE/FIXED")
    discount_value = Column(Numeric(precision=12, scale=2), nullable=False, comment="折扣值")
    active = Column(Boolean, nullable=False, default=True, comment="是否启用")
    priority = Column(Integer, nullable=False, default=0, comment="优先级（越大越靠前）")
    start_date = Column(DateTime(timezone=True), nullable=True, comment="生效时间")
    end_date = Column(DateTime(timezone=True), nullable=True, comment="失效时间")
    extra_metadata = Column("metadata", JSON, nullable=True, comment="扩展信息")

    def __repr__(self):
        return f"<PromotionModel(id={self.id}, name='{self.name}', min_quantity={self.min_quantity})>"
