"""
折扣码数据库模型
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, ForeignKey

from .base import Base, TimestampMixin, new_uuid, utc_now


class DiscountCodeModel(TimestampMixin, Base):
    __tablename__ = "discount_codes"

    id = Column(String(36), primary_key=True, default=new_uuid)
    code = Column(String(50), unique=True, index=True, nullable=False, comment="折扣码（大写）")
    type = Column(String(10), nullable=False, comment="折扣类型: PERCENT/FIXED")
    amount = Column(Numeric(precision=12, scale=2), nullable=False, comment="折扣值")
    active = Column(Boolean, nullable=False, default=True, comment="是否启用")
    expires_at = Column(DateTime(timezone=True), nullable=True, comment="过期时间")
    max_redemptions = Column(Integer, nullable=True, comment="最大使用次数")
    usage_count = Column(Integer, nullable=False, default=0, comment="已使用次数")

    def __repr__(self):
        return f"<DiscountCodeModel(id={self.id}, code='{self.code}', usage_count={self.usage_count})>"


class DiscountRedemptionModel(Base):
    __tablename__ = "discount_redemptions"

    id = Column(String(36), primary_key=True, default=new_uuid)
    discount_code_id = Column(
        String(36),
        ForeignKey("discount_codes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="折扣码ID",
    )
    user_id = Column(String(64), nullable=False, index=True, comment="兑换用户ID")
    redeemed_at = Column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        comment="兑换时间"
    )
