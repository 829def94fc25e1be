"""
订单数据库模型 - SQLAlchemy ORM模型
注意：这是基础设施层的实现细节，不是领域模型
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, new_uuid, utc_now


class OrderModel(TimestampMixin, Base):
    """
    贴纸订单数据库模型

    状态转换规则都在 domain.order.transitions 中
    """
    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_status_created", "status", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=new_uuid)
    owner_id = Column(String(64), nullable=True, index=True, comment="下单用户ID")
    name_on_sticker = Column(String(100), nullable=True, comment="贴纸上印的名字")
    quantity = Column(Integer, nullable=False, default=1, comment="贴纸数量")
    status = Column(
        String(20),
        nullable=False,
        default="ORDERED",
        index=True,
        comment="订单状态: ORDERED/PAID/PRINTING/SHIPPED/ACTIVE/LOST",
    )
    promotion_id = Column(
        String(36),
        ForeignKey("promotions.id", ondelete="SET NULL"),
        nullable=True,
        comment="下单时应用的促销",
    )
    discount_code_id = Column(
        String(36),
        ForeignKey("discount_codes.id", ondelete="SET NULL"),
        nullable=True,
        comment="下单时使用的折扣码",
    )

    payments = relationship(
        "PaymentModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="PaymentModel.created_at.desc()",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<OrderModel(id={self.id}, status='{self.status}', quantity={self.quantity})>"


class PaymentModel(Base):
    """
    订单支付记录数据库模型

    金额以最小货币单位存储（CLP 无小数）
    """
    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=new_uuid)
    order_id = Column(
        String(36),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="订单ID",
    )
    user_id = Column(String(64), nullable=True, index=True, comment="付款用户ID")
    quantity = Column(Integer, nullable=False, default=1, comment="支付覆盖的贴纸数量")
    amount = Column(Integer, nullable=False, comment="支付金额（最小货币单位）")
    currency = Column(String(3), nullable=False, default="CLP", comment="货币代码 ISO-4217")
    reference = Column(String(200), nullable=True, comment="支付渠道/转账参考号")
    status = Column(
        String(20),
        nullable=False,
        default="PENDING",
        index=True,
        comment="支付状态: PENDING/VERIFIED/PAID/REJECTED/CANCELLED/TRANSFERRED/TRANSFER_PAYMENT",
    )

    created_at = Column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        index=True,
        comment="创建时间"
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
        comment="更新时间"
    )

    order = relationship("OrderModel", back_populates="payments")

    def __repr__(self):
        return f"<PaymentModel(id={self.id}, order_id={self.order_id}, status='{self.status}')>"
