"""
订单领域实体 - 贴纸订单与其支付记录
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from domain.common.exceptions import DomainValidationException


class OrderStatus(str, Enum):
    """订单（贴纸履约流程）状态"""
    ORDERED = "ORDERED"      # 已下单
    PAID = "PAID"            # 已付款
    PRINTING = "PRINTING"    # 印刷中
    SHIPPED = "SHIPPED"      # 已发货
    ACTIVE = "ACTIVE"        # 已激活（急救资料公开可访问）
    LOST = "LOST"            # 履约/运输中丢失


class PaymentStatus(str, Enum):
    """支付子状态"""
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    PAID = "PAID"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
    TRANSFERRED = "TRANSFERRED"
    TRANSFER_PAYMENT = "TRANSFER_PAYMENT"


CONFIRMED_PAYMENT_STATUSES = frozenset({PaymentStatus.PAID, PaymentStatus.VERIFIED})


class TransitionDirection(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"
    SPECIAL = "special"


@dataclass(frozen=True)
class PaymentInfo:
    """
    订单支付汇总（只读投影）

    由调用方根据支付记录构建，状态守卫只读取这里的汇总值。
    """

    total_amount: int
    currency: str = "CLP"
    has_confirmed_payment: bool = False
    has_pending_payment: bool = False
    has_rejected_payment: bool = False
    latest_status: Optional[PaymentStatus] = None
    payment_count: int = 0


@dataclass(frozen=True)
class StatusTransition:
    status: OrderStatus
    direction: TransitionDirection
    description: Optional[str] = None


def _ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """确保时间为 UTC 时区"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class Payment:
    """
    支付记录

    业务规则：
    1. 金额不能为负（允许0元的促销订单）
    2. 货币代码必须是3位字母
    """

    id: Optional[str]
    order_id: str
    amount: int
    currency: str
    status: PaymentStatus
    reference: Optional[str] = None
    user_id: Optional[str] = None
    quantity: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.amount < 0:
            raise DomainValidationException(
                f"支付金额不能为负: {self.amount}",
                field="amount",
            )
        if not self.currency or len(self.currency) != 3 or not self.currency.isalpha():
            raise DomainValidationException(
                f"无效的货币代码: {self.currency}",
                field="currency",
            )
        self.currency = self.currency.upper()
        self.created_at = _ensure_utc(self.created_at)
        self.updated_at = _ensure_utc(self.updated_at)

    @property
    def is_confirmed(self) -> bool:
        return self.status in CONFIRMED_PAYMENT_STATUSES

    def set_status(self, status: PaymentStatus) -> None:
        self.status = status
        self.updated_at = datetime.now(timezone.utc)


@dataclass
class Order:
    """
    贴纸订单聚合根

    状态只能经由 domain.order.transitions 的守卫校验后变更。
    """

    id: Optional[str]
    owner_id: Optional[str]
    status: OrderStatus = OrderStatus.ORDERED
    name_on_sticker: Optional[str] = None
    quantity: int = 1
    promotion_id: Optional[str] = None
    discount_code_id: Optional[str] = None
    payments: list[Payment] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.quantity <= 0:
            raise DomainValidationException(
                f"订单数量必须大于0: {self.quantity}",
                field="quantity",
            )
        self.created_at = _ensure_utc(self.created_at)
        self.updated_at = _ensure_utc(self.updated_at)

    def latest_payment(self) -> Optional[Payment]:
        if not self.payments:
            return None
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        return max(self.payments, key=lambda p: p.created_at or epoch)

    def change_status(self, new_status: OrderStatus) -> OrderStatus:
        """直接写入新状态（调用方负责守卫校验），返回旧状态"""
        previous = self.status
        self.status = new_status
        self.updated_at = datetime.now(timezone.utc)
        return previous
