"""
支付汇总与订单一致性检查

把订单的支付记录归纳成 PaymentInfo，并基于它给出展示状态、一致性问题等。
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional, Union

from domain.common.money import format_amount
from .entity import (
    CONFIRMED_PAYMENT_STATUSES,
    OrderStatus,
    Payment,
    PaymentInfo,
    PaymentStatus,
)


DEFAULT_CURRENCY = "CLP"

_ORDER_TO_PAYMENT_STATUS = {
    OrderStatus.ORDERED: PaymentStatus.PENDING,
    OrderStatus.PAID: PaymentStatus.VERIFIED,
    OrderStatus.PRINTING: PaymentStatus.PAID,
    OrderStatus.SHIPPED: PaymentStatus.PAID,
    OrderStatus.ACTIVE: PaymentStatus.PAID,
    # 丢失的贴纸不影响已付款项
    OrderStatus.LOST: PaymentStatus.PAID,
}


@dataclass(frozen=True)
class ConsistencyReport:
    is_consistent: bool
    issues: tuple[str, ...] = ()


@dataclass(frozen=True)
class DisplayStatus:
    primary_status: OrderStatus
    secondary_statuses: tuple[OrderStatus, ...] = ()
    description: str = ""


@dataclass(frozen=True)
class PaymentDisplayInfo:
    amount: str
    status: str
    description: str


def analyze_payments(payments: Iterable[Payment]) -> PaymentInfo:
    """根据支付记录构建只读汇总（不修改入参顺序）"""
    items = list(payments)
    epoch = datetime.min.replace(tzinfo=timezone.utc)
    latest = max(items, key=lambda p: p.created_at or epoch) if items else None
    return PaymentInfo(
        total_amount=sum(p.amount for p in items),
        currency=items[0].currency if items else DEFAULT_CURRENCY,
        has_confirmed_payment=any(p.status in CONFIRMED_PAYMENT_STATUSES for p in items),
        has_pending_payment=any(p.status == PaymentStatus.PENDING for p in items),
        has_rejected_payment=any(p.status == PaymentStatus.REJECTED for p in items),
        latest_status=latest.status if latest else None,
        payment_count=len(items),
    )


def payment_status_for_order_status(status: Union[OrderStatus, str]) -> Optional[PaymentStatus]:
    """订单状态变更后支付记录应同步到的状态"""
    try:
        return _ORDER_TO_PAYMENT_STATUS.get(OrderStatus(status))
    except ValueError:
        return None


def check_order_consistency(status: OrderStatus, info: PaymentInfo) -> ConsistencyReport:
    """检查订单状态与支付证据是否矛盾"""
    issues: list[str] = []

    if status == OrderStatus.ACTIVE and info.has_pending_payment:
        issues.append("Active order with pending payments")
    if status == OrderStatus.PAID and not info.has_confirmed_payment:
        issues.append("Order marked as paid without payment confirmation")
    if status == OrderStatus.ORDERED and info.has_confirmed_payment:
        issues.append("Ordered order with confirmed payment (should be paid)")
    if status == OrderStatus.SHIPPED and not info.has_confirmed_payment and info.has_pending_payment:
        issues.append("Shipped order with only pending payments (should be ordered)")
    if status == OrderStatus.SHIPPED and info.payment_count == 0:
        issues.append("Shipped order without payments (should be ordered)")
    if status == OrderStatus.ACTIVE and info.payment_count == 0:
        issues.append("Active order without payments (should be ordered)")
    if status == OrderStatus.ACTIVE and not info.has_confirmed_payment:
        issues.append("Active order without confirmed payment (should be ordered)")
    if status == OrderStatus.ORDERED and info.has_rejected_payment:
        issues.append("Ordered order with rejected payment")

    return ConsistencyReport(is_consistent=not issues, issues=tuple(issues))


def get_display_status(status: OrderStatus, info: PaymentInfo) -> DisplayStatus:
    """
    后台应展示的状态

    支付证据与订单状态矛盾时，主状态取支付证据支持的状态，
    原状态放入 secondary_statuses。
    """
    if status == OrderStatus.ACTIVE and info.has_pending_payment:
        return DisplayStatus(
            OrderStatus.SHIPPED, (OrderStatus.ACTIVE,), "Inconsistent: active with pending payments"
        )
    if status == OrderStatus.PAID and not info.has_confirmed_payment:
        return DisplayStatus(
            OrderStatus.ORDERED, (OrderStatus.PAID,), "Inconsistent: paid without payment confirmation"
        )
    if status == OrderStatus.SHIPPED and not info.has_confirmed_payment and info.has_pending_payment:
        return DisplayStatus(
            OrderStatus.ORDERED, (OrderStatus.SHIPPED,), "Inconsistent: shipped with only pending payments"
        )
    if status == OrderStatus.SHIPPED and info.payment_count == 0:
        return DisplayStatus(
            OrderStatus.ORDERED, (OrderStatus.SHIPPED,), "Inconsistent: shipped without payments"
        )
    if status == OrderStatus.ACTIVE and info.payment_count == 0:
        return DisplayStatus(
            OrderStatus.ORDERED, (OrderStatus.ACTIVE,), "Inconsistent: active without payments"
        )
    if status == OrderStatus.ACTIVE and not info.has_confirmed_payment:
        return DisplayStatus(
            OrderStatus.ORDERED, (OrderStatus.ACTIVE,), "Inconsistent: active without confirmed payment"
        )
    if status == OrderStatus.ORDERED:
        if info.has_rejected_payment:
            return DisplayStatus(OrderStatus.ORDERED, (), "Payment rejected")
        if info.has_confirmed_payment:
            return DisplayStatus(OrderStatus.PAID)
    return DisplayStatus(status)


def get_payment_display_info(info: PaymentInfo, locale: Optional[str] = "es") -> PaymentDisplayInfo:
    """支付列展示：金额 + 已付/部分/待确认/被拒"""
    if info.payment_count == 0:
        return PaymentDisplayInfo(amount="No payment", status="No payment", description="No payments recorded")

    amount = format_amount(info.total_amount, locale)
    if info.has_confirmed_payment and not info.has_pending_payment:
        return PaymentDisplayInfo(amount, "Paid", "Payment confirmed")
    if info.has_confirmed_payment and info.has_pending_payment:
        return PaymentDisplayInfo(amount, "Partial", "Payment confirmed with pending payments")
    if info.has_pending_payment:
        return PaymentDisplayInfo(amount, "Pending", "Payment awaiting confirmation")
    return PaymentDisplayInfo(amount, "Rejected", "Payment rejected")
