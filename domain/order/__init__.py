"""贴纸订单：状态机守卫与支付汇总"""
from .entity import (
    CONFIRMED_PAYMENT_STATUSES,
    Order,
    OrderStatus,
    Payment,
    PaymentInfo,
    PaymentStatus,
    StatusTransition,
    TransitionDirection,
)
from .transitions import (
    TRANSITION_TABLE,
    get_available_status_transitions,
    is_valid_status_transition,
    suggest_next_status,
)
from .payments import (
    ConsistencyReport,
    DisplayStatus,
    PaymentDisplayInfo,
    analyze_payments,
    check_order_consistency,
    get_display_status,
    get_payment_display_info,
    payment_status_for_order_status,
)

__all__ = [
    "CONFIRMED_PAYMENT_STATUSES",
    "Order",
    "OrderStatus",
    "Payment",
    "PaymentInfo",
    "PaymentStatus",
    "StatusTransition",
    "TransitionDirection",
    "TRANSITION_TABLE",
    "get_available_status_transitions",
    "is_valid_status_transition",
    "suggest_next_status",
    "ConsistencyReport",
    "DisplayStatus",
    "PaymentDisplayInfo",
    "analyze_payments",
    "check_order_consistency",
    "get_display_status",
    "get_payment_display_info",
    "payment_status_for_order_status",
]
