"""
订单状态转换守卫

状态机以静态表描述：(from, to, gate, direction, description)。
新增状态或边只需要改表，不需要改控制流。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Union

from .entity import OrderStatus, PaymentInfo, StatusTransition, TransitionDirection


Gate = Callable[[PaymentInfo], bool]


def _always(_: PaymentInfo) -> bool:
    return True


def _confirmed(info: PaymentInfo) -> bool:
    return bool(info.has_confirmed_payment)


def _settled(info: PaymentInfo) -> bool:
    # 仍有待确认的支付时不能公开急救资料
    return bool(info.has_confirmed_payment and not info.has_pending_payment)


def _zero_amount(info: PaymentInfo) -> bool:
    # 0 元订单不看支付状态（待确认或被拒都不阻塞）
    return info.total_amount == 0


@dataclass(frozen=True)
class TransitionRule:
    source: OrderStatus
    target: OrderStatus
    gate: Gate
    direction: TransitionDirection
    description: Optional[str] = None

    def allows(self, info: PaymentInfo) -> bool:
        return self.gate(info)

    def to_transition(self) -> StatusTransition:
        return StatusTransition(status=self.target, direction=self.direction, description=self.description)


S = OrderStatus
D = TransitionDirection

TRANSITION_TABLE: tuple[TransitionRule, ...] = (
    TransitionRule(S.ORDERED, S.PAID, _confirmed, D.FORWARD, "Mark as paid (requires confirmed payment)"),
    TransitionRule(S.ORDERED, S.PRINTING, _zero_amount, D.SPECIAL, "Start printing (for transactions without cost)"),
    TransitionRule(S.ORDERED, S.LOST, _always, D.SPECIAL, "Mark as lost"),
    TransitionRule(S.PAID, S.PRINTING, _confirmed, D.FORWARD, "Start printing"),
    TransitionRule(S.PAID, S.ORDERED, _always, D.BACKWARD, "Back to ordered"),
    TransitionRule(S.PAID, S.LOST, _always, D.SPECIAL, "Mark as lost"),
    TransitionRule(S.PRINTING, S.SHIPPED, _confirmed, D.FORWARD, "Mark as shipped"),
    TransitionRule(S.PRINTING, S.PAID, _always, D.BACKWARD, "Back to paid"),
    TransitionRule(S.PRINTING, S.LOST, _always, D.SPECIAL, "Mark as lost"),
    TransitionRule(S.SHIPPED, S.ACTIVE, _settled, D.FORWARD, "Mark as active (no pending payments)"),
    TransitionRule(S.SHIPPED, S.PRINTING, _always, D.BACKWARD, "Back to printing"),
    TransitionRule(S.SHIPPED, S.LOST, _always, D.SPECIAL, "Mark as lost"),
    TransitionRule(S.ACTIVE, S.LOST, _always, D.SPECIAL, "Mark as lost"),
    TransitionRule(S.ACTIVE, S.SHIPPED, _always, D.BACKWARD, "Back to shipped"),
    TransitionRule(S.LOST, S.ORDERED, _always, D.SPECIAL, "Restart process"),
)

del S, D


def _coerce(status: Union[OrderStatus, str, None]) -> Optional[OrderStatus]:
    if isinstance(status, OrderStatus):
        return status
    try:
        return OrderStatus(status)
    except ValueError:
        return None


def is_valid_status_transition(
    current: Union[OrderStatus, str],
    candidate: Union[OrderStatus, str],
    payment_info: PaymentInfo,
) -> bool:
    """当前状态到候选状态的边存在且门控条件成立"""
    source, target = _coerce(current), _coerce(candidate)
    if source is None or target is None:
        return False
    return any(
        rule.source == source and rule.target == target and rule.allows(payment_info)
        for rule in TRANSITION_TABLE
    )


def get_available_status_transitions(
    current: Union[OrderStatus, str],
    payment_info: PaymentInfo,
) -> list[StatusTransition]:
    """从当前状态出发、门控条件当前成立的全部转换（按表顺序）"""
    source = _coerce(current)
    if source is None:
        return []
    return [
        rule.to_transition()
        for rule in TRANSITION_TABLE
        if rule.source == source and rule.allows(payment_info)
    ]


def suggest_next_status(
    current: Union[OrderStatus, str],
    payment_info: PaymentInfo,
) -> Optional[OrderStatus]:
    """第一个可用的正向转换"""
    for transition in get_available_status_transitions(current, payment_info):
        if transition.direction == TransitionDirection.FORWARD:
            return transition.status
    return None
