import itertools

import pytest

from domain.order import (
    OrderStatus,
    PaymentInfo,
    TRANSITION_TABLE,
    TransitionDirection,
    get_available_status_transitions,
    is_valid_status_transition,
    suggest_next_status,
)

S = OrderStatus

EXPECTED_EDGES = {
    (S.ORDERED, S.PAID),
    (S.ORDERED, S.PRINTING),
    (S.ORDERED, S.LOST),
    (S.PAID, S.PRINTING),
    (S.PAID, S.ORDERED),
    (S.PAID, S.LOST),
    (S.PRINTING, S.SHIPPED),
    (S.PRINTING, S.PAID),
    (S.PRINTING, S.LOST),
    (S.SHIPPED, S.ACTIVE),
    (S.SHIPPED, S.PRINTING),
    (S.SHIPPED, S.LOST),
    (S.ACTIVE, S.LOST),
    (S.ACTIVE, S.SHIPPED),
    (S.LOST, S.ORDERED),
}

# 所有门控条件都满足：已确认、无待确认、0 元
OPEN = PaymentInfo(total_amount=0, has_confirmed_payment=True, payment_count=1)
UNPAID = PaymentInfo(total_amount=6990, payment_count=1, has_pending_payment=True)
CONFIRMED = PaymentInfo(total_amount=6990, has_confirmed_payment=True, payment_count=1)


def test_table_matches_defined_edges():
    assert {(r.source, r.target) for r in TRANSITION_TABLE} == EXPECTED_EDGES
    assert len(TRANSITION_TABLE) == len(EXPECTED_EDGES)


@pytest.mark.parametrize("source,target", list(itertools.product(S, S)))
def test_guard_agrees_with_table(source, target):
    assert is_valid_status_transition(source, target, OPEN) == ((source, target) in EXPECTED_EDGES)


@pytest.mark.parametrize("status", list(S))
def test_available_transitions_only_use_table_edges(status):
    for info in (OPEN, UNPAID, CONFIRMED, PaymentInfo(total_amount=6990)):
        for transition in get_available_status_transitions(status, info):
            assert (status, transition.status) in EXPECTED_EDGES
            assert is_valid_status_transition(status, transition.status, info)


def test_ordered_to_shipped_is_never_valid():
    for info in (OPEN, UNPAID, CONFIRMED):
        assert is_valid_status_transition("ORDERED", "SHIPPED", info) is False


def test_ordered_to_paid_requires_confirmed_payment():
    assert not is_valid_status_transition(S.ORDERED, S.PAID, PaymentInfo(total_amount=6990))
    assert is_valid_status_transition(S.ORDERED, S.PAID, CONFIRMED)


def test_zero_amount_fast_path():
    assert is_valid_status_transition(S.ORDERED, S.PRINTING, PaymentInfo(total_amount=0))
    assert not is_valid_status_transition(S.ORDERED, S.PRINTING, PaymentInfo(total_amount=6990))
    # 0 元订单不看支付状态
    rejected_free = PaymentInfo(total_amount=0, has_rejected_payment=True, has_pending_payment=True, payment_count=2)
    assert is_valid_status_transition(S.ORDERED, S.PRINTING, rejected_free)


def test_zero_amount_edge_is_described():
    transitions = get_available_status_transitions(S.ORDERED, PaymentInfo(total_amount=0))
    fast = next(t for t in transitions if t.status == S.PRINTING)
    assert fast.direction == TransitionDirection.SPECIAL
    assert "for transactions without cost" in fast.description


def test_shipped_to_active_blocked_by_pending_payment():
    info = PaymentInfo(total_amount=13980, has_confirmed_payment=True, has_pending_payment=True, payment_count=2)
    assert not is_valid_status_transition(S.SHIPPED, S.ACTIVE, info)
    assert is_valid_status_transition(S.SHIPPED, S.ACTIVE, CONFIRMED)


def test_available_transitions_follow_table_order_and_gates():
    transitions = get_available_status_transitions(S.ORDERED, PaymentInfo(total_amount=6990))
    assert [t.status for t in transitions] == [S.LOST]

    transitions = get_available_status_transitions(S.PAID, CONFIRMED)
    assert [(t.status, t.direction) for t in transitions] == [
        (S.PRINTING, TransitionDirection.FORWARD),
        (S.ORDERED, TransitionDirection.BACKWARD),
        (S.LOST, TransitionDirection.SPECIAL),
    ]


def test_unknown_status_strings():
    assert is_valid_status_transition("ORDERED", "REJECTED", OPEN) is False
    assert is_valid_status_transition("BOGUS", "PAID", OPEN) is False
    assert get_available_status_transitions("REJECTED", OPEN) == []
    assert suggest_next_status("BOGUS", OPEN) is None


def test_suggest_next_status():
    assert suggest_next_status(S.ORDERED, CONFIRMED) == S.PAID
    assert suggest_next_status(S.ORDERED, PaymentInfo(total_amount=6990)) is None
    assert suggest_next_status(S.SHIPPED, CONFIRMED) == S.ACTIVE
    assert suggest_next_status(S.ACTIVE, CONFIRMED) is None
