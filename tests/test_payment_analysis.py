from datetime import datetime, timedelta, timezone

from domain.order import (
    OrderStatus,
    Payment,
    PaymentInfo,
    PaymentStatus,
    analyze_payments,
    check_order_consistency,
    get_display_status,
    get_payment_display_info,
    payment_status_for_order_status,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _payment(status, amount=6990, minutes=0):
    return Payment(
        id=f"p-{status.value}-{minutes}",
        order_id="o-1",
        amount=amount,
        currency="clp",
        status=status,
        created_at=NOW + timedelta(minutes=minutes),
    )


def test_analyze_without_payments():
    info = analyze_payments([])
    assert info == PaymentInfo(total_amount=0, currency="CLP")
    assert info.latest_status is None


def test_analyze_aggregates_flags_and_latest():
    payments = [
        _payment(PaymentStatus.PENDING, 1000, minutes=5),
        _payment(PaymentStatus.VERIFIED, 6990, minutes=0),
        _payment(PaymentStatus.REJECTED, 500, minutes=2),
    ]
    info = analyze_payments(payments)
    assert info.total_amount == 8490
    assert info.currency == "CLP"
    assert info.has_confirmed_payment
    assert info.has_pending_payment
    assert info.has_rejected_payment
    assert info.latest_status == PaymentStatus.PENDING
    assert info.payment_count == 3
    # 入参顺序不变
    assert [p.amount for p in payments] == [1000, 6990, 500]


def test_paid_counts_as_confirmed_but_transferred_does_not():
    assert analyze_payments([_payment(PaymentStatus.PAID)]).has_confirmed_payment
    assert not analyze_payments([_payment(PaymentStatus.TRANSFERRED)]).has_confirmed_payment


def test_payment_status_for_order_status():
    assert payment_status_for_order_status(OrderStatus.ORDERED) == PaymentStatus.PENDING
    assert payment_status_for_order_status("PAID") == PaymentStatus.VERIFIED
    assert payment_status_for_order_status(OrderStatus.SHIPPED) == PaymentStatus.PAID
    assert payment_status_for_order_status(OrderStatus.LOST) == PaymentStatus.PAID
    assert payment_status_for_order_status("NOPE") is None


def test_consistency_paid_without_confirmation():
    report = check_order_consistency(OrderStatus.PAID, PaymentInfo(total_amount=6990, has_pending_payment=True, payment_count=1))
    assert not report.is_consistent
    assert report.issues == ("Order marked as paid without payment confirmation",)


def test_consistency_active_with_pending():
    info = PaymentInfo(total_amount=6990, has_confirmed_payment=True, has_pending_payment=True, payment_count=2)
    report = check_order_consistency(OrderStatus.ACTIVE, info)
    assert "Active order with pending payments" in report.issues


def test_consistent_order():
    info = PaymentInfo(total_amount=6990, has_confirmed_payment=True, payment_count=1)
    assert check_order_consistency(OrderStatus.PRINTING, info).is_consistent
    assert check_order_consistency(OrderStatus.ORDERED, PaymentInfo(total_amount=0)).is_consistent


def test_display_status_demotes_unsupported_states():
    pending = PaymentInfo(total_amount=6990, has_pending_payment=True, payment_count=1)
    display = get_display_status(OrderStatus.PAID, pending)
    assert display.primary_status == OrderStatus.ORDERED
    assert display.secondary_statuses == (OrderStatus.PAID,)

    display = get_display_status(OrderStatus.SHIPPED, PaymentInfo(total_amount=0))
    assert display.primary_status == OrderStatus.ORDERED
    assert display.description == "Inconsistent: shipped without payments"

    mixed = PaymentInfo(total_amount=6990, has_confirmed_payment=True, has_pending_payment=True, payment_count=2)
    assert get_display_status(OrderStatus.ACTIVE, mixed).primary_status == OrderStatus.SHIPPED


def test_display_status_promotes_confirmed_ordered():
    confirmed = PaymentInfo(total_amount=6990, has_confirmed_payment=True, payment_count=1)
    assert get_display_status(OrderStatus.ORDERED, confirmed).primary_status == OrderStatus.PAID
    rejected = PaymentInfo(total_amount=6990, has_rejected_payment=True, payment_count=1)
    display = get_display_status(OrderStatus.ORDERED, rejected)
    assert display.primary_status == OrderStatus.ORDERED
    assert display.description == "Payment rejected"


def test_payment_display_info():
    assert get_payment_display_info(PaymentInfo(total_amount=0)).status == "No payment"

    paid = get_payment_display_info(PaymentInfo(total_amount=13980, has_confirmed_payment=True, payment_count=1))
    assert (paid.amount, paid.status) == ("$13.980", "Paid")

    partial = PaymentInfo(total_amount=5000, has_confirmed_payment=True, has_pending_payment=True, payment_count=2)
    assert get_payment_display_info(partial, "en").amount == "$5,000"
    assert get_payment_display_info(partial).status == "Partial"

    pending = PaymentInfo(total_amount=6990, has_pending_payment=True, payment_count=1)
    assert get_payment_display_info(pending).status == "Pending"
    rejected = PaymentInfo(total_amount=6990, has_rejected_payment=True, payment_count=1)
    assert get_payment_display_info(rejected).status == "Rejected"
