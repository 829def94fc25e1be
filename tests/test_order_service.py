from datetime import datetime, timedelta, timezone

import pytest

from application.services.order_service import OrderApplicationService
from domain.common.exceptions import (
    InvalidStatusTransitionException,
    OrderNotFoundException,
    PaymentNotFoundException,
)
from domain.order import OrderStatus, PaymentStatus

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(uow_factory):
    return OrderApplicationService(uow_factory, unit_price=6990, currency="CLP")


@pytest.mark.asyncio
async def test_order_detail(service, store):
    order = store.add_order(OrderStatus.ORDERED)
    store.add_payment(order.id, PaymentStatus.VERIFIED, created_at=NOW)

    detail = await service.get_order_detail(order.id)

    assert detail.order.id == order.id
    assert len(detail.order.payments) == 1
    assert detail.payment_info.has_confirmed_payment
    assert detail.payment_display.amount == "$6.990"
    assert [t.status for t in detail.available_transitions] == [OrderStatus.PAID, OrderStatus.LOST]
    assert detail.suggested_next_status == OrderStatus.PAID
    assert not detail.consistency.is_consistent
    assert detail.display_status.primary_status == OrderStatus.PAID


@pytest.mark.asyncio
async def test_order_detail_not_found(service):
    with pytest.raises(OrderNotFoundException):
        await service.get_order_detail("missing")


@pytest.mark.asyncio
async def test_transition_to_paid_verifies_latest_pending_payment(service, store):
    order = store.add_order(OrderStatus.ORDERED)
    store.add_payment(order.id, PaymentStatus.VERIFIED, created_at=NOW)
    pending = store.add_payment(order.id, PaymentStatus.PENDING, created_at=NOW + timedelta(minutes=1))

    result = await service.transition_order(order.id, OrderStatus.PAID)

    assert result.status == OrderStatus.PAID
    assert store.orders[order.id].status == OrderStatus.PAID
    assert store.payments[pending.id].status == PaymentStatus.VERIFIED


@pytest.mark.asyncio
async def test_rejected_transition_leaves_state_untouched(service, store):
    order = store.add_order(OrderStatus.ORDERED)
    store.add_payment(order.id, PaymentStatus.PENDING, created_at=NOW)

    with pytest.raises(InvalidStatusTransitionException) as exc_info:
        await service.transition_order(order.id, OrderStatus.SHIPPED)

    assert exc_info.value.details == {"current_status": "ORDERED", "new_status": "SHIPPED"}
    assert store.orders[order.id].status == OrderStatus.ORDERED


@pytest.mark.asyncio
async def test_zero_amount_order_can_start_printing(service, store):
    order = store.add_order(OrderStatus.ORDERED)
    store.add_payment(order.id, PaymentStatus.PENDING, amount=0, created_at=NOW)

    result = await service.transition_order(order.id, OrderStatus.PRINTING)

    assert result.status == OrderStatus.PRINTING


@pytest.mark.asyncio
async def test_transition_syncs_payment_when_requested(service, store):
    order = store.add_order(OrderStatus.PAID)
    payment = store.add_payment(order.id, PaymentStatus.VERIFIED, created_at=NOW)

    await service.transition_order(order.id, OrderStatus.PRINTING, update_payment=True)
    assert store.payments[payment.id].status == PaymentStatus.PAID

    await service.transition_order(order.id, OrderStatus.PAID)
    await service.transition_order(order.id, OrderStatus.ORDERED, update_payment=False)
    assert store.payments[payment.id].status == PaymentStatus.PAID


@pytest.mark.asyncio
async def test_transition_unknown_order(service):
    with pytest.raises(OrderNotFoundException):
        await service.transition_order("missing", OrderStatus.PAID)


@pytest.mark.asyncio
async def test_bulk_transition_partitions_results(service, store):
    ready = store.add_order(OrderStatus.PRINTING)
    store.add_payment(ready.id, PaymentStatus.PAID, created_at=NOW)
    unpaid = store.add_order(OrderStatus.PRINTING)
    store.add_payment(unpaid.id, PaymentStatus.PENDING, created_at=NOW)

    result = await service.bulk_transition([ready.id, unpaid.id, "missing", ready.id], OrderStatus.SHIPPED)

    assert result.updated == [ready.id]
    assert [(r.order_id, r.reason) for r in result.rejected] == [
        (unpaid.id, "Invalid state"),
        ("missing", "Order not found"),
    ]
    assert store.orders[ready.id].status == OrderStatus.SHIPPED
    assert store.orders[unpaid.id].status == OrderStatus.PRINTING


@pytest.mark.asyncio
async def test_find_and_fix_inconsistencies(service, store):
    fake_paid = store.add_order(OrderStatus.PAID, created_at=NOW)
    store.add_payment(fake_paid.id, PaymentStatus.PENDING, created_at=NOW)
    healthy = store.add_order(OrderStatus.PRINTING, created_at=NOW - timedelta(hours=1))
    store.add_payment(healthy.id, PaymentStatus.PAID, created_at=NOW)
    ghost = store.add_order(OrderStatus.SHIPPED, created_at=NOW - timedelta(hours=2))

    scan = await service.find_inconsistencies()
    assert scan.total_orders == 3
    assert [(i.order_id, i.suggested_status) for i in scan.inconsistencies] == [
        (fake_paid.id, OrderStatus.ORDERED),
        (ghost.id, OrderStatus.ORDERED),
    ]
    assert store.orders[fake_paid.id].status == OrderStatus.PAID

    fixed = await service.fix_inconsistencies()
    assert len(fixed.inconsistencies) == 2
    assert store.orders[fake_paid.id].status == OrderStatus.ORDERED
    assert store.orders[ghost.id].status == OrderStatus.ORDERED
    assert store.orders[healthy.id].status == OrderStatus.PRINTING
    assert (await service.find_inconsistencies()).inconsistencies == []


@pytest.mark.asyncio
async def test_update_payment_status(service, store):
    order = store.add_order(OrderStatus.ORDERED)
    payment = store.add_payment(order.id, PaymentStatus.PENDING, created_at=NOW)

    result = await service.update_payment_status(payment.id, PaymentStatus.REJECTED)

    assert result.status == PaymentStatus.REJECTED
    assert store.payments[payment.id].status == PaymentStatus.REJECTED

    with pytest.raises(PaymentNotFoundException):
        await service.update_payment_status("missing", PaymentStatus.PAID)


@pytest.mark.asyncio
async def test_list_orders_paginates_newest_first(service, store):
    created = [store.add_order(OrderStatus.ORDERED, created_at=NOW + timedelta(minutes=i)) for i in range(3)]
    store.add_order(OrderStatus.LOST, created_at=NOW + timedelta(hours=1))

    items, total = await service.list_orders(page=1, size=2, status=OrderStatus.ORDERED)
    assert total == 3
    assert [i.order.id for i in items] == [created[2].id, created[1].id]
    assert items[0].payment_display.status == "No payment"

    items, _ = await service.list_orders(page=2, size=2, status=OrderStatus.ORDERED)
    assert [i.order.id for i in items] == [created[0].id]
