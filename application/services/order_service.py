"""
订单应用服务（application/services）- 后台订单状态流转

所有状态变更先经过 domain.order.transitions 的守卫，再落库。
"""
from datetime import datetime, timezone
from typing import Callable, Optional

from domain.common.exceptions import (
    InvalidStatusTransitionException,
    OrderNotFoundException,
    PaymentNotFoundException,
)
from domain.common.unit_of_work import AbstractUnitOfWork
from domain.order import (
    Order,
    OrderStatus,
    Payment,
    PaymentStatus,
    analyze_payments,
    check_order_consistency,
    get_available_status_transitions,
    get_display_status,
    get_payment_display_info,
    is_valid_status_transition,
    payment_status_for_order_status,
    suggest_next_status,
)
from application.dtos.orders import (
    BulkRejectionDTO,
    BulkTransitionResultDTO,
    ConsistencyReportDTO,
    DisplayStatusDTO,
    InconsistencyDTO,
    InconsistencyScanDTO,
    OrderDetailDTO,
    OrderDTO,
    OrderListItemDTO,
    PaymentDisplayDTO,
    PaymentDTO,
    PaymentInfoDTO,
    StatusTransitionDTO,
)
from core.config import settings
from core.logging_config import get_logger


logger = get_logger(__name__)


class OrderApplicationService:
    """订单应用服务 - 处理后台订单/支付状态"""

    def __init__(
        self,
        uow_factory: Callable[..., AbstractUnitOfWork],
        *,
        unit_price: Optional[int] = None,
        currency: Optional[str] = None,
    ):
        self._uow_factory = uow_factory
        self._unit_price = settings.shop.sticker_unit_price if unit_price is None else unit_price
        self._currency = currency or settings.shop.currency

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------
    async def get_order_detail(self, order_id: str, locale: Optional[str] = "es") -> OrderDetailDTO:
        async with self._uow_factory(readonly=True) as uow:
            order = await uow.order_repository.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundException(order_id)

        info = analyze_payments(order.payments)
        return OrderDetailDTO(
            order=OrderDTO.model_validate(order),
            payment_info=PaymentInfoDTO.model_validate(info),
            payment_display=PaymentDisplayDTO.model_validate(get_payment_display_info(info, locale)),
            available_transitions=[
                StatusTransitionDTO.model_validate(t)
                for t in get_available_status_transitions(order.status, info)
            ],
            suggested_next_status=suggest_next_status(order.status, info),
            consistency=ConsistencyReportDTO.model_validate(check_order_consistency(order.status, info)),
            display_status=DisplayStatusDTO.model_validate(get_display_status(order.status, info)),
        )

    async def list_orders(
        self,
        page: int = 1,
        size: Optional[int] = None,
        status: Optional[OrderStatus] = None,
        locale: Optional[str] = "es",
    ) -> tuple[list[OrderListItemDTO], int]:
        """分页订单列表（按创建时间倒序），返回 (items, total)"""
        size = min(size or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
        skip = (max(page, 1) - 1) * size
        async with self._uow_factory(readonly=True) as uow:
            orders = await uow.order_repository.list_all(skip=skip, limit=size, status=status)
            total = await uow.order_repository.count(status=status)

        items = []
        for order in orders:
            info = analyze_payments(order.payments)
            items.append(
                OrderListItemDTO(
                    order=OrderDTO.model_validate(order),
                    payment_display=PaymentDisplayDTO.model_validate(get_payment_display_info(info, locale)),
                    display_status=DisplayStatusDTO.model_validate(get_display_status(order.status, info)),
                )
            )
        return items, total

    # ------------------------------------------------------------------
    # 状态流转
    # ------------------------------------------------------------------
    async def _apply_side_effects(
        self,
        uow: AbstractUnitOfWork,
        order: Order,
        new_status: OrderStatus,
        update_payment: bool,
    ) -> None:
        latest = order.latest_payment()
        if new_status == OrderStatus.PAID:
            if latest is None:
                now = datetime.now(timezone.utc)
                await uow.payment_repository.create(
                    Payment(
                        id=None,
                        order_id=order.id,
                        amount=self._unit_price,
                        currency=self._currency,
                        status=PaymentStatus.VERIFIED,
                        reference=f"STK-{order.id}-{int(now.timestamp() * 1000)}",
                        user_id=order.owner_id,
                        quantity=1,
                        created_at=now,
                        updated_at=now,
                    )
                )
            elif latest.status == PaymentStatus.PENDING:
                latest.set_status(PaymentStatus.VERIFIED)
                await uow.payment_repository.update(latest)
            return

        if update_payment and latest is not None:
            target = payment_status_for_order_status(new_status)
            if target is not None and latest.status != target:
                latest.set_status(target)
                await uow.payment_repository.update(latest)

    async def transition_order(
        self,
        order_id: str,
        new_status: OrderStatus,
        *,
        update_payment: bool = False,
    ) -> OrderDTO:
        """经守卫校验后变更订单状态；转为 PAID 时同步确认支付"""
        async with self._uow_factory() as uow:
            order = await uow.order_repository.get_by_id(order_id)
            if order is None:
                raise OrderNotFoundException(order_id)

            info = analyze_payments(order.payments)
            if not is_valid_status_transition(order.status, new_status, info):
                logger.warning(
                    "order_status_transition_rejected",
                    order_id=order_id,
                    current_status=order.status.value,
                    new_status=OrderStatus(new_status).value,
                    has_confirmed_payment=info.has_confirmed_payment,
                    has_pending_payment=info.has_pending_payment,
                    total_amount=info.total_amount,
                )
                raise InvalidStatusTransitionException(order.status.value, OrderStatus(new_status).value)

            previous = order.status
            await uow.order_repository.update_status(order_id, new_status)
            await self._apply_side_effects(uow, order, OrderStatus(new_status), update_payment)
            updated = await uow.order_repository.get_by_id(order_id)

        logger.info(
            "order_status_transitioned",
            order_id=order_id,
            previous_status=previous.value,
            new_status=updated.status.value,
        )
        return OrderDTO.model_validate(updated)

    async def bulk_transition(self, order_ids: list[str], new_status: OrderStatus) -> BulkTransitionResultDTO:
        """逐个订单校验守卫；被拒绝的订单不影响其它订单"""
        target = OrderStatus(new_status)
        result = BulkTransitionResultDTO()
        async with self._uow_factory() as uow:
            for order_id in dict.fromkeys(order_ids):
                order = await uow.order_repository.get_by_id(order_id)
                if order is None:
                    result.rejected.append(BulkRejectionDTO(order_id=order_id, reason="Order not found"))
                    continue
                info = analyze_payments(order.payments)
                if not is_valid_status_transition(order.status, target, info):
                    result.rejected.append(BulkRejectionDTO(order_id=order_id, reason="Invalid state"))
                    continue
                await uow.order_repository.update_status(order_id, target)
                await self._apply_side_effects(uow, order, target, update_payment=False)
                result.updated.append(order_id)

        logger.info(
            "order_bulk_transition",
            new_status=target.value,
            updated=len(result.updated),
            rejected=len(result.rejected),
        )
        return result

    # ------------------------------------------------------------------
    # 一致性
    # ------------------------------------------------------------------
    @staticmethod
    def _inconsistency_for(order: Order) -> Optional[InconsistencyDTO]:
        info = analyze_payments(order.payments)
        display = get_display_status(order.status, info)
        if display.primary_status == order.status:
            return None
        return InconsistencyDTO(
            order_id=order.id,
            current_status=order.status,
            suggested_status=display.primary_status,
            reason=display.description,
            issues=list(check_order_consistency(order.status, info).issues),
        )

    async def find_inconsistencies(self) -> InconsistencyScanDTO:
        """扫描展示状态与存储状态不一致的订单"""
        async with self._uow_factory(readonly=True) as uow:
            orders = await uow.order_repository.list_all()
        found = [item for item in map(self._inconsistency_for, orders) if item is not None]
        return InconsistencyScanDTO(total_orders=len(orders), inconsistencies=found)

    async def fix_inconsistencies(self) -> InconsistencyScanDTO:
        """把不一致订单的状态改写为支付证据支持的状态（对账，不走转换守卫）"""
        async with self._uow_factory() as uow:
            orders = await uow.order_repository.list_all()
            fixed = [item for item in map(self._inconsistency_for, orders) if item is not None]
            for item in fixed:
                await uow.order_repository.update_status(item.order_id, item.suggested_status)

        for item in fixed:
            logger.info(
                "order_inconsistency_fixed",
                order_id=item.order_id,
                previous_status=item.current_status.value,
                new_status=item.suggested_status.value,
                reason=item.reason,
            )
        return InconsistencyScanDTO(total_orders=len(orders), inconsistencies=fixed)

    # ------------------------------------------------------------------
    # 支付
    # ------------------------------------------------------------------
    async def update_payment_status(self, payment_id: str, status: PaymentStatus) -> PaymentDTO:
        async with self._uow_factory() as uow:
            payment = await uow.payment_repository.get_by_id(payment_id)
            if payment is None:
                raise PaymentNotFoundException(payment_id)
            previous = payment.status
            payment.set_status(PaymentStatus(status))
            updated = await uow.payment_repository.update(payment)

        logger.info(
            "payment_status_updated",
            payment_id=payment_id,
            order_id=updated.order_id,
            previous_status=previous.value,
            new_status=updated.status.value,
        )
        return PaymentDTO.model_validate(updated)
