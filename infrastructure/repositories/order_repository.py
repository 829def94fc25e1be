"""
订单/支付仓储实现 - 使用SQLAlchemy实现数据访问
"""
from datetime import datetime, timezone
from typing import Optional, List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from domain.common.exceptions import OrderNotFoundException, PaymentNotFoundException
from domain.order.entity import Order, OrderStatus, Payment, PaymentStatus
from domain.order.repository import OrderRepository, PaymentRepository
from infrastructure.models.order import OrderModel, PaymentModel


def payment_to_entity(model: PaymentModel) -> Payment:
    """将数据库模型转换为领域实体"""
    return Payment(
        id=model.id,
        order_id=model.order_id,
        amount=model.amount,
        currency=model.currency,
        status=PaymentStatus(model.status),
        reference=model.reference,
        user_id=model.user_id,
        quantity=model.quantity,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class SQLAlchemyOrderRepository(OrderRepository):
    """订单仓储的SQLAlchemy实现（读取时总是带上支付记录）"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: OrderModel, payments: Optional[List[PaymentModel]] = None) -> Order:
        rows = model.payments if payments is None else payments
        return Order(
            id=model.id,
            owner_id=model.owner_id,
            status=OrderStatus(model.status),
            name_on_sticker=model.name_on_sticker,
            quantity=model.quantity,
            promotion_id=model.promotion_id,
            discount_code_id=model.discount_code_id,
            payments=[payment_to_entity(p) for p in rows],
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Order) -> OrderModel:
        now = datetime.now(timezone.utc)
        return OrderModel(
            id=entity.id,
            owner_id=entity.owner_id,
            status=entity.status.value,
            name_on_sticker=entity.name_on_sticker,
            quantity=entity.quantity,
            promotion_id=entity.promotion_id,
            discount_code_id=entity.discount_code_id,
            created_at=entity.created_at or now,
            updated_at=entity.updated_at or now,
        )

    async def _get_model(self, order_id: str) -> Optional[OrderModel]:
        result = await self.session.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.payments))
            .where(OrderModel.id == order_id)
            # 同一会话内新增的支付记录也要反映到集合里
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, order: Order) -> Order:
        """创建订单（不级联创建支付记录）"""
        db_order = self._to_model(order)
        self.session.add(db_order)
        await self.session.flush()
        return self._to_entity(db_order, payments=[])

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        db_order = await self._get_model(order_id)
        return self._to_entity(db_order) if db_order else None

    async def list_all(
        self,
        skip: int = 0,
        limit: Optional[int] = None,
        status: Optional[OrderStatus] = None,
    ) -> List[Order]:
        query = select(OrderModel).options(selectinload(OrderModel.payments))
        if status is not None:
            query = query.where(OrderModel.status == OrderStatus(status).value)
        query = query.order_by(OrderModel.created_at.desc()).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def count(self, status: Optional[OrderStatus] = None) -> int:
        query = select(func.count()).select_from(OrderModel)
        if status is not None:
            query = query.where(OrderModel.status == OrderStatus(status).value)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        db_order = await self._get_model(order_id)
        if db_order is None:
            raise OrderNotFoundException(order_id)
        db_order.status = OrderStatus(status).value
        db_order.updated_at = datetime.now(timezone.utc)
        await self.session.flush()
        return self._to_entity(db_order)


class SQLAlchemyPaymentRepository(PaymentRepository):
    """支付仓储的SQLAlchemy实现"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: Payment) -> Payment:
        now = datetime.now(timezone.utc)
        db_payment = PaymentModel(
            id=payment.id,
            order_id=payment.order_id,
            user_id=payment.user_id,
            quantity=payment.quantity,
            amount=payment.amount,
            currency=payment.currency,
            reference=payment.reference,
            status=payment.status.value,
            created_at=payment.created_at or now,
            updated_at=payment.updated_at or now,
        )
        self.session.add(db_payment)
        await self.session.flush()
        return payment_to_entity(db_payment)

    async def get_by_id(self, payment_id: str) -> Optional[Payment]:
        result = await self.session.execute(
            select(PaymentModel).where(PaymentModel.id == payment_id)
        )
        db_payment = result.scalar_one_or_none()
        return payment_to_entity(db_payment) if db_payment else None

    async def list_by_order(self, order_id: str) -> List[Payment]:
        result = await self.session.execute(
            select(PaymentModel)
            .where(PaymentModel.order_id == order_id)
            .order_by(PaymentModel.created_at.desc())
        )
        return [payment_to_entity(m) for m in result.scalars().all()]

    async def update(self, payment: Payment) -> Payment:
        result = await self.session.execute(
            select(PaymentModel).where(PaymentModel.id == payment.id)
        )
        db_payment = result.scalar_one_or_none()
        if db_payment is None:
            raise PaymentNotFoundException(payment.id)

        db_payment.amount = payment.amount
        db_payment.currency = payment.currency
        db_payment.reference = payment.reference
        db_payment.status = payment.status.value
        db_payment.quantity = payment.quantity
        db_payment.updated_at = payment.updated_at or datetime.now(timezone.utc)
        await self.session.flush()
        return payment_to_entity(db_payment)
