"""SQLAlchemy Unit of Work 实现"""
from __future__ import annotations

from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from domain.common.unit_of_work import AbstractUnitOfWork
from infrastructure.database import AsyncSessionLocal
from infrastructure.repositories.order_repository import (
    SQLAlchemyOrderRepository,
    SQLAlchemyPaymentRepository,
)
from infrastructure.repositories.promotion_repository import SQLAlchemyPromotionRepository
from infrastructure.repositories.discount_code_repository import SQLAlchemyDiscountCodeRepository


class SQLAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    基于SQLAlchemy的Unit of Work

    一个 UoW 对应一个会话；订单状态与支付副作用在同一事务内提交。
    传入外部 session 时不负责关闭它。
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession] = AsyncSessionLocal,
        session: Optional[AsyncSession] = None,
        *,
        readonly: bool = False,
    ) -> None:
        super().__init__(readonly=readonly)
        self._session_factory = session_factory
        self._owns_session = session is None
        self.session: Optional[AsyncSession] = session

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        if self.session is None:
            self.session = self._session_factory()
        self.order_repository = SQLAlchemyOrderRepository(self.session)
        self.payment_repository = SQLAlchemyPaymentRepository(self.session)
        self.promotion_repository = SQLAlchemyPromotionRepository(self.session)
        self.discount_code_repository = SQLAlchemyDiscountCodeRepository(self.session)
        # 只读模式依赖 autobegin，不显式开启事务
        if not self._readonly and not self.session.in_transaction():
            await self.session.begin()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            if self._owns_session and self.session is not None:
                # close() 会回滚仍未结束的事务（例如只读查询的 autobegin）
                await self.session.close()
                self.session = None

    async def commit(self) -> None:
        if not self._readonly and self.session is not None and self.session.in_transaction():
            await self.session.commit()
        self._committed = True

    async def rollback(self) -> None:
        if self.session is not None and self.session.in_transaction():
            await self.session.rollback()
        self._committed = False
