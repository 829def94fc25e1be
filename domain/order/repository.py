"""
订单仓储接口 - 定义订单与支付数据访问的抽象接口
"""
from abc import ABC, abstractmethod
from typing import Optional, List

from .entity import Order, Payment, OrderStatus


class OrderRepository(ABC):
    """订单仓储抽象接口 - 只定义能做什么，不管怎么做"""

    @abstractmethod
    async def create(self, order: Order) -> Order:
        """创建订单"""
        pass

    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        """根据ID获取订单（含支付记录）"""
        pass

    @abstractmethod
    async def list_all(
        self,
        skip: int = 0,
        limit: Optional[int] = None,
        status: Optional[OrderStatus] = None,
    ) -> List[Order]:
        """获取订单列表（含支付记录），按创建时间倒序"""
        pass

    @abstractmethod
    async def count(self, status: Optional[OrderStatus] = None) -> int:
        """统计订单数量"""
        pass

    @abstractmethod
    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        """更新订单状态"""
        pass


class PaymentRepository(ABC):
    """支付仓储抽象接口"""

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        """创建支付记录"""
        pass

    @abstractmethod
    async def get_by_id(self, payment_id: str) -> Optional[Payment]:
        """根据ID获取支付"""
        pass

    @abstractmethod
    async def list_by_order(self, order_id: str) -> List[Payment]:
        """获取订单的支付记录，按创建时间倒序"""
        pass

    @abstractmethod
    async def update(self, payment: Payment) -> Payment:
        """更新支付记录"""
        pass
