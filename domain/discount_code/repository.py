"""
折扣码仓储接口
"""
from abc import ABC, abstractmethod
from typing import Optional

from .entity import DiscountCode, DiscountRedemption


class DiscountCodeRepository(ABC):
    """折扣码仓储抽象接口"""

    @abstractmethod
    async def create(self, discount_code: DiscountCode) -> DiscountCode:
        """创建折扣码"""
        pass

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[DiscountCode]:
        """根据（已规范化的）折扣码获取"""
        pass

    @abstractmethod
    async def increment_usage(self, discount_code_id: str) -> bool:
        """使用次数 +1；已达上限时不更新并返回 False"""
        pass

    @abstractmethod
    async def add_redemption(self, redemption: DiscountRedemption) -> DiscountRedemption:
        """记录一次兑换"""
        pass
