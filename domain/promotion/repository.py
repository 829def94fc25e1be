"""
促销仓储接口
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List

from .entity import Promotion


class PromotionRepository(ABC):
    """促销仓储抽象接口"""

    @abstractmethod
    async def create(self, promotion: Promotion) -> Promotion:
        """创建促销"""
        pass

    @abstractmethod
    async def get_by_id(self, promotion_id: str) -> Optional[Promotion]:
        """根据ID获取促销"""
        pass

    @abstractmethod
    async def list_currently_valid(self, now: Optional[datetime] = None) -> List[Promotion]:
        """
        当前有效的促销：启用且在有效期内

        按 priority 降序、min_quantity 升序排列
        """
        pass
