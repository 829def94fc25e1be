"""
促销领域实体 - 购物车、促销规则与折扣结果
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from domain.common.exceptions import DomainValidationException
from domain.common.money import to_decimal


class DiscountType(str, Enum):
    """折扣类型"""
    PERCENTAGE = "percentage"  # 百分比（0-100）
    FIXED = "fixed"            # 固定金额（最小货币单位）


def _is_number(value) -> bool:
    """有限数值；bool、字符串、NaN 与 Infinity 都不算"""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    return to_decimal(value).is_finite()


def _is_whole(value) -> bool:
    dec = to_decimal(value)
    return dec == dec.to_integral_value()


@dataclass(frozen=True)
class CartItem:
    """购物车条目（仅用于计价，不持久化）"""

    id: str
    name: str
    unit_price: Union[int, float, Decimal]
    quantity: int

    def is_valid(self) -> bool:
        """无效条目（空 id/name、非正价格、非正或非整数数量）不参与计价"""
        return bool(
            self.id
            and self.name
            and _is_number(self.unit_price)
            and self.unit_price > 0
            and _is_number(self.quantity)
            and _is_whole(self.quantity)
            and self.quantity > 0
        )

    @property
    def subtotal(self) -> Decimal:
        return Decimal(str(self.unit_price)) * Decimal(str(self.quantity))


@dataclass(frozen=True)
class PromotionRule:
    """数量阶梯促销规则"""

    id: str
    min_quantity: int
    discount_type: DiscountType
    discount_value: Union[int, float, Decimal]
    description: str
    active: bool = True


@dataclass(frozen=True)
class AppliedPromotion:
    id: str
    description: str
    discount_amount: int
    discount_type: DiscountType
    discount_value: Union[int, float, Decimal]
    applied_to_quantity: int


@dataclass(frozen=True)
class DiscountResult:
    total_discount: int
    original_total: int
    final_total: int
    applied_promotions: tuple[AppliedPromotion, ...] = ()
    updated_cart: tuple[CartItem, ...] = ()

    @property
    def applied_promotion(self) -> Optional[AppliedPromotion]:
        return self.applied_promotions[0] if self.applied_promotions else None


@dataclass(frozen=True)
class DiscountPreview:
    original_total: int
    discount_amount: int
    final_total: int
    applied_rule: Optional[PromotionRule]


def _ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """确保时间为 UTC 时区"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass
class Promotion:
    """
    促销聚合根（后台维护、持久化）

    业务规则：
    1. 最小数量必须大于0
    2. 折扣值不能为负；百分比折扣不能超过100
    3. 开始时间不能晚于结束时间
    """

    id: Optional[str]
    name: str
    min_quantity: int
    discount_type: DiscountType
    discount_value: Decimal
    description: Optional[str] = None
    active: bool = True
    priority: int = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.min_quantity is None or self.min_quantity <= 0:
            raise DomainValidationException(
                f"最小数量必须大于0: {self.min_quantity}",
                field="min_quantity",
            )
        if self.discount_value < 0:
            raise DomainValidationException(
                f"折扣值不能为负: {self.discount_value}",
                field="discount_value",
            )
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise DomainValidationException(
                f"百分比折扣不能超过100: {self.discount_value}",
                field="discount_value",
            )
        self.start_date = _ensure_utc(self.start_date)
        self.end_date = _ensure_utc(self.end_date)
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise DomainValidationException(
                "开始时间不能晚于结束时间",
                field="start_date",
            )
        self.created_at = _ensure_utc(self.created_at)
        self.updated_at = _ensure_utc(self.updated_at)

    def is_currently_valid(self, now: Optional[datetime] = None) -> bool:
        """启用且处于有效期内（未设置的边界视为不限）"""
        if not self.active:
            return False
        now = _ensure_utc(now) or datetime.now(timezone.utc)
        if self.start_date and self.start_date > now:
            return False
        if self.end_date and self.end_date < now:
            return False
        return True

    def to_rule(self) -> PromotionRule:
        return PromotionRule(
            id=str(self.id),
            min_quantity=self.min_quantity,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
            description=self.description or self.name,
            active=self.active,
        )
