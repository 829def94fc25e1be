"""促销/购物车试算 DTO"""
from typing import Optional

from pydantic import Field

from domain.promotion.entity import DiscountType
from .base import DTOBase


class CartItemDTO(DTOBase):
    """购物车条目"""
    id: str = Field(..., min_length=1, description="条目ID")
    name: str = Field(..., min_length=1, description="商品名称")
    unit_price: int = Field(..., gt=0, description="单价（最小货币单位）")
    quantity: int = Field(..., gt=0, description="数量")


class CartPreviewRequestDTO(DTOBase):
    cart: list[CartItemDTO] = Field(..., min_length=1, description="购物车，不能为空")


class PromotionRuleDTO(DTOBase):
    id: str
    min_quantity: int
    discount_type: DiscountType
    discount_value: float
    description: str
    active: bool = True
    display: Optional[str] = Field(None, description="展示文本，例如 10% de descuento")


class AppliedPromotionDTO(DTOBase):
    id: str
    description: str
    discount_amount: int
    discount_type: DiscountType
    discount_value: float
    applied_to_quantity: int
    display: Optional[str] = None


class DiscountResultDTO(DTOBase):
    total_discount: int
    original_total: int
    final_total: int
    applied_promotions: list[AppliedPromotionDTO] = Field(default_factory=list)
    updated_cart: list[CartItemDTO] = Field(default_factory=list)


class QuantityPreviewDTO(DTOBase):
    """购买 N 件时的价格预览"""
    unit_price: int
    quantity: int
    original_total: int
    discount_amount: int
    final_total: int
    applied_rule: Optional[PromotionRuleDTO] = None
    next_tier: Optional[PromotionRuleDTO] = None
    units_to_next_tier: Optional[int] = None
