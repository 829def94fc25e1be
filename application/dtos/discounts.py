"""折扣码 DTO"""
from typing import Optional

from pydantic import Field

from domain.discount_code.entity import DiscountCodeType
from .base import DTOBase


class DiscountValidateRequestDTO(DTOBase):
    code: str = Field(..., min_length=1, description="折扣码（不区分大小写）")
    cart_total: int = Field(..., ge=0, description="购物车总额（最小货币单位）")


class DiscountRedeemRequestDTO(DiscountValidateRequestDTO):
    user_id: str = Field(..., min_length=1, description="兑换用户ID")


class DiscountValidationDTO(DTOBase):
    valid: bool
    message: str
    type: Optional[DiscountCodeType] = None
    amount: Optional[float] = None
    applied_discount: Optional[int] = None
    new_total: Optional[int] = None
    discount_code_id: Optional[str] = None
    display: Optional[str] = None
