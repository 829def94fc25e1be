"""数量阶梯促销（折扣引擎）"""
from .entity import (
    AppliedPromotion,
    CartItem,
    DiscountPreview,
    DiscountResult,
    DiscountType,
    Promotion,
    PromotionRule,
)
from .calculator import (
    DEFAULT_PROMOTION_RULES,
    calculate_discount,
    format_discount_display,
    get_promotion_tiers,
    next_promotion_tier,
    preview_discount_for_quantity,
)

__all__ = [
    "AppliedPromotion",
    "CartItem",
    "DiscountPreview",
    "DiscountResult",
    "DiscountType",
    "Promotion",
    "PromotionRule",
    "DEFAULT_PROMOTION_RULES",
    "calculate_discount",
    "format_discount_display",
    "get_promotion_tiers",
    "next_promotion_tier",
    "preview_discount_for_quantity",
]
