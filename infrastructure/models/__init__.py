"""Infrastructure models package exports."""
from .base import Base, metadata
from .order import OrderModel, PaymentModel
from .promotion import PromotionModel
from .discount_code import DiscountCodeModel, DiscountRedemptionModel

__all__ = [
    "Base",
    "metadata",
    "OrderModel",
    "PaymentModel",
    "PromotionModel",
    "DiscountCodeModel",
    "DiscountRedemptionModel",
]
