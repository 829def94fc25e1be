from .entity import (
    DiscountCode,
    DiscountCodeType,
    DiscountRedemption,
    DiscountValidationResult,
    MSG_APPLIED,
    MSG_EXHAUSTED,
    MSG_EXPIRED,
    MSG_INACTIVE,
    MSG_MISCONFIGURED,
    MSG_NOT_FOUND,
    format_discount_for_display,
    normalize_code,
)

__all__ = [
    "DiscountCode",
    "DiscountCodeType",
    "DiscountRedemption",
    "DiscountValidationResult",
    "MSG_APPLIED",
    "MSG_EXHAUSTED",
    "MSG_EXPIRED",
    "MSG_INACTIVE",
    "MSG_MISCONFIGURED",
    "MSG_NOT_FOUND",
    "format_discount_for_display",
    "normalize_code",
]
