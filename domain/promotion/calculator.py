"""
折扣引擎 - 按购物车总数量匹配唯一一条最优促销规则

纯函数：不做 I/O、不抛异常，相同输入得到相同输出。
"""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional, Sequence

from domain.common.money import discount_suffix, format_amount, normalize_locale, round_half_up, to_decimal
from .entity import (
    AppliedPromotion,
    CartItem,
    DiscountPreview,
    DiscountResult,
    DiscountType,
    PromotionRule,
)

# 默认数量阶梯：调用方未提供规则时显式回退到这里
DEFAULT_PROMOTION_RULES: tuple[PromotionRule, ...] = (
    PromotionRule(
        id="bulk-2-plus",
        min_quantity=2,
        discount_type=DiscountType.PERCENTAGE,
        discount_value=10,
        description="10% de descuento por 2 o más stickers",
        active=True,
    ),
    PromotionRule(
        id="bulk-5-plus",
        min_quantity=5,
        discount_type=DiscountType.PERCENTAGE,
        discount_value=15,
        description="15% de descuento por 5 o más stickers",
        active=True,
    ),
    PromotionRule(
        id="bulk-10-plus",
        min_quantity=10,
        discount_type=DiscountType.PERCENTAGE,
        discount_value=20,
        description="20% de descuento por 10 o más stickers",
        active=True,
    ),
)


def _effective_rules(rules: Optional[Iterable[PromotionRule]]) -> tuple[PromotionRule, ...]:
    if rules is None:
        return DEFAULT_PROMOTION_RULES
    return tuple(rules)


def _total_quantity(cart: Sequence[CartItem]) -> int:
    return sum(int(item.quantity) for item in cart)


def _subtotal(cart: Sequence[CartItem]) -> int:
    return round_half_up(sum((item.subtotal for item in cart), Decimal("0")))


def _find_best_rule(total_quantity: int, rules: Sequence[PromotionRule]) -> Optional[PromotionRule]:
    """最高阶梯优先；同一阶梯取折扣值更高的规则"""
    eligible = [r for r in rules if r.active and total_quantity >= r.min_quantity]
    if not eligible:
        return None
    return max(eligible, key=lambda r: (r.min_quantity, to_decimal(r.discount_value)))


def _discount_amount(subtotal: int, rule: PromotionRule) -> int:
    value = to_decimal(rule.discount_value)
    if rule.discount_type == DiscountType.PERCENTAGE:
        amount = round_half_up(Decimal(subtotal) * value / Decimal(100))
    else:
        amount = round_half_up(min(value, Decimal(subtotal)))
    # 异常规则（>100% 或负值）同样被夹在 [0, subtotal]
    return max(0, min(amount, subtotal))


def calculate_discount(
    cart: Optional[Iterable[CartItem]],
    rules: Optional[Iterable[PromotionRule]] = None,
) -> DiscountResult:
    """
    计算购物车的数量阶梯折扣

    Args:
        cart: 购物车条目，无效条目会被静默过滤
        rules: 促销规则；为 None 时使用 DEFAULT_PROMOTION_RULES

    Returns:
        DiscountResult: 最多包含一条已应用促销
    """
    valid_cart = tuple(item for item in (cart or ()) if item.is_valid())
    if not valid_cart:
        return DiscountResult(total_discount=0, original_total=0, final_total=0)

    total_quantity = _total_quantity(valid_cart)
    original_total = _subtotal(valid_cart)

    rule = _find_best_rule(total_quantity, _effective_rules(rules))
    if rule is None:
        return DiscountResult(
            total_discount=0,
            original_total=original_total,
            final_total=original_total,
            updated_cart=valid_cart,
        )

    discount = _discount_amount(original_total, rule)
    applied = AppliedPromotion(
        id=rule.id,
        description=rule.description,
        discount_amount=discount,
        discount_type=rule.discount_type,
        discount_value=rule.discount_value,
        applied_to_quantity=total_quantity,
    )
    return DiscountResult(
        total_discount=discount,
        original_total=original_total,
        final_total=max(0, original_total - discount),
        applied_promotions=(applied,),
        updated_cart=valid_cart,
    )


def get_promotion_tiers(rules: Optional[Iterable[PromotionRule]] = None) -> list[PromotionRule]:
    """启用的促销阶梯，按最小数量升序（用于展示“再买N件”）"""
    return sorted(
        (r for r in _effective_rules(rules) if r.active),
        key=lambda r: r.min_quantity,
    )


def next_promotion_tier(
    quantity: int,
    rules: Optional[Iterable[PromotionRule]] = None,
) -> Optional[PromotionRule]:
    """数量超过当前值的最低阶梯；已在最高阶梯时返回 None"""
    for tier in get_promotion_tiers(rules):
        if tier.min_quantity > quantity:
            return tier
    return None


def preview_discount_for_quantity(
    unit_price: int,
    quantity: int,
    rules: Optional[Iterable[PromotionRule]] = None,
) -> DiscountPreview:
    """构造单条目购物车，预览购买 N 件时的价格"""
    effective = _effective_rules(rules)
    result = calculate_discount(
        [CartItem(id="preview", name="Sticker", unit_price=unit_price, quantity=quantity)],
        effective,
    )
    applied_rule = None
    if result.applied_promotion is not None:
        applied_rule = next((r for r in effective if r.id == result.applied_promotion.id), None)
    return DiscountPreview(
        original_total=result.original_total,
        discount_amount=result.total_discount,
        final_total=result.final_total,
        applied_rule=applied_rule,
    )


def format_discount_display(promotion: AppliedPromotion | PromotionRule, locale: str | None = "es") -> str:
    """
    折扣展示文本

    Examples:
        百分比: "10% de descuento" / "10% off"
        固定额: "$5.000 de descuento" / "$5,000 off"
    """
    lang = normalize_locale(locale)
    suffix = discount_suffix(lang)
    if promotion.discount_type == DiscountType.PERCENTAGE:
        value = to_decimal(promotion.discount_value).normalize()
        return f"{value:f}% {suffix}"
    return f"{format_amount(promotion.discount_value, lang)} {suffix}"
