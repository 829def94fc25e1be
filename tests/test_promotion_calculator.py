from decimal import Decimal

import pytest

from domain.promotion import (
    DEFAULT_PROMOTION_RULES,
    CartItem,
    DiscountType,
    PromotionRule,
    calculate_discount,
    format_discount_display,
    get_promotion_tiers,
    next_promotion_tier,
    preview_discount_for_quantity,
)


def _item(quantity, unit_price=6990, item_id="sticker", name="Sticker"):
    return CartItem(id=item_id, name=name, unit_price=unit_price, quantity=quantity)


def _rule(rule_id, min_quantity, value, discount_type=DiscountType.PERCENTAGE, active=True):
    return PromotionRule(
        id=rule_id,
        min_quantity=min_quantity,
        discount_type=discount_type,
        discount_value=value,
        description=rule_id,
        active=active,
    )


def test_two_stickers_get_ten_percent():
    result = calculate_discount([_item(2)])
    assert result.original_total == 13980
    assert result.total_discount == 1398
    assert result.final_total == 12582
    assert result.applied_promotion.id == "bulk-2-plus"
    assert result.applied_promotion.applied_to_quantity == 2


def test_ten_stickers_get_twenty_percent():
    result = calculate_discount([_item(10)])
    assert result.original_total == 69900
    assert result.total_discount == 13980
    assert result.final_total == 55920
    assert result.applied_promotion.id == "bulk-10-plus"


def test_empty_cart():
    for cart in ([], None):
        result = calculate_discount(cart)
        assert (result.original_total, result.total_discount, result.final_total) == (0, 0, 0)
        assert result.applied_promotions == ()
        assert result.updated_cart == ()


def test_single_sticker_has_no_discount():
    result = calculate_discount([_item(1)])
    assert result.total_discount == 0
    assert result.final_total == result.original_total == 6990
    assert result.applied_promotion is None


def test_tier_selection_is_monotonic():
    previous = -1
    expected_ids = {1: None, 2: "bulk-2-plus", 5: "bulk-5-plus", 10: "bulk-10-plus"}
    for quantity, rule_id in expected_ids.items():
        result = calculate_discount([_item(quantity)])
        ratio = Decimal(result.total_discount) / Decimal(result.original_total)
        assert ratio > previous
        previous = ratio
        applied = result.applied_promotion
        assert (applied.id if applied else None) == rule_id


def test_five_stickers_rounds_half_up():
    # 34950 * 15% = 5242.5
    result = calculate_discount([_item(5)])
    assert result.original_total == 34950
    assert result.total_discount == 5243
    assert result.final_total == 29707


def test_quantity_is_aggregated_across_items():
    cart = [_item(1, 6990, "a", "Sticker A"), _item(1, 5000, "b", "Sticker B")]
    result = calculate_discount(cart)
    assert result.original_total == 11990
    assert result.total_discount == 1199
    assert result.applied_promotion.id == "bulk-2-plus"


def test_invalid_items_are_filtered():
    cart = [
        _item(2),
        _item(0, item_id="zero-qty"),
        _item(3, unit_price=0, item_id="free"),
        _item(3, unit_price=-10, item_id="negative"),
        CartItem(id="", name="No id", unit_price=6990, quantity=3),
        CartItem(id="no-name", name="", unit_price=6990, quantity=3),
    ]
    result = calculate_discount(cart)
    assert result.original_total == 13980
    assert [i.id for i in result.updated_cart] == ["sticker"]
    assert result.applied_promotion.applied_to_quantity == 2


def test_non_numeric_values_are_invalid():
    cart = [CartItem(id="x", name="x", unit_price="6990", quantity=2), _item(1)]
    result = calculate_discount(cart)
    assert result.original_total == 6990
    assert result.applied_promotion is None


@pytest.mark.parametrize("bad", [float("inf"), float("-inf"), float("nan"), Decimal("Infinity"), Decimal("NaN")])
def test_non_finite_values_are_invalid(bad):
    cart = [
        CartItem(id="price", name="Price", unit_price=bad, quantity=2),
        CartItem(id="qty", name="Qty", unit_price=6990, quantity=bad),
        _item(1),
    ]
    result = calculate_discount(cart)
    assert result.original_total == 6990
    assert [i.id for i in result.updated_cart] == ["sticker"]
    assert result.total_discount == 0


def test_fractional_quantities_are_invalid():
    cart = [_item(1.5, unit_price=100, item_id="a"), _item(0.5, unit_price=100, item_id="b")]
    result = calculate_discount(cart)
    assert result.original_total == 0
    assert result.updated_cart == ()
    assert result.applied_promotion is None

    whole = calculate_discount([_item(2.0, unit_price=100)])
    assert whole.original_total == 200
    assert whole.total_discount == 20


def test_inactive_rules_are_ignored():
    rules = [_rule("off", 1, 50, active=False), _rule("on", 2, 5)]
    assert calculate_discount([_item(1)], rules).applied_promotion is None
    assert calculate_discount([_item(2)], rules).applied_promotion.id == "on"


def test_highest_threshold_wins_over_bigger_value():
    rules = [_rule("low", 2, 30), _rule("high", 5, 15)]
    result = calculate_discount([_item(5)], rules)
    assert result.applied_promotion.id == "high"


def test_same_threshold_prefers_higher_value():
    rules = [_rule("ten", 2, 10), _rule("twelve", 2, 12), _rule("eleven", 2, 11)]
    result = calculate_discount([_item(2)], rules)
    assert result.applied_promotion.id == "twelve"
    assert result.total_discount == round(13980 * 12 / 100)


def test_fixed_discount_is_capped_at_subtotal():
    rules = [_rule("fixed", 3, 5000, DiscountType.FIXED)]
    result = calculate_discount([_item(3, unit_price=1000)], rules)
    assert result.total_discount == 3000
    assert result.final_total == 0


def test_fixed_discount_below_subtotal():
    rules = [_rule("fixed", 2, 5000, DiscountType.FIXED)]
    result = calculate_discount([_item(2)], rules)
    assert result.total_discount == 5000
    assert result.final_total == 8980


@pytest.mark.parametrize("value", [150, 1000, -20])
def test_pathological_percentages_stay_within_bounds(value):
    result = calculate_discount([_item(2)], [_rule("weird", 2, value)])
    assert 0 <= result.total_discount <= result.original_total
    assert result.final_total >= 0


def test_calculation_is_idempotent():
    cart = [_item(3), _item(4, 5000, "b", "B")]
    assert calculate_discount(cart) == calculate_discount(cart)


def test_explicit_empty_rules_disable_defaults():
    result = calculate_discount([_item(10)], [])
    assert result.applied_promotion is None
    assert result.final_total == 69900


def test_promotion_tiers_are_sorted_and_active_only():
    rules = [_rule("c", 10, 20), _rule("a", 2, 10), _rule("x", 3, 99, active=False), _rule("b", 5, 15)]
    assert [r.id for r in get_promotion_tiers(rules)] == ["a", "b", "c"]
    assert [r.min_quantity for r in get_promotion_tiers()] == [2, 5, 10]


def test_next_promotion_tier():
    assert next_promotion_tier(1).id == "bulk-2-plus"
    assert next_promotion_tier(2).id == "bulk-5-plus"
    assert next_promotion_tier(9).id == "bulk-10-plus"
    assert next_promotion_tier(10) is None


def test_preview_for_quantity():
    preview = preview_discount_for_quantity(6990, 5)
    assert preview.original_total == 34950
    assert preview.discount_amount == 5243
    assert preview.final_total == 29707
    assert preview.applied_rule == DEFAULT_PROMOTION_RULES[1]

    none = preview_discount_for_quantity(6990, 1)
    assert none.applied_rule is None
    assert none.final_total == 6990


def test_format_discount_display():
    percent = _rule("p", 2, 10)
    fixed = _rule("f", 2, 5000, DiscountType.FIXED)
    assert format_discount_display(percent) == "10% de descuento"
    assert format_discount_display(percent, "en") == "10% off"
    assert format_discount_display(fixed, "es-CL") == "$5.000 de descuento"
    assert format_discount_display(fixed, "en") == "$5,000 off"
    assert format_discount_display(_rule("d", 2, Decimal("12.50"))) == "12.5% de descuento"
