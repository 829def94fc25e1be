from core.i18n import get_locale, normalize_locale, set_locale, t


def test_normalize_locale():
    assert normalize_locale("es-CL") == "es"
    assert normalize_locale("en_US") == "en"
    assert normalize_locale("fr") == "es"
    assert normalize_locale(None) == "es"


def test_missing_catalog_entry_uses_default():
    set_locale("en")
    try:
        assert get_locale() == "en"
        assert t("order.transition.invalid", default="Invalid state") == "Invalid state"
        assert t("validation.failed", default="Validation failed: {reason}", reason="x") == "Validation failed: x"
        assert t("no.default") == "no.default"
    finally:
        set_locale("es")


def test_locale_resolution_is_shared_with_money_formatting():
    from domain.common import money
    from domain.promotion import DiscountType, PromotionRule, format_discount_display

    assert normalize_locale is money.normalize_locale
    fixed = PromotionRule(
        id="f", min_quantity=2, discount_type=DiscountType.FIXED, discount_value=5000, description="f"
    )
    # 不支持的语言与请求语言解析一致，回退到 es
    assert format_discount_display(fixed, "fr") == "$5.000 de descuento"
    assert money.format_amount(5000, "pt-BR") == "$5.000"
