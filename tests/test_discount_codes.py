from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from domain.common.exceptions import DomainValidationException
from domain.discount_code import (
    MSG_APPLIED,
    MSG_EXHAUSTED,
    MSG_EXPIRED,
    MSG_INACTIVE,
    MSG_MISCONFIGURED,
    DiscountCode,
    DiscountCodeType,
    format_discount_for_display,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _code(**kwargs):
    params = dict(id="dc-1", code="safe10", type=DiscountCodeType.PERCENT, amount=10)
    params.update(kwargs)
    return DiscountCode(**params)


def test_code_is_normalized():
    assert _code(code="  safe10 ").code == "SAFE10"


@pytest.mark.parametrize(
    "kwargs",
    [{"code": "  "}, {"amount": -1}, {"max_redemptions": -1}],
)
def test_invalid_codes_are_rejected(kwargs):
    with pytest.raises(DomainValidationException):
        _code(**kwargs)


def test_percent_code_applies_half_up():
    result = _code(amount=15).evaluate(34950, NOW)
    assert result.valid
    assert result.message == MSG_APPLIED
    assert result.applied_discount == 5243
    assert result.new_total == 29707
    assert result.discount_code_id == "dc-1"


def test_fixed_code_is_capped_at_total():
    result = _code(type=DiscountCodeType.FIXED, amount=5000).evaluate(3000, NOW)
    assert result.applied_discount == 3000
    assert result.new_total == 0


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"active": False}, MSG_INACTIVE),
        ({"expires_at": NOW - timedelta(days=1)}, MSG_EXPIRED),
        ({"max_redemptions": 3, "usage_count": 3}, MSG_EXHAUSTED),
        ({"amount": 150}, MSG_MISCONFIGURED),
    ],
)
def test_rejections(kwargs, message):
    result = _code(**kwargs).evaluate(10000, NOW)
    assert not result.valid
    assert result.message == message
    assert result.applied_discount is None


def test_zero_max_redemptions_means_unlimited():
    code = _code(max_redemptions=0, usage_count=500)
    assert not code.is_exhausted()
    assert code.evaluate(10000, NOW).valid


def test_naive_expiry_is_treated_as_utc():
    code = _code(expires_at=datetime(2026, 10, 19))
    assert code.expires_at.tzinfo is not None
    assert not code.is_expired(NOW)


def test_redeem_increments_usage():
    code = _code(max_redemptions=1)
    code.redeem()
    assert code.usage_count == 1
    assert code.is_exhausted()


def test_format_for_display():
    percent = _code(amount=Decimal("12.50")).evaluate(10000, NOW)
    assert format_discount_for_display(percent) == "12.5% de descuento"
    assert format_discount_for_display(percent, "en") == "12.5% off"
    fixed = _code(type=DiscountCodeType.FIXED, amount=5000).evaluate(10000, NOW)
    assert format_discount_for_display(fixed) == "$5.000 de descuento"
    assert format_discount_for_display(_code(active=False).evaluate(10000, NOW)) == ""
