"""
金额工具：最小货币单位的取整与本地化展示
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal]

DEFAULT_LOCALE = "es"
SUPPORTED_LOCALES = frozenset({"es", "en"})

# 千分位分隔符；es 使用智利比索写法 $5.000
_THOUSANDS_SEPARATOR = {
    "es": ".",
    "en": ",",
}


def to_decimal(value: Number) -> Decimal:
    """float 先转 str，避免二进制误差带入金额计算"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: Number) -> int:
    """四舍五入到整数（0.5 向上）"""
    return int(to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def normalize_locale(locale: str | None) -> str:
    """es-CL / en_US 之类的标签映射到支持的语言，未知语言回退到 es"""
    lang = (locale or DEFAULT_LOCALE).replace("_", "-").lower().split("-", 1)[0]
    return lang if lang in SUPPORTED_LOCALES else DEFAULT_LOCALE


def format_amount(amount: Number, locale: str | None = "es") -> str:
    """
    按 locale 格式化金额（无小数位）

    Examples:
        format_amount(5000, "es") -> "$5.000"
        format_amount(5000, "en") -> "$5,000"
    """
    value = round_half_up(amount)
    sep = _THOUSANDS_SEPARATOR.get(normalize_locale(locale), ",")
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,}".replace(",", sep)
    return f"{sign}${grouped}"


_DISCOUNT_SUFFIX = {
    "es": "de descuento",
    "en": "off",
}


def discount_suffix(locale: str | None = "es") -> str:
    """折扣文案后缀：es -> "de descuento"，其它 -> "off" """
    return _DISCOUNT_SUFFIX.get(normalize_locale(locale), _DISCOUNT_SUFFIX["en"])
