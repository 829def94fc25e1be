"""
折扣码领域实体
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from domain.common.exceptions import DomainValidationException
from domain.common.money import discount_suffix, format_amount, round_half_up, to_decimal


class DiscountCodeType(str, Enum):
    PERCENT = "PERCENT"
    FIXED = "FIXED"


MSG_NOT_FOUND = "Código de descuento no válido"
MSG_INACTIVE = "Código de descuento desactivado"
MSG_EXPIRED = "Código de descuento expirado"
MSG_EXHAUSTED = "Código de descuento agotado"
MSG_MISCONFIGURED = "Configuración de descuento inválida"
MSG_APPLIED = "Código aplicado exitosamente"


def normalize_code(code: Optional[str]) -> str:
    """折扣码不区分大小写"""
    return (code or "").strip().upper()


def _ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class DiscountValidationResult:
    """折扣码校验结果；无效情况只通过 valid=False 表达"""

    valid: bool
    message: str
    type: Optional[DiscountCodeType] = None
    amount: Optional[Decimal] = None
    applied_discount: Optional[int] = None
    new_total: Optional[int] = None
    discount_code_id: Optional[str] = None

    @classmethod
    def rejected(cls, message: str) -> "DiscountValidationResult":
        return cls(valid=False, message=message)


@dataclass
class DiscountCode:
    """
    折扣码聚合根

    业务规则：
    1. code 统一为大写、去除首尾空白
    2. 金额不能为负
    3. 使用次数达到 max_redemptions 后不可再用
    """

    id: Optional[str]
    code: str
    type: DiscountCodeType
    amount: Decimal
    active: bool = True
    expires_at: Optional[datetime] = None
    max_redemptions: Optional[int] = None
    usage_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.code = normalize_code(self.code)
        if not self.code:
            raise DomainValidationException("折扣码不能为空", field="code")
        self.amount = to_decimal(self.amount)
        if self.amount < 0:
            raise DomainValidationException(f"折扣金额不能为负: {self.amount}", field="amount")
        if self.max_redemptions is not None and self.max_redemptions < 0:
            raise DomainValidationException(
                f"最大使用次数不能为负: {self.max_redemptions}",
                field="max_redemptions",
            )
        self.expires_at = _ensure_utc(self.expires_at)
        self.created_at = _ensure_utc(self.created_at)
        self.updated_at = _ensure_utc(self.updated_at)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = _ensure_utc(now) or datetime.now(timezone.utc)
        return self.expires_at is not None and now > self.expires_at

    def is_exhausted(self) -> bool:
        # max_redemptions 为 0 或 None 都视为不限次数
        return bool(self.max_redemptions) and self.usage_count >= self.max_redemptions

    def evaluate(self, cart_total: int, now: Optional[datetime] = None) -> DiscountValidationResult:
        """对购物车总额试算折扣（不修改使用次数）"""
        if not self.active:
            return DiscountValidationResult.rejected(MSG_INACTIVE)
        if self.is_expired(now):
            return DiscountValidationResult.rejected(MSG_EXPIRED)
        if self.is_exhausted():
            return DiscountValidationResult.rejected(MSG_EXHAUSTED)

        total = max(0, int(cart_total))
        if self.type == DiscountCodeType.PERCENT:
            if self.amount > 100:
                return DiscountValidationResult.rejected(MSG_MISCONFIGURED)
            applied = round_half_up(Decimal(total) * self.amount / Decimal(100))
        else:
            applied = round_half_up(min(self.amount, Decimal(total)))

        return DiscountValidationResult(
            valid=True,
            message=MSG_APPLIED,
            type=self.type,
            amount=self.amount,
            applied_discount=applied,
            new_total=max(0, total - applied),
            discount_code_id=self.id,
        )

    def redeem(self) -> None:
        self.usage_count += 1
        self.updated_at = datetime.now(timezone.utc)


@dataclass
class DiscountRedemption:
    """折扣码兑换记录"""

    id: Optional[str]
    discount_code_id: str
    user_id: str
    redeemed_at: Optional[datetime] = None

    def __post_init__(self):
        self.redeemed_at = _ensure_utc(self.redeemed_at) or datetime.now(timezone.utc)


def format_discount_for_display(result: DiscountValidationResult, locale: Optional[str] = "es") -> str:
    """校验结果的展示文本；无效结果返回空串"""
    if not result.valid or result.type is None or not result.amount:
        return ""
    suffix = discount_suffix(locale)
    if result.type == DiscountCodeType.PERCENT:
        return f"{to_decimal(result.amount).normalize():f}% {suffix}"
    return f"{format_amount(result.amount, locale)} {suffix}"
