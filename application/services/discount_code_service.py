"""
折扣码应用服务 - 预览校验与兑换
"""
from datetime import datetime
from typing import Callable, Optional

from domain.common.exceptions import DiscountCodeRejectedException
from domain.common.unit_of_work import AbstractUnitOfWork
from domain.discount_code import (
    MSG_EXHAUSTED,
    MSG_NOT_FOUND,
    DiscountRedemption,
    DiscountValidationResult,
    format_discount_for_display,
    normalize_code,
)
from application.dtos.discounts import DiscountValidationDTO
from core.logging_config import get_logger


logger = get_logger(__name__)


def _to_dto(result: DiscountValidationResult, locale: Optional[str]) -> DiscountValidationDTO:
    return DiscountValidationDTO(
        valid=result.valid,
        message=result.message,
        type=result.type,
        amount=float(result.amount) if result.amount is not None else None,
        applied_discount=result.applied_discount,
        new_total=result.new_total,
        discount_code_id=result.discount_code_id,
        display=format_discount_for_display(result, locale) or None,
    )


class DiscountCodeApplicationService:
    """折扣码应用服务"""

    def __init__(self, uow_factory: Callable[..., AbstractUnitOfWork]):
        self._uow_factory = uow_factory

    async def validate(
        self,
        code: str,
        cart_total: int,
        *,
        locale: Optional[str] = "es",
        now: Optional[datetime] = None,
    ) -> DiscountValidationDTO:
        """预览校验：不增加使用次数，无效码只返回 valid=False"""
        async with self._uow_factory(readonly=True) as uow:
            discount_code = await uow.discount_code_repository.get_by_code(normalize_code(code))
        if discount_code is None:
            return _to_dto(DiscountValidationResult.rejected(MSG_NOT_FOUND), locale)
        return _to_dto(discount_code.evaluate(cart_total, now), locale)

    async def redeem(
        self,
        code: str,
        cart_total: int,
        user_id: str,
        *,
        locale: Optional[str] = "es",
        now: Optional[datetime] = None,
    ) -> DiscountValidationDTO:
        """兑换折扣码：使用次数 +1 并记录兑换（同一事务）"""
        normalized = normalize_code(code)
        async with self._uow_factory() as uow:
            discount_code = await uow.discount_code_repository.get_by_code(normalized)
            if discount_code is None:
                raise DiscountCodeRejectedException(normalized, MSG_NOT_FOUND)

            result = discount_code.evaluate(cart_total, now)
            if not result.valid:
                logger.info("discount_code_rejected", code=normalized, reason=result.message)
                raise DiscountCodeRejectedException(normalized, result.message)

            if not await uow.discount_code_repository.increment_usage(discount_code.id):
                # 并发兑换已用完最后一次
                logger.info("discount_code_rejected", code=normalized, reason=MSG_EXHAUSTED)
                raise DiscountCodeRejectedException(normalized, MSG_EXHAUSTED)
            await uow.discount_code_repository.add_redemption(
                DiscountRedemption(id=None, discount_code_id=discount_code.id, user_id=user_id, redeemed_at=now)
            )

        logger.info(
            "discount_code_redeemed",
            code=normalized,
            discount_code_id=discount_code.id,
            user_id=user_id,
            applied_discount=result.applied_discount,
        )
        return _to_dto(result, locale)
