"""
促销应用服务（application/services）- 从存储加载促销规则并调用折扣引擎
"""
from datetime import datetime
from typing import Callable, Optional

from domain.common.unit_of_work import AbstractUnitOfWork
from domain.promotion import (
    DEFAULT_PROMOTION_RULES,
    CartItem,
    PromotionRule,
    calculate_discount,
    format_discount_display,
    get_promotion_tiers,
    next_promotion_tier,
    preview_discount_for_quantity,
)
from application.dtos.promotions import (
    AppliedPromotionDTO,
    CartItemDTO,
    DiscountResultDTO,
    PromotionRuleDTO,
    QuantityPreviewDTO,
)
from core.logging_config import get_logger


logger = get_logger(__name__)


def rule_to_dto(rule: PromotionRule, locale: Optional[str] = "es") -> PromotionRuleDTO:
    return PromotionRuleDTO(
        id=rule.id,
        min_quantity=rule.min_quantity,
        discount_type=rule.discount_type,
        discount_value=float(rule.discount_value),
        description=rule.description,
        active=rule.active,
        display=format_discount_display(rule, locale),
    )


class PromotionApplicationService:
    """促销应用服务"""

    def __init__(self, uow_factory: Callable[..., AbstractUnitOfWork]):
        self._uow_factory = uow_factory

    async def get_active_rules(self, now: Optional[datetime] = None) -> list[PromotionRule]:
        """当前有效的促销规则；存储中没有时回退到默认阶梯"""
        async with self._uow_factory(readonly=True) as uow:
            promotions = await uow.promotion_repository.list_currently_valid(now)
        if not promotions:
            return list(DEFAULT_PROMOTION_RULES)
        return [p.to_rule() for p in promotions]

    async def get_tiers(self, locale: Optional[str] = "es") -> list[PromotionRuleDTO]:
        rules = await self.get_active_rules()
        return [rule_to_dto(rule, locale) for rule in get_promotion_tiers(rules)]

    async def preview_cart(self, cart: list[CartItemDTO], locale: Optional[str] = "es") -> DiscountResultDTO:
        """按购物车试算折扣"""
        rules = await self.get_active_rules()
        items = [
            CartItem(id=item.id, name=item.name, unit_price=item.unit_price, quantity=item.quantity)
            for item in cart
        ]
        result = calculate_discount(items, rules)

        applied = result.applied_promotion
        if applied is not None:
            logger.info(
                "promotion_applied",
                promotion_id=applied.id,
                quantity=applied.applied_to_quantity,
                original_total=result.original_total,
                discount=result.total_discount,
            )

        return DiscountResultDTO(
            total_discount=result.total_discount,
            original_total=result.original_total,
            final_total=result.final_total,
            applied_promotions=[
                AppliedPromotionDTO(
                    id=p.id,
                    description=p.description,
                    discount_amount=p.discount_amount,
                    discount_type=p.discount_type,
                    discount_value=float(p.discount_value),
                    applied_to_quantity=p.applied_to_quantity,
                    display=format_discount_display(p, locale),
                )
                for p in result.applied_promotions
            ],
            updated_cart=[
                CartItemDTO(id=i.id, name=i.name, unit_price=int(i.unit_price), quantity=i.quantity)
                for i in result.updated_cart
            ],
        )

    async def preview_quantity(
        self,
        unit_price: int,
        quantity: int,
        locale: Optional[str] = "es",
    ) -> QuantityPreviewDTO:
        """购买 N 件时的价格预览，并给出下一个阶梯"""
        rules = await self.get_active_rules()
        preview = preview_discount_for_quantity(unit_price, quantity, rules)
        upcoming = next_promotion_tier(quantity, rules)
        return QuantityPreviewDTO(
            unit_price=unit_price,
            quantity=quantity,
            original_total=preview.original_total,
            discount_amount=preview.discount_amount,
            final_total=preview.final_total,
            applied_rule=rule_to_dto(preview.applied_rule, locale) if preview.applied_rule else None,
            next_tier=rule_to_dto(upcoming, locale) if upcoming else None,
            units_to_next_tier=(upcoming.min_quantity - quantity) if upcoming else None,
        )
