"""
折扣码仓储实现
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from core.logging_config import get_logger
from domain.common.exceptions import DomainValidationException
from domain.discount_code.entity import (
    DiscountCode,
    DiscountCodeType,
    DiscountRedemption,
    normalize_code,
)
from domain.discount_code.repository import DiscountCodeRepository
from infrastructure.models.discount_code import DiscountCodeModel, DiscountRedemptionModel


logger = get_logger(__name__)


class SQLAlchemyDiscountCodeRepository(DiscountCodeRepository):
    """折扣码仓储的SQLAlchemy实现"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: DiscountCodeModel) -> DiscountCode:
        return DiscountCode(
            id=model.id,
            code=model.code,
            type=DiscountCodeType(model.type),
            amount=Decimal(model.amount),
            active=model.active,
            expires_at=model.expires_at,
            max_redemptions=model.max_redemptions,
            usage_count=model.usage_count,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def create(self, discount_code: DiscountCode) -> DiscountCode:
        now = datetime.now(timezone.utc)
        db_code = DiscountCodeModel(
            id=discount_code.id,
            code=discount_code.code,
            type=discount_code.type.value,
            amount=discount_code.amount,
            active=discount_code.active,
            expires_at=discount_code.expires_at,
            max_redemptions=discount_code.max_redemptions,
            usage_count=discount_code.usage_count,
            created_at=discount_code.created_at or now,
            updated_at=discount_code.updated_at or now,
        )
        self.session.add(db_code)
        try:
            await self.session.flush()
        except IntegrityError:
            logger.warning("create_discount_code_conflict", code=discount_code.code)
            raise DomainValidationException(
                f"折扣码已存在: {discount_code.code}",
                field="code",
            )
        return self._to_entity(db_code)

    async def get_by_code(self, code: str) -> Optional[DiscountCode]:
        result = await self.session.execute(
            select(DiscountCodeModel).where(DiscountCodeModel.code == normalize_code(code))
        )
        db_code = result.scalar_one_or_none()
        return self._to_entity(db_code) if db_code else None

    async def increment_usage(self, discount_code_id: str) -> bool:
        # 上限检查与 +1 在同一条 UPDATE 内完成
        result = await self.session.execute(
            update(DiscountCodeModel)
            .where(
                DiscountCodeModel.id == discount_code_id,
                or_(
                    DiscountCodeModel.max_redemptions.is_(None),
                    DiscountCodeModel.max_redemptions <= 0,
                    DiscountCodeModel.usage_count < DiscountCodeModel.max_redemptions,
                ),
            )
            .values(
                usage_count=DiscountCodeModel.usage_count + 1,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def add_redemption(self, redemption: DiscountRedemption) -> DiscountRedemption:
        db_redemption = DiscountRedemptionModel(
            id=redemption.id,
            discount_code_id=redemption.discount_code_id,
            user_id=redemption.user_id,
            redeemed_at=redemption.redeemed_at,
        )
        self.session.add(db_redemption)
        await self.session.flush()
        return DiscountRedemption(
            id=db_redemption.id,
            discount_code_id=db_redemption.discount_code_id,
            user_id=db_redemption.user_id,
            redeemed_at=db_redemption.redeemed_at,
        )
