"""
促销仓储实现
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, List

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from domain.promotion.entity import DiscountType, Promotion
from domain.promotion.repository import PromotionRepository
from infrastructure.models.promotion import PromotionModel

# 数据库中存大写枚举名
_TYPE_TO_DB = {DiscountType.PERCENTAGE: "PERCENTAGE", DiscountType.FIXED: "FIXED"}
_TYPE_FROM_DB = {v: k for k, v in _TYPE_TO_DB.items()}


class SQLAlchemyPromotionRepository(PromotionRepository):
    """促销仓储的SQLAlchemy实现"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: PromotionModel) -> Promotion:
        return Promotion(
            id=model.id,
            name=model.name,
            description=model.description,
            min_quantity=model.min_quantity,
            discount_type=_TYPE_FROM_DB[model.discount_type.upper()],
            discount_value=Decimal(model.discount_value),
            active=model.active,
            priority=model.priority,
            start_date=model.start_date,
            end_date=model.end_date,
            created_at=model.created_at,
            updated_at=model.updated_at,
            metadata=dict(model.extra_metadata or {}),
        )

    def _to_model(self, entity: Promotion) -> PromotionModel:
        now = datetime.now(timezone.utc)
        return PromotionModel(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            min_quantity=entity.min_quantity,
            discount_type=_TYPE_TO_DB[entity.discount_type],
            discount_value=entity.discount_value,
            active=entity.active,
            priority=entity.priority,
            start_date=entity.start_date,
            end_date=entity.end_date,
            extra_metadata=entity.metadata or {},
            created_at=entity.created_at or now,
            updated_at=entity.updated_at or now,
        )

    async def create(self, promotion: Promotion) -> Promotion:
        db_promotion = self._to_model(promotion)
        self.session.add(db_promotion)
        await self.session.flush()
        return self._to_entity(db_promotion)

    async def get_by_id(self, promotion_id: str) -> Optional[Promotion]:
        result = await self.session.execute(
            select(PromotionModel).where(PromotionModel.id == promotion_id)
        )
        db_promotion = result.scalar_one_or_none()
        return self._to_entity(db_promotion) if db_promotion else None

    async def list_currently_valid(self, now: Optional[datetime] = None) -> List[Promotion]:
        now = now or datetime.now(timezone.utc)
        result = await self.session.execute(
            select(PromotionModel)
            .where(
                PromotionModel.active.is_(True),
                or_(PromotionModel.start_date.is_(None), PromotionModel.start_date <= now),
                or_(PromotionModel.end_date.is_(None), PromotionModel.end_date >= now),
            )
            .order_by(PromotionModel.priority.desc(), PromotionModel.min_quantity.asc())
        )
        promotions = [self._to_entity(m) for m in result.scalars().all()]
        # SQLite 取回的时间不带时区，按实体规则再过滤一次
        return [p for p in promotions if p.is_currently_valid(now)]
