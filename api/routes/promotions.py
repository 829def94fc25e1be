"""
促销API路由 - 阶梯展示与价格试算
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from application.dtos.promotions import (
    CartPreviewRequestDTO,
    DiscountResultDTO,
    PromotionRuleDTO,
    QuantityPreviewDTO,
)
from application.services.promotion_service import PromotionApplicationService
from api.dependencies import get_promotion_service, get_request_locale
from core.config import settings
from core.response import success_response, Response as ApiResponse

router = APIRouter(
    prefix="/promotions",
    tags=["促销"]
)


@router.get("/tiers", summary="促销阶梯", response_model=ApiResponse[list[PromotionRuleDTO]])
async def list_tiers(
    locale: str = Depends(get_request_locale),
    service: PromotionApplicationService = Depends(get_promotion_service),
):
    """当前有效的数量阶梯（按最小数量升序）；未配置时返回默认阶梯"""
    tiers = await service.get_tiers(locale)
    return success_response(data=tiers)


@router.post("/preview", summary="购物车折扣试算", response_model=ApiResponse[DiscountResultDTO])
async def preview_cart(
    payload: CartPreviewRequestDTO,
    locale: str = Depends(get_request_locale),
    service: PromotionApplicationService = Depends(get_promotion_service),
):
    """
    按购物车总数量匹配唯一一条最优促销

    - **cart**: 购物车条目（不能为空；单价 > 0，数量为正整数）
    """
    result = await service.preview_cart(payload.cart, locale)
    return success_response(data=result)


@router.get("/preview", summary="按数量预览价格", response_model=ApiResponse[QuantityPreviewDTO])
async def preview_quantity(
    quantity: int = Query(..., gt=0, description="购买数量"),
    unit_price: Optional[int] = Query(None, gt=0, description="单价（默认取贴纸价格）"),
    locale: str = Depends(get_request_locale),
    service: PromotionApplicationService = Depends(get_promotion_service),
):
    price = unit_price if unit_price is not None else settings.shop.sticker_unit_price
    result = await service.preview_quantity(price, quantity, locale)
    return success_response(data=result)
