"""
折扣码API路由
"""
from fastapi import APIRouter, Depends

from application.dtos.discounts import (
    DiscountRedeemRequestDTO,
    DiscountValidateRequestDTO,
    DiscountValidationDTO,
)
from application.services.discount_code_service import DiscountCodeApplicationService
from api.dependencies import get_discount_code_service, get_request_locale, require_admin
from core.response import success_response, Response as ApiResponse

router = APIRouter(
    prefix="/discounts",
    tags=["折扣码"]
)


@router.post("/validate", summary="校验折扣码", response_model=ApiResponse[DiscountValidationDTO])
async def validate_code(
    payload: DiscountValidateRequestDTO,
    locale: str = Depends(get_request_locale),
    service: DiscountCodeApplicationService = Depends(get_discount_code_service),
):
    """
    预览折扣码效果（不增加使用次数）

    无效码同样返回 200，`valid=false` 并附带原因
    """
    result = await service.validate(payload.code, payload.cart_total, locale=locale)
    return success_response(data=result, message=result.message)


@router.post(
    "/redeem",
    summary="兑换折扣码",
    response_model=ApiResponse[DiscountValidationDTO],
    dependencies=[Depends(require_admin)],
)
async def redeem_code(
    payload: DiscountRedeemRequestDTO,
    locale: str = Depends(get_request_locale),
    service: DiscountCodeApplicationService = Depends(get_discount_code_service),
):
    result = await service.redeem(payload.code, payload.cart_total, payload.user_id, locale=locale)
    return success_response(data=result, message=result.message)
