"""
后台订单API路由 - 状态流转与一致性修复
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from application.dtos.orders import (
    BulkTransitionRequestDTO,
    BulkTransitionResultDTO,
    InconsistencyScanDTO,
    OrderDetailDTO,
    OrderDTO,
    OrderListItemDTO,
    OrderTransitionRequestDTO,
    PaymentDTO,
    PaymentStatusUpdateDTO,
)
from application.services.order_service import OrderApplicationService
from api.dependencies import get_order_service, get_request_locale, require_admin
from core.config import settings
from core.response import PaginatedData, paginated_response, success_response, Response as ApiResponse
from domain.order import OrderStatus

router = APIRouter(
    prefix="/admin",
    tags=["后台订单"],
    dependencies=[Depends(require_admin)],
)


@router.get("/orders", summary="订单列表", response_model=ApiResponse[PaginatedData[OrderListItemDTO]])
async def list_orders(
    page: int = Query(1, ge=1, description="页码"),
    size: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE, description="每页数量"),
    status: Optional[OrderStatus] = Query(None, description="按状态过滤"),
    locale: str = Depends(get_request_locale),
    service: OrderApplicationService = Depends(get_order_service),
):
    size = size or settings.DEFAULT_PAGE_SIZE
    items, total = await service.list_orders(page, size, status, locale)
    return paginated_response(items=items, total=total, page=page, size=size)


# 静态路径需先于 /orders/{order_id} 注册
@router.put("/orders/bulk-transition", summary="批量状态流转", response_model=ApiResponse[BulkTransitionResultDTO])
async def bulk_transition(
    payload: BulkTransitionRequestDTO,
    service: OrderApplicationService = Depends(get_order_service),
):
    """逐个订单校验；未通过守卫的订单列在 rejected 中"""
    result = await service.bulk_transition(payload.order_ids, payload.new_status)
    return success_response(data=result)


@router.get("/orders/inconsistencies", summary="检查不一致订单", response_model=ApiResponse[InconsistencyScanDTO])
async def list_inconsistencies(
    service: OrderApplicationService = Depends(get_order_service),
):
    result = await service.find_inconsistencies()
    return success_response(data=result)


@router.post("/orders/fix-inconsistencies", summary="修复不一致订单", response_model=ApiResponse[InconsistencyScanDTO])
async def fix_inconsistencies(
    service: OrderApplicationService = Depends(get_order_service),
):
    """把订单状态改写为支付证据支持的状态"""
    result = await service.fix_inconsistencies()
    return success_response(data=result, message=f"Fixed {len(result.inconsistencies)} inconsistencies")


@router.get("/orders/{order_id}", summary="订单详情", response_model=ApiResponse[OrderDetailDTO])
async def get_order(
    order_id: str,
    locale: str = Depends(get_request_locale),
    service: OrderApplicationService = Depends(get_order_service),
):
    """订单、支付汇总、可用状态转换、一致性检查"""
    detail = await service.get_order_detail(order_id, locale)
    return success_response(data=detail)


@router.put("/orders/{order_id}/transition", summary="订单状态流转", response_model=ApiResponse[OrderDTO])
async def transition_order(
    order_id: str,
    payload: OrderTransitionRequestDTO,
    service: OrderApplicationService = Depends(get_order_service),
):
    """
    变更订单状态

    - 未知状态返回 422
    - 守卫不允许的转换返回 400 `Invalid state`
    - 转为 PAID 时确认最新的待确认支付
    """
    order = await service.transition_order(
        order_id,
        payload.new_status,
        update_payment=payload.update_payment,
    )
    return success_response(data=order, message=f"Order updated to {order.status.value}")


@router.put("/payments/{payment_id}/status", summary="更新支付状态", response_model=ApiResponse[PaymentDTO])
async def update_payment_status(
    payment_id: str,
    payload: PaymentStatusUpdateDTO,
    service: OrderApplicationService = Depends(get_order_service),
):
    payment = await service.update_payment_status(payment_id, payload.status)
    return success_response(data=payment)
