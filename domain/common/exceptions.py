"""领域层业务异常定义，供领域与基础设施使用。

核心（core）层仅负责全局映射与异常处理，尽量避免领域层反向依赖核心层。
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
        message_key: Optional[str] = None,
        format_params: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        self.message_key = message_key
        self.format_params = format_params
        super().__init__(self.message)


class DomainValidationException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
        message_key: str | None = None,
        format_params: dict | None = None,
    ):
        super().__init__(
            code=BusinessCode.PARAM_VALIDATION_ERROR,
            message=message,
            error_type="DomainValidationError",
            details=details,
            field=field,
            message_key=message_key or "validation.domain",
            format_params=format_params,
        )


class OrderNotFoundException(BusinessException):
    def __init__(self, order_id: Optional[str] = None):
        details = {"order_id": order_id} if order_id else None
        super().__init__(
            code=BusinessCode.ORDER_NOT_FOUND,
            message="Order not found",
            error_type="OrderNotFound",
            details=details,
            message_key="order.not_found",
        )


class InvalidStatusTransitionException(BusinessException):
    """订单状态转换未通过守卫校验"""

    def __init__(self, current_status: str, new_status: str):
        super().__init__(
            code=BusinessCode.INVALID_STATUS_TRANSITION,
            message="Invalid state",
            error_type="InvalidStatusTransition",
            details={"current_status": current_status, "new_status": new_status},
            field="new_status",
            message_key="order.transition.invalid",
        )


class PaymentNotFoundException(BusinessException):
    def __init__(self, payment_id: Optional[str] = None):
        details = {"payment_id": payment_id} if payment_id else None
        super().__init__(
            code=BusinessCode.PAYMENT_NOT_FOUND,
            message="Payment not found",
            error_type="PaymentNotFound",
            details=details,
            message_key="payment.not_found",
        )


class DiscountCodeRejectedException(BusinessException):
    """兑换折扣码时校验失败（预览场景不抛出，只返回结果）"""

    def __init__(self, code: str, reason: str):
        super().__init__(
            code=BusinessCode.DISCOUNT_CODE_INVALID,
            message=reason,
            error_type="DiscountCodeRejected",
            details={"code": code},
            field="code",
            message_key="discount_code.rejected",
        )
