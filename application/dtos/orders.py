"""订单/支付后台 DTO"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from domain.order.entity import OrderStatus, PaymentStatus, TransitionDirection
from .base import DTOBase


class PaymentDTO(DTOBase):
    id: str
    order_id: str
    amount: int
    currency: str
    status: PaymentStatus
    reference: Optional[str] = None
    user_id: Optional[str] = None
    quantity: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderDTO(DTOBase):
    id: str
    owner_id: Optional[str] = None
    status: OrderStatus
    name_on_sticker: Optional[str] = None
    quantity: int
    promotion_id: Optional[str] = None
    discount_code_id: Optional[str] = None
    payments: list[PaymentDTO] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaymentInfoDTO(DTOBase):
    total_amount: int
    currency: str
    has_confirmed_payment: bool
    has_pending_payment: bool
    has_rejected_payment: bool
    latest_status: Optional[PaymentStatus] = None
    payment_count: int


class PaymentDisplayDTO(DTOBase):
    amount: str
    status: str
    description: str


class StatusTransitionDTO(DTOBase):
    status: OrderStatus
    direction: TransitionDirection
    description: Optional[str] = None


class ConsistencyReportDTO(DTOBase):
    is_consistent: bool
    issues: list[str] = Field(default_factory=list)


class DisplayStatusDTO(DTOBase):
    primary_status: OrderStatus
    secondary_statuses: list[OrderStatus] = Field(default_factory=list)
    description: str = ""


class OrderDetailDTO(DTOBase):
    """后台订单详情：订单 + 支付汇总 + 可用转换"""
    order: OrderDTO
    payment_info: PaymentInfoDTO
    payment_display: PaymentDisplayDTO
    available_transitions: list[StatusTransitionDTO]
    suggested_next_status: Optional[OrderStatus] = None
    consistency: ConsistencyReportDTO
    display_status: DisplayStatusDTO


class OrderListItemDTO(DTOBase):
    """后台订单列表行：订单 + 支付列 + 展示状态"""
    order: OrderDTO
    payment_display: PaymentDisplayDTO
    display_status: DisplayStatusDTO


class OrderTransitionRequestDTO(DTOBase):
    new_status: OrderStatus = Field(..., description="目标状态")
    update_payment: bool = Field(False, description="是否同步最新支付记录的状态")


class BulkTransitionRequestDTO(DTOBase):
    order_ids: list[str] = Field(..., min_length=1, description="订单ID列表")
    new_status: OrderStatus


class BulkRejectionDTO(DTOBase):
    order_id: str
    reason: str


class BulkTransitionResultDTO(DTOBase):
    updated: list[str] = Field(default_factory=list)
    rejected: list[BulkRejectionDTO] = Field(default_factory=list)


class InconsistencyDTO(DTOBase):
    order_id: str
    current_status: OrderStatus
    suggested_status: OrderStatus
    reason: str
    issues: list[str] = Field(default_factory=list)


class InconsistencyScanDTO(DTOBase):
    total_orders: int
    inconsistencies: list[InconsistencyDTO] = Field(default_factory=list)


class PaymentStatusUpdateDTO(DTOBase):
    status: PaymentStatus = Field(..., description="新的支付状态")
