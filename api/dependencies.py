"""
API依赖项 - 后台认证与应用服务装配
"""
import secrets
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from application.services.discount_code_service import DiscountCodeApplicationService
from application.services.order_service import OrderApplicationService
from application.services.promotion_service import PromotionApplicationService
from core.config import settings
from core.exceptions import UnauthorizedException
from core.i18n import get_locale
from infrastructure.unit_of_work import SQLAlchemyUnitOfWork

# HTTP Bearer for admin API calls
http_bearer = HTTPBearer(
    scheme_name="Bearer",
    description="Admin API token (ADMIN_API_TOKEN)",
    auto_error=False,
)


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
) -> None:
    """校验后台令牌：Authorization: Bearer <ADMIN_API_TOKEN>"""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Missing admin credentials")
    expected = settings.ADMIN_API_TOKEN or ""
    if not secrets.compare_digest(credentials.credentials.encode(), expected.encode()):
        raise UnauthorizedException("Invalid admin credentials")


async def get_request_locale(request: Request) -> str:
    """由 LocaleMiddleware 解析的语言"""
    return getattr(request.state, "locale", None) or get_locale()


async def get_promotion_service() -> PromotionApplicationService:
    return PromotionApplicationService(uow_factory=SQLAlchemyUnitOfWork)


async def get_discount_code_service() -> DiscountCodeApplicationService:
    return DiscountCodeApplicationService(uow_factory=SQLAlchemyUnitOfWork)


async def get_order_service() -> OrderApplicationService:
    return OrderApplicationService(uow_factory=SQLAlchemyUnitOfWork)
