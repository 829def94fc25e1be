"""
FastAPI应用主入口 - SafeTap 贴纸订单服务
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_swagger_ui_html
from starlette.responses import HTMLResponse

from api.routes import discounts as discounts_routes
from api.routes import orders as orders_routes
from api.routes import promotions as promotions_routes
from api.middleware import RequestIDMiddleware, LoggingMiddleware, LocaleMiddleware
from core.config import settings
from core.exceptions import register_exception_handlers
from core.response import success_response
from core.i18n import t
from core.logging_config import get_logger
from infrastructure.database import create_tables, engine


logger = get_logger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 开发环境自动建表；生产使用 alembic upgrade head
    if settings.DEBUG:
        await create_tables()
        logger.info("database_initialized", message="Database tables created (development)")
    else:
        logger.info("database_migrations_required", message="Run alembic upgrade head before serving")
    logger.info(
        "shop_configured",
        sticker_unit_price=settings.shop.sticker_unit_price,
        currency=settings.shop.currency,
        locale=settings.shop.locale,
    )

    yield

    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description="SafeTap 贴纸订单：数量阶梯促销、折扣码与订单状态流转",
    docs_url=None,  # 使用自定义 Swagger UI 以支持国际化
    redoc_url="/redoc",
)

# 中间件按注册的逆序执行：CORS -> Locale -> Logging -> RequestID
app.add_middleware(RequestIDMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(LocaleMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(promotions_routes.router, prefix=API_PREFIX)
app.include_router(discounts_routes.router, prefix=API_PREFIX)
app.include_router(orders_routes.router, prefix=API_PREFIX)


@app.get("/", tags=["Root"])
async def root():
    return success_response(
        data={
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "docs": "/docs",
            "redoc": "/redoc",
        },
        message=t("welcome", default="Welcome"),
    )


@app.get("/health", tags=["Health"])
async def health_check():
    return success_response(data={"status": "healthy"}, message=t("health.ok", default="OK"))


@app.get("/docs", include_in_schema=False)
async def custom_swagger_ui_html(request: Request) -> HTMLResponse:
    # Swagger UI 语言跟随 LocaleMiddleware 解析结果
    lang = getattr(request.state, "locale", None) or settings.shop.locale
    return get_swagger_ui_html(
        openapi_url=app.openapi_url,
        title=f"{settings.PROJECT_NAME} - API Docs",
        swagger_ui_parameters={
            "lang": lang,
            "persistAuthorization": True,
            "displayRequestDuration": True,
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
