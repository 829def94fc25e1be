from .request_id import RequestIDMiddleware, get_request_id
from .logging import LoggingMiddleware
from .locale import LocaleMiddleware

__all__ = [
    "RequestIDMiddleware",
    "LoggingMiddleware",
    "LocaleMiddleware",
    "get_request_id",
]
