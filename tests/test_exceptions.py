import pytest

from core.exceptions import BUSINESS_CODE_TO_HTTP_STATUS, business_code_to_http_status
from domain.common import exceptions as domain_exceptions
from domain.common.exceptions import (
    BusinessException,
    DiscountCodeRejectedException,
    DomainValidationException,
    InvalidStatusTransitionException,
    OrderNotFoundException,
    PaymentNotFoundException,
)
from shared.codes import BusinessCode


@pytest.mark.parametrize(
    "exc, status",
    [
        (DomainValidationException("bad"), 422),
        (OrderNotFoundException("o-1"), 404),
        (PaymentNotFoundException("p-1"), 404),
        (InvalidStatusTransitionException("ORDERED", "SHIPPED"), 400),
        (DiscountCodeRejectedException("SAFE10", "agotado"), 400),
    ],
)
def test_domain_exceptions_map_to_http_status(exc, status):
    assert business_code_to_http_status(exc.code) == status


def test_every_domain_exception_is_covered():
    raised = {
        cls
        for cls in vars(domain_exceptions).values()
        if isinstance(cls, type) and issubclass(cls, BusinessException) and cls is not BusinessException
    }
    assert raised == {
        DomainValidationException,
        OrderNotFoundException,
        PaymentNotFoundException,
        InvalidStatusTransitionException,
        DiscountCodeRejectedException,
    }


def test_every_business_code_has_http_status():
    # 除成功码与兜底参数错误外，每个业务码都有明确的 HTTP 映射
    unmapped = set(BusinessCode) - set(BUSINESS_CODE_TO_HTTP_STATUS) - {BusinessCode.SUCCESS, BusinessCode.PARAM_ERROR}
    assert unmapped == set()


def test_unknown_code_falls_back_to_400():
    assert business_code_to_http_status(99999) == 400
