"""Tests for ft_common.errors and ft_common.response."""

from starlette.requests import Request

from src.ft_common.errors import (
    AppError,
    CacheUnavailableError,
    CategoryExistsError,
    CategoryInactiveError,
    InvalidAmountError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    TransactionNotFoundError,
    UnknownCategoryReferenceError,
    ValidationError,
)
from src.ft_common.response import error_payload, respond


def _make_request(request_id: str | None = None) -> Request:
    request = Request({"type": "http", "method": "GET", "path": "/", "headers": []})
    if request_id is not None:
        request.state.request_id = request_id
    return request


class TestErrorTaxonomy:
    def test_validation_family_is_422(self) -> None:
        for err in (
            InvalidAmountError("negative"),
            CategoryInactiveError(3),
            UnknownCategoryReferenceError(99),
        ):
            assert isinstance(err, ValidationError)
            assert err.http_status == 422

    def test_not_found_family_is_404(self) -> None:
        err = TransactionNotFoundError(7)
        assert isinstance(err, NotFoundError)
        assert err.http_status == 404
        assert err.code == 2001
        assert "7" in err.message

    def test_codes_by_range(self) -> None:
        assert 3000 <= CategoryExistsError("food").code < 4000
        assert CategoryExistsError("food").http_status == 409
        assert PermissionDeniedError().code == 4001
        assert PermissionDeniedError().http_status == 403

    def test_rate_limit_carries_retry_after(self) -> None:
        err = RateLimitError(retry_after=900)
        assert err.http_status == 429
        assert err.retry_after == 900

    def test_cache_unavailable_is_internal(self) -> None:
        assert not issubclass(CacheUnavailableError, AppError)


class TestApiResponse:
    def test_success_envelope_carries_request_id(self) -> None:
        resp = respond(_make_request("req_fixed"), {"id": 1}, "created")
        assert resp.code == 0
        assert resp.message == "created"
        assert resp.data == {"id": 1}
        assert resp.request_id == "req_fixed"
        assert resp.timestamp

    def test_fresh_request_id_without_middleware(self) -> None:
        assert respond(_make_request()).request_id.startswith("req_")

    def test_error_payload_has_no_data(self) -> None:
        body = error_payload(_make_request("req_err"), InvalidAmountError("negative"))
        assert body["code"] == 2002
        assert body["message"] == "Invalid amount: negative"
        assert body["data"] is None
        assert body["request_id"] == "req_err"
