"""Unit tests for response normalization."""

from __future__ import annotations

from requests.structures import CaseInsensitiveDict

from elebase.client.models import (
    ContentAPIError,
    GeoAPIError,
    Target,
    TransportRequest,
    TransportResponse,
)
from elebase.client.normalizer import build_error, build_response, normalize


def _request(**overrides) -> TransportRequest:
    values = dict(
        method="get",
        url="/entries",
        headers=CaseInsensitiveDict({"Accept-Language": "en", "Authorization": "Basic x"}),
        params={"phase": "2"},
        data=None,
    )
    values.update(overrides)
    return TransportRequest(**values)


def _raw(status=200, data=None, headers=None) -> TransportResponse:
    return TransportResponse(status=status, headers=CaseInsensitiveDict(headers or {}), data=data)


class TestBuildResponse:
    def test_unwraps_data_envelope(self) -> None:
        response = build_response(_raw(data={"data": {"id": 1}, "meta": {}}))
        assert response.data == {"id": 1}
        assert response.body == {"data": {"id": 1}, "meta": {}}

    def test_keeps_body_without_envelope(self) -> None:
        assert build_response(_raw(data={"id": 1})).data == {"id": 1}

    def test_scalar_data_not_unwrapped(self) -> None:
        assert build_response(_raw(data={"data": "text"})).data == {"data": "text"}

    def test_non_object_body_becomes_empty(self) -> None:
        assert build_response(_raw(data="<html>")).data == {}
        assert build_response(_raw(data=None)).data == {}

    def test_status_and_headers_passed_through(self) -> None:
        response = build_response(_raw(status=201, headers={"X-Thing": "1"}))
        assert response.status == 201
        assert response.headers["x-thing"] == "1"


class TestNormalize:
    def test_success_has_no_error(self) -> None:
        txn = normalize(_raw(status=304, data={"data": {}}), _request(), {"first": False})
        assert txn.error is None
        assert txn.ok is True

    def test_request_echo(self) -> None:
        txn = normalize(_raw(data={}), _request(data={"a": 1}), {"target": "api"})
        echo = txn.request
        assert echo.method == "GET"
        assert echo.url == "/entries"
        assert echo.headers == {"accept-language": "en", "authorization": "Basic x"}
        assert echo.params == {"phase": "2"}
        assert echo.data == {"a": 1}
        assert echo.config == {"target": "api"}

    def test_echo_headers_last_write_wins(self) -> None:
        request = _request(headers={"X-A": "1", "x-a": "2"})
        txn = normalize(_raw(data={}), request, {})
        assert txn.request.headers == {"x-a": "2"}

    def test_content_error(self) -> None:
        raw = _raw(status=404, data={"error": {"id": "not_found"}})
        txn = normalize(raw, _request(), {}, Target.API)
        assert isinstance(txn.error, ContentAPIError)
        assert txn.error.id == "not_found"
        assert "not_found" in str(txn.error)
        assert txn.error.status == 404

    def test_content_error_with_data(self) -> None:
        raw = _raw(status=422, data={"error": {"id": "invalid", "data": {"field": "name"}}})
        error = normalize(raw, _request(), {}).error
        assert error.data == {"field": "name"}
        assert '"field":"name"' in error.message

    def test_content_error_without_body(self) -> None:
        error = normalize(_raw(status=500, data=None), _request(), {}).error
        assert isinstance(error, ContentAPIError)
        assert error.id == "unknown"
        assert error.message == ""

    def test_geo_error(self) -> None:
        raw = _raw(status=401, data={"error": {"code": "bad_token", "info": "expired", "type": "auth"}})
        error = normalize(raw, _request(), {}, Target.GEO).error
        assert isinstance(error, GeoAPIError)
        assert (error.code, error.info, error.type, error.status) == ("bad_token", "expired", "auth", 401)

    def test_geo_error_defaults(self) -> None:
        error = normalize(_raw(status=503, data={}), _request(), {}, Target.GEO).error
        assert (error.code, error.info, error.type) == ("unknown", None, "unknown")


class TestUsageLimitHeaders:
    def test_usage_limit_headers_copied(self) -> None:
        raw = _raw(
            status=429,
            data={"error": {"id": "rate_limited"}},
            headers={"X-Usage-Limit-Info": "100", "X-Usage-Limit-Time": "1700000000", "X-Other": "y"},
        )
        error = normalize(raw, _request(), {}).error
        assert error.headers == {"X-Usage-Limit-Info": "100", "X-Usage-Limit-Time": "1700000000"}

    def test_absent_header_not_present(self) -> None:
        raw = _raw(status=429, data={}, headers={"X-Usage-Limit-Info": "100"})
        error = normalize(raw, _request(), {}).error
        assert "X-Usage-Limit-Info" in error.headers
        assert "X-Usage-Limit-Time" not in error.headers

    def test_plain_dict_headers_matched_case_insensitively(self) -> None:
        raw = TransportResponse(status=429, headers={"x-usage-limit-info": "5"}, data={})
        error = build_error(build_response(raw), Target.GEO)
        assert error.headers == {"X-Usage-Limit-Info": "5"}
