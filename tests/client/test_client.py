from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock
import pytest
from requests.structures import CaseInsensitiveDict
import elebase
from elebase.client.client import APIClient, create_client
from elebase.client.diagnostics import DiagnosticsLogger
from elebase.client.http import RequestsHTTPClient
from elebase.client.models import (
    ClientConfig,
    ConfigValidationError,
    ContentAPIError,
    GeoAPIError,
    RequestValidationError,
    Target,
    TransportRequest,
    TransportResponse,
)


class MockHTTPClient:
    def __init__(self, responses: Optional[List[TransportResponse]] = None):
        self.responses = responses or []
        self.calls: List[TransportRequest] = []
        self._response_index = 0

    def send(self, request: TransportRequest) -> TransportResponse:
        self.calls.append(request)
        if self._response_index < len(self.responses):
            response = self.responses[self._response_index]
            self._response_index += 1
            return response
        return TransportResponse(status=200, headers=CaseInsensitiveDict(), data={"data": {}})


def _response(status: int = 200, data: Any = None, headers: Optional[Dict[str, str]] = None) -> TransportResponse:
    return TransportResponse(status=status, headers=CaseInsensitiveDict(headers or {}), data=data)


class TestClientConstruction:
    def test_api_factory(self):
        client = elebase.api(token="t", project="p")
        assert isinstance(client, APIClient)
        assert client.target is Target.API
        assert client.config.base_url == "https://cdn.elebase.io/p/v1"

    def test_geo_factory(self):
        client = elebase.geo(token="t")
        assert client.target is Target.GEO

    def test_factory_validates_config(self):
        with pytest.raises(ConfigValidationError):
            elebase.api(project="p")

    def test_default_transport_uses_config(self):
        config = ClientConfig.create(token="t", project="p", timeout=1500, headers={"X-App": "demo"})
        client = APIClient(config)
        transport = client._http_client
        assert isinstance(transport, RequestsHTTPClient)
        assert transport.base_url == "https://cdn.elebase.io/p/v1"
        assert transport.timeout == pytest.approx(1.5)

    def test_create_client_accepts_config(self, token_config: ClientConfig):
        client = create_client(token_config)
        assert client.config is token_config

    def test_close_only_owned_transport(self, token_config: ClientConfig):
        injected = MagicMock()
        with APIClient(token_config, http_client=injected):
            pass
        injected.close.assert_not_called()


class TestVerbs:
    @pytest.mark.parametrize(
        "verb, method, kwargs",
        [
            ("get", "GET", {}),
            ("delete", "DELETE", {}),
            ("post", "POST", {"data": {"a": 1}}),
            ("create", "POST", {"data": {"a": 1}}),
            ("put", "PUT", {"data": {"a": 1}}),
            ("update", "PUT", {"data": {"a": 1}}),
        ],
    )
    def test_verb_sends_method(self, token_config: ClientConfig, verb, method, kwargs):
        mock_http = MockHTTPClient()
        client = APIClient(token_config, http_client=mock_http)
        getattr(client, verb)("things/", **kwargs)

        assert len(mock_http.calls) == 1
        assert mock_http.calls[0].method == method
        assert mock_http.calls[0].url == "/things"

    def test_returns_unwrapped_response(self, token_config: ClientConfig):
        mock_http = MockHTTPClient([_response(data={"data": {"id": "e1"}})])
        client = APIClient(token_config, http_client=mock_http)
        response = client.get("/entries/e1")
        assert response.status == 200
        assert response.data == {"id": "e1"}

    def test_validation_error_before_network(self, token_config: ClientConfig):
        mock_http = MockHTTPClient()
        client = APIClient(token_config, http_client=mock_http)
        with pytest.raises(RequestValidationError):
            client.post("/entries")
        with pytest.raises(RequestValidationError):
            client.get("https://cdn.elebase.io/entries")
        assert mock_http.calls == []

    def test_unknown_options_ignored(self, token_config: ClientConfig):
        mock_http = MockHTTPClient()
        client = APIClient(token_config, http_client=mock_http)
        client.get("/things", params={"a": 1}, foo=1)
        assert len(mock_http.calls) == 1
        assert mock_http.calls[0].params == {"a": 1}

    def test_default_phase_reaches_transport(self, token_config: ClientConfig):
        mock_http = MockHTTPClient()
        client = APIClient(token_config, http_client=mock_http)
        client.get("/entries")
        assert mock_http.calls[0].params == {"phase": "0,2,3"}


class TestFirstMode:
    def test_first_returns_first_item(self, token_config: ClientConfig):
        mock_http = MockHTTPClient([_response(data={"data": {"index": [{"id": 1}, {"id": 2}]}})])
        client = APIClient(token_config, http_client=mock_http)
        assert client.get("/entries", first=True).data == {"id": 1}

    def test_first_with_empty_index_returns_none(self, token_config: ClientConfig):
        mock_http = MockHTTPClient([_response(data={"data": {"index": []}})])
        client = APIClient(token_config, http_client=mock_http)
        assert client.get("/entries", first=True).data is None

    def test_without_first_returns_list_envelope(self, token_config: ClientConfig):
        payload = {"index": [{"id": 1}], "count": 1}
        mock_http = MockHTTPClient([_response(data={"data": payload})])
        client = APIClient(token_config, http_client=mock_http)
        assert client.get("/entries").data == payload

    def test_first_ignored_without_index(self, token_config: ClientConfig):
        mock_http = MockHTTPClient([_response(data={"data": {"id": 1}})])
        client = APIClient(token_config, http_client=mock_http)
        assert client.get("/entries/1", first=True).data == {"id": 1}

    def test_first_not_applied_on_geo(self, geo_config: ClientConfig):
        payload = {"index": [{"id": 1}], "count": 1}
        mock_http = MockHTTPClient([_response(data={"data": payload})])
        client = APIClient(geo_config, http_client=mock_http)
        assert client.get("/features", first=True).data == payload


class TestErrors:
    def test_content_error_raised(self, token_config: ClientConfig):
        mock_http = MockHTTPClient([
            _response(
                status=404,
                data={"error": {"id": "not_found"}},
                headers={"X-Usage-Limit-Info": "99"},
            )
        ])
        client = APIClient(token_config, http_client=mock_http)

        with pytest.raises(ContentAPIError) as exc_info:
            client.get("/entries/missing")

        assert exc_info.value.id == "not_found"
        assert "not_found" in str(exc_info.value)
        assert exc_info.value.headers == {"X-Usage-Limit-Info": "99"}

    def test_geo_error_raised(self, geo_config: ClientConfig):
        mock_http = MockHTTPClient([_response(status=400, data={"error": {"code": "bad", "type": "input"}})])
        client = APIClient(geo_config, http_client=mock_http)

        with pytest.raises(GeoAPIError) as exc_info:
            client.get("/features")

        assert exc_info.value.code == "bad"
        assert exc_info.value.type == "input"

    def test_not_modified_is_success(self, token_config: ClientConfig):
        mock_http = MockHTTPClient([_response(status=304, data=None)])
        client = APIClient(token_config, http_client=mock_http)
        assert client.get("/entries").status == 304

    def test_transport_errors_propagate(self, token_config: ClientConfig):
        failing = MagicMock()
        failing.send.side_effect = ConnectionError("network down")
        client = APIClient(token_config, http_client=failing)
        with pytest.raises(ConnectionError, match="network down"):
            client.get("/entries")


class TestLogging:
    def test_logging_disabled_by_default(self, token_config: ClientConfig):
        diagnostics = MagicMock(spec=DiagnosticsLogger)
        client = APIClient(token_config, http_client=MockHTTPClient(), diagnostics=diagnostics)
        client.get("/entries")
        diagnostics.log.assert_not_called()

    def test_logging_happens_before_raise(self, caplog):
        config = ClientConfig.create(token="t", project="p", logging=True)
        sink = logging.getLogger("tests.client.logging")
        mock_http = MockHTTPClient([_response(status=500, data={"error": {"id": "boom"}})])
        client = APIClient(config, http_client=mock_http, diagnostics=DiagnosticsLogger(sink))

        with caplog.at_level(logging.INFO, logger=sink.name):
            with pytest.raises(ContentAPIError):
                client.get("/entries")

        assert len(caplog.records) == 1
        assert caplog.records[0].getMessage().startswith("GET /entries (500)")
