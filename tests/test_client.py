"""Tests for client construction and the shared request/response handling."""

import httpx
import pytest

from poc_requests import __version__, cdfapi
from poc_requests.cdfapi import session

from conftest import BASE_URL, PROJECT, RecordingTransport


class CountingCredentials:
    def __init__(self, token: str = "counted-token"):
        self.token = token
        self.calls = 0

    def fetch_token(self) -> str:
        self.calls += 1
        return self.token


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("cluster", ["api", "westeurope-1", "az-eastus-1", "greenfield"])
def test_base_url_derived_from_cluster(cluster):
    assert cdfapi.build_base_url(cluster) == f"https://{cluster}.cognitedata.com"


def test_empty_cluster_is_rejected():
    with pytest.raises(ValueError, match="cluster"):
        cdfapi.build_base_url("")


def test_client_configuration(client: cdfapi.CogniteClient):
    assert client.config.project == PROJECT
    assert client.base_url == BASE_URL
    assert client.access_token == "test-token"


def test_client_allows_empty_project(client_config):
    config = cdfapi.ClientConfig(
        client_name=client_config.client_name,
        cluster=client_config.cluster,
        project="",
        credentials=client_config.credentials,
    )
    client = cdfapi.CogniteClient(config)
    assert client.config.project == ""
    assert client.base_url == BASE_URL


def test_client_config_is_immutable(client_config):
    with pytest.raises(AttributeError):
        client_config.project = "other"


def test_client_fetches_token_once_at_construction():
    credentials = CountingCredentials()
    config = cdfapi.ClientConfig("app", "api", "proj", credentials)

    client = cdfapi.CogniteClient(config)

    assert credentials.calls == 1
    assert client.headers["Authorization"] == "Bearer counted-token"


def test_default_headers(client: cdfapi.CogniteClient):
    assert client.headers == {
        "Authorization": "Bearer test-token",
        "Content-Type": "application/json",
        "Accept": "application/json",
        "x-cdp-app": "test-client",
        "x-cdp-sdk": f"poc-requests-python:{__version__}",
        "cdf-version": "beta",
    }


def test_headers_cannot_be_mutated_through_property(client: cdfapi.CogniteClient):
    client.headers["Authorization"] = "Bearer other"
    assert client.headers["Authorization"] == "Bearer test-token"


def test_resource_apis_are_initialized(client: cdfapi.CogniteClient):
    assert client.time_series is not None
    assert client.units is not None
    assert client.data_modeling is not None


def test_timeout_must_be_positive(client_config):
    with pytest.raises(ValueError, match="timeout"):
        cdfapi.CogniteClient(client_config, timeout=0)


def test_token_errors_propagate():
    class FailingCredentials:
        def fetch_token(self):
            raise cdfapi.TokenAcquisitionError("Error acquiring token: invalid_client")

    config = cdfapi.ClientConfig("app", "api", "proj", FailingCredentials())
    with pytest.raises(cdfapi.TokenAcquisitionError):
        cdfapi.CogniteClient(config)


# ---------------------------------------------------------------------------
# Request handling
# ---------------------------------------------------------------------------


def test_requests_carry_default_headers(client, transport, respond):
    respond(json={"items": []})

    client.units.list()

    headers = transport.last_request.headers
    assert headers["authorization"] == "Bearer test-token"
    assert headers["accept"] == "application/json"
    assert headers["x-cdp-app"] == "test-client"
    assert headers["cdf-version"] == "beta"


def test_non_200_raises_api_error_with_status_and_body(client, respond):
    respond(400, json={"error": {"code": 400, "message": "Invalid limit"}})

    with pytest.raises(cdfapi.CogniteAPIError) as exc_info:
        client.time_series.list(limit=-1)

    error = exc_info.value
    assert error.status_code == 400
    assert error.reason == "Bad Request"
    assert "Invalid limit" in error.body
    assert str(error).startswith("failed to fetch timeseries: 400 Bad Request - ")


def test_non_200_without_body(client, respond):
    respond(404)

    with pytest.raises(cdfapi.CogniteAPIError, match=r"^failed to fetch units: 404 Not Found$"):
        client.units.list()


def test_other_2xx_status_is_an_error(client, respond):
    """Only 200 is success, matching the API contract."""
    respond(204)

    with pytest.raises(cdfapi.CogniteAPIError, match="204"):
        client.units.list()


def test_transport_failure_raises_connection_error(client, transport):
    transport.responses.append(httpx.ConnectError("connection refused"))

    with pytest.raises(cdfapi.CogniteConnectionError, match="connection refused") as exc_info:
        client.units.list()
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_invalid_json_raises_decode_error(client, respond):
    respond(content=b"<html>not json</html>")

    with pytest.raises(cdfapi.CogniteDecodeError, match="UnitList"):
        client.units.list()


def test_unexpected_shape_raises_decode_error(client, respond):
    respond(json={"items": [{"externalId": "temperature:deg_c"}]})

    with pytest.raises(cdfapi.CogniteDecodeError):
        client.units.list()


def test_session_reuses_http_client_within_thread():
    api_session = session.APISession(BASE_URL, PROJECT, {}, transport=RecordingTransport())
    assert api_session.client is api_session.client


def test_close_closes_http_client():
    api_session = session.APISession(BASE_URL, PROJECT, {}, transport=RecordingTransport())
    http_client = api_session.client

    api_session.close()

    assert http_client.is_closed
    assert api_session.client is not http_client


def test_project_path():
    api_session = session.APISession(BASE_URL, PROJECT, {})
    assert api_session.project_path("timeseries") == f"/api/v1/projects/{PROJECT}/timeseries"
    assert api_session.project_path("/units") == f"/api/v1/projects/{PROJECT}/units"
