"""Shared fixtures for exercising the client against a mock transport."""

import json
from collections.abc import Callable

import httpx
import pytest

from poc_requests import cdfapi
from poc_requests.cdfapi import _proto

PROJECT = "test-project"
CLUSTER = "test-cluster"
BASE_URL = f"https://{CLUSTER}.cognitedata.com"


class RecordingTransport(httpx.MockTransport):
    """Mock transport replaying queued responses and recording requests."""

    def __init__(self, responses: list[httpx.Response | Exception] | None = None):
        self.responses = list(responses or [])
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last_request.content)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def client_config() -> cdfapi.ClientConfig:
    return cdfapi.ClientConfig(
        client_name="test-client",
        cluster=CLUSTER,
        project=PROJECT,
        credentials=cdfapi.Token("test-token"),
    )


@pytest.fixture
def client(
    client_config: cdfapi.ClientConfig,
    transport: RecordingTransport,
) -> cdfapi.CogniteClient:
    with cdfapi.CogniteClient(client_config, transport=transport) as api_client:
        yield api_client


@pytest.fixture
def respond(transport: RecordingTransport) -> Callable[..., None]:
    """Queue a response on the mock transport."""

    def _respond(status_code: int = 200, **kwargs) -> None:
        transport.responses.append(httpx.Response(status_code, **kwargs))

    return _respond


def project_url(resource: str) -> str:
    return f"{BASE_URL}/api/v1/projects/{PROJECT}/{resource}"


def encode_datapoint_items(*items: dict) -> bytes:
    """Encode items as a protobuf DataPointListResponse.

    Each item dict holds top-level item fields (camelCase) plus at most one
    of ``numericDatapoints``, ``stringDatapoints`` or ``aggregateDatapoints``
    given as a list of datapoint field dicts.
    """
    message = _proto.DataPointListResponse()
    for item in items:
        entry = message.items.add()
        for key, value in item.items():
            if key.endswith("Datapoints"):
                payload = getattr(entry, key)
                payload.SetInParent()
                for dp in value:
                    payload.datapoints.add(**dp)
            elif key == "instanceId":
                entry.instanceId.space = value["space"]
                entry.instanceId.externalId = value["externalId"]
            else:
                setattr(entry, key, value)
    return message.SerializeToString()
