"""HTTP session shared by the CDF resource APIs.

Performs single request/response round trips, checks the status code and
validates JSON responses into Pydantic models.
"""

import gzip
import json
import threading
import time
from typing import Any, TypeVar

import httpx
import pydantic
import structlog

from .errors import CogniteAPIError, CogniteConnectionError, CogniteDecodeError
from .utils import build_query_params

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


class APISession:
    """HTTP session bound to one CDF project.

    Holds the base URL and default headers and performs single
    request/response round trips. Thread-safe through thread-local storage
    of httpx.Client instances; nothing else is mutated after construction.
    """

    def __init__(
        self,
        base_url: str,
        project: str,
        headers: dict[str, str],
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)

        self.base_url = base_url.rstrip("/")
        self.project = project
        self._headers = dict(headers)
        self._timeout = timeout
        self._transport = transport

        # Use thread-local storage for httpx.Client (thread safety)
        self._local = threading.local()

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    @property
    def client(self) -> httpx.Client:
        """Get or create the thread-local httpx client."""
        if not hasattr(self._local, "client") or self._local.client.is_closed:
            self._local.client = httpx.Client(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._local.client

    def close(self):
        """Close the thread-local HTTP client if open."""
        if hasattr(self._local, "client") and not self._local.client.is_closed:
            self._local.client.close()

    def project_path(self, resource: str) -> str:
        """Return the path of a resource within the project."""
        return f"/api/v1/projects/{self.project}/{resource.lstrip('/')}"

    def _send(
        self,
        action: str,
        method: str,
        endpoint: str,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send one request and return the successful response.

        Args:
            action: Short description used in error messages
                (e.g. "failed to fetch timeseries").
            method: HTTP method.
            endpoint: Path, including any query string.
            content: Optional encoded request body.
            headers: Headers overriding the session defaults.

        Returns:
            The response, whose status is 200.

        Raises:
            CogniteConnectionError: If the request could not be completed.
            CogniteAPIError: If the API answered with a non-200 status.
        """
        start_time = time.time()
        logger.debug("Making API request", method=method, endpoint=endpoint)

        try:
            response = self.client.request(
                method,
                endpoint,
                content=content,
                headers=headers,
            )
        except httpx.TransportError as exc:
            duration = time.time() - start_time
            logger.exception(
                "API request failed",
                method=method,
                endpoint=endpoint,
                duration_seconds=round(duration, 3),
            )
            msg = f"{action}: {exc}"
            raise CogniteConnectionError(msg) from exc

        duration = time.time() - start_time
        if response.status_code != httpx.codes.OK:
            logger.error(
                "API error response",
                method=method,
                endpoint=endpoint,
                status_code=response.status_code,
                duration_seconds=round(duration, 3),
            )
            raise CogniteAPIError(
                action,
                response.status_code,
                response.reason_phrase,
                response.text.strip(),
            )

        logger.debug(
            "API request completed",
            status_code=response.status_code,
            duration_seconds=round(duration, 3),
        )
        return response

    def _decode(
        self,
        response: httpx.Response,
        model: type[ModelT],
        action: str,
    ) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, pydantic.ValidationError) as exc:
            logger.exception("Failed to decode API response", model=model.__name__)
            msg = f"{action}: could not decode response as {model.__name__}: {exc}"
            raise CogniteDecodeError(msg) from exc

    def get(
        self,
        endpoint: str,
        model: type[ModelT],
        action: str,
        params: dict[str, Any] | None = None,
    ) -> ModelT:
        """GET a resource and validate the JSON response into ``model``."""
        query = build_query_params(params or {})
        if query:
            endpoint = f"{endpoint}?{query}"
        response = self._send(action, "GET", endpoint)
        return self._decode(response, model, action)

    def post(
        self,
        endpoint: str,
        body: dict[str, Any],
        model: type[ModelT],
        action: str,
    ) -> ModelT:
        """POST a JSON body and validate the JSON response into ``model``."""
        response = self._send(
            action,
            "POST",
            endpoint,
            content=json.dumps(body).encode("utf-8"),
        )
        return self._decode(response, model, action)

    def post_protobuf(self, endpoint: str, body: dict[str, Any], action: str) -> bytes:
        """POST a gzip-compressed JSON body and return the protobuf payload."""
        response = self._send(
            action,
            "POST",
            endpoint,
            content=gzip.compress(json.dumps(body).encode("utf-8")),
            headers={
                "Accept": "application/protobuf",
                "Content-Encoding": "gzip",
            },
        )
        return response.content
