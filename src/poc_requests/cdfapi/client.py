"""CDF REST API client.

Wires the credential provider, the shared HTTP session and the resource
APIs together behind ``CogniteClient``.
"""

from dataclasses import dataclass

import httpx
import structlog

from .. import __version__
from .credentials import CredentialProvider
from .data_modeling import DataModelingAPI
from .session import DEFAULT_TIMEOUT, APISession
from .time_series import TimeSeriesAPI
from .units import UnitsAPI

logger = structlog.get_logger(__name__)

# Sent as ``cdf-version``; units and data modeling search require beta.
API_VERSION = "beta"

SDK_NAME = "poc-requests-python"


def build_base_url(cluster: str) -> str:
    """Derive the API base URL of a CDF cluster."""
    if not cluster:
        msg = "cluster cannot be empty"
        raise ValueError(msg)
    return f"https://{cluster}.cognitedata.com"


@dataclass(frozen=True)
class ClientConfig:
    """Immutable client configuration.

    Attributes:
        client_name: Application name reported in the ``x-cdp-app`` header.
        cluster: CDF cluster, e.g. ``westeurope-1``.
        project: CDF project all requests are scoped to.
        credentials: Provider of the bearer token.
    """

    client_name: str
    cluster: str
    project: str
    credentials: CredentialProvider

    @property
    def base_url(self) -> str:
        return build_base_url(self.cluster)


class CogniteClient:
    """Client for the CDF REST API.

    Fetches a bearer token from the configured credentials once, at
    construction, and exposes the resource APIs as attributes. The
    resource APIs share a read-only session; none of them hold a reference
    back to this object.

    Can be used as a context manager for automatic cleanup.
    """

    def __init__(
        self,
        config: ClientConfig,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            config: Project, cluster, application name and credentials.
            timeout: Request timeout in seconds (default: 30.0).
            transport: Optional httpx transport, e.g. for testing.

        Raises:
            ValueError: If the cluster is empty or timeout is not positive.
            TokenAcquisitionError: If no token could be obtained.
        """
        self.config = config
        self.base_url = config.base_url
        self.access_token = config.credentials.fetch_token()

        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "x-cdp-app": config.client_name,
            "x-cdp-sdk": f"{SDK_NAME}:{__version__}",
            "cdf-version": API_VERSION,
        }
        self._session = APISession(
            base_url=self.base_url,
            project=config.project,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        logger.info(
            "Created CDF client",
            base_url=self.base_url,
            project=config.project,
        )

        self.time_series = TimeSeriesAPI(self._session)
        self.units = UnitsAPI(self._session)
        self.data_modeling = DataModelingAPI(self._session)

    @property
    def headers(self) -> dict[str, str]:
        """Default headers sent with every request (a copy)."""
        return self._session.headers

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and cleanup resources."""
        self.close()

    def close(self):
        """Close the thread-local HTTP client if open."""
        self._session.close()
