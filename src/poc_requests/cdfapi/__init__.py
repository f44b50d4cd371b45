"""CDF REST API client package.

Provides a lightweight HTTP client for the Cognite Data Fusion REST API
that returns validated API response types with minimal processing.

Exports:
    CogniteClient: Client exposing the time series, units and data
        modeling APIs.
    ClientConfig: Immutable project/cluster/credentials configuration.
    OAuthClientCredentials, Token: Credential providers.
    types: Module containing Pydantic models for API responses.
    datapoints: Module containing the data point payload types.
"""

from . import datapoints, types
from .client import API_VERSION, ClientConfig, CogniteClient, build_base_url
from .credentials import (
    CredentialProvider,
    OAuthClientCredentials,
    Token,
    azure_ad_client_credentials,
)
from .errors import (
    CogniteAPIError,
    CogniteConnectionError,
    CogniteDecodeError,
    CogniteError,
    ExpiredTokenError,
    TokenAcquisitionError,
    UnknownDatapointTypeError,
)
from .session import DEFAULT_TIMEOUT
from .utils import build_query_params

__all__ = [
    "API_VERSION",
    "DEFAULT_TIMEOUT",
    "ClientConfig",
    "CogniteAPIError",
    "CogniteClient",
    "CogniteConnectionError",
    "CogniteDecodeError",
    "CogniteError",
    "CredentialProvider",
    "ExpiredTokenError",
    "OAuthClientCredentials",
    "Token",
    "TokenAcquisitionError",
    "UnknownDatapointTypeError",
    "azure_ad_client_credentials",
    "build_base_url",
    "build_query_params",
    "datapoints",
    "types",
]
